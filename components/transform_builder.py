import glm

X_AXIS = glm.vec3(1.0, 0.0, 0.0)
Y_AXIS = glm.vec3(0.0, 1.0, 0.0)
Z_AXIS = glm.vec3(0.0, 0.0, 1.0)


def build_model_matrix(scale, x_rotation_degrees, y_rotation_degrees, z_rotation_degrees, position):
    """
    Compose a model matrix from scale, per-axis rotations (degrees) and a position.

    The result is Translate * RotateZ * RotateY * RotateX * Scale, so a vertex is
    scaled first, then rotated about X, Y and Z (all through the origin), then
    translated. The order matters and must not change.

    Args:
        scale: (x, y, z) scale factors.
        x_rotation_degrees (float): Rotation about the X axis.
        y_rotation_degrees (float): Rotation about the Y axis.
        z_rotation_degrees (float): Rotation about the Z axis.
        position: (x, y, z) translation.

    Returns:
        glm.mat4: The model matrix.
    """
    scale_matrix = glm.scale(glm.mat4(1.0), glm.vec3(*scale))
    rotation_x = glm.rotate(glm.mat4(1.0), glm.radians(x_rotation_degrees), X_AXIS)
    rotation_y = glm.rotate(glm.mat4(1.0), glm.radians(y_rotation_degrees), Y_AXIS)
    rotation_z = glm.rotate(glm.mat4(1.0), glm.radians(z_rotation_degrees), Z_AXIS)
    translation = glm.translate(glm.mat4(1.0), glm.vec3(*position))

    return translation * rotation_z * rotation_y * rotation_x * scale_matrix
