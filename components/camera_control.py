# ------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------
import glm
import pygame

UP_VECTOR = glm.vec3(0.0, 1.0, 0.0)

# Keep the view from flipping over the vertical
MAX_PITCH = 89.0


# ------------------------------------------------------------------------------
# Camera Class
# ------------------------------------------------------------------------------
class Camera:
    """
    Camera holds a position and a yaw/pitch orientation (degrees) and derives the
    view and projection matrices from them.

    Keyboard fly movement is optional: WASD moves in the view plane, Q/E move down
    and up, and the arrow keys turn the camera.
    """

    def __init__(
        self,
        position=(0.0, 7.0, 18.0),
        yaw=0.0,
        pitch=-18.0,
        fov=45.0,
        aspect_ratio=4.0 / 3.0,
        near_plane=0.1,
        far_plane=100.0,
        move_speed=5.0,
        turn_speed=60.0,
    ):
        self.position = glm.vec3(*position)
        self.yaw = yaw
        self.pitch = pitch
        self.fov = fov
        self.aspect_ratio = aspect_ratio
        self.near_plane = near_plane
        self.far_plane = far_plane
        self.move_speed = move_speed
        self.turn_speed = turn_speed

        self.view = glm.mat4(1.0)
        self.projection = glm.mat4(1.0)
        self.setup_camera_matrices()

    # --------------------------------------------------------------------------
    # Matrices
    # --------------------------------------------------------------------------
    @property
    def forward_direction(self):
        rotation_matrix = glm.mat4(1.0)
        rotation_matrix = glm.rotate(rotation_matrix, glm.radians(self.yaw), glm.vec3(0.0, 1.0, 0.0))
        rotation_matrix = glm.rotate(rotation_matrix, glm.radians(self.pitch), glm.vec3(1.0, 0.0, 0.0))
        return glm.vec3(rotation_matrix * glm.vec4(0.0, 0.0, -1.0, 0.0))

    def setup_camera_matrices(self):
        """
        Compute the view and projection matrices from the current position and rotation.
        """
        self.view = glm.lookAt(self.position, self.position + self.forward_direction, UP_VECTOR)
        self.projection = glm.perspective(glm.radians(self.fov), self.aspect_ratio, self.near_plane, self.far_plane)

    def apply(self, shader_engine):
        shader_engine.set_mat4_value("view", self.view)
        shader_engine.set_mat4_value("projection", self.projection)
        shader_engine.set_vec3_value("viewPosition", self.position)

    # --------------------------------------------------------------------------
    # Movement
    # --------------------------------------------------------------------------
    def update(self, delta_time, pressed_keys):
        """
        Move and turn the camera for the keys held this frame.

        Args:
            delta_time (float): Seconds since the previous frame.
            pressed_keys: Result of pygame.key.get_pressed().
        """
        forward = self.forward_direction
        right = glm.normalize(glm.cross(forward, UP_VECTOR))
        step = self.move_speed * delta_time
        turn = self.turn_speed * delta_time

        if pressed_keys[pygame.K_w]:
            self.position += forward * step
        if pressed_keys[pygame.K_s]:
            self.position -= forward * step
        if pressed_keys[pygame.K_d]:
            self.position += right * step
        if pressed_keys[pygame.K_a]:
            self.position -= right * step
        if pressed_keys[pygame.K_e]:
            self.position += UP_VECTOR * step
        if pressed_keys[pygame.K_q]:
            self.position -= UP_VECTOR * step

        if pressed_keys[pygame.K_LEFT]:
            self.yaw += turn
        if pressed_keys[pygame.K_RIGHT]:
            self.yaw -= turn
        if pressed_keys[pygame.K_UP]:
            self.pitch = min(self.pitch + turn, MAX_PITCH)
        if pressed_keys[pygame.K_DOWN]:
            self.pitch = max(self.pitch - turn, -MAX_PITCH)

        self.setup_camera_matrices()
