"""
Mesh Geometry Module

Generates the vertex and index data for the unit primitives used by the scene:
plane, box, cylinder, cone, tapered cylinder and torus. Every vertex is laid
out as (x, y, z, nx, ny, nz, u, v).

Conventions:
  - plane: XZ plane spanning -1..1, facing +Y
  - box: -0.5..0.5 on every axis
  - cylinder, cone, tapered cylinder: base radius 1 centred on the Y axis,
    from y = 0 to y = 1 (the tapered cylinder narrows to radius 0.5)
  - torus: lies in the XY plane, main radius 1, tube radius = thickness

No OpenGL calls happen here, so everything can be generated and inspected headless.
"""

import numpy as np

FLOATS_PER_VERTEX = 8

DEFAULT_SEGMENTS = 36
DEFAULT_TORUS_SIDES = 24
DEFAULT_TORUS_THICKNESS = 0.1
TAPERED_TOP_RADIUS = 0.5


class MeshData:
    """
    Interleaved vertex data, triangle indices and named index ranges.

    `parts` maps a part name (e.g. "top", "bottom", "sides") to an
    (offset, count) range in `indices`, so callers can draw a subset of the mesh.
    """

    def __init__(self, vertices, indices, parts):
        self.vertices = vertices
        self.indices = indices
        self.parts = parts

    @property
    def vertex_count(self):
        return self.vertices.shape[0]

    @property
    def index_count(self):
        return self.indices.shape[0]


def _vertices(positions, normals, uvs):
    return np.column_stack((positions, normals, uvs)).astype(np.float32)


def _combine(parts):
    """
    Merge a list of (name, vertices, indices) into a single MeshData,
    offsetting each part's indices by the vertices that precede it.
    """
    all_vertices = []
    all_indices = []
    ranges = {}
    vertex_offset = 0
    index_offset = 0

    for name, vertices, indices in parts:
        all_vertices.append(vertices)
        all_indices.append(indices + vertex_offset)
        ranges[name] = (index_offset, len(indices))
        vertex_offset += len(vertices)
        index_offset += len(indices)

    return MeshData(
        np.vstack(all_vertices).astype(np.float32),
        np.concatenate(all_indices).astype(np.uint32),
        ranges,
    )


def _grid_indices(columns, rows):
    """
    Triangle indices for a (rows + 1) x (columns + 1) vertex grid stored row by row.
    """
    indices = []
    stride = columns + 1
    for row in range(rows):
        for column in range(columns):
            a = row * stride + column
            b = a + 1
            c = a + stride
            d = c + 1
            indices.extend((a, c, d, a, d, b))
    return np.array(indices, dtype=np.uint32)


# ------------------------------------------------------------------------------
# Flat Primitives
# ------------------------------------------------------------------------------
def plane():
    positions = np.array(
        [
            (-1.0, 0.0, 1.0),
            (1.0, 0.0, 1.0),
            (1.0, 0.0, -1.0),
            (-1.0, 0.0, -1.0),
        ]
    )
    normals = np.tile((0.0, 1.0, 0.0), (4, 1))
    uvs = np.array([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)])
    indices = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32)
    return _combine([("surface", _vertices(positions, normals, uvs), indices)])


def box():
    # (normal, u axis, v axis) for each face
    faces = [
        ((0, 0, 1), (1, 0, 0), (0, 1, 0)),
        ((0, 0, -1), (-1, 0, 0), (0, 1, 0)),
        ((1, 0, 0), (0, 0, -1), (0, 1, 0)),
        ((-1, 0, 0), (0, 0, 1), (0, 1, 0)),
        ((0, 1, 0), (1, 0, 0), (0, 0, -1)),
        ((0, -1, 0), (1, 0, 0), (0, 0, 1)),
    ]
    corners = [(-1, -1), (1, -1), (1, 1), (-1, 1)]
    uvs = np.array([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)])

    parts = []
    for normal, u_axis, v_axis in faces:
        normal = np.array(normal, dtype=np.float64)
        u_axis = np.array(u_axis, dtype=np.float64)
        v_axis = np.array(v_axis, dtype=np.float64)
        positions = np.array([0.5 * (normal + su * u_axis + sv * v_axis) for su, sv in corners])
        normals = np.tile(normal, (4, 1))
        indices = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32)
        parts.append((f"face_{len(parts)}", _vertices(positions, normals, uvs), indices))

    mesh = _combine(parts)
    mesh.parts = {"sides": (0, mesh.index_count)}
    return mesh


# ------------------------------------------------------------------------------
# Round Primitives
# ------------------------------------------------------------------------------
def _frustum_sides(bottom_radius, top_radius, segments):
    angles = np.linspace(0.0, 2.0 * np.pi, segments + 1)
    cos_a, sin_a = np.cos(angles), np.sin(angles)

    # Outward normal of a side whose radius shrinks by (bottom - top) over a height of 1
    slope = bottom_radius - top_radius
    length = np.sqrt(1.0 + slope * slope)
    normals = np.column_stack((cos_a / length, np.full_like(cos_a, slope / length), sin_a / length))

    positions = []
    uvs = []
    for y, radius in ((0.0, bottom_radius), (1.0, top_radius)):
        positions.append(np.column_stack((cos_a * radius, np.full_like(cos_a, y), sin_a * radius)))
        uvs.append(np.column_stack((angles / (2.0 * np.pi), np.full_like(cos_a, y))))

    vertices = _vertices(np.vstack(positions), np.vstack((normals, normals)), np.vstack(uvs))
    return vertices, _grid_indices(segments, 1)


def _cap(radius, y, facing_up, segments):
    angles = np.linspace(0.0, 2.0 * np.pi, segments + 1)
    cos_a, sin_a = np.cos(angles), np.sin(angles)

    positions = np.vstack(((0.0, y, 0.0), np.column_stack((cos_a * radius, np.full_like(cos_a, y), sin_a * radius))))
    normal = (0.0, 1.0 if facing_up else -1.0, 0.0)
    normals = np.tile(normal, (segments + 2, 1))
    uvs = np.vstack(((0.5, 0.5), np.column_stack((0.5 + 0.5 * cos_a, 0.5 + 0.5 * sin_a))))

    indices = []
    for i in range(1, segments + 1):
        if facing_up:
            indices.extend((0, i + 1, i))
        else:
            indices.extend((0, i, i + 1))
    return _vertices(positions, normals, uvs), np.array(indices, dtype=np.uint32)


def _frustum(bottom_radius, top_radius, segments, with_top):
    parts = [("sides",) + _frustum_sides(bottom_radius, top_radius, segments)]
    parts.append(("bottom",) + _cap(bottom_radius, 0.0, False, segments))
    if with_top:
        parts.append(("top",) + _cap(top_radius, 1.0, True, segments))
    return _combine(parts)


def cylinder(segments=DEFAULT_SEGMENTS):
    return _frustum(1.0, 1.0, segments, with_top=True)


def tapered_cylinder(segments=DEFAULT_SEGMENTS, top_radius=TAPERED_TOP_RADIUS):
    return _frustum(1.0, top_radius, segments, with_top=True)


def cone(segments=DEFAULT_SEGMENTS):
    return _frustum(1.0, 0.0, segments, with_top=False)


def torus(thickness=DEFAULT_TORUS_THICKNESS, segments=DEFAULT_SEGMENTS, sides=DEFAULT_TORUS_SIDES):
    """
    Torus in the XY plane with main radius 1 and tube radius `thickness`.
    """
    if thickness <= 0.0:
        raise ValueError("Torus thickness must be positive.")

    u = np.linspace(0.0, 2.0 * np.pi, segments + 1)
    v = np.linspace(0.0, 2.0 * np.pi, sides + 1)
    # Rows follow the main ring (u), columns follow the tube (v)
    uu, vv = np.meshgrid(u, v, indexing="ij")

    normals = np.column_stack(
        (
            (np.cos(uu) * np.cos(vv)).ravel(),
            (np.sin(uu) * np.cos(vv)).ravel(),
            np.sin(vv).ravel(),
        )
    )
    centres = np.column_stack((np.cos(uu).ravel(), np.sin(uu).ravel(), np.zeros(uu.size)))
    positions = centres + thickness * normals
    uvs = np.column_stack(((uu / (2.0 * np.pi)).ravel(), (vv / (2.0 * np.pi)).ravel()))

    vertices = _vertices(positions, normals, uvs)
    return _combine([("sides", vertices, _grid_indices(sides, segments))])
