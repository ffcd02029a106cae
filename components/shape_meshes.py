import ctypes

from OpenGL.GL import *

from components import mesh_geometry
from utils.logger import get_logger

logger = get_logger("shape_meshes")

# Attribute locations fixed by `layout(location = N)` in the vertex shader
POSITION_LOCATION = 0
NORMAL_LOCATION = 1
TEX_COORDS_LOCATION = 2

MESH_KINDS = (
    "plane",
    "box",
    "cylinder",
    "cone",
    "torus",
    "tapered_cylinder",
    "extra_torus1",
    "extra_torus2",
)

# Which named parts of each mesh a draw flag toggles
DRAW_FLAGS = {
    "cylinder": ("top", "bottom", "sides"),
    "tapered_cylinder": ("top", "bottom", "sides"),
    "cone": ("bottom", "sides"),
}

# Keyword parameters each load_*_mesh method accepts
MESH_PARAMETERS = {
    "torus": ("thickness",),
    "extra_torus1": ("thickness",),
    "extra_torus2": ("thickness",),
}


class GLMesh:
    """
    GPU buffers for one uploaded primitive.
    """

    def __init__(self, vao, vbo, ebo, data):
        self.vao = vao
        self.vbo = vbo
        self.ebo = ebo
        self.data = data


class ShapeMeshes:
    """
    Uploads the unit primitives to the GPU and draws them on request.

    Each primitive has a load_*_mesh / draw_*_mesh pair; load_mesh and
    draw_mesh dispatch by kind name for data-driven callers.
    """

    def __init__(self, float_size=4):
        self.float_size = float_size
        self.meshes = {}

    def is_loaded(self, kind):
        return kind in self.meshes

    # --------------------------------------------------------------------------
    # Loading
    # --------------------------------------------------------------------------
    def load_mesh(self, kind, **params):
        """
        Load a primitive by kind name. Extra torus kinds accept a `thickness` parameter.
        """
        loaders = {
            "plane": self.load_plane_mesh,
            "box": self.load_box_mesh,
            "cylinder": self.load_cylinder_mesh,
            "cone": self.load_cone_mesh,
            "torus": self.load_torus_mesh,
            "tapered_cylinder": self.load_tapered_cylinder_mesh,
            "extra_torus1": self.load_extra_torus_mesh1,
            "extra_torus2": self.load_extra_torus_mesh2,
        }
        if kind not in loaders:
            raise ValueError(f"Unknown mesh kind '{kind}'. Use one of: {', '.join(MESH_KINDS)}.")
        loaders[kind](**params)

    def load_plane_mesh(self):
        self._upload("plane", mesh_geometry.plane())

    def load_box_mesh(self):
        self._upload("box", mesh_geometry.box())

    def load_cylinder_mesh(self):
        self._upload("cylinder", mesh_geometry.cylinder())

    def load_cone_mesh(self):
        self._upload("cone", mesh_geometry.cone())

    def load_torus_mesh(self, thickness=mesh_geometry.DEFAULT_TORUS_THICKNESS):
        self._upload("torus", mesh_geometry.torus(thickness))

    def load_tapered_cylinder_mesh(self):
        self._upload("tapered_cylinder", mesh_geometry.tapered_cylinder())

    def load_extra_torus_mesh1(self, thickness=mesh_geometry.DEFAULT_TORUS_THICKNESS):
        self._upload("extra_torus1", mesh_geometry.torus(thickness))

    def load_extra_torus_mesh2(self, thickness=mesh_geometry.DEFAULT_TORUS_THICKNESS):
        self._upload("extra_torus2", mesh_geometry.torus(thickness))

    def _upload(self, kind, data):
        if kind in self.meshes:
            logger.debug("Mesh '%s' already loaded; replacing it", kind)
            self._delete(self.meshes.pop(kind))

        vao = glGenVertexArrays(1)
        glBindVertexArray(vao)

        vbo = glGenBuffers(1)
        glBindBuffer(GL_ARRAY_BUFFER, vbo)
        glBufferData(GL_ARRAY_BUFFER, data.vertices.nbytes, data.vertices, GL_STATIC_DRAW)

        ebo = glGenBuffers(1)
        glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, ebo)
        glBufferData(GL_ELEMENT_ARRAY_BUFFER, data.indices.nbytes, data.indices, GL_STATIC_DRAW)

        stride = mesh_geometry.FLOATS_PER_VERTEX * self.float_size
        self.enable_vertex_attrib(POSITION_LOCATION, 3, stride, 0)
        self.enable_vertex_attrib(NORMAL_LOCATION, 3, stride, 3 * self.float_size)
        self.enable_vertex_attrib(TEX_COORDS_LOCATION, 2, stride, 6 * self.float_size)

        glBindVertexArray(0)
        glBindBuffer(GL_ARRAY_BUFFER, 0)

        self.meshes[kind] = GLMesh(vao, vbo, ebo, data)
        logger.debug("Loaded mesh '%s' (%d vertices, %d indices)", kind, data.vertex_count, data.index_count)

    def enable_vertex_attrib(self, location, size, stride, pointer_offset):
        glEnableVertexAttribArray(location)
        glVertexAttribPointer(location, size, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(pointer_offset))

    # --------------------------------------------------------------------------
    # Drawing
    # --------------------------------------------------------------------------
    def draw_mesh(self, kind, **flags):
        """
        Draw a primitive by kind name.

        Cylinder and tapered cylinder accept draw_top, draw_bottom and draw_sides;
        cone accepts draw_bottom and draw_sides. Every flag defaults to True.
        """
        allowed = DRAW_FLAGS.get(kind, ())
        unknown = [name for name in flags if name[len("draw_"):] not in allowed]
        if unknown:
            raise ValueError(f"Mesh '{kind}' does not support draw flags: {', '.join(unknown)}.")

        parts = None
        if allowed:
            parts = [part for part in allowed if flags.get(f"draw_{part}", True)]
        self._draw(kind, parts)

    def draw_plane_mesh(self):
        self._draw("plane")

    def draw_box_mesh(self):
        self._draw("box")

    def draw_cylinder_mesh(self, draw_top=True, draw_bottom=True, draw_sides=True):
        self.draw_mesh("cylinder", draw_top=draw_top, draw_bottom=draw_bottom, draw_sides=draw_sides)

    def draw_cone_mesh(self, draw_bottom=True, draw_sides=True):
        self.draw_mesh("cone", draw_bottom=draw_bottom, draw_sides=draw_sides)

    def draw_torus_mesh(self):
        self._draw("torus")

    def draw_tapered_cylinder_mesh(self, draw_top=True, draw_bottom=True, draw_sides=True):
        self.draw_mesh("tapered_cylinder", draw_top=draw_top, draw_bottom=draw_bottom, draw_sides=draw_sides)

    def draw_extra_torus_mesh1(self):
        self._draw("extra_torus1")

    def draw_extra_torus_mesh2(self):
        self._draw("extra_torus2")

    def _draw(self, kind, parts=None):
        """
        Draw the named index ranges of a mesh, or the whole mesh if parts is None.
        """
        mesh = self.meshes.get(kind)
        if mesh is None:
            logger.warning("Mesh '%s' has not been loaded; skipping draw", kind)
            return

        if parts is None:
            ranges = [(0, mesh.data.index_count)]
        else:
            ranges = [mesh.data.parts[part] for part in parts if part in mesh.data.parts]

        glBindVertexArray(mesh.vao)
        for offset, count in ranges:
            glDrawElements(GL_TRIANGLES, count, GL_UNSIGNED_INT, ctypes.c_void_p(offset * 4))
        glBindVertexArray(0)

    # --------------------------------------------------------------------------
    # Cleanup
    # --------------------------------------------------------------------------
    def _delete(self, mesh):
        glDeleteVertexArrays(1, [mesh.vao])
        glDeleteBuffers(2, [mesh.vbo, mesh.ebo])

    def shutdown(self):
        """
        Delete every uploaded mesh's GPU buffers.
        """
        for mesh in self.meshes.values():
            self._delete(mesh)
        self.meshes.clear()
