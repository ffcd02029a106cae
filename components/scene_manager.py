import os

from components.material_registry import MaterialRegistry
from components.shape_meshes import ShapeMeshes
from components.texture_registry import NOT_FOUND, TextureRegistry
from components.transform_builder import build_model_matrix
from config.path_config import textures_dir
from utils.logger import get_logger

logger = get_logger("scene_manager")


class SceneManager:
    """
    Prepares and renders a SceneDescription.

    prepare_scene() is called once after the GL context exists: it uploads the
    meshes the scene uses, loads its textures and registers its materials.
    render_scene() is called every frame and replays the scene objects in order,
    pushing transform, material, surface and UV uniforms before each draw.
    """

    def __init__(
        self,
        shader_engine,
        scene,
        texture_registry=None,
        material_registry=None,
        shape_meshes=None,
        textures_directory=textures_dir,
    ):
        self.shader_engine = shader_engine
        self.scene = scene
        self.texture_registry = texture_registry or TextureRegistry()
        self.material_registry = material_registry or MaterialRegistry()
        self.shape_meshes = shape_meshes or ShapeMeshes()
        self.textures_directory = textures_directory

    # --------------------------------------------------------------------------
    # Setup
    # --------------------------------------------------------------------------
    def prepare_scene(self):
        """
        Load everything the scene needs into GPU memory.
        """
        for kind in self.scene.mesh_kinds:
            self.shape_meshes.load_mesh(kind, **self.scene.mesh_params.get(kind, {}))

        self.load_scene_textures()

        for material in self.scene.materials:
            self.material_registry.add(material)

        logger.info(
            "Prepared scene '%s': %d meshes, %d/%d textures, %d materials",
            self.scene.name,
            len(self.shape_meshes.meshes),
            len(self.texture_registry),
            len(self.scene.textures),
            len(self.material_registry),
        )

    def load_scene_textures(self):
        """
        Load the scene's textures in listed order, then bind them all to their slots.
        A texture that fails to load is skipped and its tag resolves to NOT_FOUND.
        """
        for tag, relative_path in self.scene.textures.items():
            path = os.path.join(self.textures_directory, relative_path)
            if not self.texture_registry.load(path, tag):
                logger.warning("Texture '%s' unavailable; skipped", tag)

        self.texture_registry.bind_all()

    # --------------------------------------------------------------------------
    # Uniform Helpers
    # --------------------------------------------------------------------------
    def set_transformations(self, scale, x_rotation_degrees, y_rotation_degrees, z_rotation_degrees, position):
        model = build_model_matrix(scale, x_rotation_degrees, y_rotation_degrees, z_rotation_degrees, position)
        self.shader_engine.set_mat4_value("model", model)

    def set_shader_color(self, red, green, blue, alpha):
        """Draw the next object with a flat colour instead of a texture."""
        self.shader_engine.set_int_value("bUseTexture", False)
        self.shader_engine.set_vec4_value("objectColor", (red, green, blue, alpha))

    def set_shader_texture(self, texture_tag):
        """
        Draw the next object with the texture registered under texture_tag.

        An unknown tag still enables texturing; the -1 slot is not uploaded, so the
        sampler keeps its previous unit.
        """
        self.shader_engine.set_int_value("bUseTexture", True)
        slot = self.texture_registry.find_slot(texture_tag)
        if slot == NOT_FOUND:
            logger.debug("Texture tag '%s' not found", texture_tag)
        self.shader_engine.set_sampler2d_value("objectTexture", slot)

    def set_texture_uv_scale(self, u, v):
        self.shader_engine.set_vec2_value("UVscale", (u, v))

    def set_shader_material(self, material_tag):
        """
        Push the named material's uniforms; an unknown tag leaves them unchanged.
        """
        material = self.material_registry.find(material_tag)
        if material is None:
            logger.debug("Material tag '%s' not found; keeping current material", material_tag)
            return
        self.apply_material(material)

    def apply_material(self, material):
        self.shader_engine.set_vec3_value("material.diffuseColor", material.diffuse_color)
        self.shader_engine.set_vec3_value("material.specularColor", material.specular_color)
        self.shader_engine.set_float_value("material.shininess", material.shininess)

    # --------------------------------------------------------------------------
    # Rendering
    # --------------------------------------------------------------------------
    def render_scene(self):
        """
        Apply the light rig, then draw every scene object in listed order.
        """
        self.scene.lighting.apply(self.shader_engine)

        for scene_object in self.scene.objects:
            self.render_object(scene_object)

    def render_object(self, scene_object):
        x_rotation, y_rotation, z_rotation = scene_object.rotation
        self.set_transformations(scene_object.scale, x_rotation, y_rotation, z_rotation, scene_object.position)

        self.shader_engine.set_int_value("bUseLighting", scene_object.lighting)

        if scene_object.material_override is not None:
            self.apply_material(scene_object.material_override)
        elif scene_object.material is not None:
            self.set_shader_material(scene_object.material)

        if scene_object.texture is not None:
            self.set_shader_texture(scene_object.texture)
        else:
            self.set_shader_color(*scene_object.color)

        self.set_texture_uv_scale(*scene_object.uv_scale)

        draw_flags = {f"draw_{flag}": value for flag, value in scene_object.draw_flags.items()}
        logger.debug("Drawing '%s' (%s)", scene_object.name, scene_object.mesh)
        self.shape_meshes.draw_mesh(scene_object.mesh, **draw_flags)

    # --------------------------------------------------------------------------
    # Cleanup
    # --------------------------------------------------------------------------
    def destroy(self):
        """
        Release the scene's textures and mesh buffers.
        """
        self.texture_registry.destroy_all()
        self.shape_meshes.shutdown()
