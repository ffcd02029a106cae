"""
Test Suite for the Still-Life Renderer (Headless/Pure Python)

OpenGL entry points are patched with unittest.mock so every test runs without a
GL context or a window. The tests focus on:

  - Texture registry loading, slot assignment, lookups and cleanup
  - Material registry lookups
  - Model matrix composition order
  - Primitive mesh generation and part-wise drawing
  - Scene file validation and the per-object uniform sequence
  - Light rig uniforms, camera matrices and renderer config validation
  - Shader include processing and uniform caching
  - Screenshot saving

Run via:
  python test_suite_runner.py
or:
  python -m pytest tests
"""

import collections
import json
import os
import sys
import tempfile
import unittest
from unittest.mock import MagicMock, call, patch

import glm
import numpy as np
import pygame
from OpenGL.GL import (
    GL_RGB,
    GL_RGB8,
    GL_RGBA,
    GL_RGBA8,
    GL_TEXTURE0,
    GL_TEXTURE_2D,
    GL_UNSIGNED_BYTE,
)
from PIL import Image

# Adjust PYTHONPATH to include project root
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from components import mesh_geometry
from components.camera_control import Camera
from components.lighting import MAX_POINT_LIGHTS, LightingSetup, PointLight
from components.material_registry import Material, MaterialRegistry
from components.renderer_config import RendererConfig
from components.renderer_instancing import check_gl_error
from components.scene_description import SceneObject, load_scene, parse_scene
from components.scene_manager import SceneManager
from components.shader_engine import ShaderEngine
from components.shape_meshes import ShapeMeshes
from components.texture_registry import NOT_FOUND, TextureEntry, TextureRegistry, decode_image
from components.transform_builder import build_model_matrix
from config.path_config import default_scene_path
from main import parse_args
from utils.image_saver import ImageSaver
from utils.logger import get_logger

TEXTURE_GL_FUNCTIONS = (
    "glGenTextures",
    "glBindTexture",
    "glTexParameteri",
    "glPixelStorei",
    "glTexImage2D",
    "glGenerateMipmap",
    "glActiveTexture",
    "glDeleteTextures",
)

MESH_GL_FUNCTIONS = (
    "glGenVertexArrays",
    "glBindVertexArray",
    "glGenBuffers",
    "glBindBuffer",
    "glBufferData",
    "glEnableVertexAttribArray",
    "glVertexAttribPointer",
    "glDrawElements",
    "glDeleteVertexArrays",
    "glDeleteBuffers",
)


# --------------------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------------------
def patch_gl(test_case, module, names):
    """
    Replace the named GL functions in `module` with MagicMocks for the duration
    of a test and return them keyed by name.
    """
    mocks = {name: MagicMock(name=name) for name in names}
    patcher = patch.multiple(module, **mocks)
    patcher.start()
    test_case.addCleanup(patcher.stop)
    return mocks


def minimal_scene_data(**object_overrides):
    scene_object = {"name": "jug_body", "mesh": "cylinder", "texture": "stone"}
    scene_object.update(object_overrides)
    return {
        "name": "test_scene",
        "textures": {"stone": "stone.jpg"},
        "materials": [
            {"tag": "matte", "diffuse_color": [1, 1, 1], "specular_color": [0.25, 0.25, 0.25], "shininess": 16}
        ],
        "objects": [scene_object],
    }


def assert_vec_almost_equal(test_case, actual, expected, places=5):
    for index, value in enumerate(expected):
        test_case.assertAlmostEqual(actual[index], value, places=places)


# --------------------------------------------------------------------------------
# Tests: Texture Registry
# --------------------------------------------------------------------------------
class TestTextureRegistry(unittest.TestCase):
    """
    Texture loading is driven by real image files written with Pillow; only the
    GL calls are mocked.
    """

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)

        self.gl = patch_gl(self, "components.texture_registry", TEXTURE_GL_FUNCTIONS)
        self.gl["glGenTextures"].side_effect = [11, 12, 13, 14]

        self.rgb_path = self._write_image("wood.png", "RGB", (4, 2))
        self.rgba_path = self._write_image("stone.png", "RGBA", (3, 3))

    def _write_image(self, filename, mode, size):
        path = os.path.join(self.temp_dir.name, filename)
        Image.new(mode, size).save(path)
        return path

    def test_load_rgb_image(self):
        registry = TextureRegistry()

        self.assertTrue(registry.load(self.rgb_path, "wood"))
        self.assertEqual(registry.find_handle("wood"), 11)
        self.assertEqual(registry.find_slot("wood"), 0)

        entry = registry.entries["wood"]
        self.assertEqual((entry.width, entry.height, entry.channels), (4, 2, 3))

        args = self.gl["glTexImage2D"].call_args[0]
        self.assertEqual(args[2], GL_RGB8)
        self.assertEqual(args[6], GL_RGB)
        self.assertEqual(args[7], GL_UNSIGNED_BYTE)
        self.assertEqual(len(args[8]), 4 * 2 * 3)
        self.gl["glGenerateMipmap"].assert_called_once_with(GL_TEXTURE_2D)

    def test_load_rgba_image(self):
        registry = TextureRegistry()

        self.assertTrue(registry.load(self.rgba_path, "stone"))
        self.assertNotEqual(registry.find_handle("stone"), NOT_FOUND)

        args = self.gl["glTexImage2D"].call_args[0]
        self.assertEqual(args[2], GL_RGBA8)
        self.assertEqual(args[6], GL_RGBA)

    def test_unsupported_channel_counts_are_rejected(self):
        registry = TextureRegistry()
        gray_path = self._write_image("gray.png", "L", (2, 2))
        gray_alpha_path = self._write_image("gray_alpha.png", "LA", (2, 2))

        self.assertFalse(registry.load(gray_path, "gray"))
        self.assertFalse(registry.load(gray_alpha_path, "gray_alpha"))

        self.assertEqual(len(registry), 0)
        self.assertEqual(registry.find_handle("gray"), NOT_FOUND)
        self.gl["glGenTextures"].assert_not_called()

    def test_palette_images_expand_to_rgb_or_rgba(self):
        registry = TextureRegistry()

        opaque_path = self._write_image("opaque.png", "P", (2, 2))

        transparent_path = os.path.join(self.temp_dir.name, "transparent.png")
        palette_image = Image.new("P", (2, 2), 0)
        palette_image.putpalette([255, 0, 0, 0, 255, 0])
        palette_image.save(transparent_path, transparency=0)

        self.assertTrue(registry.load(opaque_path, "opaque"))
        self.assertEqual(registry.entries["opaque"].channels, 3)
        self.assertEqual(self.gl["glTexImage2D"].call_args[0][2], GL_RGB8)

        self.assertTrue(registry.load(transparent_path, "transparent"))
        self.assertEqual(registry.entries["transparent"].channels, 4)
        args = self.gl["glTexImage2D"].call_args[0]
        self.assertEqual(args[2], GL_RGBA8)
        self.assertEqual(len(args[8]), 2 * 2 * 4)

    def test_oversized_image_is_rejected(self):
        registry = TextureRegistry()
        large_path = self._write_image("large.png", "RGB", (8, 8))

        with patch.object(Image, "MAX_IMAGE_PIXELS", 16):
            self.assertFalse(registry.load(large_path, "large"))

        self.assertEqual(len(registry), 0)
        self.assertEqual(registry.find_handle("large"), NOT_FOUND)
        self.gl["glGenTextures"].assert_not_called()

    def test_missing_and_corrupt_files_are_rejected(self):
        registry = TextureRegistry()
        corrupt_path = os.path.join(self.temp_dir.name, "corrupt.jpg")
        with open(corrupt_path, "wb") as file:
            file.write(b"not an image")

        self.assertFalse(registry.load(os.path.join(self.temp_dir.name, "missing.jpg"), "missing"))
        self.assertFalse(registry.load(corrupt_path, "corrupt"))
        self.assertEqual(len(registry), 0)
        self.gl["glGenTextures"].assert_not_called()

    def test_duplicate_tag_keeps_first_texture(self):
        registry = TextureRegistry()

        self.assertTrue(registry.load(self.rgb_path, "wood"))
        self.assertFalse(registry.load(self.rgba_path, "wood"))

        self.assertEqual(len(registry), 1)
        self.assertEqual(registry.find_handle("wood"), 11)
        self.assertEqual(registry.entries["wood"].channels, 3)

    def test_capacity_is_bounded(self):
        registry = TextureRegistry(max_slots=2)

        self.assertTrue(registry.load(self.rgb_path, "wood"))
        self.assertTrue(registry.load(self.rgb_path, "stone"))
        self.assertFalse(registry.load(self.rgb_path, "ceramic"))

        self.assertEqual(registry.tags, ["wood", "stone"])
        self.assertEqual(self.gl["glGenTextures"].call_count, 2)

    def test_unknown_tag_returns_sentinel(self):
        registry = TextureRegistry()
        registry.load(self.rgb_path, "wood")

        self.assertEqual(registry.find_handle("marble"), NOT_FOUND)
        self.assertEqual(registry.find_slot("marble"), NOT_FOUND)
        self.assertEqual(NOT_FOUND, -1)

    def test_slots_follow_load_order(self):
        registry = TextureRegistry()
        registry.load(self.rgb_path, "wood")
        registry.load(self.rgba_path, "stone")

        self.assertEqual(registry.find_slot("wood"), 0)
        self.assertEqual(registry.find_slot("stone"), 1)
        self.assertEqual([entry.tag for entry in registry], ["wood", "stone"])

    def test_bind_all_binds_each_slot(self):
        registry = TextureRegistry()
        registry.load(self.rgb_path, "wood")
        registry.load(self.rgba_path, "stone")
        self.gl["glBindTexture"].reset_mock()

        registry.bind_all()

        self.gl["glActiveTexture"].assert_has_calls([call(GL_TEXTURE0 + 0), call(GL_TEXTURE0 + 1)])
        self.gl["glBindTexture"].assert_has_calls([call(GL_TEXTURE_2D, 11), call(GL_TEXTURE_2D, 12)])

    def test_destroy_all_deletes_textures(self):
        registry = TextureRegistry()
        registry.load(self.rgb_path, "wood")
        registry.load(self.rgba_path, "stone")

        registry.destroy_all()

        self.gl["glDeleteTextures"].assert_called_once_with(2, [11, 12])
        self.assertEqual(len(registry), 0)
        self.assertNotIn("wood", registry)

    def test_decode_flips_rows_for_opengl(self):
        path = os.path.join(self.temp_dir.name, "stripes.png")
        image = Image.new("RGB", (1, 2))
        image.putpixel((0, 0), (255, 0, 0))
        image.putpixel((0, 1), (0, 0, 255))
        image.save(path)

        _, _, _, flipped = decode_image(path)
        _, _, _, unflipped = decode_image(path, flip_vertically=False)

        self.assertEqual(flipped[:3], bytes((0, 0, 255)))
        self.assertEqual(unflipped[:3], bytes((255, 0, 0)))


# --------------------------------------------------------------------------------
# Tests: Material Registry
# --------------------------------------------------------------------------------
class TestMaterialRegistry(unittest.TestCase):

    def test_find_registered_material(self):
        registry = MaterialRegistry()
        registry.add_material("glossy_table", (1, 1, 1), (0.8, 0.8, 0.8), 64)

        material = registry.find("glossy_table")
        self.assertIsNotNone(material)
        self.assertEqual(material.shininess, 64.0)
        self.assertEqual(material.specular_color, glm.vec3(0.8, 0.8, 0.8))

    def test_find_unknown_material_returns_none(self):
        registry = MaterialRegistry()
        self.assertIsNone(registry.find("velvet"))

    def test_duplicate_tag_raises(self):
        registry = MaterialRegistry([Material.from_values("matte", (1, 1, 1), (0.2, 0.2, 0.2), 8)])
        with self.assertRaises(ValueError):
            registry.add_material("matte", (0, 0, 0), (0, 0, 0), 1)
        self.assertEqual(len(registry), 1)

    def test_invalid_values_raise(self):
        with self.assertRaises(ValueError):
            Material.from_values("bad", (1, 1), (0, 0, 0), 1)
        with self.assertRaises(ValueError):
            Material.from_values("bad", (1, 1, 1), (0, 0, 0), -1)


# --------------------------------------------------------------------------------
# Tests: Transform Builder
# --------------------------------------------------------------------------------
class TestTransformBuilder(unittest.TestCase):

    def test_identity(self):
        model = build_model_matrix((1, 1, 1), 0, 0, 0, (0, 0, 0))
        self.assertEqual(model, glm.mat4(1.0))

    def test_scale_is_applied_before_rotation(self):
        model = build_model_matrix((2, 1, 1), 0, 0, 90, (0, 0, 0))
        assert_vec_almost_equal(self, model * glm.vec4(1, 0, 0, 1), (0, 2, 0, 1))

        # Rotating first would leave the X scale on the wrong axis
        rotate_then_scale = glm.scale(glm.mat4(1.0), glm.vec3(2, 1, 1)) * glm.rotate(
            glm.mat4(1.0), glm.radians(90.0), glm.vec3(0, 0, 1)
        )
        self.assertNotAlmostEqual((rotate_then_scale * glm.vec4(1, 0, 0, 1)).y, 2.0, places=3)

    def test_x_rotation_is_applied_before_y(self):
        model = build_model_matrix((1, 1, 1), 90, 90, 0, (0, 0, 0))
        assert_vec_almost_equal(self, model * glm.vec4(0, 1, 0, 1), (1, 0, 0, 1))

    def test_translation_is_applied_last(self):
        model = build_model_matrix((3, 3, 3), 0, 0, 90, (5, 0, -1))
        assert_vec_almost_equal(self, model * glm.vec4(1, 0, 0, 1), (5, 3, -1, 1))


# --------------------------------------------------------------------------------
# Tests: Mesh Geometry and Shape Meshes
# --------------------------------------------------------------------------------
class TestMeshGeometry(unittest.TestCase):

    def test_flat_primitives(self):
        plane = mesh_geometry.plane()
        self.assertEqual((plane.vertex_count, plane.index_count), (4, 6))
        self.assertTrue(np.allclose(plane.vertices[:, 4], 1.0))

        box = mesh_geometry.box()
        self.assertEqual((box.vertex_count, box.index_count), (24, 36))
        self.assertTrue(np.allclose(np.abs(box.vertices[:, :3]).max(), 0.5))

    def test_cylinder_parts(self):
        segments = 12
        cylinder = mesh_geometry.cylinder(segments)

        self.assertEqual(set(cylinder.parts), {"sides", "bottom", "top"})
        self.assertEqual(cylinder.parts["sides"], (0, segments * 6))
        self.assertEqual(cylinder.parts["bottom"][1], segments * 3)
        self.assertEqual(cylinder.parts["top"][1], segments * 3)
        self.assertEqual(sum(count for _, count in cylinder.parts.values()), cylinder.index_count)

        heights = cylinder.vertices[:, 1]
        self.assertAlmostEqual(float(heights.min()), 0.0)
        self.assertAlmostEqual(float(heights.max()), 1.0)
        self.assertLess(int(cylinder.indices.max()), cylinder.vertex_count)

    def test_cone_and_tapered_cylinder(self):
        cone = mesh_geometry.cone()
        self.assertNotIn("top", cone.parts)

        tapered = mesh_geometry.tapered_cylinder()
        top_ring = tapered.vertices[np.isclose(tapered.vertices[:, 1], 1.0)]
        radii = np.hypot(top_ring[:, 0], top_ring[:, 2])
        self.assertAlmostEqual(float(radii.max()), mesh_geometry.TAPERED_TOP_RADIUS, places=5)

    def test_torus_thickness(self):
        torus = mesh_geometry.torus(0.22)
        self.assertAlmostEqual(float(torus.vertices[:, 0].max()), 1.22, places=4)
        self.assertAlmostEqual(float(np.abs(torus.vertices[:, 2]).max()), 0.22, places=4)

        with self.assertRaises(ValueError):
            mesh_geometry.torus(0.0)


class TestShapeMeshes(unittest.TestCase):

    def setUp(self):
        self.gl = patch_gl(self, "components.shape_meshes", MESH_GL_FUNCTIONS)
        self.gl["glGenVertexArrays"].return_value = 1
        self.gl["glGenBuffers"].side_effect = [2, 3, 4, 5, 6, 7]
        self.meshes = ShapeMeshes()

    def _drawn_counts(self):
        return [draw_call[0][1] for draw_call in self.gl["glDrawElements"].call_args_list]

    def test_cylinder_draw_flags(self):
        self.meshes.load_mesh("cylinder")
        parts = self.meshes.meshes["cylinder"].data.parts

        self.meshes.draw_cylinder_mesh(draw_top=False, draw_bottom=True, draw_sides=True)

        self.assertEqual(self._drawn_counts(), [parts["bottom"][1], parts["sides"][1]])

    def test_whole_mesh_draw(self):
        self.meshes.load_mesh("box")
        self.meshes.draw_mesh("box")
        self.assertEqual(self._drawn_counts(), [36])

    def test_extra_torus_thickness_is_forwarded(self):
        self.meshes.load_mesh("extra_torus2", thickness=0.22)
        data = self.meshes.meshes["extra_torus2"].data
        self.assertAlmostEqual(float(data.vertices[:, 0].max()), 1.22, places=4)

    def test_torus_wrappers_draw_whole_mesh(self):
        self.meshes.load_mesh("torus")
        self.meshes.load_mesh("extra_torus1", thickness=0.12)
        torus_count = self.meshes.meshes["torus"].data.index_count
        extra_count = self.meshes.meshes["extra_torus1"].data.index_count

        self.meshes.draw_extra_torus_mesh1()
        self.meshes.draw_torus_mesh()

        self.assertEqual(self._drawn_counts(), [extra_count, torus_count])
        self.assertGreater(torus_count, 0)

    def test_unsupported_flag_and_kind(self):
        self.meshes.load_mesh("cone")
        with self.assertRaises(ValueError):
            self.meshes.draw_mesh("cone", draw_top=True)
        with self.assertRaises(ValueError):
            self.meshes.load_mesh("sphere")

    def test_unloaded_mesh_is_skipped(self):
        self.meshes.draw_plane_mesh()
        self.gl["glDrawElements"].assert_not_called()

    def test_shutdown_deletes_buffers(self):
        self.meshes.load_mesh("plane")
        self.meshes.shutdown()

        self.gl["glDeleteVertexArrays"].assert_called_once_with(1, [1])
        self.gl["glDeleteBuffers"].assert_called_once_with(2, [2, 3])
        self.assertFalse(self.meshes.is_loaded("plane"))


# --------------------------------------------------------------------------------
# Tests: Scene Description
# --------------------------------------------------------------------------------
class TestSceneDescription(unittest.TestCase):

    def test_shipped_still_life_scene(self):
        scene = load_scene(default_scene_path)

        self.assertEqual(len(scene.objects), 13)
        self.assertEqual(
            list(scene.textures), ["wood", "stone", "ceramic", "table", "bread1", "bread2", "basket"]
        )
        self.assertEqual(scene.mesh_params["extra_torus1"], {"thickness": 0.12})
        self.assertEqual(scene.mesh_params["extra_torus2"], {"thickness": 0.22})
        self.assertEqual(
            set(scene.mesh_kinds),
            {"plane", "cylinder", "cone", "torus", "extra_torus1", "tapered_cylinder", "extra_torus2", "box"},
        )

        cup = next(scene_object for scene_object in scene.objects if scene_object.name == "cup")
        self.assertEqual(cup.draw_flags, {"top": True, "bottom": False, "sides": True})
        self.assertEqual(cup.rotation, (0.0, 0.0, 180.0))
        self.assertEqual(len(scene.lighting.point_lights), 1)

    def test_defaults_are_filled_in(self):
        scene = parse_scene(minimal_scene_data())
        scene_object = scene.objects[0]

        self.assertEqual(scene_object.scale, (1.0, 1.0, 1.0))
        self.assertEqual(scene_object.uv_scale, (1.0, 1.0))
        self.assertTrue(scene_object.lighting)
        self.assertIsNone(scene_object.color)

    def test_invalid_objects_name_the_object(self):
        invalid_overrides = [
            {"mesh": "sphere"},
            {"scale": [1, 2]},
            {"uv_scale": [1, 2, 3]},
            {"texture": "marble"},
            {"draw_flags": {"lid": True}},
            {"lighting": "false"},
            {"draw_flags": {"top": "no"}},
        ]
        for overrides in invalid_overrides:
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValueError) as context:
                    parse_scene(minimal_scene_data(**overrides))
                self.assertIn("jug_body", str(context.exception))

    def test_mesh_parameters_are_validated(self):
        invalid_meshes = [
            {"plane": {"thickness": 1}},
            {"torus": {"radius": 2}},
            {"torus": {"thickness": 0}},
            {"torus": {"thickness": -0.1}},
            {"torus": {"thickness": "thin"}},
            {"torus": {"thickness": True}},
            {"torus": [0.1]},
        ]
        for meshes in invalid_meshes:
            with self.subTest(meshes=meshes):
                data = minimal_scene_data()
                data["meshes"] = meshes
                with self.assertRaises(ValueError) as context:
                    parse_scene(data)
                self.assertIn("meshes", str(context.exception))

        data = minimal_scene_data()
        data["meshes"] = {"extra_torus1": {"thickness": 0.12}}
        self.assertEqual(parse_scene(data).mesh_params, {"extra_torus1": {"thickness": 0.12}})

    def test_object_without_texture_or_color(self):
        data = minimal_scene_data()
        del data["objects"][0]["texture"]
        with self.assertRaises(ValueError):
            parse_scene(data)

    def test_color_and_inline_material(self):
        data = minimal_scene_data()
        del data["objects"][0]["texture"]
        data["objects"][0]["color"] = [0.5, 0.4, 0.3, 1.0]
        data["objects"][0]["material"] = {"diffuse_color": [1, 0, 0], "specular_color": [0, 0, 0], "shininess": 2}

        scene_object = parse_scene(data).objects[0]

        self.assertEqual(scene_object.color, (0.5, 0.4, 0.3, 1.0))
        self.assertEqual(scene_object.material_override.tag, "jug_body_material")

    def test_invalid_json_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, "broken.json")
            with open(path, "w", encoding="utf-8") as file:
                file.write("{ not json")
            with self.assertRaises(ValueError):
                load_scene(path)

            valid_path = os.path.join(temp_dir, "valid.json")
            with open(valid_path, "w", encoding="utf-8") as file:
                json.dump(minimal_scene_data(), file)
            self.assertEqual(load_scene(valid_path).name, "test_scene")


# --------------------------------------------------------------------------------
# Tests: Scene Manager
# --------------------------------------------------------------------------------
class TestSceneManager(unittest.TestCase):

    def setUp(self):
        self.shader_engine = MagicMock()
        self.shape_meshes = MagicMock()
        self.texture_registry = TextureRegistry()
        self.texture_registry.entries["stone"] = TextureEntry("stone", 5, 0, 1, 1, 3)
        self.material_registry = MaterialRegistry()
        self.scene = parse_scene(minimal_scene_data(uv_scale=[1, 0.8], draw_flags={"top": False}))

        self.manager = SceneManager(
            self.shader_engine,
            self.scene,
            texture_registry=self.texture_registry,
            material_registry=self.material_registry,
            shape_meshes=self.shape_meshes,
        )

    def test_render_object_sequence(self):
        self.material_registry.add(self.scene.materials[0])
        scene_object = self.scene.objects[0]
        scene_object.material = "matte"
        scene_object.position = (0.0, 3.5, 0.0)

        self.manager.render_object(scene_object)

        name, matrix = self.shader_engine.set_mat4_value.call_args[0]
        self.assertEqual(name, "model")
        self.assertEqual(matrix, build_model_matrix((1, 1, 1), 0, 0, 0, (0, 3.5, 0)))

        self.shader_engine.set_int_value.assert_any_call("bUseLighting", True)
        self.shader_engine.set_int_value.assert_any_call("bUseTexture", True)
        self.shader_engine.set_sampler2d_value.assert_called_once_with("objectTexture", 0)
        self.shader_engine.set_vec2_value.assert_called_once_with("UVscale", (1.0, 0.8))
        self.shader_engine.set_float_value.assert_called_once_with("material.shininess", 16.0)
        self.shape_meshes.draw_mesh.assert_called_once_with("cylinder", draw_top=False)

    def test_flat_color_disables_texturing(self):
        scene_object = SceneObject(name="cube", mesh="box", color=(0.1, 0.2, 0.3, 1.0))

        self.manager.render_object(scene_object)

        self.shader_engine.set_int_value.assert_any_call("bUseTexture", False)
        self.shader_engine.set_vec4_value.assert_called_once_with("objectColor", (0.1, 0.2, 0.3, 1.0))
        self.shader_engine.set_sampler2d_value.assert_not_called()

    def test_unknown_texture_and_material(self):
        self.manager.set_shader_texture("marble")
        self.manager.set_shader_material("velvet")

        self.shader_engine.set_sampler2d_value.assert_called_once_with("objectTexture", NOT_FOUND)
        self.shader_engine.set_vec3_value.assert_not_called()
        self.shader_engine.set_float_value.assert_not_called()

    def test_render_scene_applies_lighting_first(self):
        self.manager.render_scene()

        first_call = self.shader_engine.method_calls[0]
        self.assertEqual(first_call, call.set_int_value("bUseLighting", True))
        self.shape_meshes.draw_mesh.assert_called_once()

    def test_prepare_scene(self):
        texture_registry = MagicMock()
        texture_registry.load.return_value = False
        texture_registry.__len__.return_value = 0
        self.scene.mesh_params["cylinder"] = {}
        manager = SceneManager(
            self.shader_engine,
            self.scene,
            texture_registry=texture_registry,
            material_registry=self.material_registry,
            shape_meshes=self.shape_meshes,
            textures_directory="textures",
        )

        manager.prepare_scene()

        self.shape_meshes.load_mesh.assert_called_once_with("cylinder")
        texture_registry.load.assert_called_once_with(os.path.join("textures", "stone.jpg"), "stone")
        texture_registry.bind_all.assert_called_once()
        self.assertIsNotNone(self.material_registry.find("matte"))

    def test_destroy(self):
        texture_registry = MagicMock()
        manager = SceneManager(
            self.shader_engine, self.scene, texture_registry=texture_registry, shape_meshes=self.shape_meshes
        )
        manager.destroy()
        texture_registry.destroy_all.assert_called_once()
        self.shape_meshes.shutdown.assert_called_once()


# --------------------------------------------------------------------------------
# Tests: Lighting, Camera and Config
# --------------------------------------------------------------------------------
class TestLighting(unittest.TestCase):

    def test_unused_point_lights_are_disabled(self):
        shader_engine = MagicMock()
        LightingSetup().apply(shader_engine)

        shader_engine.set_int_value.assert_any_call("pointLights[0].bActive", True)
        for index in range(1, MAX_POINT_LIGHTS):
            shader_engine.set_int_value.assert_any_call(f"pointLights[{index}].bActive", False)
        shader_engine.set_int_value.assert_any_call("spotLight.bActive", False)
        shader_engine.set_vec3_value.assert_any_call("pointLights[0].position", glm.vec3(4.5, 6.5, 4.5))

    def test_too_many_point_lights(self):
        lights = [PointLight(glm.vec3(0), glm.vec3(0), glm.vec3(1), glm.vec3(1)) for _ in range(6)]
        with self.assertRaises(ValueError):
            LightingSetup(point_lights=lights)

    def test_from_dict(self):
        lighting = LightingSetup.from_dict({"point_lights": [], "directional_light": {"active": False}})
        self.assertEqual(lighting.point_lights, [])
        self.assertFalse(lighting.directional_light.active)

        with self.assertRaises(ValueError):
            LightingSetup.from_dict({"point_lights": [{"position": [0, 1, 0]}]})


class TestCamera(unittest.TestCase):

    def test_matrices_and_uniforms(self):
        camera = Camera(position=(0, 0, 5), yaw=0, pitch=0, aspect_ratio=1.0)
        self.assertEqual(camera.view, glm.lookAt(glm.vec3(0, 0, 5), glm.vec3(0, 0, 4), glm.vec3(0, 1, 0)))

        shader_engine = MagicMock()
        camera.apply(shader_engine)
        shader_engine.set_mat4_value.assert_any_call("view", camera.view)
        shader_engine.set_mat4_value.assert_any_call("projection", camera.projection)
        shader_engine.set_vec3_value.assert_called_once_with("viewPosition", camera.position)

    def test_keyboard_movement(self):
        camera = Camera(position=(0, 0, 5), yaw=0, pitch=0, move_speed=2.0)
        pressed_keys = collections.defaultdict(bool, {pygame.K_w: True, pygame.K_e: True})

        camera.update(0.5, pressed_keys)

        assert_vec_almost_equal(self, camera.position, (0, 1, 4))

    def test_pitch_is_clamped(self):
        camera = Camera(pitch=80, turn_speed=100.0)
        camera.update(1.0, collections.defaultdict(bool, {pygame.K_UP: True}))
        self.assertEqual(camera.pitch, 89.0)


class TestRendererConfig(unittest.TestCase):
    """
    Tests around RendererConfig to ensure it accepts/validates configuration properly.
    """

    def test_basic_initialization(self):
        rc = RendererConfig(window_title="Test", window_size=(800, 600))
        self.assertEqual(rc.window_title, "Test")
        self.assertEqual(rc.window_size, (800, 600))
        self.assertAlmostEqual(rc.aspect_ratio, 800 / 600)
        self.assertTrue(rc.vsync_enabled)
        self.assertIsNone(rc.duration)
        self.assertFalse(rc.culling)

    def test_invalid_options(self):
        invalid_options = [
            {"window_size": (0, 600)},
            {"duration": 0},
            {"fov": 180},
            {"near_plane": 10, "far_plane": 1},
            {"msaa_level": 3},
            {"camera_rotation": (0, 0, 0)},
        ]
        for options in invalid_options:
            with self.subTest(options=options):
                with self.assertRaises(ValueError):
                    RendererConfig(**options)

    def test_unpack_returns_copy(self):
        rc = RendererConfig()
        unpacked = rc.unpack()
        unpacked["window_title"] = "Changed"
        self.assertEqual(rc.window_title, "Still Life")

    def test_command_line_arguments(self):
        args = parse_args(["--duration", "5", "--width", "640", "--height", "480", "--debug"])
        self.assertEqual(args.duration, 5.0)
        self.assertEqual((args.width, args.height), (640, 480))
        self.assertTrue(args.debug)
        self.assertEqual(args.scene, default_scene_path)


# --------------------------------------------------------------------------------
# Tests: Shader Engine and Utilities
# --------------------------------------------------------------------------------
class TestShaderEngine(unittest.TestCase):

    def setUp(self):
        patcher = patch.object(ShaderEngine, "create_shader_program", return_value=3)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.engine = ShaderEngine("vertex/standard/vertex.glsl", "fragment/still_life/fragment.glsl")

    def test_includes_are_expanded(self):
        source = self.engine._load_shader_code(os.path.join("fragment", "still_life", "fragment.glsl"))
        self.assertIn("struct Material", source)
        self.assertIn("uniform PointLight pointLights[MAX_POINT_LIGHTS];", source)
        self.assertNotIn("#include", source)

    def test_missing_shader_file(self):
        with self.assertRaises(FileNotFoundError):
            self.engine._load_shader_code("missing.glsl")

    def test_uniform_locations_are_cached(self):
        gl = patch_gl(self, "components.shader_engine", ("glGetUniformLocation", "glUniform1i", "glUniform1f"))
        gl["glGetUniformLocation"].return_value = 4

        self.engine.set_int_value("bUseTexture", True)
        self.engine.set_int_value("bUseTexture", False)

        gl["glGetUniformLocation"].assert_called_once_with(3, "bUseTexture")
        gl["glUniform1i"].assert_has_calls([call(4, 1), call(4, 0)])

    def test_missing_uniform_is_skipped(self):
        gl = patch_gl(self, "components.shader_engine", ("glGetUniformLocation", "glUniform1f"))
        gl["glGetUniformLocation"].return_value = -1

        self.engine.set_float_value("material.shininess", 16.0)

        gl["glUniform1f"].assert_not_called()

    def test_negative_sampler_slot_is_skipped(self):
        gl = patch_gl(self, "components.shader_engine", ("glGetUniformLocation", "glUniform1i"))
        gl["glGetUniformLocation"].return_value = 2

        self.engine.set_sampler2d_value("objectTexture", NOT_FOUND)
        self.engine.set_sampler2d_value("objectTexture", 1)

        gl["glUniform1i"].assert_called_once_with(2, 1)


class TestUtilities(unittest.TestCase):

    def test_check_gl_error(self):
        with patch("components.renderer_instancing.glGetError", return_value=1280) as gl_get_error:
            check_gl_error("release", debug_mode=False)
            gl_get_error.assert_not_called()
            with self.assertRaises(RuntimeError):
                check_gl_error("render_frame", debug_mode=True)

    def test_image_saver(self):
        ImageSaver.reset_instance()
        self.addCleanup(ImageSaver.reset_instance)

        with tempfile.TemporaryDirectory() as temp_dir:
            saver = ImageSaver(screenshots_dir=temp_dir)
            self.assertIs(ImageSaver(), saver)

            path = saver.save_image(Image.new("RGB", (2, 2)), "shot.png", timestamped=False)
            self.assertEqual(path, os.path.join(temp_dir, "shot.png"))

            path = saver.save_framebuffer(bytes(2 * 2 * 3), 2, 2)
            self.assertTrue(os.path.basename(path).startswith("still_life_"))
            self.assertTrue(path.endswith(".png"))
            self.assertTrue(os.path.isfile(path))

    def test_logger_namespace(self):
        self.assertEqual(get_logger("texture_registry").name, "stilllife.texture_registry")


if __name__ == "__main__":
    unittest.main()
