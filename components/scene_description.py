"""
Scene Description Module

Reads a still-life scene from JSON and validates it into plain records the
SceneManager can replay. A scene file has five sections:

  - textures:  ordered mapping of tag -> image path (relative to the textures dir)
  - meshes:    optional per-kind load parameters, e.g. torus thickness
  - materials: list of {tag, diffuse_color, specular_color, shininess}
  - lighting:  directional light, point lights and spotlight toggle
  - objects:   ordered list of objects drawn every frame

All validation failures raise ValueError naming the offending entry.
"""

import json
from dataclasses import dataclass, field

from components.lighting import LightingSetup
from components.material_registry import Material
from components.shape_meshes import DRAW_FLAGS, MESH_KINDS, MESH_PARAMETERS
from utils.logger import get_logger

logger = get_logger("scene_description")


@dataclass
class SceneObject:
    name: str
    mesh: str
    scale: tuple = (1.0, 1.0, 1.0)
    rotation: tuple = (0.0, 0.0, 0.0)
    position: tuple = (0.0, 0.0, 0.0)
    texture: str = None
    color: tuple = None
    uv_scale: tuple = (1.0, 1.0)
    material: str = None
    material_override: Material = None
    lighting: bool = True
    draw_flags: dict = field(default_factory=dict)


@dataclass
class SceneDescription:
    name: str
    textures: dict = field(default_factory=dict)
    mesh_params: dict = field(default_factory=dict)
    materials: list = field(default_factory=list)
    lighting: LightingSetup = field(default_factory=LightingSetup)
    objects: list = field(default_factory=list)

    @property
    def mesh_kinds(self):
        """Mesh kinds used by at least one object, in first-use order."""
        kinds = []
        for scene_object in self.objects:
            if scene_object.mesh not in kinds:
                kinds.append(scene_object.mesh)
        return kinds


def _vector(owner, key, values, size):
    if not isinstance(values, (list, tuple)) or len(values) != size:
        raise ValueError(f"{owner}: '{key}' must be a list of {size} numbers, got {values!r}.")
    try:
        return tuple(float(value) for value in values)
    except (TypeError, ValueError):
        raise ValueError(f"{owner}: '{key}' must contain only numbers, got {values!r}.") from None


def _flag(owner, key, value):
    if not isinstance(value, bool):
        raise ValueError(f"{owner}: '{key}' must be true or false, got {value!r}.")
    return value


def _parse_mesh_params(kind, params):
    owner = f"Scene 'meshes' entry '{kind}'"
    if not isinstance(params, dict):
        raise ValueError(f"{owner}: parameters must be an object.")

    allowed = MESH_PARAMETERS.get(kind, ())
    for key in params:
        if key not in allowed:
            raise ValueError(f"{owner}: unsupported parameter '{key}'.")

    if "thickness" in params:
        thickness = params["thickness"]
        if isinstance(thickness, bool) or not isinstance(thickness, (int, float)) or thickness <= 0:
            raise ValueError(f"{owner}: 'thickness' must be a positive number, got {thickness!r}.")
    return dict(params)


def _parse_material(owner, data, default_tag=None):
    tag = data.get("tag", default_tag)
    if not tag:
        raise ValueError(f"{owner}: material is missing a 'tag'.")
    try:
        return Material.from_values(
            tag,
            _vector(owner, "diffuse_color", data["diffuse_color"], 3),
            _vector(owner, "specular_color", data["specular_color"], 3),
            float(data["shininess"]),
        )
    except KeyError as exc:
        raise ValueError(f"{owner}: material is missing {exc}.") from None


def _parse_object(index, data, texture_tags):
    name = data.get("name", f"object_{index}")
    owner = f"Scene object '{name}'"

    mesh = data.get("mesh")
    if mesh not in MESH_KINDS:
        raise ValueError(f"{owner}: unknown mesh kind {mesh!r}. Use one of: {', '.join(MESH_KINDS)}.")

    scene_object = SceneObject(name=name, mesh=mesh)
    scene_object.scale = _vector(owner, "scale", data.get("scale", scene_object.scale), 3)
    scene_object.rotation = _vector(owner, "rotation", data.get("rotation", scene_object.rotation), 3)
    scene_object.position = _vector(owner, "position", data.get("position", scene_object.position), 3)
    scene_object.uv_scale = _vector(owner, "uv_scale", data.get("uv_scale", scene_object.uv_scale), 2)
    scene_object.lighting = _flag(owner, "lighting", data.get("lighting", True))

    # ------------------------------------------------------------------
    # Surface: a texture tag or a flat colour, never neither
    # ------------------------------------------------------------------
    if "texture" in data:
        scene_object.texture = data["texture"]
        if scene_object.texture not in texture_tags:
            raise ValueError(f"{owner}: texture tag '{scene_object.texture}' is not listed under 'textures'.")
    elif "color" in data:
        scene_object.color = _vector(owner, "color", data["color"], 4)
    else:
        raise ValueError(f"{owner}: needs either a 'texture' or a 'color'.")

    material = data.get("material")
    if isinstance(material, dict):
        scene_object.material_override = _parse_material(owner, material, default_tag=f"{name}_material")
    elif material is not None:
        scene_object.material = str(material)

    draw_flags = data.get("draw_flags", {})
    allowed = DRAW_FLAGS.get(mesh, ())
    for flag, value in draw_flags.items():
        if flag not in allowed:
            raise ValueError(f"{owner}: mesh '{mesh}' does not support draw flag '{flag}'.")
        scene_object.draw_flags[flag] = _flag(owner, f"draw_flags.{flag}", value)

    return scene_object


def parse_scene(data, name="scene"):
    """
    Validate an already-decoded scene dictionary into a SceneDescription.
    """
    scene = SceneDescription(name=data.get("name", name))

    textures = data.get("textures", {})
    if not isinstance(textures, dict):
        raise ValueError("Scene 'textures' must map tags to image paths.")
    scene.textures = dict(textures)

    mesh_params = data.get("meshes", {})
    for kind, params in mesh_params.items():
        if kind not in MESH_KINDS:
            raise ValueError(f"Scene 'meshes': unknown mesh kind '{kind}'.")
        scene.mesh_params[kind] = _parse_mesh_params(kind, params)

    material_tags = set()
    for material_data in data.get("materials", []):
        material = _parse_material("Scene 'materials'", material_data)
        if material.tag in material_tags:
            raise ValueError(f"Scene 'materials': tag '{material.tag}' is listed twice.")
        material_tags.add(material.tag)
        scene.materials.append(material)

    if "lighting" in data:
        scene.lighting = LightingSetup.from_dict(data["lighting"])

    for index, object_data in enumerate(data.get("objects", [])):
        scene_object = _parse_object(index, object_data, scene.textures)
        if scene_object.material and scene_object.material not in material_tags:
            logger.warning(
                "Scene object '%s' uses material '%s', which is not listed under 'materials'",
                scene_object.name,
                scene_object.material,
            )
        scene.objects.append(scene_object)

    return scene


def load_scene(path):
    """
    Load and validate a scene file.

    Args:
        path (str): Path to the scene JSON file.

    Returns:
        SceneDescription: The validated scene.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or describes an invalid scene.
    """
    with open(path, "r", encoding="utf-8") as file:
        try:
            data = json.load(file)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Scene file {path} is not valid JSON: {exc}") from exc

    scene = parse_scene(data)
    logger.info(
        "Loaded scene '%s' from %s: %d objects, %d textures, %d materials",
        scene.name,
        path,
        len(scene.objects),
        len(scene.textures),
        len(scene.materials),
    )
    return scene
