from dataclasses import dataclass

import glm

from utils.logger import get_logger

logger = get_logger("material_registry")


@dataclass(frozen=True)
class Material:
    """Phong surface parameters pushed to the shader's `material` struct."""

    tag: str
    diffuse_color: glm.vec3
    specular_color: glm.vec3
    shininess: float

    @classmethod
    def from_values(cls, tag, diffuse_color, specular_color, shininess):
        """
        Build a Material from plain sequences, e.g. values read from a scene file.
        """
        if len(diffuse_color) != 3 or len(specular_color) != 3:
            raise ValueError(f"Material '{tag}' colors must have exactly 3 components.")
        if shininess < 0.0:
            raise ValueError(f"Material '{tag}' shininess must not be negative.")
        return cls(
            tag=tag,
            diffuse_color=glm.vec3(*diffuse_color),
            specular_color=glm.vec3(*specular_color),
            shininess=float(shininess),
        )


class MaterialRegistry:
    """
    Named materials, populated once at startup and read-only afterwards.
    """

    def __init__(self, materials=None):
        self.materials = {}
        for material in materials or []:
            self.add(material)

    def __len__(self):
        return len(self.materials)

    def __contains__(self, tag):
        return tag in self.materials

    def add(self, material):
        """
        Register a material.

        Raises:
            ValueError: If a material with the same tag is already registered.
        """
        if material.tag in self.materials:
            raise ValueError(f"Material tag '{material.tag}' is already registered.")
        self.materials[material.tag] = material
        logger.debug("Registered material '%s'", material.tag)
        return material

    def add_material(self, tag, diffuse_color, specular_color, shininess):
        return self.add(Material.from_values(tag, diffuse_color, specular_color, shininess))

    def find(self, tag):
        """
        Look a material up by tag.

        Returns:
            Material or None: The registered material, or None if the tag is unknown.
        """
        return self.materials.get(tag)
