from dataclasses import dataclass, field

import glm

# Size of the pointLights[] array in the fragment shader
MAX_POINT_LIGHTS = 5


def _vec3(values, name):
    if len(values) != 3:
        raise ValueError(f"Lighting value '{name}' must have exactly 3 components.")
    return glm.vec3(*values)


@dataclass
class DirectionalLight:
    direction: glm.vec3 = field(default_factory=lambda: glm.vec3(-0.35, -1.0, -0.25))
    ambient: glm.vec3 = field(default_factory=lambda: glm.vec3(0.20, 0.18, 0.14))
    diffuse: glm.vec3 = field(default_factory=lambda: glm.vec3(0.90, 0.78, 0.62))
    specular: glm.vec3 = field(default_factory=lambda: glm.vec3(0.90, 0.90, 0.90))
    active: bool = True

    @classmethod
    def from_dict(cls, data):
        light = cls()
        for key in ("direction", "ambient", "diffuse", "specular"):
            if key in data:
                setattr(light, key, _vec3(data[key], f"directional_light.{key}"))
        light.active = bool(data.get("active", True))
        return light


@dataclass
class PointLight:
    position: glm.vec3
    ambient: glm.vec3
    diffuse: glm.vec3
    specular: glm.vec3
    active: bool = True

    @classmethod
    def from_dict(cls, data):
        try:
            return cls(
                position=_vec3(data["position"], "point_light.position"),
                ambient=_vec3(data.get("ambient", (0.0, 0.0, 0.0)), "point_light.ambient"),
                diffuse=_vec3(data["diffuse"], "point_light.diffuse"),
                specular=_vec3(data.get("specular", (1.0, 1.0, 1.0)), "point_light.specular"),
                active=bool(data.get("active", True)),
            )
        except KeyError as exc:
            raise ValueError(f"Point light is missing required value {exc}.") from None


def default_point_lights():
    # Warm orange fill light above and in front of the table
    return [
        PointLight(
            position=glm.vec3(4.5, 6.5, 4.5),
            ambient=glm.vec3(0.10, 0.08, 0.06),
            diffuse=glm.vec3(0.85, 0.55, 0.30),
            specular=glm.vec3(0.60, 0.55, 0.50),
        )
    ]


class LightingSetup:
    """
    The light rig uploaded once per frame before any object is drawn:
    one directional light, up to MAX_POINT_LIGHTS point lights and a spotlight
    that is only toggled on or off.
    """

    def __init__(self, directional_light=None, point_lights=None, spot_light_active=False):
        if point_lights is None:
            point_lights = default_point_lights()
        if len(point_lights) > MAX_POINT_LIGHTS:
            raise ValueError(f"At most {MAX_POINT_LIGHTS} point lights are supported, got {len(point_lights)}.")

        self.directional_light = directional_light or DirectionalLight()
        self.point_lights = list(point_lights)
        self.spot_light_active = spot_light_active

    @classmethod
    def from_dict(cls, data):
        """
        Build the rig from the `lighting` section of a scene file. Missing keys
        fall back to the still-life defaults.
        """
        directional = DirectionalLight.from_dict(data.get("directional_light", {}))
        point_lights = None
        if "point_lights" in data:
            point_lights = [PointLight.from_dict(item) for item in data["point_lights"]]
        return cls(
            directional_light=directional,
            point_lights=point_lights,
            spot_light_active=bool(data.get("spot_light_active", False)),
        )

    def apply(self, shader_engine):
        """
        Push every light uniform, explicitly disabling the unused point light slots.
        """
        shader_engine.set_int_value("bUseLighting", True)

        light = self.directional_light
        shader_engine.set_vec3_value("directionalLight.direction", light.direction)
        shader_engine.set_vec3_value("directionalLight.ambient", light.ambient)
        shader_engine.set_vec3_value("directionalLight.diffuse", light.diffuse)
        shader_engine.set_vec3_value("directionalLight.specular", light.specular)
        shader_engine.set_int_value("directionalLight.bActive", light.active)

        for index in range(MAX_POINT_LIGHTS):
            prefix = f"pointLights[{index}]"
            if index >= len(self.point_lights):
                shader_engine.set_int_value(f"{prefix}.bActive", False)
                continue

            point = self.point_lights[index]
            shader_engine.set_vec3_value(f"{prefix}.position", point.position)
            shader_engine.set_vec3_value(f"{prefix}.ambient", point.ambient)
            shader_engine.set_vec3_value(f"{prefix}.diffuse", point.diffuse)
            shader_engine.set_vec3_value(f"{prefix}.specular", point.specular)
            shader_engine.set_int_value(f"{prefix}.bActive", point.active)

        shader_engine.set_int_value("spotLight.bActive", self.spot_light_active)
