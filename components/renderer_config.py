import copy
import os

from config.path_config import default_scene_path, textures_dir


class RendererConfig:
    """
    RendererConfig stores the configuration options for the still-life renderer:
    - Window properties
    - Camera settings
    - Core rendering options
    - Shader and scene selection
    - Debug mode
    """

    def __init__(
        self,
        # ------------------------------------------------------------------------------
        # Window/Runtime Settings
        # ------------------------------------------------------------------------------
        window_title="Still Life",
        window_size=(1000, 800),
        vsync_enabled=True,
        fullscreen=False,
        duration=None,

        # ------------------------------------------------------------------------------
        # Camera Settings
        # ------------------------------------------------------------------------------
        camera_position=(0.0, 7.0, 18.0),
        camera_rotation=(0.0, -18.0),
        fov=45,
        near_plane=0.1,
        far_plane=100,
        free_camera=True,
        move_speed=5.0,
        turn_speed=60.0,

        # ------------------------------------------------------------------------------
        # Core Rendering Options
        # ------------------------------------------------------------------------------
        msaa_level=4,
        depth_testing=True,
        culling=False,
        clear_color=(0.0, 0.0, 0.0, 1.0),

        # ------------------------------------------------------------------------------
        # Shaders and Scene
        # ------------------------------------------------------------------------------
        vertex_shader=os.path.join("vertex", "standard", "vertex.glsl"),
        fragment_shader=os.path.join("fragment", "still_life", "fragment.glsl"),
        scene_path=default_scene_path,
        textures_directory=textures_dir,
        flip_textures=True,

        # ------------------------------------------------------------------------------
        # Debug Mode
        # ------------------------------------------------------------------------------
        debug_mode=False,
    ):
        """
        duration is in seconds; None keeps the window open until it is closed.
        """
        # ------------------------------------------------------------------------------
        # Store Window/Runtime Settings
        # ------------------------------------------------------------------------------
        self.window_title = window_title
        self.window_size = tuple(window_size)
        self.vsync_enabled = vsync_enabled
        self.fullscreen = fullscreen
        self.duration = duration

        # ------------------------------------------------------------------------------
        # Camera Settings
        # ------------------------------------------------------------------------------
        self.camera_position = tuple(camera_position)
        self.camera_rotation = tuple(camera_rotation)
        self.fov = fov
        self.near_plane = near_plane
        self.far_plane = far_plane
        self.free_camera = free_camera
        self.move_speed = move_speed
        self.turn_speed = turn_speed

        # ------------------------------------------------------------------------------
        # Core Rendering Options
        # ------------------------------------------------------------------------------
        self.msaa_level = msaa_level
        self.depth_testing = depth_testing
        self.culling = culling
        self.clear_color = tuple(clear_color)

        # ------------------------------------------------------------------------------
        # Shaders and Scene
        # ------------------------------------------------------------------------------
        self.vertex_shader = vertex_shader
        self.fragment_shader = fragment_shader
        self.scene_path = scene_path
        self.textures_directory = textures_directory
        self.flip_textures = flip_textures

        # ------------------------------------------------------------------------------
        # Debug Mode
        # ------------------------------------------------------------------------------
        self.debug_mode = debug_mode

        self._validate_config(self.__dict__)

    @property
    def aspect_ratio(self):
        return self.window_size[0] / self.window_size[1]

    def unpack(self):
        """
        Unpack the configuration into a dictionary.
        Returns a deep copy so mutations won't affect this config.
        """
        return copy.deepcopy(self.__dict__)

    def _validate_config(self, config):
        """
        Private method to validate certain configuration options.
        Raises ValueError if invalid options or combinations are detected.
        """
        width, height = config["window_size"]
        if width <= 0 or height <= 0:
            raise ValueError("Invalid window_size option. Width and height must be positive.")

        duration = config["duration"]
        if duration is not None and duration <= 0:
            raise ValueError("Invalid duration option. Use a positive number of seconds or None.")

        if len(config["camera_position"]) != 3:
            raise ValueError("Invalid camera_position option. Use (x, y, z).")
        if len(config["camera_rotation"]) != 2:
            raise ValueError("Invalid camera_rotation option. Use (yaw, pitch).")

        if not (0.0 < config["fov"] < 180.0):
            raise ValueError("Invalid fov option. Must be between 0 and 180 degrees.")
        if not (0.0 < config["near_plane"] < config["far_plane"]):
            raise ValueError("Invalid clipping planes. Require 0 < near_plane < far_plane.")

        if config["msaa_level"] not in (0, 2, 4, 8, 16):
            raise ValueError("Invalid msaa_level option. Use 0, 2, 4, 8 or 16.")

        if len(config["clear_color"]) != 4:
            raise ValueError("Invalid clear_color option. Use (r, g, b, a).")
