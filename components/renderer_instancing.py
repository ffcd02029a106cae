# ------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------
import time

from OpenGL.GL import *

from components.camera_control import Camera
from components.renderer_window import RendererWindow
from components.scene_description import load_scene
from components.scene_manager import SceneManager
from components.shader_engine import ShaderEngine
from components.texture_registry import TextureRegistry
from utils.image_saver import ImageSaver
from utils.logger import get_logger

logger = get_logger("renderer_instancing")


def check_gl_error(context: str, debug_mode: bool):
    """
    Check for OpenGL errors if debug_mode is enabled.

    :param context: A string indicating where in the code the check occurs.
    :param debug_mode: If True, any OpenGL error raises a RuntimeError.
    """
    if debug_mode:
        gl_error = glGetError()
        if gl_error != GL_NO_ERROR:
            raise RuntimeError(f"OpenGL error in {context}: {gl_error}")


class RenderingInstance:
    """
    RenderingInstance coordinates all rendering activities:
      - Window creation and management
      - Shader program, camera and scene setup
      - Main loop and updates (FPS, events, screenshots)
      - Orderly release of GPU resources
    """

    # --------------------------------------------------------------------------
    # Initialization
    # --------------------------------------------------------------------------
    def __init__(self, config):
        """
        Initialize the RenderingInstance with a given configuration.

        Args:
            config: A RendererConfig object containing the rendering options.
        """
        # --- Primary Configuration ---
        self.config = config
        self.debug_mode = config.debug_mode

        # --- Window/Context & Runtime State ---
        self.render_window = None
        self.duration = None
        self.running = False

        # --- Scene Management ---
        self.shader_engine = None
        self.camera = None
        self.scene_manager = None

    # --------------------------------------------------------------------------
    # Setup and Lifecycle Methods
    # --------------------------------------------------------------------------
    def setup(self):
        """
        Set up the rendering instance:
          - Load and validate the scene file
          - Create the window
          - Configure global GL state
          - Compile the shader program and create the camera
          - Upload meshes and textures
        """
        # 1) Fail on a malformed scene before a window is opened
        scene = load_scene(self.config.scene_path)

        # 2) Create the main window
        self.render_window = RendererWindow(
            window_size=self.config.window_size,
            title=self.config.window_title,
            msaa_level=self.config.msaa_level,
            vsync_enabled=self.config.vsync_enabled,
            fullscreen=self.config.fullscreen,
        )

        # 3) Store the maximum run duration
        self.duration = self.config.duration

        # 4) Global GL state
        self.setup_gl_state()

        # 5) Shader program and camera
        self.shader_engine = ShaderEngine(self.config.vertex_shader, self.config.fragment_shader)
        self.shader_engine.use_shader_program()
        check_gl_error("shader program setup", self.debug_mode)

        width, height = self.render_window.window_size
        yaw, pitch = self.config.camera_rotation
        self.camera = Camera(
            position=self.config.camera_position,
            yaw=yaw,
            pitch=pitch,
            fov=self.config.fov,
            aspect_ratio=width / height,
            near_plane=self.config.near_plane,
            far_plane=self.config.far_plane,
            move_speed=self.config.move_speed,
            turn_speed=self.config.turn_speed,
        )

        # 6) Scene resources
        self.scene_manager = SceneManager(
            self.shader_engine,
            scene,
            texture_registry=TextureRegistry(flip_vertically=self.config.flip_textures),
            textures_directory=self.config.textures_directory,
        )
        self.scene_manager.prepare_scene()
        check_gl_error("scene preparation", self.debug_mode)

    def setup_gl_state(self):
        width, height = self.render_window.window_size
        glViewport(0, 0, width, height)
        glClearColor(*self.config.clear_color)

        if self.config.depth_testing:
            glEnable(GL_DEPTH_TEST)
        else:
            glDisable(GL_DEPTH_TEST)

        # Several meshes are open (cup, basket), so back faces stay visible by default
        if self.config.culling:
            glEnable(GL_CULL_FACE)
        else:
            glDisable(GL_CULL_FACE)

    def run(self):
        """
        Start the main rendering loop. Collect FPS and handle events.
        """
        # 1) Perform initial setup
        self.setup()

        # 2) Begin the main loop
        self.running = True
        start_time = time.time()

        # --- FPS Tracking ---
        fps_update_interval = 1.0  # seconds
        last_fps_update_time = time.time()
        fps_accumulator = 0.0
        fps_frame_count = 0

        # 3) Main Loop
        try:
            while self.running and not self.duration_elapsed(start_time):
                # Update delta time (in seconds)
                delta_time = self.render_window.clock.tick() / 1000.0

                # Handle window events (returns True if close requested)
                if self.render_window.handle_events():
                    self.running = False
                    break

                if self.config.free_camera:
                    self.camera.update(delta_time, self.render_window.pressed_keys())

                self.render_frame()

                if self.render_window.screenshot_requested:
                    self.render_window.screenshot_requested = False
                    self.take_screenshot()

                # Gather FPS data
                fps_accumulator += self.render_window.clock.get_fps()
                fps_frame_count += 1

                current_time = time.time()
                if current_time - last_fps_update_time >= fps_update_interval:
                    average_fps = fps_accumulator / fps_frame_count
                    self.render_window.draw_fps_in_title(average_fps)
                    logger.debug("Average FPS: %.2f", average_fps)
                    # Reset FPS tracking
                    fps_accumulator = 0.0
                    fps_frame_count = 0
                    last_fps_update_time = current_time

                # Update display
                self.render_window.display_flip()
        finally:
            # 4) Shutdown once loop finishes, is broken, or fails
            self.shutdown()

    def duration_elapsed(self, start_time):
        if self.duration is None:
            return False
        return (time.time() - start_time) >= self.duration

    def shutdown(self):
        """
        Clean up the rendering instance:
          - Release textures and mesh buffers
          - Delete the shader program
          - Close the window (OpenGL context)
        """
        self.running = False

        if self.scene_manager:
            self.scene_manager.destroy()
            self.scene_manager = None

        if self.shader_engine:
            self.shader_engine.delete_shader_programs()
            self.shader_engine = None

        if self.render_window:
            self.render_window.shutdown()
            self.render_window = None

        logger.info("Renderer shut down")

    # --------------------------------------------------------------------------
    # Rendering Methods
    # --------------------------------------------------------------------------
    def render_frame(self):
        """
        Clear the frame, upload camera uniforms and replay the scene.
        """
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        self.shader_engine.use_shader_program()
        self.camera.apply(self.shader_engine)
        self.scene_manager.render_scene()
        check_gl_error("render_frame", self.debug_mode)

    def take_screenshot(self):
        """
        Read the back buffer and save it as a timestamped PNG.
        """
        width, height = self.render_window.window_size
        glPixelStorei(GL_PACK_ALIGNMENT, 1)
        pixels = glReadPixels(0, 0, width, height, GL_RGB, GL_UNSIGNED_BYTE)
        return ImageSaver().save_framebuffer(pixels, width, height)
