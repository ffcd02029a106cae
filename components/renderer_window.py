import pygame
from OpenGL.GL import *

from utils.logger import get_logger

logger = get_logger("renderer_window")


class RendererWindow:
    """
    RendererWindow manages a Pygame-based OpenGL rendering window:
    - Window creation (with optional fullscreen, vsync, MSAA)
    - Event handling (closing, ESC key, screenshot requests)
    - FPS title bar updates
    """

    def __init__(
            self,
            window_size=(800, 600),
            title="Still Life",
            msaa_level=4,
            vsync_enabled=True,
            fullscreen=False
    ):
        """
        Initialize the window parameters and open the OpenGL display.

        Args:
            window_size (tuple): (width, height) of the window.
            title (str): The title to display in the window bar.
            msaa_level (int): Level of MSAA anti-aliasing, 0 to disable.
            vsync_enabled (bool): Whether to enable VSync (if supported).
            fullscreen (bool): If True, creates a fullscreen window.
        """
        # ----------------------------------------------------------------------
        # Window and Rendering Config
        # ----------------------------------------------------------------------
        self.window_size = window_size
        self.title = title
        self.msaa_level = msaa_level
        self.vsync_enabled = vsync_enabled
        self.fullscreen = fullscreen

        # ----------------------------------------------------------------------
        # Internal State
        # ----------------------------------------------------------------------
        self.clock = None
        self.running = True
        self.should_close = False
        self.screenshot_requested = False

        # ----------------------------------------------------------------------
        # Pygame Setup and OpenGL Initialization
        # ----------------------------------------------------------------------
        self.setup_pygame()
        self.clock = pygame.time.Clock()

    # --------------------------------------------------------------------------
    # Pygame and OpenGL Setup
    # --------------------------------------------------------------------------
    def setup_pygame(self):
        """
        Initialize Pygame, configure OpenGL attributes, and open the display.
        """
        pygame.init()
        self.configure_opengl_attributes()

        if self.fullscreen:
            # Match the desktop resolution for fullscreen
            desktop_info = pygame.display.Info()
            self.window_size = (desktop_info.current_w, desktop_info.current_h)

        display_flags = pygame.DOUBLEBUF | pygame.OPENGL
        if self.fullscreen:
            display_flags |= pygame.FULLSCREEN

        # Attempt to set vsync if supported
        try:
            pygame.display.set_mode(
                self.window_size,
                display_flags,
                vsync=1 if self.vsync_enabled else 0
            )
        except TypeError:
            # For older Pygame versions that do not support vsync argument
            pygame.display.set_mode(self.window_size, display_flags)
            logger.warning("VSync not supported by your Pygame version")

        pygame.display.set_caption(self.title)
        logger.info(
            "Opened %dx%d window (OpenGL %s, renderer %s)",
            self.window_size[0],
            self.window_size[1],
            glGetString(GL_VERSION).decode(),
            glGetString(GL_RENDERER).decode(),
        )

        if self.msaa_level:
            glEnable(GL_MULTISAMPLE)

    def configure_opengl_attributes(self):
        """
        Request a 3.3 core context and configure multisampling.
        """
        pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MAJOR_VERSION, 3)
        pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MINOR_VERSION, 3)
        pygame.display.gl_set_attribute(pygame.GL_CONTEXT_PROFILE_MASK, pygame.GL_CONTEXT_PROFILE_CORE)
        if self.msaa_level:
            pygame.display.gl_set_attribute(pygame.GL_MULTISAMPLEBUFFERS, 1)
            pygame.display.gl_set_attribute(pygame.GL_MULTISAMPLESAMPLES, self.msaa_level)

    # --------------------------------------------------------------------------
    # Window Title and FPS
    # --------------------------------------------------------------------------
    def draw_fps_in_title(self, fps):
        """
        Update the window title with the average FPS.

        Args:
            fps (float): Current frames per second.
        """
        pygame.display.set_caption(f"{self.title} - FPS: {fps:.2f}")

    # --------------------------------------------------------------------------
    # Event Handling
    # --------------------------------------------------------------------------
    def handle_events(self):
        """
        Process incoming Pygame events. F12 flags a screenshot request for the
        current frame.

        Returns:
            bool: True if the window should close, False otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.should_close = True
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.should_close = True
                elif event.key == pygame.K_F12:
                    self.screenshot_requested = True

        return self.should_close

    def pressed_keys(self):
        return pygame.key.get_pressed()

    # --------------------------------------------------------------------------
    # Display Handling
    # --------------------------------------------------------------------------
    def display_flip(self):
        """
        Swap the front and back buffers to display the newly rendered frame.
        """
        pygame.display.flip()

    # --------------------------------------------------------------------------
    # Shutdown and Cleanup
    # --------------------------------------------------------------------------
    def shutdown(self):
        """
        Close the window and quit Pygame.
        """
        self.running = False
        pygame.quit()
