import os

# ------------------------------------------------------------------------------
# Base Directory Setup
# ------------------------------------------------------------------------------
# Determine the directory of the current config file.
current_dir = os.path.dirname(os.path.realpath(__file__))


def get_path(*path_parts):
    """
    Build an absolute path by joining the current config directory with the given parts.

    Args:
        *path_parts: Variable length path segments.

    Returns:
        str: The absolute path.
    """
    return os.path.normpath(os.path.join(current_dir, *path_parts))


# ------------------------------------------------------------------------------
# Repository Directories
# ------------------------------------------------------------------------------
# These paths are relative to the repository root.
scenes_dir = get_path("..", "scenes")
screenshots_dir = get_path("..", "screenshots")
shaders_dir = get_path("..", "shaders")
textures_dir = get_path("..", "textures")

# The configuration directory itself
config_dir = current_dir

# ------------------------------------------------------------------------------
# Default Scene
# ------------------------------------------------------------------------------
default_scene_path = os.path.join(scenes_dir, "still_life.json")
