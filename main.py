import argparse
import logging

from components.renderer_config import RendererConfig
from components.renderer_instancing import RenderingInstance
from config.path_config import default_scene_path, textures_dir
from utils.logger import setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Render the still-life scene")
    parser.add_argument("--scene", default=default_scene_path, help="Path to a scene JSON file")
    parser.add_argument("--textures", default=textures_dir, help="Directory the scene's texture paths are relative to")
    parser.add_argument("--duration", type=float, default=None, help="Close after this many seconds")
    parser.add_argument("--width", type=int, default=1000, help="Window width")
    parser.add_argument("--height", type=int, default=800, help="Window height")
    parser.add_argument("--fullscreen", action="store_true", help="Open a fullscreen window")
    parser.add_argument("--no-vsync", action="store_true", help="Disable vsync")
    parser.add_argument("--msaa", type=int, default=4, help="MSAA samples (0 to disable)")
    parser.add_argument("--debug", action="store_true", help="Debug logging and OpenGL error checks")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO, args.log_file)

    config = RendererConfig(
        window_size=(args.width, args.height),
        vsync_enabled=not args.no_vsync,
        fullscreen=args.fullscreen,
        duration=args.duration,
        msaa_level=args.msaa,
        scene_path=args.scene,
        textures_directory=args.textures,
        debug_mode=args.debug,
    )

    instance = RenderingInstance(config)
    instance.run()


if __name__ == "__main__":
    main()
