"""
glsnap main entry point
"""

import argparse
from pathlib import Path
import sys

from . import configure_logger, __version__
from .render import RenderError
from .render.pipeline import render
from .settings import Settings, DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_OUTPUT, DEFAULT_COLOR, DEFAULT_CLEAR_COLOR


FATAL_EXIT_STATUS = -1


def build_parser():
    parser = argparse.ArgumentParser(description=f"Render a triangle off-screen to a pixel map, version {__version__}")
    parser.set_defaults(level=None)
    levels = parser.add_mutually_exclusive_group()
    levels.add_argument('--trace', action='store_const', const='TRACE', dest='level', help="Trace logging")
    levels.add_argument('--debug', action='store_const', const='DEBUG', dest='level', help="Debug logging")
    levels.add_argument('--verbose', action='store_const', const='INFO', dest='level', help="Informational logging")
    levels.add_argument('--quiet', action='store_const', const='WARNING', dest='level', help="Only log warnings and errors")
    parser.add_argument('--size', type=int, nargs=2, metavar=('WIDTH', 'HEIGHT'), default=(DEFAULT_WIDTH, DEFAULT_HEIGHT),
                        help="Image size")
    parser.add_argument('--output', '-o', type=Path, default=Path(DEFAULT_OUTPUT), help="Output pixel map file")
    parser.add_argument('--vertex', type=float, nargs=4, metavar=('X', 'Y', 'Z', 'W'), action='append', dest='vertices',
                        help="Clip-space vertex position (give exactly three)")
    parser.add_argument('--color', type=float, nargs='+', metavar='C', default=DEFAULT_COLOR, help="Triangle color as R G B [A]")
    parser.add_argument('--clear', type=float, nargs='+', metavar='C', default=DEFAULT_CLEAR_COLOR, help="Clear color as R G B [A]")
    parser.add_argument('--vertex-shader', type=Path, help="Vertex shader template file")
    parser.add_argument('--fragment-shader', type=Path, help="Fragment shader template file")
    parser.add_argument('--uniform', type=str, default='u_Vertices', help="Name of the vertex position uniform array")
    return parser


def make_settings(parser, args):
    settings = Settings(width=args.size[0], height=args.size[1], output=args.output, color=args.color,
                        clear_color=args.clear, uniform_name=args.uniform)
    if args.vertices is not None:
        settings.vertices = args.vertices
    try:
        if args.vertex_shader is not None:
            settings.vertex_source = args.vertex_shader.read_text(encoding='utf8')
        if args.fragment_shader is not None:
            settings.fragment_source = args.fragment_shader.read_text(encoding='utf8')
    except OSError as exc:
        parser.error(f"unable to read shader: {exc}")
    try:
        settings.validate()
    except ValueError as exc:
        parser.error(str(exc))
    return settings


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = configure_logger(args.level)
    logger.info("glsnap version {}", __version__)
    settings = make_settings(parser, args)
    try:
        render(settings)
    except RenderError as exc:
        logger.error("{}", exc)
        return FATAL_EXIT_STATUS
    except KeyboardInterrupt:
        logger.info("Exited on keyboard interrupt")
    except Exception:
        logger.error("Unexpected exception in glsnap")
        raise
    finally:
        logger.complete()
    return 0


if __name__ == '__main__':
    sys.exit(main())
