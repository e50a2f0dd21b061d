"""
ebb Command Line
================

Entry point for the `ebb` command.

Usage:
    ebb [options] <in_file> <out_file> [<splash_file>]

    <in_file>      path to video file
    <out_file>     path to destination name; frames are written as
                   <out_file>00000000.png, <out_file>00000001.png, ...
                   (a trailing ".png" is dropped first)
    <splash_file>  optional path to start screen PNG

Notes:
    Output is numbered from 0 on every run and existing files are
    overwritten. In the default link mode a splash slot that already
    exists cannot be linked, so re-running into a used directory skips
    the splash with a warning. Clear the output directory first.

Exit Codes:
    0  Success, including runs cut short by a decode error
    1  Failure (bad arguments or config, unreadable input, write failure)
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml
from pydantic import ValidationError

from ebb import EbbError, __version__
from ebb.config import Settings, load_config, setup_logging
from ebb.pipeline import run


logger = logging.getLogger(__name__)


def non_negative_int(value: str) -> int:
    """argparse type for border / slack / intro values."""
    if not value.isdigit():
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}")
    return int(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ebb",
        description="Remove consecutive frames where nothing is changing from a video.",
    )
    parser.add_argument("input_path", metavar="in_file", help="path to video file")
    parser.add_argument("output_path", metavar="out_file", help="path to destination name")
    parser.add_argument(
        "splash_path", metavar="splash_file", nargs="?", default=None,
        help="optional path to start screen PNG",
    )
    parser.add_argument(
        "-b", "--border", type=non_negative_int, default=None,
        help="set border in px (changes are ignored outside)",
    )
    parser.add_argument(
        "-s", "--slack", type=non_negative_int, default=None,
        help="set slack time in cs (unchanging time allowed)",
    )
    parser.add_argument(
        "-i", "--intro", type=non_negative_int, default=None,
        help="set time to show splash screen in cs (splash slots must not already exist)",
    )
    parser.add_argument(
        "-c", "--config", dest="config_path", default=None,
        help="YAML config file",
    )

    parser.add_argument(
        "-q", "--quiet", dest="log_level", action="store_const", const="WARNING",
        help="only report warnings and errors",
    )
    parser.add_argument(
        "-v", "--verbose", dest="log_level", action="store_const", const="INFO",
        help="verbose output",
    )
    parser.add_argument(
        "-d", "--debug", dest="log_level", action="store_const", const="DEBUG",
        help="debug output",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def apply_args(settings: Settings, args: argparse.Namespace) -> Settings:
    """Overlay command-line values on loaded settings."""
    data = settings.model_dump()
    if args.border is not None:
        data["comparison"]["border"] = args.border
    if args.slack is not None:
        data["timing"]["slack_cs"] = args.slack
    if args.intro is not None:
        data["splash"]["duration_cs"] = args.intro
    if args.splash_path is not None:
        data["splash"]["path"] = args.splash_path
    if args.log_level is not None:
        data["logging"]["level"] = args.log_level
    return Settings.model_validate(data)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = apply_args(load_config(args.config_path), args)
    except (OSError, ValueError, ValidationError, yaml.YAMLError) as e:
        logging.basicConfig(format="%(message)s")
        logger.error(f"Invalid configuration: {e}")
        return 1

    setup_logging(settings)

    try:
        run(args.input_path, args.output_path, settings)
    except (EbbError, OSError) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
