"""Command-line entry point for the LC-3 simulator.

Loads one or more object images into a fresh machine and runs it until the
program halts. Diagnostics are logged to stderr; the simulated program owns
stdout.
"""

import argparse
import logging
import sys
from typing import List, Optional

from lc3_core_tracer.common.errors import (
    ConfigError,
    IllegalInstructionError,
    ImageLoadError,
    UsageError,
)
from lc3_core_tracer.config.builder import SystemBuilder
from lc3_core_tracer.config.loader import ConfigLoader
from lc3_core_tracer.config.models import SystemConfig
from lc3_core_tracer.loader.loader import ObjectImageLoader
from lc3_core_tracer.terminal.console import Console, create_console

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LOAD_FAILURE = 1
EXIT_USAGE = 2
EXIT_ILLEGAL_INSTRUCTION = 134  # status reported for abort()
EXIT_INTERRUPTED = -2

USAGE = "lc3-tracer [obj-file1] ..."


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lc3-tracer",
        usage=USAGE,
        description="Run LC-3 object images.",
    )
    parser.add_argument(
        "images",
        nargs="*",
        metavar="IMAGE",
        help="LC-3 object image(s); later images overwrite earlier ones",
    )
    parser.add_argument(
        "--config",
        help="YAML system configuration (initial registers, keyboard addresses, trap messages)",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Log every executed instruction to stderr",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostic log level (default: WARNING)",
    )
    return parser


def configure_logging(level: str, trace: bool) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if trace:
        logging.getLogger("lc3_core_tracer.core.cpu").setLevel(logging.DEBUG)


def run(images: List[str], config: SystemConfig, console: Console) -> int:
    """Build a machine, load ``images`` and execute until it stops."""
    if not images:
        raise UsageError(USAGE)

    cpu, bus = SystemBuilder().build_system(config, console)

    loader = ObjectImageLoader()
    for path in images:
        loader.load_image(path, bus)

    try:
        with console:
            cpu.run()
    except IllegalInstructionError:
        return EXIT_ILLEGAL_INSTRUCTION
    except KeyboardInterrupt:
        # the console has already restored the terminal on the way out
        print()
        return EXIT_INTERRUPTED
    return EXIT_OK


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.images:
        print(USAGE)
        return EXIT_USAGE

    configure_logging(args.log_level, args.trace)

    try:
        config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    except ConfigError as exc:
        parser.exit(EXIT_USAGE, f"lc3-tracer: {exc}\n")

    if console is None:
        console = create_console()

    try:
        return run(args.images, config, console)
    except UsageError:
        print(USAGE)
        return EXIT_USAGE
    except ImageLoadError as exc:
        print(f"failed to load image: {exc.path}")
        return EXIT_LOAD_FAILURE


if __name__ == "__main__":
    sys.exit(main())
