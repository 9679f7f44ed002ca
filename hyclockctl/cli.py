import argparse
import logging
import sys

from pydantic import ValidationError

from hyclock.bootstrap.config.settings import ClockSettings
from hyclock.core.exception import ClockError
from hyclock.core.utils.log import setup_logging
from hyclockctl.commands import COMMANDS
from hyclockctl.parser import ParseError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="hyclockctl",
        description=(
            "Build, advance, merge and compare Hybrid Logical Clocks.\n\n"
            "Clocks are read and written in their canonical form\n"
            "PPPPPPPPPPPPPPP:CCCCCCCC:ID (15-digit milliseconds, 8-digit counter, id)."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to a hyclock configuration file"
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity (overrides the configuration file)."
    )

    parser.add_argument("command", choices=sorted(COMMANDS), help="Command to run")
    parser.add_argument("args", nargs="*", help="Command arguments")

    return parser.parse_args(argv)


def entrypoint(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    overrides = {"log_level": args.log_level} if args.log_level else {}
    try:
        settings = ClockSettings.load(args.config, **overrides)
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(settings.log_level)

    logger = logging.getLogger("hyclockctl")
    logger.debug("Running %s with %r", args.command, args.args)

    try:
        output = COMMANDS[args.command](settings, args.args)
    except (ParseError, ClockError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if output:
        print(output)
