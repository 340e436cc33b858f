import argparse
import logging
import sys
from pathlib import Path

from dbexport import __version__
from dbexport.commands.config import ConfigCommand
from dbexport.commands.export import setup_export_parsers


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="dbexport",
        description="Resolve and validate arguments for batch database exports"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "--config", "-c",
        metavar="CONFIG",
        default="./config.toml",
        help="Path to config.toml file (default: ./config.toml)"
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True
    )

    # Config command
    config_parser = subparsers.add_parser(
        "config",
        help="Display current configuration"
    )
    ConfigCommand.add_arguments(config_parser)
    config_parser.set_defaults(func=ConfigCommand.execute)

    # Export commands
    setup_export_parsers(subparsers)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # Handle the command
    if hasattr(args, 'func'):
        config_path = Path(args.config)
        args.func(config_path, args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
