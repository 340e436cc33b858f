"""Utility functions for export commands."""
import sys
from functools import wraps

from dbexport.config import ExportOptions

# Argparse destinations that are not export options
NON_OPTION_ARGS = ("command", "func", "config", "log_level")


def load_and_validate_options(config_path, args):
    """Load options from config.toml, apply CLI overrides and validate them."""
    cli_args = {key: value for key, value in vars(args).items() if key not in NON_OPTION_ARGS}
    options = ExportOptions.from_cli_args(config_path, cli_args)
    options.validate()
    return options


def handle_command_errors(func):
    """Decorator to handle command errors consistently."""
    @wraps(func)
    def wrapper(config_path, args):
        try:
            return func(config_path, args)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    return wrapper
