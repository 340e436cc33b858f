"""Resolve export arguments command handler."""
import json

from dbexport.commands.export.utils import handle_command_errors, load_and_validate_options
from dbexport.services.export_args_factory import export_args_from_options


@handle_command_errors
def resolve_args(config_path, args):
    """Resolve credentials and partition options and print the export arguments."""
    options = load_and_validate_options(config_path, args)

    export_args = export_args_from_options(options)

    print(json.dumps(export_args.to_dict(), indent=2))
