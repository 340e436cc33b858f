"""Build query command handler."""
from dbexport.commands.export.utils import handle_command_errors, load_and_validate_options
from dbexport.services.dates import format_period
from dbexport.services.query_args_builder import create_query_args


@handle_command_errors
def build_query(config_path, args):
    """Validate the partition options and print the extraction query."""
    options = load_and_validate_options(config_path, args)

    query_args = create_query_args(options)

    print(f"Table: {query_args.table}")
    if query_args.partition:
        print(f"Partition: {query_args.partition.isoformat()} ({format_period(query_args.partition_period)})")
    if query_args.partition_column:
        print(f"Partition column: {query_args.partition_column}")
    if query_args.limit is not None:
        print(f"Limit: {query_args.limit}")
    print()
    print(query_args.build_query())
