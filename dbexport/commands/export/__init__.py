from dbexport.commands.export.handlers import (
    resolve_args,
    build_query,
)


def add_export_arguments(parser):
    """Add the flags that override config.toml export options."""
    connection = parser.add_argument_group("connection")
    connection.add_argument(
        "--connection-url",
        help="Database connection URL, e.g. jdbc:postgresql://host:5432/db"
    )
    connection.add_argument(
        "--username",
        help="Database username (ignored when --vault-url is set)"
    )
    connection.add_argument(
        "--password",
        help="Database password (prefer --password-file or the interactive prompt)"
    )
    connection.add_argument(
        "--password-file",
        help="Local path or s3://bucket/key holding the database password"
    )

    vault = parser.add_argument_group("vault")
    vault.add_argument(
        "--vault-url",
        help="Vault address; when set, credentials are read from Vault"
    )
    vault.add_argument(
        "--vault-cert",
        help="CA bundle used to verify the Vault server certificate"
    )
    vault.add_argument(
        "--vault-role",
        help="Vault Kubernetes auth role"
    )
    vault.add_argument(
        "--vault-path",
        help="Vault path holding 'username' and 'password' entries"
    )
    vault.add_argument(
        "--vault-timeout",
        type=float,
        help="Vault request timeout in seconds (default: 30)"
    )

    query = parser.add_argument_group("query")
    query.add_argument(
        "--table",
        help="Table to export, optionally schema-qualified"
    )
    query.add_argument(
        "--partition",
        help="Partition date/time to export (ISO-8601, e.g. 2024-01-01)"
    )
    query.add_argument(
        "--partition-column",
        help="Timestamp column used to filter rows of the partition"
    )
    query.add_argument(
        "--partition-period",
        help="Partition period as an ISO-8601 period (default: P1D)"
    )
    query.add_argument(
        "--min-partition-period",
        help="Oldest partition date allowed (default: now minus two partition periods)"
    )
    query.add_argument(
        "--skip-partition-check",
        action="store_true",
        default=None,
        help="Allow partitions older than the minimum partition date (backfills)"
    )
    query.add_argument(
        "--limit",
        type=int,
        help="Maximum number of rows to export"
    )

    avro = parser.add_argument_group("avro")
    avro.add_argument(
        "--fetch-size",
        type=int,
        help="Rows fetched per database round trip (default: 10000)"
    )
    avro.add_argument(
        "--avro-codec",
        help="Avro codec: null, snappy, bzip2, xz, deflate1-9 or zstandard1-22 (default: deflate6)"
    )
    avro.add_argument(
        "--avro-schema-namespace",
        help="Namespace of the generated Avro schema (default: dbexport_generated)"
    )
    avro.add_argument(
        "--avro-doc",
        help="Doc string of the generated Avro schema"
    )
    avro.add_argument(
        "--use-avro-logical-types",
        action="store_true",
        default=None,
        help="Use Avro logical types for dates and timestamps"
    )


def setup_export_parsers(subparsers):
    """Set up the export subcommand parsers."""
    # resolve command
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve credentials and partition options into export arguments"
    )
    add_export_arguments(resolve_parser)
    resolve_parser.set_defaults(func=resolve_args)

    # query command
    query_parser = subparsers.add_parser(
        "query",
        help="Validate the partition options and print the extraction query"
    )
    add_export_arguments(query_parser)
    query_parser.set_defaults(func=build_query)
