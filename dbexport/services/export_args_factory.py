"""Assemble the immutable ExportArgs handed to the export pipeline."""
from dataclasses import replace
from datetime import datetime
from typing import Optional

from dbexport.config import ExportOptions
from dbexport.models.args import AvroArgs, ConnectionParams, ExportArgs
from dbexport.services.credential_resolver import resolve_credentials
from dbexport.services.password_reader import PasswordReader
from dbexport.services.query_args_builder import create_query_args
from dbexport.services.vault_connector import ConnectorCache


def export_args_from_options(
    options: ExportOptions,
    cache: Optional[ConnectorCache] = None,
    password_reader: Optional[PasswordReader] = None,
    now: Optional[datetime] = None,
) -> ExportArgs:
    """Resolve credentials and query arguments into one ExportArgs.

    Everything that can be checked locally is validated before Vault is
    contacted or a password is prompted for.
    """
    options.validate()
    avro_args = AvroArgs(
        connection=ConnectionParams(url=options.connection_url),
        fetch_size=options.fetch_size,
        codec=options.avro_codec,
    )
    query_args = create_query_args(options, now=now)

    credentials = resolve_credentials(options, cache=cache, password_reader=password_reader)
    avro_args = replace(avro_args, connection=avro_args.connection.with_credentials(credentials))

    return ExportArgs(
        avro=avro_args,
        query=query_args,
        avro_namespace=options.avro_schema_namespace,
        avro_doc=options.avro_doc,
        use_logical_types=options.use_avro_logical_types,
    )
