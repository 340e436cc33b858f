"""Export command handlers."""
from dbexport.commands.export.handlers.resolve_args import resolve_args
from dbexport.commands.export.handlers.build_query import build_query

__all__ = [
    "resolve_args",
    "build_query",
]
