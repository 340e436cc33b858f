import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional

from dbexport.errors import ConfigurationError, MissingPartitionError
from dbexport.services.dates import ONE_DAY, Period, format_datetime, format_period

SUPPORTED_DRIVERS = ("postgresql", "mysql", "mariadb", "h2")

TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")
COLUMN_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
CODEC_PATTERN = re.compile(r"^(null|snappy|bzip2|xz|deflate[1-9]|zstandard([1-9]|1[0-9]|2[0-2]))$")

DEFAULT_FETCH_SIZE = 10000
DEFAULT_AVRO_CODEC = "deflate6"
DEFAULT_AVRO_NAMESPACE = "dbexport_generated"

MASKED_PASSWORD = "*****"


def parse_driver(url: str) -> str:
    """Driver family taken from a ``jdbc:<driver>:`` or ``<driver>://`` URL."""
    url = url or ""
    body = url[len("jdbc:"):] if url.startswith("jdbc:") else url
    driver, sep, _ = body.partition(":")
    if not sep or not driver:
        raise ConfigurationError(f"Invalid connection URL '{url}'")
    driver = driver.lower()
    if driver not in SUPPORTED_DRIVERS:
        raise ConfigurationError(
            f"Unsupported database '{driver}' in connection URL '{url}'. "
            f"Supported: {', '.join(SUPPORTED_DRIVERS)}"
        )
    return driver


@dataclass(frozen=True)
class Credentials:
    """A resolved username/password pair."""
    username: Optional[str]
    password: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        if not self.username and self.password is not None:
            raise ConfigurationError("A password was resolved but no username is configured")


@dataclass(frozen=True)
class ConnectionParams:
    """Database connection settings. The password never appears in repr()."""
    url: str
    username: str = ""
    password: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        parse_driver(self.url)

    @property
    def driver(self) -> str:
        return parse_driver(self.url)

    def with_credentials(self, credentials: Credentials) -> "ConnectionParams":
        return replace(self, username=credentials.username or "", password=credentials.password)


@dataclass(frozen=True)
class QueryArgs:
    """What to extract: table, optional limit and the partition to export."""
    table: str
    limit: Optional[int] = None
    partition_column: Optional[str] = None
    partition: Optional[datetime] = None
    partition_period: Period = ONE_DAY

    def __post_init__(self):
        if not self.table or not TABLE_NAME_PATTERN.match(self.table):
            raise ConfigurationError(
                f"Invalid table name '{self.table}'. Use <table> or <schema>.<table>"
            )
        if self.limit is not None and self.limit < 0:
            raise ConfigurationError(f"Limit must be >= 0, got {self.limit}")
        if self.partition_column is not None:
            if self.partition is None:
                raise MissingPartitionError(
                    "To use --partition-column the --partition parameter must also be configured"
                )
            if not COLUMN_NAME_PATTERN.match(self.partition_column):
                raise ConfigurationError(f"Invalid partition column '{self.partition_column}'")

    @property
    def partition_end(self) -> Optional[datetime]:
        """Exclusive upper bound of the exported partition."""
        if self.partition is None:
            return None
        return self.partition + self.partition_period

    def build_query(self) -> str:
        """Render the SQL statement that extracts this table/partition."""
        query = f"SELECT * FROM {self.table}"
        if self.partition_column:
            query += (
                f" WHERE {self.partition_column} >= '{format_datetime(self.partition)}'"
                f" AND {self.partition_column} < '{format_datetime(self.partition_end)}'"
            )
        if self.limit is not None:
            query += f" LIMIT {self.limit}"
        return query


@dataclass(frozen=True)
class AvroArgs:
    """Connection plus the Avro encoding settings of the export."""
    connection: ConnectionParams
    fetch_size: int = DEFAULT_FETCH_SIZE
    codec: str = DEFAULT_AVRO_CODEC

    def __post_init__(self):
        if self.fetch_size <= 0:
            raise ConfigurationError(f"Fetch size must be > 0, got {self.fetch_size}")
        if not CODEC_PATTERN.match(self.codec or ""):
            raise ConfigurationError(
                f"Invalid Avro codec '{self.codec}'. Use null, snappy, bzip2, xz, "
                "deflate1-9 or zstandard1-22"
            )

    @property
    def codec_name(self) -> str:
        return self.codec.rstrip("0123456789")

    @property
    def codec_level(self) -> Optional[int]:
        level = self.codec[len(self.codec_name):]
        return int(level) if level else None


@dataclass(frozen=True)
class ExportArgs:
    """Frozen snapshot of everything one export run needs."""
    avro: AvroArgs
    query: QueryArgs
    avro_namespace: str = DEFAULT_AVRO_NAMESPACE
    avro_doc: Optional[str] = None
    use_logical_types: bool = False

    @property
    def connection(self) -> ConnectionParams:
        return self.avro.connection

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view with the password masked."""
        connection = self.connection
        query = self.query
        return {
            "connection": {
                "url": connection.url,
                "driver": connection.driver,
                "username": connection.username,
                "password": MASKED_PASSWORD if connection.password else None,
            },
            "avro": {
                "fetch_size": self.avro.fetch_size,
                "codec": self.avro.codec,
                "namespace": self.avro_namespace,
                "doc": self.avro_doc,
                "use_logical_types": self.use_logical_types,
            },
            "query": {
                "table": query.table,
                "limit": query.limit,
                "partition_column": query.partition_column,
                "partition": query.partition.isoformat() if query.partition else None,
                "partition_period": format_period(query.partition_period),
                "sql": query.build_query(),
            },
        }
