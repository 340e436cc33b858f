import toml
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from dbexport.errors import ConfigurationError
from dbexport.models.args import DEFAULT_AVRO_CODEC, DEFAULT_AVRO_NAMESPACE, DEFAULT_FETCH_SIZE

DEFAULT_VAULT_TIMEOUT = 30


@dataclass
class ExportOptions:
    """Raw export options, as read from config.toml and the command line."""
    # Connection settings
    connection_url: str = ""
    username: Optional[str] = None
    password: Optional[str] = None
    password_file: Optional[str] = None

    # Vault settings (used instead of username/password when vault_url is set)
    vault_url: Optional[str] = None
    vault_cert: Optional[str] = None
    vault_role: Optional[str] = None
    vault_path: Optional[str] = None
    vault_timeout: float = DEFAULT_VAULT_TIMEOUT

    # Query settings
    table: str = ""
    partition: Optional[str] = None
    partition_column: Optional[str] = None
    partition_period: Optional[str] = None
    min_partition_period: Optional[str] = None
    skip_partition_check: bool = False
    limit: Optional[int] = None

    # Avro settings
    fetch_size: int = DEFAULT_FETCH_SIZE
    avro_codec: str = DEFAULT_AVRO_CODEC
    avro_schema_namespace: str = DEFAULT_AVRO_NAMESPACE
    avro_doc: Optional[str] = None
    use_avro_logical_types: bool = False

    @classmethod
    def from_file(cls, config_path: Path) -> "ExportOptions":
        """Load options from a TOML file with [connection], [vault], [query] and [avro] tables."""
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            config_data = toml.load(config_path)
        except toml.TomlDecodeError as e:
            raise ConfigurationError(f"Invalid configuration file {config_path}: {e}") from e

        connection = config_data.get("connection", {})
        vault = config_data.get("vault", {})
        query = config_data.get("query", {})
        avro = config_data.get("avro", {})

        return cls(
            # Connection settings
            connection_url=connection.get("url", ""),
            username=connection.get("username"),
            password=connection.get("password"),
            password_file=connection.get("password_file"),
            # Vault settings
            vault_url=vault.get("url"),
            vault_cert=vault.get("cert"),
            vault_role=vault.get("role"),
            vault_path=vault.get("path"),
            vault_timeout=_as_number(vault.get("timeout", DEFAULT_VAULT_TIMEOUT), "vault.timeout"),
            # Query settings
            table=query.get("table", ""),
            partition=_as_text(query.get("partition")),
            partition_column=query.get("partition_column"),
            partition_period=query.get("partition_period"),
            min_partition_period=_as_text(query.get("min_partition_period")),
            skip_partition_check=_as_bool(query.get("skip_partition_check", False), "query.skip_partition_check"),
            limit=_as_int(query.get("limit"), "query.limit"),
            # Avro settings
            fetch_size=_as_int(avro.get("fetch_size", DEFAULT_FETCH_SIZE), "avro.fetch_size"),
            avro_codec=avro.get("codec", DEFAULT_AVRO_CODEC),
            avro_schema_namespace=avro.get("namespace", DEFAULT_AVRO_NAMESPACE),
            avro_doc=avro.get("doc"),
            use_avro_logical_types=_as_bool(avro.get("logical_types", False), "avro.logical_types"),
        )

    @classmethod
    def from_cli_args(cls, config_path: Path, cli_args: dict) -> "ExportOptions":
        """Load options with CLI argument precedence."""
        # Start with file config
        try:
            options = cls.from_file(config_path)
        except FileNotFoundError:
            # If no config file, start from defaults and rely on CLI args
            options = cls()

        # Override with CLI arguments if provided
        for option in fields(cls):
            value = cli_args.get(option.name)
            if value is not None:
                setattr(options, option.name, value)

        return options

    @property
    def uses_vault(self) -> bool:
        return bool(self.vault_url)

    def validate(self):
        """Validate options and raise ConfigurationError listing every missing field."""
        errors = []

        if not self.connection_url:
            errors.append("connection_url is required")
        if not self.table:
            errors.append("table is required")
        if self.uses_vault and not self.vault_path:
            errors.append("vault_path is required when vault_url is set")

        if errors:
            raise ConfigurationError(
                "Export configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
            )


def _as_text(value):
    """TOML parses bare dates into date/datetime objects; keep partitions as text."""
    if value is None or isinstance(value, str):
        return value
    # An unquoted trailing Z comes back as tz-aware; drop it like parse_datetime does
    if getattr(value, "tzinfo", None) is not None:
        value = value.replace(tzinfo=None)
    return value.isoformat()


def _as_bool(value, name):
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ConfigurationError(f"{name} must be true or false, got {value!r}")


def _as_int(value, name):
    if value is None or (isinstance(value, int) and not isinstance(value, bool)):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _as_number(value, name):
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e
