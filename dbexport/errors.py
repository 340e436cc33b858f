"""Exception types raised while resolving export arguments."""


class DbExportError(Exception):
    """Base class for all dbexport errors."""


class ConfigurationError(DbExportError, ValueError):
    """Options are invalid or inconsistent. Aborts the job before any data moves."""


class InvalidPartitionError(ConfigurationError):
    """A partition (or minimum partition) value is not a valid ISO-8601 date/time."""


class InvalidPeriodError(ConfigurationError):
    """A partition period is not a valid ISO-8601 period."""


class MissingPartitionError(ConfigurationError):
    """A partition column was configured without a partition."""


class PartitionTooOldError(ConfigurationError):
    """The partition is not after the minimum allowed partition date."""

    def __init__(self, partition, min_partition):
        self.partition = partition
        self.min_partition = min_partition
        super().__init__(
            f"Too old partition date {partition.isoformat()}. "
            f"Use a partition date > {min_partition.isoformat()} or use --skip-partition-check"
        )


class VaultError(DbExportError):
    """Any failure talking to the secret store."""


class SecretResolutionError(DbExportError):
    """Credentials could not be resolved from the secret store."""
