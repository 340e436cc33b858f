"""Build validated query arguments from partition-related options."""
import logging
from datetime import datetime
from typing import Optional

from dbexport.config import ExportOptions
from dbexport.errors import MissingPartitionError, PartitionTooOldError
from dbexport.models.args import QueryArgs
from dbexport.services.dates import Period, parse_datetime, parse_period, subtract_periods

logger = logging.getLogger(__name__)


def create_query_args(options: ExportOptions, now: Optional[datetime] = None) -> QueryArgs:
    """
    Parse and validate the partition options.

    Unless --skip-partition-check is given or a partition column is used, the
    partition must be strictly after the minimum partition date: the explicit
    min_partition_period, or now minus two partition periods.
    """
    partition_period = parse_period(options.partition_period)
    partition = parse_datetime(options.partition) if options.partition is not None else None
    partition_column = options.partition_column

    if partition_column is not None and partition is None:
        raise MissingPartitionError(
            "To use --partition-column the --partition parameter must also be configured"
        )

    if not (options.skip_partition_check or partition_column is not None):
        min_partition = min_partition_date(options, partition_period, now)
        if partition is not None:
            validate_partition(partition, min_partition)
    elif partition is not None:
        logger.info("Skipping partition age check for partition %s", partition.isoformat())

    return QueryArgs(
        table=options.table,
        limit=options.limit,
        partition_column=partition_column,
        partition=partition,
        partition_period=partition_period,
    )


def min_partition_date(options: ExportOptions, partition_period: Period,
                       now: Optional[datetime] = None) -> datetime:
    """Oldest partition date (exclusive) a run may export without an override."""
    if options.min_partition_period is not None:
        return parse_datetime(options.min_partition_period)
    return subtract_periods(now or datetime.now(), partition_period, 2)


def validate_partition(partition: datetime, min_partition: datetime) -> datetime:
    if not partition > min_partition:
        raise PartitionTooOldError(partition, min_partition)
    return partition
