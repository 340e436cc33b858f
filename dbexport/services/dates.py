"""Parsing of partition dates and partition periods."""
import re
from datetime import datetime, timedelta
from typing import Optional, Union

import isodate
from dateutil import parser as date_parser

from dbexport.errors import InvalidPartitionError, InvalidPeriodError

Period = Union[timedelta, isodate.Duration]

ONE_DAY = timedelta(days=1)

# Extended format only: yyyy[-MM[-dd[Thh[:mm[:ss[.fff]]]]]], no offset
LOCAL_DATE_OPTIONAL_TIME = re.compile(
    r"^\d{4}(-\d{2}(-\d{2}(T\d{2}(:\d{2}(:\d{2}([.,]\d+)?)?)?)?)?)?$"
)


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 date or date-time into a naive local datetime.

    A trailing literal ``Z`` is dropped before parsing, so ``2024-01-01Z`` and
    ``2024-01-01`` yield the same value. UTC offsets and the ISO basic format
    (``20240101``) are rejected.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1]

    if not LOCAL_DATE_OPTIONAL_TIME.match(text):
        raise InvalidPartitionError(
            f"Invalid partition date '{value}': expected yyyy-MM-dd[THH:mm:ss], optionally suffixed with 'Z'"
        )

    try:
        return date_parser.isoparse(text)
    except (ValueError, OverflowError) as e:
        raise InvalidPartitionError(f"Invalid partition date '{value}': {e}") from e


def parse_period(value: Optional[str]) -> Period:
    """Parse an ISO-8601 period such as ``P1D`` or ``PT6H``, defaulting to one day."""
    if value is None:
        return ONE_DAY

    try:
        return isodate.parse_duration(value.strip())
    except (isodate.ISO8601Error, ValueError) as e:
        raise InvalidPeriodError(f"Invalid partition period '{value}': {e}") from e


def subtract_periods(moment: datetime, period: Period, times: int) -> datetime:
    """Step ``moment`` back by ``times`` periods in a single calendar-aware step."""
    return moment - period * times


def format_datetime(moment: datetime) -> str:
    """Format a partition boundary the way it is embedded in SQL literals."""
    return moment.isoformat(sep=" ")


def format_period(period: Period) -> str:
    """Render a period back to ISO-8601, e.g. ``P1D``."""
    return isodate.duration_isoformat(period)
