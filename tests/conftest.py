from datetime import datetime

import pytest

from dbexport.config import ExportOptions


@pytest.fixture
def now():
    """Fixed reference time for partition age checks."""
    return datetime(2024, 1, 10)


@pytest.fixture
def options():
    """Minimal valid options using the direct password path."""
    return ExportOptions(
        connection_url="jdbc:postgresql://db.internal:5432/shop",
        username="exporter",
        password="s3cret",
        table="orders",
    )
