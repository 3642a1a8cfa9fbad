import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Ensure the `src/` directory is on sys.path so we can import `la_core_lib` package
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from la_core_lib.catalog import ServiceCatalog, reset_service_catalog
from la_core_lib.models import RecordStatus, ServiceRecord

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_record(record_id, service_type, day, status="completed", hours=2, depends_on=None, **kwargs):
    """Record starting `day` days after BASE_TIME; completed records get an end time."""
    start = BASE_TIME + timedelta(days=day)
    end = start + timedelta(hours=hours) if status == "completed" else None
    end = kwargs.pop("end_time", end)
    return ServiceRecord(
        id=record_id,
        service_type=service_type,
        status=RecordStatus(status),
        start_time=start,
        end_time=end,
        depends_on=depends_on,
        **kwargs,
    )


@pytest.fixture
def catalog():
    return ServiceCatalog.default()


@pytest.fixture(autouse=True)
def _fresh_catalog(monkeypatch):
    monkeypatch.delenv("LA_SERVICE_CATALOG_PATH", raising=False)
    reset_service_catalog()
    yield
    reset_service_catalog()
