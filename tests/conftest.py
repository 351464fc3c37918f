from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from herdcheck.config import ValidationRules
from herdcheck.main import app, get_clock
from herdcheck.services.clock import FixedClock

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def rules():
    return ValidationRules()


@pytest.fixture
def client(clock):
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()
