"""Pytest configuration and fixtures for sensordb tests."""
import os
import pytest
from datetime import datetime, timezone

from sensordb import SensorDataClient


@pytest.fixture(scope="function")
def test_db_conninfo():
    """Get test database connection string from environment."""
    conninfo = os.environ.get("TEST_SENSORDB_DSN") or os.environ.get("TEST_DATABASE_URL")
    if not conninfo:
        pytest.skip("TEST_SENSORDB_DSN or TEST_DATABASE_URL environment variable not set")
    return conninfo


@pytest.fixture(scope="function")
def clean_db(test_db_conninfo):
    """Client on a freshly created schema (tables dropped and recreated per test)."""
    with SensorDataClient(test_db_conninfo) as client:
        client.delete()
        client.create()
        yield client


@pytest.fixture(scope="function")
def seeded_db(clean_db):
    """Clean schema with the four default sensors inserted."""
    clean_db.insert_sensors()
    return clean_db


@pytest.fixture
def sample_datetime():
    """Sample datetime for testing."""
    return datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
