"""Tests for schema creation, deletion and sensor seeding."""
import psycopg
import pytest

from sensordb import SENSORS
from sensordb.db import create, delete, seed


def test_create_schema_is_idempotent(clean_db):
    """Creating the schema a second time leaves existing tables in place."""
    clean_db.insert_sensors()
    clean_db.create()
    assert len(clean_db.list_sensors()) == 4


def test_sensor_data_is_a_hypertable(clean_db):
    with clean_db.connection() as conn:
        with conn.cursor() as cur:
            cur.execute(
                "SELECT count(*) FROM timescaledb_information.hypertables WHERE hypertable_name = 'sensor_data'"
            )
            assert cur.fetchone()[0] == 1


def test_delete_schema_drops_tables(test_db_conninfo):
    with psycopg.connect(test_db_conninfo) as conn:
        create.create_schema(conn)
        delete.delete_schema(conn)
        with conn.cursor() as cur:
            cur.execute("SELECT to_regclass('sensors'), to_regclass('sensor_data')")
            assert cur.fetchone() == (None, None)


def test_insert_sensors_matches_pairs(clean_db):
    """Every seeded pair exists with a unique id, in insertion order."""
    reported = []
    sensors = clean_db.insert_sensors(SENSORS, on_insert=reported.append)

    assert [(s.type, s.location) for s in sensors] == SENSORS
    assert reported == sensors
    assert len({s.id for s in sensors}) == len(SENSORS)
    assert clean_db.list_sensors() == sensors


def test_insert_sensor_failure_stops_seeding(clean_db):
    """A failing insert raises and no later pair is attempted."""
    pairs = [("a", "floor"), ("x" * 51, "ceiling"), ("b", "floor")]

    with pytest.raises(psycopg.errors.StringDataRightTruncation):
        clean_db.insert_sensors(pairs)

    # The pooled connection rolled back the whole call
    assert clean_db.list_sensors() == []


def test_insert_sensor_returns_id(clean_db):
    with clean_db.connection() as conn:
        first = seed.insert_sensor(conn, sensor_type="a", location="floor")
        second = seed.insert_sensor(conn, sensor_type="a", location="floor")
    assert second.id > first.id
