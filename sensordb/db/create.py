from importlib import resources
import psycopg

# -----------------------------------------------------------------------------
# This DDL creates:
#   1) sensors      → relational metadata, one row per sensor
#   2) sensor_data  → time-series facts, registered as a hypertable on `time`
#
# Both statements are idempotent (safe to run multiple times).
# -----------------------------------------------------------------------------

# Read packaged SQL
SENSORS_DDL = resources.files("sensordb").joinpath("sql", "create_sensors.sql").read_text(encoding="utf-8")
SENSOR_DATA_DDL = resources.files("sensordb").joinpath("sql", "create_sensor_data.sql").read_text(encoding="utf-8")

DDL = SENSORS_DDL + "\n" + SENSOR_DATA_DDL


def create_sensors_table(conn: psycopg.Connection) -> None:
    """Create the relational ``sensors`` table if it does not exist."""
    with conn.cursor() as cur:
        cur.execute(SENSORS_DDL)


def create_sensor_data_hypertable(conn: psycopg.Connection) -> None:
    """
    Create ``sensor_data`` and register it as a hypertable keyed on ``time``.

    Requires the ``sensors`` table (foreign key target) to exist already.
    """
    with conn.cursor() as cur:
        cur.execute(SENSOR_DATA_DDL)


def create_schema(conn: psycopg.Connection) -> None:
    """
    Creates the full schema: sensors first, then the sensor_data hypertable.

    - Safe to run multiple times
    - Commit is left to the caller (the pool commits when the connection
      block exits cleanly)
    """
    create_sensors_table(conn)
    create_sensor_data_hypertable(conn)
