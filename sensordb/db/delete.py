import psycopg

# -----------------------------------------------------------------------------
# Drops all sensordb tables:
#   1) sensor_data (hypertable, references sensors)
#   2) sensors
#
# Uses CASCADE to handle foreign key dependencies automatically.
# -----------------------------------------------------------------------------


def delete_schema(conn: psycopg.Connection) -> None:
    """
    Deletes all sensordb tables.

    - Drops the hypertable first (it holds the foreign key)
    - Uses CASCADE to handle dependencies
    """
    with conn.cursor() as cur:
        cur.execute("DROP TABLE IF EXISTS sensor_data CASCADE;")
        cur.execute("DROP TABLE IF EXISTS sensors CASCADE;")
