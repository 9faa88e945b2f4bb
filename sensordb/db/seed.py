from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple
import psycopg


class Sensor(NamedTuple):
    """One row of the sensors table."""
    id: int
    type: str
    location: str


# observation i has type SENSORS[i][0] and location SENSORS[i][1]
SENSORS: List[Tuple[str, str]] = [
    ("a", "floor"),
    ("a", "ceiling"),
    ("b", "floor"),
    ("b", "ceiling"),
]


def insert_sensor(
    conn: psycopg.Connection,
    *,
    sensor_type: str,
    location: str,
) -> Sensor:
    """Insert one sensor and return it with its storage-assigned id."""
    with conn.cursor() as cur:
        cur.execute(
            "INSERT INTO sensors (type, location) VALUES (%s, %s) RETURNING id;",
            (sensor_type, location),
        )
        (sensor_id,) = cur.fetchone()
    return Sensor(sensor_id, sensor_type, location)


def insert_sensors(
    conn: psycopg.Connection,
    pairs: Iterable[Tuple[str, str]] = SENSORS,
    on_insert: Optional[Callable[[Sensor], None]] = None,
) -> List[Sensor]:
    """
    Insert one sensor per (type, location) pair, in order.

    ``on_insert`` is called after each successful insert. The first failing
    insert raises and nothing after it is attempted.
    """
    sensors = []
    for sensor_type, location in pairs:
        sensor = insert_sensor(conn, sensor_type=sensor_type, location=location)
        if on_insert is not None:
            on_insert(sensor)
        sensors.append(sensor)
    return sensors


def list_sensors(conn: psycopg.Connection) -> List[Sensor]:
    """Return every sensor ordered by id."""
    with conn.cursor() as cur:
        cur.execute("SELECT id, type, location FROM sensors ORDER BY id;")
        return [Sensor(*row) for row in cur.fetchall()]
