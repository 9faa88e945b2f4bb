from datetime import datetime
from typing import Iterable, List, NamedTuple, Tuple
import psycopg

from .generate import Observation

INSERT_SQL = """
INSERT INTO sensor_data (time, sensor_id, temperature, cpu)
VALUES (%s, %s, %s, %s);
"""

COUNT_SQL = "SELECT count(*) FROM sensor_data;"


class BatchInsertResult(NamedTuple):
    """Outcome of a batched insert: rows sent vs. rows in the table afterwards."""
    generated: int
    table_rows: int


def _observation_row(obs: Observation) -> Tuple[datetime, int, float, float]:
    time, sensor_id, temperature, cpu = obs
    if not isinstance(time, datetime):
        raise ValueError("time must be a datetime")
    if time.tzinfo is None:
        raise ValueError("time must be timezone-aware (timestamptz).")
    return (time, sensor_id, temperature, cpu)


def insert_observation(conn: psycopg.Connection, obs: Observation) -> None:
    """Insert a single observation."""
    with conn.cursor() as cur:
        cur.execute(INSERT_SQL, _observation_row(obs))


def insert_observations(
    conn: psycopg.Connection,
    observations: Iterable[Observation],
) -> int:
    """
    Row-at-a-time insert: one round trip per observation.

    Stops at the first failing row (the exception propagates).

    Returns:
        Number of rows inserted
    """
    count = 0
    with conn.cursor() as cur:
        for obs in observations:
            cur.execute(INSERT_SQL, _observation_row(obs))
            count += 1
    return count


def insert_observations_batch(
    conn: psycopg.Connection,
    observations: Iterable[Observation],
) -> BatchInsertResult:
    """
    Batched insert using a psycopg pipeline.

    One INSERT per observation plus a trailing ``count(*)`` are queued and
    sent together; results come back in submission order, so the count
    reflects every insert queued before it.

    Returns:
        BatchInsertResult(generated=len(observations), table_rows=count(*))
    """
    rows: List[Tuple] = [_observation_row(obs) for obs in observations]

    with conn.pipeline():
        with conn.cursor() as cur, conn.cursor() as count_cur:
            for row in rows:
                cur.execute(INSERT_SQL, row)
            count_cur.execute(COUNT_SQL)
            (table_rows,) = count_cur.fetchone()

    return BatchInsertResult(generated=len(rows), table_rows=table_rows)


def count_observations(conn: psycopg.Connection) -> int:
    """Number of rows currently in sensor_data."""
    with conn.cursor() as cur:
        cur.execute(COUNT_SQL)
        return cur.fetchone()[0]
