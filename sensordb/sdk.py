"""
High-level client for sensordb.

SensorDataClient owns a psycopg connection pool and hands out connections to
the functions in ``sensordb.db``. Every operation borrows a connection for
its own duration; the pool commits on a clean exit and rolls back on error.

Example:
    >>> from sensordb import SensorDataClient
    >>> with SensorDataClient() as client:
    ...     client.create()
    ...     sensors = client.insert_sensors()
    ...     obs = client.generate([s.id for s in sensors])
    ...     client.insert_batch(obs)
    ...     for bucket, avg_cpu in client.iter_cpu_buckets(location="ceiling", sensor_type="a"):
    ...         print(bucket, avg_cpu)
"""
import os
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple
import numpy as np
import pandas as pd

from . import db
from .db.generate import DEFAULT_LOOKBACK, DEFAULT_STEP, Observation
from .db.insert import BatchInsertResult
from .db.read import DEFAULT_BUCKET
from .db.seed import SENSORS, Sensor
import psycopg
from psycopg.conninfo import conninfo_to_dict
from psycopg_pool import ConnectionPool


class SensorDataClient:
    """
    Client for the sensors / sensor_data schema.

    Args:
        conninfo: Postgres connection string (default: SENSORDB_DSN or DATABASE_URL)
        min_size: Minimum pool size
        max_size: Maximum pool size
        timeout: Seconds to wait for the pool to fill at startup and for a
            free connection afterwards

    Raises:
        ValueError: If no connection string is configured
        psycopg.ProgrammingError: If the connection string cannot be parsed
        psycopg_pool.PoolTimeout: If the database cannot be reached
    """

    def __init__(
        self,
        conninfo: Optional[str] = None,
        min_size: int = 1,
        max_size: int = 4,
        timeout: float = 10.0,
    ):
        self._conninfo = conninfo or _get_conninfo()
        # Fails fast on a malformed string instead of retrying in the background
        conninfo_to_dict(self._conninfo)
        self._pool = ConnectionPool(
            self._conninfo, min_size=min_size, max_size=max_size, timeout=timeout, open=True,
        )
        try:
            self._pool.wait(timeout=timeout)
        except Exception:
            self._pool.close()
            raise

    def close(self):
        """Close the connection pool."""
        self._pool.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    @contextmanager
    def connection(self) -> Iterator[psycopg.Connection]:
        """Borrow a connection from the pool for the duration of the block."""
        with self._pool.connection() as conn:
            yield conn

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------

    def create_sensors_table(self) -> None:
        with self.connection() as conn:
            db.create.create_sensors_table(conn)

    def create_sensor_data_hypertable(self) -> None:
        with self.connection() as conn:
            db.create.create_sensor_data_hypertable(conn)

    def create(self) -> None:
        """Create both tables (idempotent)."""
        with self.connection() as conn:
            db.create.create_schema(conn)

    def delete(self) -> None:
        """Drop both tables and all their data."""
        with self.connection() as conn:
            db.delete.delete_schema(conn)

    # -------------------------------------------------------------------------
    # Sensors
    # -------------------------------------------------------------------------

    def insert_sensors(
        self,
        pairs: Iterable[Tuple[str, str]] = SENSORS,
        on_insert: Optional[Callable[[Sensor], None]] = None,
    ) -> List[Sensor]:
        """Insert one sensor per (type, location) pair. See :func:`db.seed.insert_sensors`."""
        with self.connection() as conn:
            return db.seed.insert_sensors(conn, pairs, on_insert=on_insert)

    def list_sensors(self) -> List[Sensor]:
        with self.connection() as conn:
            return db.seed.list_sensors(conn)

    # -------------------------------------------------------------------------
    # Observations
    # -------------------------------------------------------------------------

    def generate(
        self,
        sensor_ids: Sequence[int],
        *,
        server: bool = True,
        end: Optional[datetime] = None,
        lookback: timedelta = DEFAULT_LOOKBACK,
        step: timedelta = DEFAULT_STEP,
        rng: Optional[np.random.Generator] = None,
    ) -> List[Observation]:
        """
        Generate a synthetic series for ``sensor_ids``.

        With ``server=True`` the database builds the series (window ends at
        its now(); ``end`` and ``rng`` are ignored). Otherwise it is built
        in-process with numpy.
        """
        if not server:
            return db.generate.generate_observations(
                sensor_ids, end=end, lookback=lookback, step=step, rng=rng,
            )
        with self.connection() as conn:
            return db.generate.generate_observations_server(
                conn, sensor_ids, lookback=lookback, step=step,
            )

    def insert(self, observations: Iterable[Observation]) -> int:
        """Row-at-a-time insert. Returns the number of rows written."""
        with self.connection() as conn:
            return db.insert.insert_observations(conn, observations)

    def insert_batch(self, observations: Iterable[Observation]) -> BatchInsertResult:
        """Pipelined insert with a trailing row count."""
        with self.connection() as conn:
            return db.insert.insert_observations_batch(conn, observations)

    def count(self) -> int:
        with self.connection() as conn:
            return db.insert.count_observations(conn)

    def read(
        self,
        *,
        sensor_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> pd.DataFrame:
        """Read observations as a DataFrame indexed by time."""
        with self.connection() as conn:
            return db.read.read_observations(conn, sensor_id=sensor_id, start=start, end=end)

    def iter_cpu_buckets(
        self,
        *,
        location: str,
        sensor_type: str,
        bucket: str = DEFAULT_BUCKET,
    ) -> Iterator[Tuple[datetime, float]]:
        """
        Stream (bucket, avg_cpu) pairs, most recent first.

        The pooled connection is held until the iterator is exhausted or closed.
        """
        with self.connection() as conn:
            yield from db.read.iter_cpu_buckets(
                conn, location=location, sensor_type=sensor_type, bucket=bucket,
            )


# =============================================================================
# Internal helper functions (not part of public API)
# =============================================================================

def _get_conninfo() -> str:
    """Get database connection string from environment variables."""
    conninfo = os.environ.get("SENSORDB_DSN") or os.environ.get("DATABASE_URL")
    if not conninfo:
        raise ValueError(
            "Database connection not configured. Set SENSORDB_DSN or DATABASE_URL environment variable."
        )
    return conninfo
