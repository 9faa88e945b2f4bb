import warnings
from datetime import datetime
from typing import Iterator, Optional, Tuple
import pandas as pd
import psycopg

DEFAULT_BUCKET = "5 minutes"


def iter_cpu_buckets(
    conn: psycopg.Connection,
    *,
    location: str,
    sensor_type: str,
    bucket: str = DEFAULT_BUCKET,
) -> Iterator[Tuple[datetime, float]]:
    """
    Average cpu per time bucket for sensors matching location and type.

    Rows are streamed from the server, most recent bucket first. Nothing is
    kept in memory; collect the iterator if you need the full result.

    Args:
        conn: Database connection
        location: Sensor location to filter on (e.g. 'ceiling')
        sensor_type: Sensor type to filter on (e.g. 'a')
        bucket: Bucket width as a Postgres interval (default: '5 minutes')

    Yields:
        (bucket_start, avg_cpu) tuples
    """
    sql = """
    SELECT time_bucket(%(bucket)s::interval, time) AS five_min, avg(cpu)
    FROM sensor_data
    JOIN sensors ON sensors.id = sensor_data.sensor_id
    WHERE sensors.location = %(location)s AND sensors.type = %(sensor_type)s
    GROUP BY five_min
    ORDER BY five_min DESC;
    """
    params = {"bucket": bucket, "location": location, "sensor_type": sensor_type}

    with conn.cursor() as cur:
        for bucket_start, avg_cpu in cur.stream(sql, params):
            yield bucket_start, avg_cpu


def _build_where_clause(
    sensor_id: Optional[int] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> tuple[str, dict]:
    """
    Build WHERE clause and parameters for sensor_data reads.

    Returns:
        Tuple of (where_clause_string, params_dict)
    """
    filters = []
    params = {}

    if sensor_id is not None:
        filters.append("sensor_id = %(sensor_id)s")
        params["sensor_id"] = sensor_id
    if start is not None:
        filters.append("time >= %(start)s")
        params["start"] = start
    if end is not None:
        filters.append("time < %(end)s")
        params["end"] = end

    where_clause = ""
    if filters:
        where_clause = "WHERE " + " AND ".join(filters)

    return where_clause, params


def read_observations(
    conn: psycopg.Connection,
    *,
    sensor_id: Optional[int] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> pd.DataFrame:
    """
    Read raw observations back from sensor_data.

    Args:
        conn: Database connection
        sensor_id: Only rows for this sensor (optional)
        start: Inclusive lower bound on time (optional)
        end: Exclusive upper bound on time (optional)

    Returns:
        DataFrame indexed by time with columns (sensor_id, temperature, cpu)
    """
    where_clause, params = _build_where_clause(sensor_id=sensor_id, start=start, end=end)

    sql = f"""
    SELECT time, sensor_id, temperature, cpu
    FROM sensor_data
    {where_clause}
    ORDER BY time, sensor_id;
    """

    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", category=UserWarning, message=".*pandas only supports SQLAlchemy.*")
        df = pd.read_sql(sql, conn, params=params)

    # Ensure timezone-aware pandas datetimes
    df["time"] = pd.to_datetime(df["time"], utc=True)

    return df.set_index("time")
