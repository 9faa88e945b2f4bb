"""
Synthetic sensor_data generation.

Two generators with the same statistical shape:

- generate_observations: computed in-process with numpy
- generate_observations_server: delegated to the database via generate_series

Both span ``lookback`` before ``end``/now() up to and including the end point,
at a fixed ``step``. Sensor ids are drawn uniformly from ``sensor_ids``,
temperature from [0, 100) and cpu from [0, 1).
"""
from datetime import datetime, timedelta, timezone
from typing import List, NamedTuple, Optional, Sequence
import numpy as np
import psycopg

DEFAULT_LOOKBACK = timedelta(hours=24)
DEFAULT_STEP = timedelta(minutes=5)


class Observation(NamedTuple):
    """One row of the sensor_data hypertable."""
    time: datetime
    sensor_id: int
    temperature: float
    cpu: float


def series_times(start: datetime, end: datetime, step: timedelta) -> List[datetime]:
    """
    Timestamps from ``start`` to ``end`` inclusive, ``step`` apart.

    When ``end - start`` is not a multiple of ``step`` the last delta is
    shorter, so ``end`` is always the final element.
    """
    if start.tzinfo is None or end.tzinfo is None:
        raise ValueError("start and end must be timezone-aware")
    if step <= timedelta(0):
        raise ValueError("step must be positive")
    if end < start:
        raise ValueError("end must not be before start")

    times = []
    t = start
    while t < end:
        times.append(t)
        t += step
    times.append(end)
    return times


def _check_sensor_ids(sensor_ids: Sequence[int]) -> List[int]:
    ids = [int(s) for s in sensor_ids]
    if not ids:
        raise ValueError("sensor_ids must not be empty")
    return ids


def generate_observations(
    sensor_ids: Sequence[int],
    *,
    end: Optional[datetime] = None,
    lookback: timedelta = DEFAULT_LOOKBACK,
    step: timedelta = DEFAULT_STEP,
    rng: Optional[np.random.Generator] = None,
) -> List[Observation]:
    """
    Generate observations in-process.

    Args:
        sensor_ids: Ids to draw from (uniformly, with replacement)
        end: Last timestamp of the window (default: now, UTC)
        lookback: Window length before ``end`` (default: 24 hours)
        step: Spacing between timestamps (default: 5 minutes)
        rng: numpy Generator, pass a seeded one for reproducible output

    Returns:
        List of Observation ordered by time
    """
    ids = _check_sensor_ids(sensor_ids)
    if end is None:
        end = datetime.now(timezone.utc)
    if rng is None:
        rng = np.random.default_rng()

    times = series_times(end - lookback, end, step)
    n = len(times)

    picks = rng.choice(np.asarray(ids), size=n)
    temperatures = rng.random(n) * 100.0
    cpus = rng.random(n)

    return [
        Observation(t, int(s), float(temp), float(cpu))
        for t, s, temp, cpu in zip(times, picks, temperatures, cpus)
    ]


def generate_observations_server(
    conn: psycopg.Connection,
    sensor_ids: Sequence[int],
    *,
    lookback: timedelta = DEFAULT_LOOKBACK,
    step: timedelta = DEFAULT_STEP,
) -> List[Observation]:
    """
    Generate observations with a single generate_series query.

    The window ends at the server's now(), which is always included even
    when ``lookback`` is not a multiple of ``step``.
    """
    ids = _check_sensor_ids(sensor_ids)

    sql = """
    SELECT
        t AS time,
        (%(sensor_ids)s::int[])[floor(random() * cardinality(%(sensor_ids)s::int[]) + 1)::int] AS sensor_id,
        random() * 100 AS temperature,
        random() AS cpu
    FROM (
        SELECT generate_series(now() - %(lookback)s::interval, now(), %(step)s::interval) AS t
        UNION
        SELECT now()
    ) AS s
    ORDER BY t;
    """
    params = {"sensor_ids": ids, "lookback": lookback, "step": step}

    with conn.cursor() as cur:
        cur.execute(sql, params)
        return [Observation(*row) for row in cur]
