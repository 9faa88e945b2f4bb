"""
The end-to-end sensordb walkthrough.

Runs once, in order, stopping at the first failure:

1. open the connection pool
2. create the sensors table and the sensor_data hypertable
3. seed the sensors table
4. generate a series and write it row by row
5. generate a second, independent series and write it as one pipelined batch
6. stream the 5-minute average cpu for one (location, type)

Every step runs under :func:`step`, which turns any failure into a
:class:`StepError` naming the step.
"""
from contextlib import contextmanager
from itertools import chain
from typing import Optional
import numpy as np
from rich.console import Console
from rich.markup import escape

from .sdk import SensorDataClient
from .db.seed import SENSORS


class StepError(RuntimeError):
    """A workflow step failed. ``str()`` gives '<step message>: <cause>'."""

    def __init__(self, message: str, cause: BaseException):
        super().__init__(f"{message}: {cause}")
        self.message = message
        self.cause = cause


@contextmanager
def step(message: str):
    """Re-raise any exception from the block as a StepError carrying ``message``."""
    try:
        yield
    except StepError:
        raise
    except Exception as exc:
        raise StepError(message, exc) from exc


def run_demo(
    conninfo: str,
    *,
    console: Console,
    location: str = "ceiling",
    sensor_type: str = "a",
    server_generator: bool = True,
    seed: Optional[int] = None,
    show_generated: bool = True,
) -> None:
    """
    Run the full walkthrough against ``conninfo``.

    Raises:
        StepError: On the first failing step
    """
    rng = np.random.default_rng(seed)

    with step("Unable to create connection pool"):
        client = SensorDataClient(conninfo)

    with client:
        with step("Unable to create SENSORS table"):
            client.create_sensors_table()
        console.print("Successfully created relational table SENSORS")

        with step("Unable to create SENSOR_DATA hypertable"):
            client.create_sensor_data_hypertable()
        console.print("Successfully created hypertable SENSOR_DATA")

        def report(sensor):
            console.print(f"Inserted sensor ({escape(sensor.type)}, {escape(sensor.location)}) into database")

        with step("Unable to insert data into database"):
            sensors = client.insert_sensors(SENSORS, on_insert=report)
        console.print("Successfully inserted all sensors into database")
        sensor_ids = [s.id for s in sensors]

        # Row-at-a-time path
        with step("Unable to generate sensor data"):
            observations = client.generate(sensor_ids, server=server_generator, rng=rng)
        console.print("Successfully generated sensor data")

        if show_generated:
            console.print("Contents of RESULTS slice")
            for obs in observations:
                console.print(
                    f"Time: {obs.time} | ID: {obs.sensor_id} | "
                    f"Temperature: {obs.temperature:f} | CPU: {obs.cpu:f} |",
                    soft_wrap=True,
                )

        with step("Unable to insert sample into Timescale"):
            client.insert(observations)
        console.print("Successfully inserted samples into sensor_data hypertable")

        # Batched path, on an independent dataset
        with step("Unable to generate sensor data"):
            observations = client.generate(sensor_ids, server=server_generator, rng=rng)
        console.print("Successfully generated sensor data")

        with step("Unable to execute statement in batch queue"):
            result = client.insert_batch(observations)
        console.print("Successfully batch inserted data")
        console.print(f"size of results: {result.generated}")
        console.print(f"size of table: {result.table_rows}")

        with step("Unable to execute query"):
            buckets = client.iter_cpu_buckets(location=location, sensor_type=sensor_type)
            # The query only reaches the server on the first fetch
            first = next(buckets, None)
            console.print("Successfully executed query")
            if first is not None:
                for bucket, avg_cpu in chain([first], buckets):
                    console.print(f"Time bucket: {bucket} | Avg: {avg_cpu:f}", soft_wrap=True)
