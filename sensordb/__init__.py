"""
sensordb - A TimescaleDB walkthrough: sensors, a sensor_data hypertable,
synthetic data, row and batch inserts, and a time-bucketed query.

Quick usage:
    from sensordb import SensorDataClient

    with SensorDataClient(conninfo='postgresql://...') as client:
        client.create()
        sensors = client.insert_sensors()
        result = client.insert_batch(client.generate([s.id for s in sensors]))
        for bucket, avg_cpu in client.iter_cpu_buckets(location='ceiling', sensor_type='a'):
            print(bucket, avg_cpu)

Command line:
    $ sensordb run --dsn postgresql://...
"""

from dotenv import load_dotenv, find_dotenv

load_dotenv(find_dotenv())

from .sdk import SensorDataClient
from .db.seed import SENSORS, Sensor
from .db.generate import Observation
from .db.insert import BatchInsertResult
from .workflow import StepError, run_demo

__all__ = [
    'SensorDataClient',
    'SENSORS',
    'Sensor',
    'Observation',
    'BatchInsertResult',
    'StepError',
    'run_demo',
]
