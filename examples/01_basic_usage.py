import numpy as np
from datetime import datetime, timezone
from sensordb import SensorDataClient
from dotenv import load_dotenv
load_dotenv()

with SensorDataClient() as client:
    # Start from empty tables
    client.delete()
    client.create()

    sensors = client.insert_sensors()
    print(f"✓ Seeded {len(sensors)} sensors: {sensors}")

    # One day of 5-minute samples, generated locally and reproducibly
    end = datetime(2025, 1, 1, tzinfo=timezone.utc)
    obs = client.generate([s.id for s in sensors], server=False, end=end, rng=np.random.default_rng(42))

    result = client.insert_batch(obs)
    print(f"✓ Batch inserted {result.generated} rows, table now holds {result.table_rows}")

    df = client.read(sensor_id=sensors[0].id)
    print(df.head())

    for bucket, avg_cpu in client.iter_cpu_buckets(location="ceiling", sensor_type="a"):
        print(f"{bucket} | {avg_cpu:.3f}")
