import os

import numpy as np
import pandas as pd

from collectors.fixtures import VEHICLE_CAPACITY_KG
from pickups.models import WasteType

# Nairobi CBD
CENTER_LAT = -1.2921
CENTER_LNG = 36.8219


def generate_mock_collectors(count=60, output_file="sampledata/collectors.csv", seed=None):
    """
    Generates a fleet of collectors scattered around Nairobi (roughly +/- 12 km).
    Each collector gets 1-3 specializations, a vehicle and a realistic workload,
    so matching runs see offline, busy and out-of-range collectors side by side.
    """
    rng = np.random.default_rng(seed)
    waste_types = [w.value for w in WasteType]
    vehicles = list(VEHICLE_CAPACITY_KG.keys())

    data = []
    for index in range(count):
        vehicle = rng.choice(vehicles, p=[0.3, 0.5, 0.2])
        max_load = int(rng.integers(2, 6))
        specializations = rng.choice(waste_types, size=int(rng.integers(1, 4)), replace=False)

        data.append({
            "collector_id": f"col_{str(index + 1).zfill(3)}",
            "name": f"Collector {index + 1}",
            "lat": np.round(CENTER_LAT + rng.uniform(-0.11, 0.11), 6),
            "lng": np.round(CENTER_LNG + rng.uniform(-0.11, 0.11), 6),
            # pipe-separated so the column survives CSV quoting
            "specializations": "|".join(sorted(specializations)),
            "vehicle_type": vehicle,
            "vehicle_capacity_kg": VEHICLE_CAPACITY_KG[vehicle],
            "current_load": int(rng.integers(0, max_load + 1)),
            "max_load": max_load,
            "rating": np.round(rng.uniform(3.0, 5.0), 1),
            "response_time_min": int(rng.integers(5, 40)),
            "online": bool(rng.random() < 0.8),
            "phone": f"+2547{rng.integers(10000000, 99999999)}",
        })

    df = pd.DataFrame(data)
    os.makedirs(os.path.dirname(output_file) or ".", exist_ok=True)
    df.to_csv(output_file, index=False)
    print(f"Generated {count} collectors and saved to '{output_file}'")

    print("\nFleet by vehicle:")
    for vehicle, group in df.groupby("vehicle_type"):
        print(f"  {vehicle}: {len(group)} ({int(group['online'].sum())} online)")


if __name__ == "__main__":
    generate_mock_collectors()
