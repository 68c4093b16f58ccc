import os
from datetime import datetime, timedelta

import numpy as np
import pandas as pd

from pickups.models import PreferredTime, Urgency, WasteType
from routing.geocoding import KNOWN_AREAS


def generate_mock_requests(num_requests=200, output_file="sampledata/requests.csv", missing_coordinates_ratio=0.05, seed=None):
    """
    Generates pending pickup requests clustered around a handful of Nairobi
    neighbourhoods, which gives route planning several dense pockets to work with.
    A small share of rows is left without coordinates to exercise the geocoding fallback.
    """
    rng = np.random.default_rng(seed)
    areas = list(KNOWN_AREAS.items())
    now = datetime.now()

    data = []
    for index in range(num_requests):
        area_name, area = areas[int(rng.integers(0, len(areas)))]

        # ~3 km spread around the neighbourhood
        lat = area.lat + rng.uniform(-0.03, 0.03)
        lng = area.lng + rng.uniform(-0.03, 0.03)
        has_coordinates = rng.random() >= missing_coordinates_ratio

        data.append({
            "request_id": f"req_{str(index + 1).zfill(5)}",
            "client_id": f"cl_{rng.integers(1000, 9999)}",
            "waste_type": rng.choice([w.value for w in WasteType], p=[0.35, 0.3, 0.1, 0.05, 0.2]),
            "quantity_kg": np.round(rng.uniform(5, 250), 1),
            "address": f"{int(rng.integers(1, 200))} {area_name.title()} Road",
            "lat": np.round(lat, 6) if has_coordinates else None,
            "lng": np.round(lng, 6) if has_coordinates else None,
            "urgency": rng.choice([u.value for u in Urgency], p=[0.75, 0.2, 0.05]),
            "preferred_time": rng.choice([p.value for p in PreferredTime], p=[0.4, 0.6]),
            "base_price": np.round(rng.uniform(150, 1500), 0),
            "surge_multiplier": rng.choice([1.0, 1.2, 1.5], p=[0.7, 0.2, 0.1]),
            "created_at": (now - timedelta(minutes=int(rng.integers(0, 90)))).isoformat(),
        })

    df = pd.DataFrame(data)
    os.makedirs(os.path.dirname(output_file) or ".", exist_ok=True)
    df.to_csv(output_file, index=False)
    print(f"Generated {num_requests} requests and saved to '{output_file}'")

    print("\nRequests by waste type:")
    for waste_type, count in df["waste_type"].value_counts().items():
        print(f"  {waste_type}: {count}")


if __name__ == "__main__":
    generate_mock_requests()
