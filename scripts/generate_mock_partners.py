import uuid

import numpy as np
import pandas as pd

# (city, state, lat, lon) hubs the mock data is scattered around
CITIES = [
    ("Pune", "Maharashtra", 18.5204, 73.8567),
    ("Mumbai", "Maharashtra", 19.0760, 72.8777),
    ("Nashik", "Maharashtra", 19.9975, 73.7898),
    ("Bengaluru", "Karnataka", 12.9716, 77.5946),
]


def generate_mock_partners(count=40, output_file="mock_partners.csv", seed=None):
    """
    Delivery partners scattered around the hub cities.
    ~75% available; ~10% have never geocoded their location (lat/lon empty).
    """
    rng = np.random.default_rng(seed)
    rows = []
    for partner_index in range(count):
        city, state, lat, lon = CITIES[rng.integers(len(CITIES))]
        has_location = rng.random() >= 0.10

        rows.append({
            "partner_id": f"DP-{str(partner_index + 1).zfill(3)}",
            "status": "available" if rng.random() < 0.75 else rng.choice(["busy", "offline"]),
            "city": city,
            "state": state,
            # roughly +/- 8km around the hub
            "latitude": round(lat + rng.uniform(-0.07, 0.07), 6) if has_location else np.nan,
            "longitude": round(lon + rng.uniform(-0.07, 0.07), 6) if has_location else np.nan,
        })

    df = pd.DataFrame(rows)
    df.to_csv(output_file, index=False)
    print(f"Successfully generated {count} mock partners into '{output_file}'.")
    return df


def generate_mock_orders(count=100, output_file="mock_orders.csv", seed=None):
    """
    Unassigned customer orders waiting for a delivery partner.
    """
    rng = np.random.default_rng(seed)
    rows = []
    for _ in range(count):
        city, state, lat, lon = CITIES[rng.integers(len(CITIES))]
        rows.append({
            "order_id": str(uuid.uuid4()),
            "status": rng.choice(["pending", "confirmed", "dispatched"]),
            "city": city,
            "state": state,
            "latitude": round(lat + rng.uniform(-0.05, 0.05), 6),
            "longitude": round(lon + rng.uniform(-0.05, 0.05), 6),
            "total_price": round(float(rng.uniform(80, 2500)), 2),
        })

    df = pd.DataFrame(rows)
    df.to_csv(output_file, index=False)
    print(f"Successfully generated {count} mock orders into '{output_file}'.")
    return df


if __name__ == "__main__":
    generate_mock_partners()
    generate_mock_orders()
