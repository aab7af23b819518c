"""
Basic example of using the grid index.

This example demonstrates:
1. Building an index over a set of parcels
2. Running window queries
3. Refining candidates with exact geometry
"""

import logging
import numpy as np
from shapely.geometry import box, Point
from spatial_lib import GridIndex, Envelope, query_exact, occupancy_stats

logging.basicConfig(level=logging.DEBUG)

rng = np.random.default_rng(42)

parcels = []
for _ in range(500):
    x, y = rng.uniform(0, 1000, 2)
    w, h = rng.uniform(2, 40, 2)
    parcels.append(box(x, y, x + w, y + h))
parcels.append(Point(500, 500).buffer(80))

print("Building grid index...")
index = GridIndex.from_geometries(parcels, n_cols=50, n_rows=50)

window = Envelope(400, 600, 400, 600)
candidates = index.query(window)
exact = query_exact(index, window, parcels)

print("\n=== Query Results ===")
print(f"Candidates: {len(candidates)}")
print(f"Exact hits: {len(exact)}")

print("\n=== Occupancy ===")
for key, value in occupancy_stats(index).items():
    print(f"{key}: {value}")
