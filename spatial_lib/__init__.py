"""
Spatial Grid Index - uniform lattice index for planar shapes

Partitions a bounding rectangle into a regular lattice of cells and records,
for every inserted shape, the cells its geometry truly intersects. Window
queries then only look at the cells under the window instead of testing
every shape.

Key Features:
- Exact shape/cell intersection on insert (shapely prepared geometries)
- Lazily allocated per-cell buckets over a dense numpy cell table
- Deduplicated, order-free query results
- Resolution presets and soft parameter validation
- Optional exact refinement of query candidates

Example Usage:
    from shapely.geometry import box, Point
    from spatial_lib import GridIndex, Envelope
    
    index = GridIndex(Envelope(0, 100, 0, 100), n_cols=10, n_rows=10)
    index.insert(box(5, 5, 15, 15), 1)
    index.insert(Point(50, 50), 2)
    
    index.query(Envelope(0, 10, 0, 10))   # {1}
"""

__version__ = "0.1.0"

from .core.types import Envelope, CellRange
from .core.errors import ErrorCode, InvalidConfiguration
from .spatial.lattice import Lattice
from .spatial.grid_index import GridIndex

from .params import GridParams, get_preset, list_presets, validate_params

from .analysis.refine import refine_candidates, query_exact
from .analysis.occupancy import occupancy_stats

__all__ = [
    "Envelope",
    "CellRange",
    "ErrorCode",
    "InvalidConfiguration",
    "Lattice",
    "GridIndex",
    "GridParams",
    "get_preset",
    "list_presets",
    "validate_params",
    "refine_candidates",
    "query_exact",
    "occupancy_stats",
]
