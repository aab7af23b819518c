"""Exact refinement and occupancy analysis for grid indexes."""

from .refine import refine_candidates, query_exact, window_from_point
from .occupancy import occupancy_grid, occupancy_stats

__all__ = [
    "refine_candidates",
    "query_exact",
    "window_from_point",
    "occupancy_grid",
    "occupancy_stats",
]
