"""Spatial indexing for fast rectangle queries over planar shapes."""

from .lattice import Lattice
from .grid_index import GridIndex, EMPTY

__all__ = ["Lattice", "GridIndex", "EMPTY"]
