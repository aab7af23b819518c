"""
Geometric primitive types for the grid index.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple, Union
import numpy as np
from shapely.geometry import box
from shapely.geometry.base import BaseGeometry


@dataclass(frozen=True)
class Envelope:
    """Axis-aligned rectangle in world coordinates."""
    
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    
    @property
    def width(self) -> float:
        return self.max_x - self.min_x
    
    @property
    def height(self) -> float:
        return self.max_y - self.min_y
    
    def center(self) -> Tuple[float, float]:
        """Get center point as (x, y)."""
        return ((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)
    
    def is_degenerate(self) -> bool:
        """True if the rectangle has no positive area or non-finite bounds."""
        if not np.all(np.isfinite([self.min_x, self.max_x, self.min_y, self.max_y])):
            return True
        return self.width <= 0 or self.height <= 0
    
    def intersects(self, other: "Envelope") -> bool:
        """Bounding-box overlap test (boundary touch counts)."""
        return not (
            other.min_x > self.max_x or
            other.max_x < self.min_x or
            other.min_y > self.max_y or
            other.max_y < self.min_y
        )
    
    def contains_point(self, x: float, y: float) -> bool:
        """Check if a point lies inside or on the rectangle."""
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y
    
    def expand_to_include(self, other: "Envelope") -> "Envelope":
        """Smallest envelope covering both rectangles."""
        return Envelope(
            min_x=min(self.min_x, other.min_x),
            max_x=max(self.max_x, other.max_x),
            min_y=min(self.min_y, other.min_y),
            max_y=max(self.max_y, other.max_y),
        )
    
    def expand_by(self, margin: float) -> "Envelope":
        """Grow the rectangle by margin on every side."""
        return Envelope(
            self.min_x - margin,
            self.max_x + margin,
            self.min_y - margin,
            self.max_y + margin,
        )
    
    def to_geometry(self) -> BaseGeometry:
        """Convert to a shapely polygon."""
        return box(self.min_x, self.min_y, self.max_x, self.max_y)
    
    def to_bounds(self) -> Tuple[float, float, float, float]:
        """Convert to shapely bounds order (minx, miny, maxx, maxy)."""
        return (self.min_x, self.min_y, self.max_x, self.max_y)
    
    @classmethod
    def from_bounds(cls, bounds: Tuple[float, float, float, float]) -> "Envelope":
        """Create from shapely bounds order (minx, miny, maxx, maxy)."""
        min_x, min_y, max_x, max_y = bounds
        return cls(float(min_x), float(max_x), float(min_y), float(max_y))
    
    @classmethod
    def from_geometry(cls, geometry: BaseGeometry) -> "Envelope":
        """Bounding envelope of a shapely geometry."""
        return cls.from_bounds(geometry.bounds)
    
    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "min_x": self.min_x,
            "max_x": self.max_x,
            "min_y": self.min_y,
            "max_y": self.max_y,
        }
    
    @classmethod
    def from_dict(cls, d: dict) -> "Envelope":
        """Create from dictionary."""
        return cls(d["min_x"], d["max_x"], d["min_y"], d["max_y"])


EnvelopeLike = Union[Envelope, Tuple[float, float, float, float]]


def as_envelope(envelope: EnvelopeLike) -> Envelope:
    """Accept an Envelope or shapely-ordered bounds (minx, miny, maxx, maxy)."""
    if isinstance(envelope, Envelope):
        return envelope
    return Envelope.from_bounds(envelope)


@dataclass(frozen=True)
class CellRange:
    """
    Candidate cell range, inclusive start and exclusive end on both axes.
    
    A range with min >= max on either axis is empty.
    """
    
    min_row: int
    max_row: int
    min_col: int
    max_col: int
    
    def is_empty(self) -> bool:
        return self.min_row >= self.max_row or self.min_col >= self.max_col
    
    def __len__(self) -> int:
        if self.is_empty():
            return 0
        return (self.max_row - self.min_row) * (self.max_col - self.min_col)
    
    def cells(self) -> Iterator[Tuple[int, int]]:
        """Yield (row, col) pairs in row-major order."""
        for row in range(self.min_row, self.max_row):
            for col in range(self.min_col, self.max_col):
                yield row, col
    
    def to_slices(self) -> Tuple[slice, slice]:
        """Row and column slices for indexing a (rows, cols) array."""
        return slice(self.min_row, self.max_row), slice(self.min_col, self.max_col)
