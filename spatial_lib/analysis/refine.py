"""
Exact refinement of grid index candidates.
"""

from typing import Iterable, Mapping, Sequence, Set, Union
from shapely.geometry.base import BaseGeometry
from shapely.prepared import prep
from ..core.types import Envelope, EnvelopeLike, as_envelope
from ..spatial.grid_index import GridIndex

GeometryLookup = Union[Mapping[int, BaseGeometry], Sequence[BaseGeometry]]


def _lookup(geometries: GeometryLookup, feature_id: int):
    if isinstance(geometries, Mapping):
        return geometries.get(feature_id)
    if 0 <= feature_id < len(geometries):
        return geometries[feature_id]
    return None


def refine_candidates(
    candidates: Iterable[int],
    geometries: GeometryLookup,
    envelope: EnvelopeLike,
) -> Set[int]:
    """
    Keep only candidates whose geometry truly intersects a rectangle.
    
    Parameters
    ----------
    candidates : iterable of int
        Identifiers returned by GridIndex.query
    geometries : mapping or sequence
        Geometry for each identifier (by key, or by position for sequences)
    envelope : Envelope or tuple
        Query rectangle
    
    Returns
    -------
    feature_ids : set of int
        Identifiers whose shape intersects the rectangle. Unknown ids and
        empty geometries are dropped.
    """
    window = prep(as_envelope(envelope).to_geometry())
    refined = set()
    for feature_id in candidates:
        geom = _lookup(geometries, feature_id)
        if geom is None or geom.is_empty:
            continue
        if window.intersects(geom):
            refined.add(feature_id)
    return refined


def query_exact(
    index: GridIndex,
    envelope: EnvelopeLike,
    geometries: GeometryLookup,
) -> Set[int]:
    """Grid query followed by exact refinement against the rectangle."""
    env = as_envelope(envelope)
    return refine_candidates(index.query(env), geometries, env)


def window_from_point(x: float, y: float, radius: float) -> Envelope:
    """Square query window of half-size radius centered on a point."""
    return Envelope(x - radius, x + radius, y - radius, y + radius)
