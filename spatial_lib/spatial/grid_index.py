"""
Uniform grid-based spatial index for fast rectangle queries.
"""

import logging
from numbers import Integral
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Sequence, Set, Tuple
import numpy as np
from shapely.geometry.base import BaseGeometry
from shapely.prepared import prep
from ..core.types import Envelope, EnvelopeLike, as_envelope
from ..core.errors import ErrorCode, InvalidConfiguration
from .lattice import Lattice

if TYPE_CHECKING:
    from ..params.presets import GridParams

logger = logging.getLogger(__name__)

EMPTY = -1


class GridIndex:
    """
    Uniform 2D grid spatial index for planar shapes.
    
    Each inserted shape is recorded in every lattice cell its geometry truly
    intersects (prepared-rectangle test, touching a cell boundary counts).
    Queries return the identifiers found in the cells overlapping the query
    window, at cell granularity only.
    
    The index is built once and then queried. It holds no locks: inserts
    must come from a single writer, and concurrent queries are safe only
    after the last insert has returned.
    """
    
    def __init__(self, envelope: EnvelopeLike, n_cols: int, n_rows: int):
        """
        Initialize an empty index.
        
        Parameters
        ----------
        envelope : Envelope or tuple
            Main bounding rectangle, an Envelope or (minx, miny, maxx, maxy)
        n_cols : int
            Number of cells along x
        n_rows : int
            Number of cells along y
        
        Raises
        ------
        InvalidConfiguration
            If the envelope has no positive area or a count is below 1
        """
        self.lattice = Lattice(as_envelope(envelope), n_cols, n_rows)
        self.cells = np.full(self.lattice.shape, EMPTY, dtype=np.int64)
        self.buckets: List[List[int]] = []
        self._feature_count = 0
    
    @classmethod
    def from_params(cls, envelope: EnvelopeLike, params: "GridParams") -> "GridIndex":
        """Create an empty index over envelope (grown by params.margin)."""
        env = as_envelope(envelope)
        if params.margin:
            env = env.expand_by(params.margin)
        return cls(env, params.n_cols, params.n_rows)
    
    @classmethod
    def from_geometries(
        cls,
        geometries: Sequence[BaseGeometry],
        n_cols: int,
        n_rows: int,
        envelope: Optional[EnvelopeLike] = None,
        margin: float = 0.0,
    ) -> "GridIndex":
        """
        Build an index where each geometry's id is its position in the sequence.
        
        Parameters
        ----------
        geometries : sequence of shapely geometries
            Shapes to index; empty geometries are skipped
        n_cols, n_rows : int
            Lattice resolution
        envelope : Envelope or tuple, optional
            Main bounding rectangle. Defaults to the union of all geometry
            bounds grown by margin.
        margin : float
            Padding added around the computed envelope
        
        Returns
        -------
        index : GridIndex
            Populated index
        """
        if envelope is None:
            total = None
            for geom in geometries:
                if geom is None or geom.is_empty:
                    continue
                env = Envelope.from_geometry(geom)
                total = env if total is None else total.expand_to_include(env)
            if total is None:
                raise InvalidConfiguration(
                    "Cannot derive an envelope from an empty geometry collection",
                    ErrorCode.DEGENERATE_ENVELOPE,
                )
            envelope = total.expand_by(margin) if margin else total
        
        index = cls(envelope, n_cols, n_rows)
        index.extend((geom, i) for i, geom in enumerate(geometries))
        return index
    
    def insert(self, geometry: BaseGeometry, feature_id: int) -> int:
        """
        Record feature_id in every cell the geometry intersects.
        
        Shapes outside the lattice and empty geometries are ignored.
        
        Parameters
        ----------
        geometry : shapely geometry
            Polygon, line, point or multi-part shape
        feature_id : int
            Caller-defined identifier
        
        Returns
        -------
        n_cells : int
            Number of cells the identifier was added to
        """
        if isinstance(feature_id, bool) or not isinstance(feature_id, Integral):
            raise TypeError(f"feature_id must be an integer, got {type(feature_id).__name__}")
        feature_id = int(feature_id)
        
        if geometry is None or geometry.is_empty:
            return 0
        
        cell_range = self.lattice.candidate_range(Envelope.from_geometry(geometry), padding=1)
        n_cells = 0
        for row, col in cell_range.cells():
            cell_geom = prep(self.lattice.cell_envelope(row, col).to_geometry())
            if cell_geom.intersects(geometry):
                self._add_item(row, col, feature_id)
                n_cells += 1
        
        if n_cells:
            self._feature_count += 1
        return n_cells
    
    def extend(self, items: Iterable[Tuple[BaseGeometry, int]]) -> int:
        """Insert (geometry, feature_id) pairs; returns total cells written."""
        n_items = 0
        n_cells = 0
        for geometry, feature_id in items:
            n_cells += self.insert(geometry, feature_id)
            n_items += 1
        
        logger.debug(
            "Indexed %d shapes into %d cell entries (%d buckets, lattice %dx%d)",
            n_items, n_cells, len(self.buckets), self.lattice.n_cols, self.lattice.n_rows,
        )
        return n_cells
    
    def _add_item(self, row: int, col: int, feature_id: int) -> None:
        bucket_id = self.cells[row, col]
        if bucket_id == EMPTY:
            bucket_id = len(self.buckets)
            self.buckets.append([])
            self.cells[row, col] = bucket_id
        self.buckets[bucket_id].append(feature_id)
    
    def query(self, envelope: EnvelopeLike) -> Set[int]:
        """
        Identifiers recorded in the cells overlapping a rectangle.
        
        A cell is read when its rectangle overlaps the window, boundary
        touch included. No exact test is made against the shapes; use
        analysis.refine_candidates when exact results are needed.
        
        Parameters
        ----------
        envelope : Envelope or tuple
            Query window, an Envelope or (minx, miny, maxx, maxy)
        
        Returns
        -------
        feature_ids : set of int
            Unique identifiers, empty if the window is outside the lattice
        """
        env = as_envelope(envelope)
        cell_range = self.lattice.candidate_range(env, padding=1)
        result: Set[int] = set()
        if cell_range.is_empty():
            return result
        
        rows, cols = cell_range.to_slices()
        row_mask, col_mask = self.lattice.overlapping_cells(env, cell_range)
        block = self.cells[rows, cols][np.ix_(row_mask, col_mask)]
        for bucket_id in block[block != EMPTY]:
            result.update(self.buckets[bucket_id])
        return result
    
    def query_geometry(self, geometry: BaseGeometry) -> Set[int]:
        """Query with the bounding envelope of a geometry."""
        if geometry is None or geometry.is_empty:
            return set()
        return self.query(Envelope.from_geometry(geometry))
    
    def cell_ids(self, row: int, col: int) -> List[int]:
        """Identifiers of one cell in insertion order."""
        self.lattice.flat_index(row, col)  # bounds check
        bucket_id = self.cells[row, col]
        if bucket_id == EMPTY:
            return []
        return list(self.buckets[bucket_id])
    
    def occupied_cells(self) -> Iterator[Tuple[int, int]]:
        """Yield (row, col) of every cell holding a bucket, row-major."""
        rows, cols = np.nonzero(self.cells != EMPTY)
        for row, col in zip(rows, cols):
            yield int(row), int(col)
    
    @property
    def bucket_count(self) -> int:
        return len(self.buckets)
    
    def __len__(self) -> int:
        return self._feature_count
    
    def __repr__(self) -> str:
        env = self.lattice.envelope
        return (
            f"GridIndex(envelope={env.to_bounds()}, n_cols={self.lattice.n_cols}, "
            f"n_rows={self.lattice.n_rows}, buckets={len(self.buckets)})"
        )
