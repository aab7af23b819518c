"""
Coordinate mapping between world rectangles and lattice cell indices.
"""

from dataclasses import dataclass, field
from numbers import Integral
from typing import Optional, Tuple
import numpy as np
from ..core.types import Envelope, CellRange
from ..core.errors import ErrorCode, InvalidConfiguration


@dataclass(frozen=True)
class Lattice:
    """
    Fixed rectangular lattice of cells over a bounding envelope.
    
    Rows run along y and columns along x. Cell (0, 0) is the cell at the
    envelope's minimum corner.
    
    Parameters
    ----------
    envelope : Envelope
        Main bounding rectangle. Must have finite bounds and positive area.
    n_cols : int
        Number of cells along x (>= 1)
    n_rows : int
        Number of cells along y (>= 1)
    """
    
    envelope: Envelope
    n_cols: int
    n_rows: int
    cell_size_i: float = field(init=False)
    cell_size_j: float = field(init=False)
    row_edges: np.ndarray = field(init=False, repr=False, compare=False)
    col_edges: np.ndarray = field(init=False, repr=False, compare=False)
    
    def __post_init__(self):
        """Validate lattice geometry and derive cell sizes."""
        for name in ("n_cols", "n_rows"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Integral) or value < 1:
                raise InvalidConfiguration(
                    f"{name} must be an integer >= 1, got {value!r}",
                    ErrorCode.INVALID_SUBDIVISION,
                )
        
        env = self.envelope
        if not np.all(np.isfinite([env.min_x, env.max_x, env.min_y, env.max_y])):
            raise InvalidConfiguration(
                f"Lattice envelope has non-finite bounds: {env.to_bounds()}",
                ErrorCode.NON_FINITE_ENVELOPE,
            )
        if env.width <= 0 or env.height <= 0:
            raise InvalidConfiguration(
                f"Lattice envelope must have positive width and height "
                f"(width={env.width}, height={env.height})",
                ErrorCode.DEGENERATE_ENVELOPE,
            )
        
        cell_size_i = env.height / self.n_rows
        cell_size_j = env.width / self.n_cols
        
        # edge k is min + k * cell_size; the last edge is pinned to the max bound
        row_edges = env.min_y + cell_size_i * np.arange(self.n_rows + 1, dtype=np.float64)
        row_edges[-1] = env.max_y
        col_edges = env.min_x + cell_size_j * np.arange(self.n_cols + 1, dtype=np.float64)
        col_edges[-1] = env.max_x
        row_edges.setflags(write=False)
        col_edges.setflags(write=False)
        
        # frozen dataclass: derived fields are set through object.__setattr__
        object.__setattr__(self, "cell_size_i", cell_size_i)
        object.__setattr__(self, "cell_size_j", cell_size_j)
        object.__setattr__(self, "row_edges", row_edges)
        object.__setattr__(self, "col_edges", col_edges)
    
    @property
    def cell_count(self) -> int:
        return self.n_rows * self.n_cols
    
    @property
    def shape(self) -> Tuple[int, int]:
        """(n_rows, n_cols), the shape of the cell table."""
        return (self.n_rows, self.n_cols)
    
    def candidate_range(self, envelope: Envelope, padding: int = 0) -> CellRange:
        """
        Cell index range that could contain a rectangle.
        
        Offsets from the lattice min corner are scaled to cell units and
        floored (min corner) or ceiled (max corner). A rectangle collapsing
        onto a cell boundary still spans one cell. The range is then grown by
        padding cells on each side and clamped to the lattice; it is empty
        when the rectangle lies outside it.
        
        Parameters
        ----------
        envelope : Envelope
            Rectangle to map (shape bounds or query window). Infinite bounds
            are accepted; any NaN bound gives an empty range.
        padding : int
            Extra cells added on every side before clamping. Insertion and
            queries use 1 so that rounding on cell boundaries never drops
            the cell a coordinate actually lies in.
        
        Returns
        -------
        cell_range : CellRange
            Inclusive-exclusive row and column range, possibly empty
        """
        env = self.envelope
        scaled_i = np.array([envelope.min_y - env.min_y, envelope.max_y - env.min_y]) / self.cell_size_i
        scaled_j = np.array([envelope.min_x - env.min_x, envelope.max_x - env.min_x]) / self.cell_size_j
        if np.isnan(scaled_i).any() or np.isnan(scaled_j).any():
            return CellRange(0, 0, 0, 0)
        
        # keep infinite windows within int range; two cells of slack so a
        # clipped, padded range beyond the lattice still clamps to empty
        scaled_i = np.clip(scaled_i, -2.0, self.n_rows + 2.0)
        scaled_j = np.clip(scaled_j, -2.0, self.n_cols + 2.0)
        
        min_i = int(np.floor(scaled_i[0]))
        max_i = int(np.ceil(scaled_i[1]))
        min_j = int(np.floor(scaled_j[0]))
        max_j = int(np.ceil(scaled_j[1]))
        
        if min_i == max_i:
            max_i += 1
        if min_j == max_j:
            max_j += 1
        
        return CellRange(
            min_row=max(min_i - padding, 0),
            max_row=min(max_i + padding, self.n_rows),
            min_col=max(min_j - padding, 0),
            max_col=min(max_j + padding, self.n_cols),
        )
    
    def cell_envelope(self, row: int, col: int) -> Envelope:
        """Exact rectangle covered by cell (row, col)."""
        self._check_cell(row, col)
        return Envelope(
            float(self.col_edges[col]),
            float(self.col_edges[col + 1]),
            float(self.row_edges[row]),
            float(self.row_edges[row + 1]),
        )
    
    def overlapping_cells(self, envelope: Envelope, cell_range: CellRange) -> Tuple[np.ndarray, np.ndarray]:
        """
        Masks of the rows and columns of cell_range whose cell rectangles
        overlap envelope (boundary touch counts).
        """
        rows, cols = cell_range.to_slices()
        row_mask = (
            (self.row_edges[rows] <= envelope.max_y) &
            (self.row_edges[cell_range.min_row + 1:cell_range.max_row + 1] >= envelope.min_y)
        )
        col_mask = (
            (self.col_edges[cols] <= envelope.max_x) &
            (self.col_edges[cell_range.min_col + 1:cell_range.max_col + 1] >= envelope.min_x)
        )
        return row_mask, col_mask
    
    def flat_index(self, row: int, col: int) -> int:
        """Row-major index of a cell in a table of length n_rows * n_cols."""
        self._check_cell(row, col)
        return row * self.n_cols + col
    
    def cell_of(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        """Cell a point maps to, or None if the point is outside the lattice."""
        if not self.envelope.contains_point(x, y):
            return None
        cell_range = self.candidate_range(Envelope(x, x, y, y))
        # points on the max edge map one past the last cell
        return (
            min(cell_range.min_row, self.n_rows - 1),
            min(cell_range.min_col, self.n_cols - 1),
        )
    
    def _check_cell(self, row: int, col: int) -> None:
        if not (0 <= row < self.n_rows and 0 <= col < self.n_cols):
            raise IndexError(
                f"Cell ({row}, {col}) is outside lattice of shape {self.shape}"
            )
