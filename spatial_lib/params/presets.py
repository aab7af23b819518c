"""Lattice resolution parameters and named presets.

The resolution is the index's main tuning knob: coarse lattices keep
insertion cheap but return loose candidate sets, fine lattices return tight
candidate sets but run one exact intersection test per candidate cell on
every insert.
"""

from dataclasses import dataclass
from typing import Dict, List
import numpy as np
from ..core.types import Envelope


@dataclass
class GridParams:
    """Resolution of a grid index lattice."""
    
    n_cols: int
    n_rows: int
    margin: float = 0.0  # padding around the indexed envelope
    
    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"n_cols": self.n_cols, "n_rows": self.n_rows, "margin": self.margin}
    
    @classmethod
    def from_dict(cls, d: dict) -> "GridParams":
        """Create from dictionary."""
        return cls(n_cols=d["n_cols"], n_rows=d["n_rows"], margin=d.get("margin", 0.0))


def coarse() -> GridParams:
    """Few large cells, for small feature sets or very large query windows."""
    return GridParams(n_cols=8, n_rows=8)


def default() -> GridParams:
    """Balanced resolution for a few thousand features."""
    return GridParams(n_cols=32, n_rows=32)


def fine() -> GridParams:
    """
    Many small cells, for dense feature sets queried with small windows.
    
    Insertion of large shapes becomes expensive at this resolution.
    """
    return GridParams(n_cols=128, n_rows=128)


def debug() -> GridParams:
    """2x2 lattice, easy to inspect by hand."""
    return GridParams(n_cols=2, n_rows=2)


PRESETS = {
    "coarse": coarse,
    "default": default,
    "fine": fine,
    "debug": debug,
}


def get_preset(name: str) -> GridParams:
    """
    Get a resolution preset by name.
    
    Parameters
    ----------
    name : str
        Preset name (see list_presets())
    
    Returns
    -------
    params : GridParams
        Fresh parameters for the preset
    """
    if name not in PRESETS:
        available = ", ".join(sorted(PRESETS.keys()))
        raise ValueError(f"Unknown preset '{name}'. Available presets: {available}")
    return PRESETS[name]()


def list_presets() -> List[str]:
    """List available preset names."""
    return list(PRESETS.keys())


def params_for_cell_size(envelope: Envelope, cell_size: float) -> GridParams:
    """
    Pick a resolution whose cells are at most cell_size wide and high.
    
    Parameters
    ----------
    envelope : Envelope
        Region to be indexed
    cell_size : float
        Largest acceptable cell edge length (> 0)
    
    Returns
    -------
    params : GridParams
        Resolution with at least one cell per axis
    """
    if cell_size <= 0:
        raise ValueError(f"cell_size must be positive, got {cell_size}")
    n_cols = max(1, int(np.ceil(envelope.width / cell_size)))
    n_rows = max(1, int(np.ceil(envelope.height / cell_size)))
    return GridParams(n_cols=n_cols, n_rows=n_rows)


def describe_presets() -> Dict[str, dict]:
    """Presets as plain dictionaries."""
    return {name: factory().to_dict() for name, factory in PRESETS.items()}
