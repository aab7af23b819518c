"""
Occupancy statistics for a populated grid index.
"""

import numpy as np
from ..spatial.grid_index import GridIndex, EMPTY


def occupancy_grid(index: GridIndex) -> np.ndarray:
    """
    Bucket size of every cell.
    
    Returns
    -------
    counts : np.ndarray
        Integer array of shape (n_rows, n_cols); empty cells are 0
    """
    counts = np.zeros(index.lattice.shape, dtype=np.int64)
    occupied = index.cells != EMPTY
    sizes = np.array([len(b) for b in index.buckets], dtype=np.int64)
    if sizes.size:
        counts[occupied] = sizes[index.cells[occupied]]
    return counts


def occupancy_stats(index: GridIndex) -> dict:
    """
    Summary of how features are spread over the lattice.
    
    Useful when tuning the lattice resolution: a high max_bucket_size or a
    low fill_ratio suggests the resolution does not match the data.
    """
    counts = occupancy_grid(index)
    occupied = counts[counts > 0]
    
    return {
        "cell_count": int(counts.size),
        "occupied_cells": int(occupied.size),
        "bucket_count": index.bucket_count,
        "total_entries": int(counts.sum()),
        "mean_bucket_size": float(occupied.mean()) if occupied.size else 0.0,
        "max_bucket_size": int(occupied.max()) if occupied.size else 0,
        "fill_ratio": float(occupied.size / counts.size),
    }
