"""Resolution parameter validation with soft bounds.

Hard errors (non-positive counts, degenerate envelopes) are raised when the
lattice is built. This module only reports settings that are legal but
likely to perform badly.
"""

import warnings
from typing import List, Optional, Tuple
from ..core.types import Envelope
from .presets import GridParams


PARAM_BOUNDS = {
    "n_cols": (1, 4096, "cells"),
    "n_rows": (1, 4096, "cells"),
    "margin": (0.0, float("inf"), "world units"),
}

MAX_CELL_COUNT = 4_000_000
MAX_CELL_ASPECT = 16.0


def validate_params(
    params: GridParams,
    envelope: Optional[Envelope] = None,
) -> Tuple[bool, List[str]]:
    """
    Validate GridParams against soft bounds.
    
    Parameters
    ----------
    params : GridParams
        Parameters to validate
    envelope : Envelope, optional
        Region to be indexed, enables cell shape checks
        
    Returns
    -------
    is_valid : bool
        True if no warnings were raised
    warnings : list of str
        List of validation warnings
    """
    messages = []
    
    for param_name, (min_val, max_val, unit) in PARAM_BOUNDS.items():
        value = getattr(params, param_name)
        if value < min_val:
            messages.append(
                f"{param_name} = {value} {unit} is below minimum {min_val} {unit}"
            )
        elif value > max_val:
            messages.append(
                f"{param_name} = {value} {unit} exceeds maximum {max_val} {unit}"
            )
    
    cell_count = params.n_cols * params.n_rows
    if cell_count > MAX_CELL_COUNT:
        messages.append(
            f"lattice has {cell_count} cells (> {MAX_CELL_COUNT}), "
            "insertion of large shapes will be slow"
        )
    
    if params.n_cols == 1 and params.n_rows == 1:
        messages.append("a 1x1 lattice returns every feature for every query")
    
    if envelope is not None and params.n_cols >= 1 and params.n_rows >= 1:
        if envelope.width <= 0 or envelope.height <= 0:
            messages.append(
                f"envelope has no positive area (width={envelope.width}, height={envelope.height})"
            )
        else:
            cell_w = (envelope.width + 2 * params.margin) / params.n_cols
            cell_h = (envelope.height + 2 * params.margin) / params.n_rows
            aspect = max(cell_w, cell_h) / min(cell_w, cell_h)
            if aspect > MAX_CELL_ASPECT:
                messages.append(
                    f"cells are strongly anisotropic ({cell_w:.4g} x {cell_h:.4g}, "
                    f"aspect {aspect:.1f} > {MAX_CELL_ASPECT})"
                )
    
    is_valid = len(messages) == 0
    return is_valid, messages


def validate_and_warn(
    params: GridParams,
    envelope: Optional[Envelope] = None,
) -> GridParams:
    """
    Validate parameters and emit a UserWarning per problem.
    
    Returns
    -------
    params : GridParams
        Same parameters (for chaining)
    """
    is_valid, messages = validate_params(params, envelope)
    if not is_valid:
        for message in messages:
            warnings.warn(f"Grid parameter warning: {message}", UserWarning, stacklevel=2)
    return params
