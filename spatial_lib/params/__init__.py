"""Resolution presets and validation for grid indexes."""

from .presets import (
    GridParams,
    coarse,
    default,
    fine,
    debug,
    get_preset,
    list_presets,
    params_for_cell_size,
    describe_presets,
    PRESETS,
)

from .validation import (
    validate_params,
    validate_and_warn,
    PARAM_BOUNDS,
)

__all__ = [
    # Params
    "GridParams",
    # Presets
    "coarse",
    "default",
    "fine",
    "debug",
    "get_preset",
    "list_presets",
    "params_for_cell_size",
    "describe_presets",
    "PRESETS",
    # Validation
    "validate_params",
    "validate_and_warn",
    "PARAM_BOUNDS",
]
