"""Validation helpers: p-value calibration against U(0, 1)."""

from .p_value_calibration import (
    calibrate_p_values,
    compute_pvalues_from_streams,
    generate_streams,
    ks_test_uniform,
    qq_data,
    save_calibration_csv,
)

__all__ = [
    "calibrate_p_values",
    "compute_pvalues_from_streams",
    "generate_streams",
    "ks_test_uniform",
    "qq_data",
    "save_calibration_csv",
]
