"""
Data loading and resampling.

This module provides:
- load_table / require_columns: delimited-file loading and column checks
- ResampleView / Split / ResampleCollection: index-based split views
- generate_splits: Monte Carlo train/test resampling
- generate_kfold_splits / generate_loo_splits: exhaustive variants
"""

from src.data.splitters import (
    ResampleCollection,
    ResampleView,
    Split,
    generate_kfold_splits,
    generate_loo_splits,
    generate_splits,
)
from src.data.tables import as_frame, load_table, require_columns

__all__ = [
    "ResampleCollection",
    "ResampleView",
    "Split",
    "as_frame",
    "generate_kfold_splits",
    "generate_loo_splits",
    "generate_splits",
    "load_table",
    "require_columns",
]
