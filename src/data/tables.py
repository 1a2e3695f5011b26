"""
Tabular data loading and column validation.

Loads delimited text files into DataFrames, applies column renames, and
checks that the variables a model needs are present.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence

import pandas as pd

from src.exceptions import MissingColumn

logger = logging.getLogger(__name__)


def as_frame(dataset: pd.DataFrame | Sequence[Mapping]) -> pd.DataFrame:
    """Return dataset as a DataFrame.

    Args:
        dataset: A DataFrame (returned as-is) or a sequence of row mappings.

    Returns:
        DataFrame with one row per input row.
    """
    if isinstance(dataset, pd.DataFrame):
        return dataset
    return pd.DataFrame.from_records(list(dataset))


def require_columns(frame: pd.DataFrame, columns: Iterable[str]) -> None:
    """Raise MissingColumn listing every requested column absent from frame."""
    missing = [c for c in columns if c not in frame.columns]
    if missing:
        raise MissingColumn(missing, available=frame.columns)


def load_table(
    path: Path | str,
    rename: Optional[Mapping[str, str]] = None,
    required: Optional[Iterable[str]] = None,
    sep: str = ",",
) -> pd.DataFrame:
    """Load a delimited text file.

    Args:
        path: File to read.
        rename: Optional old -> new column name mapping, applied after reading.
        required: Columns that must exist after renaming.
        sep: Field delimiter.

    Returns:
        Loaded DataFrame.

    Raises:
        FileNotFoundError: If path does not exist.
        MissingColumn: If a required column is absent.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Required file not found: {path}")

    frame = pd.read_csv(path, sep=sep)
    if rename:
        frame = frame.rename(columns=dict(rename))
    if required is not None:
        require_columns(frame, required)

    logger.info("Loaded %s: %d rows x %d columns", path.name, len(frame), frame.shape[1])
    return frame
