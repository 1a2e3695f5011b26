"""
Splitting utilities for resampled model evaluation.

Implements:
- Monte Carlo cross-validation: k independent random holdouts
- KFold splits (every row held out exactly once)
- Leave-one-out splits

Splits store row indices into one shared copy of the dataset rather than
copies of the rows. A split becomes a standalone table only when the caller
asks for it with materialize().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from numbers import Integral, Real
from typing import Iterator, List, Mapping, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import KFold, LeaveOneOut

from src.data.tables import as_frame
from src.exceptions import InvalidParameter

logger = logging.getLogger(__name__)


def _frozen_indices(indices: np.ndarray) -> np.ndarray:
    """Copy indices into a read-only integer array."""
    arr = np.array(indices, dtype=np.intp)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class ResampleView:
    """Index-set view over a shared table.

    Attributes:
        data: The shared dataset. Never modified through the view.
        indices: Row positions into data (read-only).
    """

    data: pd.DataFrame = field(repr=False)
    indices: np.ndarray

    def __len__(self) -> int:
        return len(self.indices)

    def materialize(self) -> pd.DataFrame:
        """Return the selected rows as a standalone DataFrame."""
        return self.data.iloc[self.indices].reset_index(drop=True)


@dataclass(frozen=True, eq=False)
class Split:
    """A single train/test partition of dataset row indices."""

    split_id: int
    data: pd.DataFrame = field(repr=False)
    train_indices: np.ndarray
    test_indices: np.ndarray

    @property
    def train(self) -> ResampleView:
        return ResampleView(self.data, self.train_indices)

    @property
    def test(self) -> ResampleView:
        return ResampleView(self.data, self.test_indices)

    @property
    def n_train(self) -> int:
        return len(self.train_indices)

    @property
    def n_test(self) -> int:
        return len(self.test_indices)

    def materialize(self) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """Return (train_df, test_df) as standalone tables."""
        return self.train.materialize(), self.test.materialize()


@dataclass(frozen=True, eq=False)
class ResampleCollection:
    """Ordered batch of splits over one immutable dataset.

    Attributes:
        data: Private copy of the input table, shared by every split.
        splits: The splits, in generation order.
        method: How the splits were drawn ("mc", "kfold" or "loo").
    """

    data: pd.DataFrame = field(repr=False)
    splits: Tuple[Split, ...]
    method: str

    def __len__(self) -> int:
        return len(self.splits)

    def __iter__(self) -> Iterator[Split]:
        return iter(self.splits)

    def __getitem__(self, i: int) -> Split:
        return self.splits[i]

    @property
    def n_rows(self) -> int:
        return len(self.data)

    def to_frame(self) -> pd.DataFrame:
        """One row per split with its train/test sizes."""
        return pd.DataFrame(
            {
                "split_id": [s.split_id for s in self.splits],
                "n_train": [s.n_train for s in self.splits],
                "n_test": [s.n_test for s in self.splits],
            }
        )


def _prepare_dataset(dataset: pd.DataFrame | Sequence[Mapping]) -> pd.DataFrame:
    """Take the one private copy every split of a collection will share."""
    frame = as_frame(dataset)
    if len(frame) == 0:
        raise InvalidParameter("dataset must contain at least one row")
    return frame.reset_index(drop=True).copy(deep=True)


def _resolve_holdout(holdout_size_or_fraction: float | int, n_rows: int) -> int:
    """Convert a holdout fraction or count into a number of test rows.

    Integers are row counts and must lie strictly in (0, n_rows). Floats are
    fractions in (0, 1); the count is round(n_rows * fraction) and must leave
    both sides non-empty.
    """
    value = holdout_size_or_fraction
    if isinstance(value, (bool, np.bool_)):
        raise InvalidParameter(f"holdout must be a number, got {value!r}")

    if isinstance(value, Integral):
        n_test = int(value)
        if not 0 < n_test < n_rows:
            raise InvalidParameter(
                f"holdout size must be in (0, {n_rows}), got {n_test}"
            )
        return n_test

    if isinstance(value, Real):
        fraction = float(value)
        if not 0.0 < fraction < 1.0:
            raise InvalidParameter(
                f"holdout fraction must be in (0, 1), got {fraction}"
            )
        n_test = int(round(n_rows * fraction))
        if n_test == 0 or n_test == n_rows:
            raise InvalidParameter(
                f"holdout fraction {fraction} leaves an empty train or test set "
                f"for {n_rows} rows"
            )
        return n_test

    raise InvalidParameter(f"holdout must be a number, got {type(value).__name__}")


def generate_splits(
    dataset: pd.DataFrame | Sequence[Mapping],
    num_splits: int,
    holdout_size_or_fraction: float | int = 0.2,
    random_seed: int = 42,
) -> ResampleCollection:
    """Draw num_splits independent random train/test partitions.

    Each split holds out a fresh random subset of rows (sampled without
    replacement); the remaining rows form the training set. Across splits a
    row may be held out several times or never.

    Args:
        dataset: Non-empty DataFrame or sequence of row mappings.
        num_splits: Number of splits to draw (>= 1).
        holdout_size_or_fraction: Held-out fraction in (0, 1), or an integer
            row count in (0, n_rows).
        random_seed: Seed for reproducibility.

    Returns:
        ResampleCollection of num_splits splits.

    Raises:
        InvalidParameter: On an empty dataset, num_splits < 1, or a holdout
            outside its valid range.
    """
    if isinstance(num_splits, (bool, np.bool_)) or not isinstance(num_splits, Integral):
        raise InvalidParameter(f"num_splits must be an integer, got {num_splits!r}")
    if num_splits < 1:
        raise InvalidParameter(f"num_splits must be >= 1, got {num_splits}")

    data = _prepare_dataset(dataset)
    n_rows = len(data)
    n_test = _resolve_holdout(holdout_size_or_fraction, n_rows)

    rng = np.random.default_rng(random_seed)
    all_indices = np.arange(n_rows)
    splits: List[Split] = []

    for split_id in range(int(num_splits)):
        test_idx = np.sort(rng.choice(n_rows, size=n_test, replace=False))
        train_idx = np.setdiff1d(all_indices, test_idx, assume_unique=True)
        splits.append(Split(
            split_id=split_id,
            data=data,
            train_indices=_frozen_indices(train_idx),
            test_indices=_frozen_indices(test_idx),
        ))

    logger.debug(
        "Generated %d Monte Carlo splits: %d rows, %d held out per split",
        num_splits, n_rows, n_test,
    )
    return ResampleCollection(data=data, splits=tuple(splits), method="mc")


def generate_kfold_splits(
    dataset: pd.DataFrame | Sequence[Mapping],
    n_folds: int = 5,
    random_seed: int = 42,
) -> ResampleCollection:
    """Create shuffled KFold train/test splits.

    Args:
        dataset: Non-empty DataFrame or sequence of row mappings.
        n_folds: Number of folds, between 2 and the number of rows.
        random_seed: Random seed for reproducibility.

    Returns:
        ResampleCollection with one split per fold.
    """
    data = _prepare_dataset(dataset)
    n_rows = len(data)
    if isinstance(n_folds, (bool, np.bool_)) or not isinstance(n_folds, Integral):
        raise InvalidParameter(f"n_folds must be an integer, got {n_folds!r}")
    if not 2 <= n_folds <= n_rows:
        raise InvalidParameter(f"n_folds must be in [2, {n_rows}], got {n_folds}")

    kf = KFold(n_splits=n_folds, shuffle=True, random_state=random_seed)
    splits = tuple(
        Split(
            split_id=fold_id,
            data=data,
            train_indices=_frozen_indices(train_idx),
            test_indices=_frozen_indices(test_idx),
        )
        for fold_id, (train_idx, test_idx) in enumerate(kf.split(np.arange(n_rows)))
    )
    return ResampleCollection(data=data, splits=splits, method="kfold")


def generate_loo_splits(dataset: pd.DataFrame | Sequence[Mapping]) -> ResampleCollection:
    """Create leave-one-out splits (one per row)."""
    data = _prepare_dataset(dataset)
    if len(data) < 2:
        raise InvalidParameter("leave-one-out needs at least 2 rows")

    splits = tuple(
        Split(
            split_id=i,
            data=data,
            train_indices=_frozen_indices(train_idx),
            test_indices=_frozen_indices(test_idx),
        )
        for i, (train_idx, test_idx) in enumerate(LeaveOneOut().split(np.arange(len(data))))
    )
    return ResampleCollection(data=data, splits=splits, method="loo")
