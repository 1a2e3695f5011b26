"""
Penalized cubic smoothing spline for one predictor.

Minimizes sum(w * (y - f(x))^2) + lam * integral(f''(x)^2).

- lam=None: penalty chosen by generalized cross-validation (a smooth fit)
- lam tiny: the spline nearly interpolates the training points, which is
  the deliberately over-fit "wiggly" model
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pandas as pd
from scipy.interpolate import make_smoothing_spline

from src.data.tables import require_columns
from src.exceptions import InvalidParameter

MIN_DISTINCT_X = 5  # make_smoothing_spline needs at least 5 abscissas


def collapse_ties(x: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Average y over repeated x values.

    The spline needs strictly increasing abscissas. Each distinct x keeps
    the mean response of its rows and a weight equal to the row count.

    Returns:
        (x_unique, y_mean, weights), sorted by x.
    """
    x_unique, inverse, counts = np.unique(x, return_inverse=True, return_counts=True)
    y_mean = np.bincount(inverse, weights=y) / counts
    return x_unique, y_mean, counts.astype(np.float64)


class SmoothModel:
    """Smoothing-spline regression of response on a single predictor."""

    def __init__(self, response: str, predictor: str, lam: Optional[float] = None):
        if lam is not None and lam < 0:
            raise InvalidParameter(f"lam must be non-negative, got {lam}")
        self.response = response
        self.predictor = predictor
        self.lam = lam
        self._spline = None

    def fit(self, frame: pd.DataFrame) -> "SmoothModel":
        """Fit the spline on a training table.

        Rows with a missing predictor or response are dropped.

        Raises:
            MissingColumn: If response or predictor is absent.
            InvalidParameter: If fewer than 5 distinct predictor values remain.
        """
        require_columns(frame, [self.response, self.predictor])
        subset = frame[[self.predictor, self.response]].dropna()
        x = subset[self.predictor].to_numpy(dtype=np.float64)
        y = subset[self.response].to_numpy(dtype=np.float64)

        x_u, y_u, w = collapse_ties(x, y)
        if len(x_u) < MIN_DISTINCT_X:
            raise InvalidParameter(
                f"Smoothing spline needs at least {MIN_DISTINCT_X} distinct "
                f"values of {self.predictor!r}, got {len(x_u)}"
            )

        self._spline = make_smoothing_spline(x_u, y_u, w=w, lam=self.lam)
        return self

    def predict(self, frame: pd.DataFrame) -> np.ndarray:
        """Evaluate the fitted spline at frame[predictor].

        Raises:
            RuntimeError: If model has not been fitted.
        """
        if self._spline is None:
            raise RuntimeError("Model has not been fitted. Call fit() first.")
        require_columns(frame, [self.predictor])
        x = frame[self.predictor].to_numpy(dtype=np.float64)
        return np.asarray(self._spline(x), dtype=np.float64)

    def __repr__(self) -> str:
        return f"SmoothModel({self.response!r} ~ s({self.predictor!r}), lam={self.lam})"
