"""
Ordinary least squares model (formula interface).

Used as the "linear" candidate in cross-validated model comparison.
Factor and interaction terms are written in the formula, e.g.
"y ~ x * C(group)".
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf

from src.models.formula import check_formula_columns

logger = logging.getLogger(__name__)


class LinearModel:
    """OLS regression fitted through statsmodels' formula API."""

    def __init__(self, formula: str):
        """Initialize model with a formula.

        Args:
            formula: patsy formula, e.g. "y ~ x".
        """
        self.formula = formula
        self._result = None

    def fit(self, frame: pd.DataFrame) -> "LinearModel":
        """Fit model on a training table.

        Args:
            frame: Table containing every variable in the formula.

        Returns:
            Self for chaining.

        Raises:
            MissingColumn: If a formula variable is absent.
        """
        check_formula_columns(self.formula, frame)
        self._result = smf.ols(self.formula, data=frame).fit()
        logger.debug("Fitted %s on %d rows", self.formula, int(self._result.nobs))
        return self

    def predict(self, frame: pd.DataFrame) -> np.ndarray:
        """Predict the response for each row of frame.

        Raises:
            RuntimeError: If model has not been fitted.
        """
        if self._result is None:
            raise RuntimeError("Model has not been fitted. Call fit() first.")
        check_formula_columns(self.formula, frame, side="rhs")
        return np.asarray(self._result.predict(frame), dtype=np.float64)

    @property
    def result(self):
        """The underlying statsmodels results object."""
        if self._result is None:
            raise RuntimeError("Model has not been fitted. Call fit() first.")
        return self._result

    @property
    def params(self) -> pd.Series:
        return self.result.params

    def __repr__(self) -> str:
        return f"LinearModel({self.formula!r})"
