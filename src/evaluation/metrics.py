"""
Held-out error metrics for regression models.

Implements:
- RMSE: Root mean squared error
- MAE: Mean absolute error
- R-squared: 1 - SS_res / SS_tot on the scored rows
"""

from __future__ import annotations

from typing import Dict, Iterable

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

from src.data.tables import require_columns


def compute_rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Compute root mean squared error.

    Lower is better.

    Args:
        y_true: Observed response.
        y_pred: Predicted response.

    Returns:
        RMSE in the units of the response.
    """
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


def compute_mae(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Compute mean absolute error."""
    return float(mean_absolute_error(y_true, y_pred))


def compute_rsquare(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Compute coefficient of determination on the scored rows.

    Can be negative on held-out data when the model does worse than the
    mean of the held-out response. Undefined (NaN) for a single row.
    """
    if len(y_true) < 2:
        return float("nan")
    return float(r2_score(y_true, y_pred))


METRIC_FUNCS = {
    "rmse": compute_rmse,
    "mae": compute_mae,
    "rsquare": compute_rsquare,
}


def compute_metrics(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    metrics: Iterable[str],
) -> Dict[str, float]:
    """Compute multiple evaluation metrics.

    Args:
        y_true: Observed response.
        y_pred: Predicted response.
        metrics: Metric names. Supported: "rmse", "mae", "rsquare".

    Returns:
        Dictionary mapping metric name to value.
    """
    y_true = np.asarray(y_true, dtype=np.float64)
    y_pred = np.asarray(y_pred, dtype=np.float64)
    if y_true.shape != y_pred.shape:
        raise ValueError(f"Shape mismatch: y_true={y_true.shape}, y_pred={y_pred.shape}")

    results = {}
    for metric in metrics:
        metric_lower = metric.lower()
        if metric_lower not in METRIC_FUNCS:
            raise ValueError(f"Unknown metric: {metric}. Supported: {list(METRIC_FUNCS.keys())}")
        results[metric_lower] = METRIC_FUNCS[metric_lower](y_true, y_pred)

    return results


def score_model(
    model,
    frame: pd.DataFrame,
    response: str,
    metrics: Iterable[str] = ("rmse",),
) -> Dict[str, float]:
    """Predict frame with a fitted model and score against frame[response]."""
    require_columns(frame, [response])
    y_pred = model.predict(frame)
    return compute_metrics(frame[response].to_numpy(), y_pred, metrics)
