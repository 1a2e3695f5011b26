"""
Presentational figures for the model-comparison report.

Figures are written straight to disk with the non-interactive Agg backend
so the batch scripts run headless.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from src.data.tables import require_columns  # noqa: E402
from src.exceptions import InvalidParameter  # noqa: E402

logger = logging.getLogger(__name__)


def plot_score_distributions(
    scores: pd.DataFrame,
    output_path: Path | str,
    metric: str = "rmse",
) -> Path:
    """Box plot of per-split held-out scores, one box per model.

    Args:
        scores: Output of cross_validate().
        output_path: PNG file to write.
        metric: Score column to plot.

    Returns:
        Path of the written figure.

    Raises:
        InvalidParameter: If scores has no rows.
    """
    require_columns(scores, ["model", metric])
    if scores.empty:
        raise InvalidParameter("no scores to plot")
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    models = list(dict.fromkeys(scores["model"]))
    data = [scores.loc[scores["model"] == m, metric].to_numpy() for m in models]

    fig, ax = plt.subplots(figsize=(7, 4.5))
    ax.boxplot(data)
    ax.set_xticks(range(1, len(models) + 1))
    ax.set_xticklabels(models)
    for i, values in enumerate(data, start=1):
        jitter = np.random.default_rng(i).uniform(-0.12, 0.12, size=len(values))
        ax.scatter(np.full(len(values), i) + jitter, values, s=8, alpha=0.35)
    ax.set_ylabel(f"held-out {metric}")
    ax.set_title(f"held-out {metric} by model (n={len(data[0])} per model)")
    ax.grid(True, axis="y", alpha=0.3)

    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    logger.info("Saved score distribution plot to %s", output_path)
    return output_path


def plot_fitted_curves(
    data: pd.DataFrame,
    response: str,
    predictor: str,
    models: Mapping[str, object],
    output_path: Path | str,
    n_points: int = 200,
) -> Path:
    """Scatter the data and overlay each fitted model's curve.

    Args:
        data: Table with response and predictor.
        response: Response column.
        predictor: Predictor column.
        models: Name -> fitted model with predict(frame).
        output_path: PNG file to write.
        n_points: Points along the predictor range per curve.
    """
    require_columns(data, [response, predictor])
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    grid = pd.DataFrame({
        predictor: np.linspace(data[predictor].min(), data[predictor].max(), n_points)
    })

    fig, ax = plt.subplots(figsize=(7, 4.5))
    ax.scatter(data[predictor], data[response], s=12, color="grey", alpha=0.6, label="data")
    for name, model in models.items():
        ax.plot(grid[predictor], model.predict(grid), linewidth=1.8, label=name)
    ax.set_xlabel(predictor)
    ax.set_ylabel(response)
    ax.legend()

    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    logger.info("Saved fitted curve plot to %s", output_path)
    return output_path
