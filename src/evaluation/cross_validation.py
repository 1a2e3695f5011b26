"""
Cross-validated comparison of candidate models.

For each split in a ResampleCollection:
- materialize the train and test rows
- fit a fresh model from every factory on train
- score it on the held-out test rows

Rows are written per (split, model) and never aggregated here;
summarize_scores() does the aggregation.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Mapping

import pandas as pd

from src.data.splitters import ResampleCollection
from src.data.tables import require_columns
from src.evaluation.metrics import score_model
from src.exceptions import InvalidParameter

logger = logging.getLogger(__name__)


def cross_validate(
    collection: ResampleCollection,
    models: Mapping[str, Callable[[], object]],
    response: str,
    metrics: Iterable[str] = ("rmse",),
    show_progress: bool = False,
) -> pd.DataFrame:
    """Fit and score every model on every split.

    Args:
        collection: Splits over one dataset.
        models: Model name -> zero-argument factory returning an unfitted
            model with fit(frame) and predict(frame).
        response: Response column scored on the held-out rows.
        metrics: Metric names passed to compute_metrics.
        show_progress: Whether to show a progress bar.

    Returns:
        DataFrame with split_id, model, n_train, n_test and one column per
        metric; one row per (split, model).

    Raises:
        InvalidParameter: If no models are given.
        MissingColumn: If response is absent from the dataset.
    """
    if not models:
        raise InvalidParameter("cross_validate needs at least one model")
    require_columns(collection.data, [response])
    metrics = list(metrics)

    if show_progress:
        from tqdm import tqdm
        iterator = tqdm(collection, desc="CV splits", total=len(collection))
    else:
        iterator = collection

    rows: List[dict] = []
    for split in iterator:
        train_df, test_df = split.materialize()
        for name, factory in models.items():
            model = factory()
            model.fit(train_df)
            scores = score_model(model, test_df, response, metrics)
            rows.append({
                "split_id": split.split_id,
                "model": name,
                "n_train": split.n_train,
                "n_test": split.n_test,
                **scores,
            })
        logger.debug("Scored split %d", split.split_id)

    logger.info(
        "Cross-validated %d models over %d %s splits",
        len(models), len(collection), collection.method,
    )
    return pd.DataFrame(rows)


def summarize_scores(scores: pd.DataFrame, metric: str = "rmse") -> pd.DataFrame:
    """Aggregate per-split scores into one row per model.

    Returns:
        DataFrame indexed by position with model, n_splits, mean, std, var,
        min, median, max, sorted by mean (best first for error metrics).
    """
    require_columns(scores, ["model", metric])
    grouped = scores.groupby("model", sort=False)[metric]
    summary = grouped.agg(
        n_splits="count",
        mean="mean",
        std="std",
        var="var",
        min="min",
        median="median",
        max="max",
    )
    summary.insert(0, "metric", metric)
    return summary.sort_values("mean").reset_index()
