import numpy as np
import pandas as pd
import pytest

from src.evaluation.metrics import (
    compute_mae,
    compute_metrics,
    compute_rmse,
    compute_rsquare,
    score_model,
)
from src.exceptions import MissingColumn
from src.models.linear_model import LinearModel


def test_rmse():
    assert compute_rmse(np.array([1.0, 2.0, 3.0]), np.array([1.0, 2.0, 5.0])) == pytest.approx(
        np.sqrt(4.0 / 3.0)
    )


def test_mae():
    assert compute_mae(np.array([0.0, 0.0]), np.array([1.0, -3.0])) == pytest.approx(2.0)


def test_rsquare_perfect_and_single_row():
    y = np.array([1.0, 2.0, 3.0])

    assert compute_rsquare(y, y) == pytest.approx(1.0)
    assert np.isnan(compute_rsquare(np.array([1.0]), np.array([2.0])))


def test_compute_metrics_case_insensitive():
    result = compute_metrics([1.0, 2.0], [1.0, 4.0], ["RMSE", "mae"])

    assert set(result) == {"rmse", "mae"}
    assert result["mae"] == pytest.approx(1.0)


def test_compute_metrics_unknown():
    with pytest.raises(ValueError, match="Unknown metric"):
        compute_metrics([1.0], [1.0], ["auc"])


def test_compute_metrics_shape_mismatch():
    with pytest.raises(ValueError, match="Shape mismatch"):
        compute_metrics([1.0, 2.0], [1.0], ["rmse"])


def test_score_model(linear_frame):
    model = LinearModel("y ~ x").fit(linear_frame)

    scores = score_model(model, linear_frame, "y", ["rmse", "rsquare"])

    assert scores["rmse"] == pytest.approx(0.5, abs=0.15)
    assert scores["rsquare"] > 0.5


def test_score_model_missing_response(linear_frame):
    model = LinearModel("y ~ x").fit(linear_frame)

    with pytest.raises(MissingColumn):
        score_model(model, pd.DataFrame({"x": [0.1]}), "y")
