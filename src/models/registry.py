"""Named candidate models for cross-validated comparison."""

from __future__ import annotations

from functools import partial
from typing import Callable, Dict, Iterable

from src.config import SmoothingConfig
from src.exceptions import InvalidParameter
from src.models.formula import quote_column
from src.models.linear_model import LinearModel
from src.models.smooth_model import SmoothModel

MODEL_KINDS = ("linear", "smooth", "wiggly")


def build_model(
    kind: str,
    response: str,
    predictor: str,
    smoothing: SmoothingConfig | None = None,
) -> LinearModel | SmoothModel:
    """Create an unfitted model of the given kind.

    Args:
        kind: "linear", "smooth" or "wiggly".
        response: Response column name.
        predictor: Predictor column name.
        smoothing: Spline penalties. Uses defaults if None.

    Raises:
        InvalidParameter: If kind is unknown.
    """
    smoothing = smoothing or SmoothingConfig()
    kind = kind.lower()

    if kind == "linear":
        return LinearModel(f"{quote_column(response)} ~ {quote_column(predictor)}")
    if kind == "smooth":
        return SmoothModel(response, predictor, lam=smoothing.smooth_lam)
    if kind == "wiggly":
        return SmoothModel(response, predictor, lam=smoothing.wiggly_lam)

    raise InvalidParameter(f"Unknown model kind: {kind}. Supported: {list(MODEL_KINDS)}")


def model_factories(
    kinds: Iterable[str],
    response: str,
    predictor: str,
    smoothing: SmoothingConfig | None = None,
) -> Dict[str, Callable[[], LinearModel | SmoothModel]]:
    """Map each kind to a zero-argument factory producing a fresh model."""
    factories = {}
    for kind in kinds:
        build_model(kind, response, predictor, smoothing)  # validate eagerly
        factories[kind] = partial(build_model, kind, response, predictor, smoothing)
    return factories
