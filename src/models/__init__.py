"""Model implementations for resampled comparison and interpretation."""

from src.config import SmoothingConfig
from src.models.linear_model import LinearModel
from src.models.registry import MODEL_KINDS, build_model, model_factories
from src.models.smooth_model import SmoothModel

__all__ = [
    "MODEL_KINDS",
    "LinearModel",
    "SmoothModel",
    "SmoothingConfig",
    "build_model",
    "model_factories",
]
