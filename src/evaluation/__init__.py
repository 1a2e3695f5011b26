"""Evaluation module for held-out error metrics and cross-validation."""

from src.evaluation.cross_validation import cross_validate, summarize_scores
from src.evaluation.metrics import compute_metrics, score_model

__all__ = [
    "compute_metrics",
    "cross_validate",
    "score_model",
    "summarize_scores",
]
