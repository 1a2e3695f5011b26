"""Plots of cross-validation scores and fitted curves."""

from src.reporting.plots import plot_fitted_curves, plot_score_distributions

__all__ = ["plot_fitted_curves", "plot_score_distributions"]
