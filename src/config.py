"""
Configuration management using pydantic.

All config classes use pydantic for validation and YAML loading.
Config files are stored in configs/ directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


# Base path for config files
CONFIGS_DIR = Path(__file__).parent.parent / "configs"


def load_yaml(path: Path | str) -> dict[str, Any]:
    """Load a YAML file and return as dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


class SimulationConfig(BaseModel):
    """Configuration for simulated regression data.

    The linear generator uses intercept/slope; the nonlinear one replaces
    the slope term with amplitude * sin(frequency * x).
    """

    random_seed: int = 42
    n_samples: int = 100
    x_min: float = 0.0
    x_max: float = 1.0
    intercept: float = 2.0
    slope: float = 3.0
    noise_sd: float = 0.5
    amplitude: float = 1.5
    frequency: float = 6.0

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> SimulationConfig:
        """Load config from YAML file.

        Args:
            path: Path to YAML file. If None, uses configs/simulation.yaml.
        """
        if path is None:
            path = CONFIGS_DIR / "simulation.yaml"
        return cls(**load_yaml(path))


class ResampleConfig(BaseModel):
    """Configuration for repeated random train/test splitting."""

    n_splits: int = 100
    holdout: float = 0.2  # Fraction in (0, 1), or a row count if >= 1
    random_seed: int = 42

    def holdout_value(self) -> float | int:
        """Return holdout as an int row count when given as a whole number >= 1."""
        if self.holdout >= 1 and float(self.holdout).is_integer():
            return int(self.holdout)
        return self.holdout


class SmoothingConfig(BaseModel):
    """Penalties for the smoothing-spline models.

    smooth_lam=None lets generalized cross-validation pick the penalty.
    wiggly_lam is deliberately tiny so the spline chases the noise.
    """

    smooth_lam: Optional[float] = None
    wiggly_lam: float = 1e-8


class CVExperimentConfig(BaseModel):
    """Configuration for the linear vs smooth vs wiggly comparison."""

    response: str = "y"
    predictor: str = "x"
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    resample: ResampleConfig = Field(default_factory=ResampleConfig)
    smoothing: SmoothingConfig = Field(default_factory=SmoothingConfig)
    metrics: List[str] = Field(default=["rmse", "mae", "rsquare"])

    @field_validator("metrics")
    @classmethod
    def _known_metrics(cls, value: List[str]) -> List[str]:
        from src.evaluation.metrics import METRIC_FUNCS

        if not value:
            raise ValueError("metrics must name at least one metric")
        metrics = [m.lower() for m in value]
        unknown = [m for m in metrics if m not in METRIC_FUNCS]
        if unknown:
            raise ValueError(f"Unknown metric(s): {unknown}. Supported: {list(METRIC_FUNCS)}")
        return metrics

    @property
    def primary_metric(self) -> str:
        """Metric used for plots and the printed summary."""
        return self.metrics[0]

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> CVExperimentConfig:
        """Load config from YAML file.

        Args:
            path: Path to YAML file. If None, uses configs/cv_experiment.yaml.
        """
        if path is None:
            path = CONFIGS_DIR / "cv_experiment.yaml"
        return cls(**load_yaml(path))


class RegressionConfig(BaseModel):
    """Configuration for the factor / interaction / mixed-model walkthrough."""

    random_seed: int = 42
    n_samples: int = 400
    levels: List[str] = Field(default=["a", "b", "c"])
    group_intercepts: List[float] = Field(default=[-1.0, 0.0, 1.0])
    group_slopes: List[float] = Field(default=[0.5, 1.5, -0.5])
    n_groups: int = 8  # Clusters for the by-group and mixed-effects fits
    n_per_group: int = 25
    group_sd: float = 1.0  # Spread of the random intercepts
    noise_sd: float = 0.5
    conf_level: float = 0.95

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> "RegressionConfig":
        """Load config from YAML file.

        Args:
            path: Path to YAML file. If None, uses configs/regression.yaml.
        """
        if path is None:
            path = CONFIGS_DIR / "regression.yaml"
        return cls(**load_yaml(path))
