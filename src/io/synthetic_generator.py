"""
Synthetic data generators for the model-comparison walkthroughs.

- SyntheticGenerator: one predictor x and a continuous response y with a
  known linear or sinusoidal signal plus Gaussian noise.
- FactorDataGenerator: a categorical factor interacting with x in a
  logistic model, and clustered data with random intercepts.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from src.config import RegressionConfig, SimulationConfig
from src.exceptions import InvalidParameter


class SyntheticGenerator:
    """
    Generates (x, y) regression data with a known signal.

    x is drawn from U(x_min, x_max); noise is N(0, noise_sd). The generator
    keeps one random stream, so successive calls return different draws and
    the whole sequence is reproducible from cfg.random_seed.
    """

    def __init__(self, cfg: SimulationConfig):
        self.cfg = cfg
        self.rng = np.random.default_rng(cfg.random_seed)

    def _sample_x(self, n_samples: int) -> np.ndarray:
        if n_samples < 1:
            raise InvalidParameter(f"n_samples must be >= 1, got {n_samples}")
        return self.rng.uniform(self.cfg.x_min, self.cfg.x_max, size=n_samples)

    def _noise(self, n_samples: int) -> np.ndarray:
        return self.rng.normal(0.0, self.cfg.noise_sd, size=n_samples)

    def linear(self, n_samples: int | None = None) -> pd.DataFrame:
        """
        y = intercept + slope * x + noise.

        Args:
            n_samples: Rows to generate. Defaults to cfg.n_samples.

        Returns:
            DataFrame with columns id, x, y.
        """
        n = n_samples or self.cfg.n_samples
        x = self._sample_x(n)
        y = self.cfg.intercept + self.cfg.slope * x + self._noise(n)
        return pd.DataFrame({"id": np.arange(n), "x": x, "y": y})

    def nonlinear(self, n_samples: int | None = None) -> pd.DataFrame:
        """
        y = intercept + amplitude * sin(frequency * x) + noise.

        A linear fit underfits this curve; a smoothing spline recovers it.
        """
        n = n_samples or self.cfg.n_samples
        x = self._sample_x(n)
        signal = self.cfg.amplitude * np.sin(self.cfg.frequency * x)
        y = self.cfg.intercept + signal + self._noise(n)
        return pd.DataFrame({"id": np.arange(n), "x": x, "y": y})

    def true_curve(self, x: np.ndarray, kind: str = "linear") -> np.ndarray:
        """Noise-free response for plotting against fitted curves."""
        if kind == "linear":
            return self.cfg.intercept + self.cfg.slope * x
        if kind == "nonlinear":
            return self.cfg.intercept + self.cfg.amplitude * np.sin(self.cfg.frequency * x)
        raise InvalidParameter(f"Unknown curve kind: {kind}")


class FactorDataGenerator:
    """Generates data with factor variables and grouping structure."""

    def __init__(self, cfg: RegressionConfig):
        if not (len(cfg.levels) == len(cfg.group_intercepts) == len(cfg.group_slopes)):
            raise InvalidParameter(
                "levels, group_intercepts and group_slopes must have equal length"
            )
        self.cfg = cfg
        self.rng = np.random.default_rng(cfg.random_seed)

    def factor_logistic(self, n_samples: int | None = None) -> pd.DataFrame:
        """
        Binary outcome from a logistic model with a group x interaction.

        logit P(y=1) = intercept[group] + slope[group] * x

        Returns:
            DataFrame with x (numeric), group (categorical) and y (0/1).
        """
        n = n_samples or self.cfg.n_samples
        levels = np.asarray(self.cfg.levels)
        codes = self.rng.integers(0, len(levels), size=n)
        x = self.rng.normal(0.0, 1.0, size=n)

        eta = np.asarray(self.cfg.group_intercepts)[codes] + np.asarray(self.cfg.group_slopes)[codes] * x
        prob = 1.0 / (1.0 + np.exp(-eta))
        y = self.rng.binomial(1, prob)

        return pd.DataFrame({
            "x": x,
            "group": pd.Categorical(levels[codes], categories=list(levels)),
            "y": y,
        })

    def grouped_linear(
        self,
        n_groups: int | None = None,
        n_per_group: int | None = None,
    ) -> pd.DataFrame:
        """
        Clustered data with a random intercept per cluster.

        y = 1 + 2 * x + u[cluster] + noise, u ~ N(0, group_sd)

        Returns:
            DataFrame with cluster (string label), x and y.
        """
        n_groups = n_groups or self.cfg.n_groups
        n_per_group = n_per_group or self.cfg.n_per_group
        if n_groups < 1 or n_per_group < 1:
            raise InvalidParameter("n_groups and n_per_group must be >= 1")

        u = self.rng.normal(0.0, self.cfg.group_sd, size=n_groups)
        cluster_idx = np.repeat(np.arange(n_groups), n_per_group)
        x = self.rng.uniform(0.0, 1.0, size=len(cluster_idx))
        noise = self.rng.normal(0.0, self.cfg.noise_sd, size=len(cluster_idx))
        y = 1.0 + 2.0 * x + u[cluster_idx] + noise

        return pd.DataFrame({
            "cluster": [f"g{i:02d}" for i in cluster_idx],
            "x": x,
            "y": y,
        })
