import numpy as np
import pandas as pd
import pytest

from src.config import CVExperimentConfig, RegressionConfig, SimulationConfig
from src.io.synthetic_generator import SyntheticGenerator


@pytest.fixture
def linear_frame():
    """100 rows of y = 2 + 3x + N(0, 0.5)."""
    return SyntheticGenerator(SimulationConfig(random_seed=0, n_samples=100)).linear()


@pytest.fixture
def nonlinear_frame():
    """200 rows of a sine signal plus noise."""
    cfg = SimulationConfig(random_seed=1, n_samples=200, noise_sd=0.3)
    return SyntheticGenerator(cfg).nonlinear()


@pytest.fixture
def small_frame():
    """Ten rows with a numeric and a categorical column."""
    return pd.DataFrame({
        "id": np.arange(10),
        "x": np.linspace(0.0, 1.0, 10),
        "y": np.linspace(1.0, 4.0, 10),
        "group": list("ababababab"),
    })


@pytest.fixture
def cv_config():
    """Small comparison config: 20 splits keeps tests fast."""
    return CVExperimentConfig(
        simulation=SimulationConfig(random_seed=3, n_samples=100),
        resample={"n_splits": 20, "holdout": 0.2, "random_seed": 5},
        metrics=["rmse", "mae"],
    )


@pytest.fixture
def regression_config():
    return RegressionConfig(random_seed=11, n_samples=600, n_groups=6, n_per_group=30)
