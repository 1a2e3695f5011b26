"""Data input/output utilities."""

from src.config import RegressionConfig, SimulationConfig
from src.io.synthetic_generator import FactorDataGenerator, SyntheticGenerator

__all__ = [
    "FactorDataGenerator",
    "RegressionConfig",
    "SimulationConfig",
    "SyntheticGenerator",
]
