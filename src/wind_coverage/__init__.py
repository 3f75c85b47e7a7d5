"""Top-level package for the wind coverage estimator."""

from __future__ import annotations

from . import cli
from .errors import InvalidScenarioError, NoDataError, NoWindDataError
from .estimator import EvaluationResult, WindCoverageEstimator

__all__ = [
    "__version__",
    "cli",
    "EvaluationResult",
    "InvalidScenarioError",
    "NoDataError",
    "NoWindDataError",
    "WindCoverageEstimator",
]

__version__ = "0.1.0"
