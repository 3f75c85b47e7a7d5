"""Exceptions raised by the wind coverage estimator."""

from __future__ import annotations

__all__ = ["NoDataError", "NoWindDataError", "InvalidScenarioError"]


class NoDataError(ValueError):
    """Raised when an aggregation is requested over an empty set of records."""


class NoWindDataError(NoDataError):
    """Raised when the wind source returns no samples for a point and date range."""


class InvalidScenarioError(ValueError):
    """Raised when the turbine count or household load is outside its valid range."""
