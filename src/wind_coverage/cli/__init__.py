"""CLI entry points for the wind coverage estimator."""

from __future__ import annotations

from .main import main, build_parser

__all__ = ["main", "build_parser"]
