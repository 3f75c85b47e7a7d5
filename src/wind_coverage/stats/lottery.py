"""Seeded allocation of powered buildings on a raster grid.

Coverage is a single ratio; maps need to show *which* buildings receive
power. Each pixel draws a uniform number from a seeded generator and is
marked as powered when it holds a qualifying building and its draw falls
below the capped coverage ratio. The expected powered fraction therefore
matches the ratio while the pattern stays reproducible for a given seed.
"""

from __future__ import annotations

import numpy as np

__all__ = ["DEFAULT_LOTTERY_SEED", "allocate_powered_pixels", "draw_lottery_grid"]

DEFAULT_LOTTERY_SEED = 42


def draw_lottery_grid(shape: tuple[int, ...], *, seed: int = DEFAULT_LOTTERY_SEED) -> np.ndarray:
    """Return uniform draws in ``[0, 1)`` for every pixel of ``shape``."""

    rng = np.random.default_rng(seed)
    return rng.random(shape)


def allocate_powered_pixels(
    building_mask: np.ndarray,
    capped_ratio: float,
    *,
    seed: int = DEFAULT_LOTTERY_SEED,
) -> np.ndarray:
    """Return a boolean grid of building pixels that win the lottery."""

    if not 0.0 <= capped_ratio <= 1.0:
        raise ValueError("capped_ratio must lie within [0, 1].")

    mask = np.asarray(building_mask, dtype=bool)
    draws = draw_lottery_grid(mask.shape, seed=seed)
    return mask & (draws < capped_ratio)
