"""
Genetic operators for pixel-evolve.
Array-level seeding, mutation and uniform crossover of RGB pixel grids.
"""

import logging
from typing import Sequence

import numpy as np

from evolution.errors import require
from evolution.interfaces import CROSSOVER_PROBABILITY, RGB

logger = logging.getLogger(__name__)


def validate_rate(rate: float) -> None:
    require(0.0 <= rate <= 1.0, "Mutation rate must be within [0, 1]", rate=rate)


def validate_dimensions(width: int, height: int) -> None:
    require(
        width > 0 and height > 0,
        "Image dimensions must be positive",
        width=width,
        height=height,
    )


def random_pixels(
    width: int, height: int, palette: Sequence[RGB], rng: np.random.Generator
) -> np.ndarray:
    """
    Build a grid where every pixel is drawn uniformly from the palette.

    Args:
        width: Grid width in pixels
        height: Grid height in pixels
        palette: Non-empty sequence of RGB colors
        rng: Random source owned by the calling task

    Returns:
        New height x width x 3 uint8 array
    """
    validate_dimensions(width, height)
    require(len(palette) > 0, "Palette must contain at least one color")
    colors = np.asarray(palette, dtype=np.uint8)
    indices = rng.integers(0, len(colors), size=(height, width))
    return colors[indices]


def mutate_pixels(pixels: np.ndarray, rate: float, rng: np.random.Generator) -> int:
    """
    Replace each pixel, with probability ``rate``, by a uniform random color.

    Writes into ``pixels`` and returns the number of replaced pixels.
    """
    validate_rate(rate)
    if rate == 0.0:
        return 0

    height, width = pixels.shape[:2]
    mask = rng.random((height, width)) < rate
    count = int(np.count_nonzero(mask))
    if count:
        pixels[mask] = rng.integers(0, 256, size=(count, 3), dtype=np.uint8)
    return count


def uniform_crossover(
    first: np.ndarray, second: np.ndarray, rng: np.random.Generator
) -> np.ndarray:
    """
    Combine two grids by an independent coin flip per pixel.

    Each pixel comes from ``first`` with probability 0.5 and from ``second``
    otherwise. The result is always a newly allocated array.
    """
    require(
        first.shape == second.shape,
        "Crossover parents must have the same shape",
        first_shape=list(first.shape),
        second_shape=list(second.shape),
    )
    height, width = first.shape[:2]
    take_first = rng.random((height, width)) < CROSSOVER_PROBABILITY
    return np.where(take_first[..., np.newaxis], first, second)
