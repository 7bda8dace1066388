"""
Fitness evaluation for pixel-evolve.
Scores a pixel grid by its summed per-pixel RGB distance to the target.
"""

import logging

import numpy as np

from evolution.errors import require
from evolution.interfaces import FITNESS_PRECISION

logger = logging.getLogger(__name__)


def pixel_distances(pixels: np.ndarray, target: np.ndarray) -> np.ndarray:
    """Euclidean RGB distance of every pixel to the matching target pixel."""
    require(
        pixels.shape == target.shape,
        "Pixel grid and target must have the same shape",
        pixels_shape=list(pixels.shape),
        target_shape=list(target.shape),
    )
    diff = pixels.astype(np.int32) - target.astype(np.int32)
    return np.sqrt(np.sum(diff * diff, axis=-1, dtype=np.int64))


def pixel_distance_loss(
    pixels: np.ndarray, target: np.ndarray, precision: int = FITNESS_PRECISION
) -> float:
    """
    Loss of a pixel grid against the target; lower is better.

    The sum of per-pixel Euclidean distances is rounded so that comparisons
    are stable across platforms. Identical grids score exactly 0.
    """
    total = float(np.sum(pixel_distances(pixels, target)))
    return round(total, precision)


def mean_fitness(genomes) -> float:
    """Mean fitness of a non-empty sequence of genomes."""
    require(len(genomes) > 0, "Cannot average the fitness of an empty generation")
    return float(np.mean([g.fitness for g in genomes]))
