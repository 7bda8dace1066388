"""
Evolution module for pixel-evolve.
Provides the genetic algorithm that evolves pixel grids toward a target image.
"""

from .engine import EvolutionConfig, EvolutionEngine, EvolutionResult
from .errors import (
    ImageLoadError,
    InvalidConfigError,
    PixelEvolveError,
    SnapshotWriteError,
)
from .fitness import pixel_distance_loss
from .genome import DEFAULT_PALETTE, Genome, Palette
from .interfaces import AcceptancePolicy
from .population import GenerationOutcome, Population, PopulationConfig
from .selection import select_parents, should_accept

__all__ = [
    "EvolutionEngine",
    "EvolutionConfig",
    "EvolutionResult",
    "Population",
    "PopulationConfig",
    "GenerationOutcome",
    "Genome",
    "Palette",
    "DEFAULT_PALETTE",
    "AcceptancePolicy",
    "pixel_distance_loss",
    "select_parents",
    "should_accept",
    "PixelEvolveError",
    "InvalidConfigError",
    "ImageLoadError",
    "SnapshotWriteError",
]
