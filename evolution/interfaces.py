"""pixel-evolve: Core Interface Definitions"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Tuple, Union

import numpy as np

PathLike = Union[str, Path]
RGB = Tuple[int, int, int]

# Enumerations


class AcceptancePolicy(Enum):
    """Statistic compared between current and offspring generations."""

    BEST = "best"
    MEAN_TOP_K = "mean_top_k"


# Collaborator Interfaces


class ImageLoader(ABC):
    """Reads a raster image into a height x width x 3 uint8 grid."""

    @abstractmethod
    def load(self, path: PathLike) -> np.ndarray:
        pass


class ImageWriter(ABC):
    """Persists a pixel grid as a raster image."""

    @abstractmethod
    def write(self, pixels: np.ndarray, path: PathLike) -> Path:
        pass


class ProgressReporter(ABC):
    """Observes generation progress; has no effect on the algorithm."""

    @abstractmethod
    def report(
        self,
        generation: int,
        fitness: float,
        parent_pool_size: int,
        genome_pool_size: int,
    ) -> None:
        pass


# Constants

DEFAULT_PARENT_POOL_SIZE = 5
DEFAULT_MUTATION_RATE = 0.01
DEFAULT_MAX_GENERATIONS = 1000
FITNESS_PRECISION = 4
CROSSOVER_PROBABILITY = 0.5
