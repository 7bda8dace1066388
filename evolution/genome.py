"""
Genome representation for pixel-evolve.
A genome is a candidate image plus its loss against a shared target.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Tuple
from uuid import UUID, uuid4

import numpy as np

from evolution.errors import require
from evolution.fitness import pixel_distance_loss
from evolution.interfaces import RGB
from evolution.operators import mutate_pixels, random_pixels, uniform_crossover

logger = logging.getLogger(__name__)

Palette = Tuple[RGB, ...]

DEFAULT_PALETTE: Palette = (
    (255, 0, 0),
    (0, 255, 0),
    (0, 0, 255),
)


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class Genome:
    """
    Candidate image with a cached fitness.

    Pixels are stored as a height x width x 3 uint8 array and only exposed
    read-only; every write goes through a method that recomputes fitness.
    """

    def __init__(
        self,
        pixels: np.ndarray,
        target: Optional["Genome"] = None,
        generation: int = 0,
        parent_ids: Sequence[UUID] = (),
    ):
        pixels = np.asarray(pixels)
        require(
            np.issubdtype(pixels.dtype, np.integer),
            "Pixel channels must be integers",
            dtype=str(pixels.dtype),
        )
        if pixels.dtype != np.uint8 and pixels.size:
            require(
                int(pixels.min()) >= 0 and int(pixels.max()) <= 255,
                "Pixel channels must be in [0, 255]",
                min=int(pixels.min()),
                max=int(pixels.max()),
            )
        require(
            pixels.ndim == 3 and pixels.shape[2] == 3,
            "Pixels must be a height x width x 3 grid",
            shape=list(pixels.shape),
        )
        require(
            pixels.shape[0] > 0 and pixels.shape[1] > 0,
            "Image dimensions must be positive",
            shape=list(pixels.shape),
        )

        self.id: UUID = uuid4()
        self.generation = generation
        self.parent_ids = list(parent_ids)
        self._pixels = np.array(pixels, dtype=np.uint8, copy=True)
        # A genome without a target is itself the target
        self.target: Genome = target if target is not None else self

        if self.target is self:
            self._pixels.flags.writeable = False
        else:
            require(
                self.target.shape == self.shape,
                "Genome dimensions must match the target",
                genome_shape=[self.width, self.height],
                target_shape=[self.target.width, self.target.height],
            )

        self._fitness = 0.0
        self.compute_fitness()

    @classmethod
    def from_pixels(cls, pixels: np.ndarray) -> "Genome":
        """Create a target genome from a loaded pixel grid."""
        return cls(pixels)

    @classmethod
    def initialize_random(
        cls,
        target: "Genome",
        rng: np.random.Generator,
        palette: Palette = DEFAULT_PALETTE,
    ) -> "Genome":
        """Seed a genome with colors drawn uniformly from the palette."""
        pixels = random_pixels(target.width, target.height, palette, rng)
        return cls(pixels, target=target)

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def pixels(self) -> np.ndarray:
        return _read_only(self._pixels)

    @property
    def fitness(self) -> float:
        return self._fitness

    @property
    def is_target(self) -> bool:
        return self.target is self

    def compute_fitness(self) -> float:
        """Recompute and cache the loss against the target."""
        if self.is_target:
            self._fitness = 0.0
        else:
            self._fitness = pixel_distance_loss(self._pixels, self.target._pixels)
        return self._fitness

    def mutate(self, rate: float, rng: np.random.Generator) -> int:
        """
        Replace each pixel with a random color with probability ``rate``.

        Only valid on a genome this caller owns (a freshly seeded genome);
        the target is never mutated.

        Returns:
            Number of mutated pixels
        """
        require(not self.is_target, "The target genome cannot be mutated")
        count = mutate_pixels(self._pixels, rate, rng)
        self.compute_fitness()
        return count

    def mate_with(
        self, partner: "Genome", mutation_rate: float, rng: np.random.Generator
    ) -> "Genome":
        """
        Produce a child by uniform crossover with ``partner`` followed by mutation.

        Both parents are left unchanged; the child owns a new pixel grid and
        is scored once, after mutation.
        """
        require(
            partner.target is self.target,
            "Parents must share the same target",
            genome_id=str(self.id),
            partner_id=str(partner.id),
        )
        pixels = uniform_crossover(self._pixels, partner._pixels, rng)
        mutate_pixels(pixels, mutation_rate, rng)
        return Genome(
            pixels,
            target=self.target,
            generation=max(self.generation, partner.generation) + 1,
            parent_ids=[self.id, partner.id],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "generation": self.generation,
            "parent_ids": [str(p) for p in self.parent_ids],
            "width": self.width,
            "height": self.height,
            "fitness": self.fitness,
        }

    def __repr__(self) -> str:
        return (
            f"Genome(id={str(self.id)[:8]}, {self.width}x{self.height}, "
            f"fitness={self.fitness:.4f})"
        )
