"""
Population management for pixel-evolve.
Owns the current generation and advances it by full pairwise mating.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

import numpy as np
import psutil

from evolution.errors import require
from evolution.genome import DEFAULT_PALETTE, Genome, Palette
from evolution.interfaces import (
    DEFAULT_MUTATION_RATE,
    DEFAULT_PARENT_POOL_SIZE,
    AcceptancePolicy,
)
from evolution.operators import validate_rate
from evolution.selection import (
    generation_statistic,
    select_parents,
    should_accept,
    sort_by_fitness,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def default_worker_count() -> int:
    """Worker pool size matching the CPUs this process may run on."""
    try:
        return len(psutil.Process().cpu_affinity()) or 1
    except (AttributeError, NotImplementedError, psutil.Error):
        # cpu_affinity is unavailable on macOS
        return psutil.cpu_count(logical=True) or 1


@dataclass
class PopulationConfig:
    """Configuration for a population"""

    parent_pool_size: int = DEFAULT_PARENT_POOL_SIZE
    mutation_rate: float = DEFAULT_MUTATION_RATE
    acceptance_policy: AcceptancePolicy = AcceptancePolicy.BEST
    palette: Palette = DEFAULT_PALETTE
    max_workers: Optional[int] = None
    seed: Optional[int] = None

    @property
    def genome_pool_size(self) -> int:
        return self.parent_pool_size**2

    def validate(self) -> None:
        require(
            self.parent_pool_size > 0,
            "Parent pool size must be positive",
            parent_pool_size=self.parent_pool_size,
        )
        validate_rate(self.mutation_rate)
        require(len(self.palette) > 0, "Palette must contain at least one color")
        require(
            self.max_workers is None or self.max_workers > 0,
            "Worker count must be positive",
            max_workers=self.max_workers,
        )


@dataclass
class GenerationOutcome:
    """Result of advancing the population by one generation"""

    generation: int
    accepted: bool
    current_fitness: float
    offspring_fitness: float
    best_fitness: float
    offspring_count: int
    duration_seconds: float
    timestamp: datetime = field(default_factory=datetime.now)


class Population:
    """
    Generational genetic algorithm over pixel genomes.

    Each generation the K fittest genomes mate pairwise (including with
    themselves) to produce K^2 children. The children replace the current
    generation only if their statistic is strictly lower, so the best known
    fitness never regresses.
    """

    def __init__(self, target: Genome, config: Optional[PopulationConfig] = None):
        self.config = config or PopulationConfig()
        self.config.validate()
        require(target.is_target, "Population target must be a target genome")

        self.target = target
        self.parent_pool_size = self.config.parent_pool_size
        self.genome_pool_size = self.config.genome_pool_size
        self.max_workers = self.config.max_workers or default_worker_count()

        self.current_generation: List[Genome] = []
        self.offspring_generation: List[Genome] = []
        self.generation = 0
        self._seed_sequence = np.random.SeedSequence(self.config.seed)
        self._executor: Optional[ThreadPoolExecutor] = None

    def __enter__(self) -> "Population":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the worker pool; it is recreated if the population steps again."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    @property
    def initialized(self) -> bool:
        return bool(self.current_generation)

    @property
    def best(self) -> Genome:
        require(self.initialized, "Population has not been initialized")
        return self.current_generation[0]

    def statistic(self, generation: Optional[Sequence[Genome]] = None) -> float:
        """Acceptance statistic of a generation (current by default)."""
        if generation is None:
            generation = self.current_generation
        return generation_statistic(
            generation, self.config.acceptance_policy, self.parent_pool_size
        )

    def initialize(self) -> List[Genome]:
        """Seed the current generation with N random genomes."""
        palette = self.config.palette
        rngs = self._spawn_rngs(self.genome_pool_size)

        def build(rng: np.random.Generator) -> Genome:
            return Genome.initialize_random(self.target, rng, palette)

        seeds = self._run_parallel(build, rngs)
        self.current_generation = sort_by_fitness(seeds)
        self.offspring_generation = []
        self.generation = 0

        logger.info(
            f"Initialized population of {len(self.current_generation)} genomes "
            f"({self.target.width}x{self.target.height}), best loss "
            f"{self.best.fitness:.4f}"
        )
        return self.current_generation

    def generate_offspring(self) -> List[Genome]:
        """Mate every ordered pair of selected parents and sort the children."""
        require(self.initialized, "Population has not been initialized")
        parents = select_parents(self.current_generation, self.parent_pool_size)
        pairs: List[Tuple[Genome, Genome]] = [
            (father, mother) for father in parents for mother in parents
        ]
        rngs = self._spawn_rngs(len(pairs))
        mutation_rate = self.config.mutation_rate

        def mate(task: Tuple[Tuple[Genome, Genome], np.random.Generator]) -> Genome:
            (father, mother), rng = task
            return father.mate_with(mother, mutation_rate, rng)

        children = self._run_parallel(mate, list(zip(pairs, rngs)))
        self.offspring_generation = sort_by_fitness(children)

        logger.debug(
            f"Generated {len(self.offspring_generation)} offspring from "
            f"{len(parents)} parents"
        )
        return self.offspring_generation

    def decide_generation(self) -> bool:
        """Promote the offspring generation if it improves on the current one."""
        require(
            bool(self.offspring_generation), "No offspring generation to evaluate"
        )
        accepted = should_accept(
            self.current_generation,
            self.offspring_generation,
            self.config.acceptance_policy,
            self.parent_pool_size,
        )
        if accepted:
            self.current_generation = self.offspring_generation
        self.offspring_generation = []
        return accepted

    def step(self) -> GenerationOutcome:
        """Advance by one generation."""
        start = time.perf_counter()
        if not self.initialized:
            self.initialize()

        current_fitness = self.statistic()
        offspring = self.generate_offspring()
        offspring_fitness = self.statistic(offspring)
        offspring_count = len(offspring)
        accepted = self.decide_generation()
        self.generation += 1

        return GenerationOutcome(
            generation=self.generation,
            accepted=accepted,
            current_fitness=current_fitness,
            offspring_fitness=offspring_fitness,
            best_fitness=self.best.fitness,
            offspring_count=offspring_count,
            duration_seconds=time.perf_counter() - start,
        )

    def _spawn_rngs(self, count: int) -> List[np.random.Generator]:
        """Independent random streams, one per parallel task."""
        return [np.random.default_rng(s) for s in self._seed_sequence.spawn(count)]

    def _run_parallel(
        self, fn: Callable[[T], Genome], tasks: Sequence[T]
    ) -> List[Genome]:
        """Fan tasks out over the population's worker pool; results keep task order."""
        if self.max_workers <= 1 or len(tasks) <= 1:
            return [fn(task) for task in tasks]
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="population"
            )
        return list(self._executor.map(fn, tasks))
