"""
Evolution Engine implementation for pixel-evolve.
Central orchestrator that runs a population for a fixed number of generations.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import UUID, uuid4

from evolution.errors import SnapshotWriteError, require
from evolution.genome import Genome
from evolution.interfaces import (
    DEFAULT_MAX_GENERATIONS,
    ImageWriter,
    PathLike,
    ProgressReporter,
)
from evolution.population import GenerationOutcome, Population

logger = logging.getLogger(__name__)


@dataclass
class EvolutionResult:
    """Result of an evolution run"""

    run_id: UUID
    generations: int
    accepted_generations: int
    best_genome: Genome
    best_fitness: float
    final_statistic: float
    duration_seconds: float
    snapshots: List[Path] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class EvolutionConfig:
    """Configuration for evolution engine"""

    max_generations: int = DEFAULT_MAX_GENERATIONS
    report_interval: int = 100
    snapshot_interval: int = 100
    output_dir: PathLike = "results"
    image_format: str = "bmp"

    def validate(self) -> None:
        require(
            self.max_generations >= 0,
            "Generation count must not be negative",
            max_generations=self.max_generations,
        )
        require(
            self.report_interval >= 0,
            "Report interval must not be negative",
            report_interval=self.report_interval,
        )
        require(
            self.snapshot_interval >= 0,
            "Snapshot interval must not be negative",
            snapshot_interval=self.snapshot_interval,
        )


class EvolutionEngine:
    """
    Runs the generational loop of a population.

    Progress is reported every ``report_interval`` generations and the fittest
    genome is written every ``snapshot_interval`` generations, plus once at the
    end. An interval of 0 disables the periodic action.
    """

    def __init__(
        self,
        population: Population,
        config: Optional[EvolutionConfig] = None,
        reporter: Optional[ProgressReporter] = None,
        writer: Optional[ImageWriter] = None,
    ):
        self.population = population
        self.config = config or EvolutionConfig()
        self.config.validate()
        self.reporter = reporter
        self.writer = writer

        self.event_listeners: List[Tuple[str, Callable]] = []

    def run(self, generations: Optional[int] = None) -> EvolutionResult:
        """
        Run the population for a fixed number of generations.

        Steps per generation:
        1. Report progress and snapshot on checkpoint generations
        2. Produce offspring from the parent pool
        3. Accept or reject the offspring generation
        """
        if generations is None:
            generations = self.config.max_generations
        require(
            generations >= 0,
            "Generation count must not be negative",
            generations=generations,
        )

        run_id = uuid4()
        start_time = datetime.now()
        population = self.population
        if not population.initialized:
            population.initialize()

        logger.info(
            f"Starting evolution run {run_id}: {generations} generations, "
            f"K={population.parent_pool_size}, N={population.genome_pool_size}, "
            f"mutation rate {population.config.mutation_rate}"
        )
        self._emit_event(
            "evolution_started",
            {"run_id": run_id, "generations": generations},
        )

        snapshots: List[Path] = []
        accepted_generations = 0
        start_generation = population.generation

        for n in range(start_generation, start_generation + generations):
            if self._is_checkpoint(n, self.config.report_interval):
                self._report(n)
            if self._is_checkpoint(n, self.config.snapshot_interval):
                path = self._write_snapshot(f"gen-{n}", fatal=False)
                if path is not None:
                    snapshots.append(path)

            outcome = population.step()
            if outcome.accepted:
                accepted_generations += 1
            self._emit_event("generation_completed", {"outcome": outcome})
            self._log_outcome(outcome)

        final_generation = population.generation
        self._report(final_generation)
        final_path = self._write_snapshot("gen-result", fatal=True)
        if final_path is not None:
            snapshots.append(final_path)

        result = EvolutionResult(
            run_id=run_id,
            generations=final_generation - start_generation,
            accepted_generations=accepted_generations,
            best_genome=population.best,
            best_fitness=population.best.fitness,
            final_statistic=population.statistic(),
            duration_seconds=(datetime.now() - start_time).total_seconds(),
            snapshots=snapshots,
        )

        logger.info(
            f"Evolution run {run_id} complete: best loss {result.best_fitness:.4f} "
            f"after {result.generations} generations "
            f"({accepted_generations} accepted)"
        )
        self._emit_event("evolution_completed", {"run_id": run_id, "result": result})
        return result

    def add_event_listener(self, event_type: str, callback: Callable):
        """Add event listener for evolution events"""
        self.event_listeners.append((event_type, callback))

    @staticmethod
    def _is_checkpoint(generation: int, interval: int) -> bool:
        return interval > 0 and generation % interval == 0

    def _report(self, generation: int) -> None:
        if self.reporter is None:
            return
        self.reporter.report(
            generation,
            self.population.statistic(),
            self.population.parent_pool_size,
            self.population.genome_pool_size,
        )

    def _write_snapshot(self, name: str, fatal: bool) -> Optional[Path]:
        """Write the fittest genome; periodic failures are logged and skipped."""
        if self.writer is None:
            return None
        path = Path(self.config.output_dir) / f"{name}.{self.config.image_format}"
        try:
            written = self.writer.write(self.population.best.pixels, path)
        except SnapshotWriteError as e:
            if fatal:
                raise
            logger.warning(f"Skipping snapshot: {e}")
            return None
        logger.debug(f"Wrote snapshot {written}")
        return written

    def _log_outcome(self, outcome: GenerationOutcome) -> None:
        logger.debug(
            f"Generation {outcome.generation} - "
            f"{'accepted' if outcome.accepted else 'rejected'}: "
            f"current {outcome.current_fitness:.4f}, "
            f"offspring {outcome.offspring_fitness:.4f}, "
            f"best {outcome.best_fitness:.4f}"
        )

    def _emit_event(self, event_type: str, data: Dict[str, Any]):
        """Emit event to all registered listeners"""
        for listener_type, callback in self.event_listeners:
            if listener_type == event_type:
                try:
                    callback(data)
                except Exception as e:
                    logger.error(f"Event listener error: {e}")
