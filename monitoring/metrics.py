"""
Progress reporting and run history for pixel-evolve.
Records one data point per reported generation and exports them.
"""

import csv
import json
import logging
import statistics
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from evolution.interfaces import PathLike, ProgressReporter
from pixel_evolve.logging_config import get_logger

logger = logging.getLogger(__name__)

RECORD_FIELDS = [
    "generation",
    "fitness",
    "parent_pool_size",
    "genome_pool_size",
    "memory_mb",
    "timestamp",
]


@dataclass
class GenerationRecord:
    """Progress data point for a single generation."""

    generation: int
    fitness: float
    parent_pool_size: int
    genome_pool_size: int
    memory_mb: float
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


class RunHistory:
    """Ordered log of generation records for one run."""

    def __init__(self):
        self.records: List[GenerationRecord] = []

    def add(self, record: GenerationRecord) -> None:
        self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)

    def summary(self) -> Dict[str, Any]:
        """Aggregate statistics over the recorded generations."""
        if not self.records:
            return {"records": 0}

        losses = [r.fitness for r in self.records]
        first, last = self.records[0], self.records[-1]
        return {
            "records": len(self.records),
            "first_generation": first.generation,
            "last_generation": last.generation,
            "initial_fitness": first.fitness,
            "final_fitness": last.fitness,
            "best_fitness": min(losses),
            "mean_fitness": statistics.fmean(losses),
            "improvement": round(first.fitness - last.fitness, 4),
            "peak_memory_mb": max(r.memory_mb for r in self.records),
        }

    def export_to_csv(self, path: PathLike) -> None:
        """Export records to CSV format."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="") as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=RECORD_FIELDS)
            writer.writeheader()
            for record in self.records:
                writer.writerow(record.to_dict())

    def export_to_json(self, path: PathLike) -> None:
        """Export summary and records to JSON format."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(
                {
                    "summary": self.summary(),
                    "data": [r.to_dict() for r in self.records],
                },
                f,
                indent=2,
            )

    def export(self, path: PathLike) -> None:
        """Export using the format implied by the file extension."""
        if Path(path).suffix.lower() == ".csv":
            self.export_to_csv(path)
        else:
            self.export_to_json(path)
        logger.info(f"Exported {len(self.records)} generation records to {path}")


class ProgressMonitor(ProgressReporter):
    """
    Logs a progress line per reported generation and keeps a run history.
    """

    def __init__(self, history: Optional[RunHistory] = None):
        self.history = history if history is not None else RunHistory()
        self.events = get_logger("monitoring.progress")
        self._process = psutil.Process()

    def report(
        self,
        generation: int,
        fitness: float,
        parent_pool_size: int,
        genome_pool_size: int,
    ) -> None:
        record = GenerationRecord(
            generation=generation,
            fitness=fitness,
            parent_pool_size=parent_pool_size,
            genome_pool_size=genome_pool_size,
            memory_mb=self._memory_mb(),
        )
        self.history.add(record)
        self.events.generation_progress(
            generation, fitness, parent_pool_size, genome_pool_size
        )

    def _memory_mb(self) -> float:
        return round(self._process.memory_info().rss / (1024 * 1024), 2)
