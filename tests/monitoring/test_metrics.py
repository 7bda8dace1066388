"""
Unit tests for progress reporting and run history.
"""

import csv
import json
import logging
from datetime import datetime

import pytest

from monitoring import GenerationRecord, ProgressMonitor, RunHistory


def record(generation, fitness, memory_mb=50.0):
    return GenerationRecord(
        generation=generation,
        fitness=fitness,
        parent_pool_size=3,
        genome_pool_size=9,
        memory_mb=memory_mb,
        timestamp=datetime(2026, 1, 1, 12, 0, generation % 60),
    )


class TestRunHistory:
    """Test suite for RunHistory"""

    def test_empty_summary(self):
        history = RunHistory()
        assert history.summary() == {"records": 0}
        assert len(history) == 0

    def test_summary(self):
        """Test summary statistics over recorded generations"""
        history = RunHistory()
        history.add(record(0, 90.0, 40.0))
        history.add(record(10, 70.0, 55.5))
        history.add(record(20, 50.0, 45.0))

        summary = history.summary()

        assert summary["records"] == 3
        assert summary["first_generation"] == 0
        assert summary["last_generation"] == 20
        assert summary["initial_fitness"] == 90.0
        assert summary["final_fitness"] == 50.0
        assert summary["best_fitness"] == 50.0
        assert summary["mean_fitness"] == pytest.approx(70.0)
        assert summary["improvement"] == 40.0
        assert summary["peak_memory_mb"] == 55.5

    def test_export_to_json(self, tmp_path):
        history = RunHistory()
        history.add(record(0, 12.5))
        history.add(record(5, 10.25))
        path = tmp_path / "out" / "history.json"

        history.export(path)

        with open(path) as f:
            data = json.load(f)
        assert data["summary"]["records"] == 2
        assert [row["generation"] for row in data["data"]] == [0, 5]
        assert data["data"][1]["fitness"] == 10.25
        assert data["data"][0]["timestamp"] == "2026-01-01T12:00:00"

    def test_export_to_csv(self, tmp_path):
        history = RunHistory()
        history.add(record(0, 12.5))
        history.add(record(5, 10.25))
        path = tmp_path / "history.csv"

        history.export(path)

        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 2
        assert rows[1]["generation"] == "5"
        assert float(rows[1]["fitness"]) == 10.25
        assert rows[0]["genome_pool_size"] == "9"


class TestProgressMonitor:
    """Test suite for ProgressMonitor"""

    def test_report_records_generation(self):
        monitor = ProgressMonitor()
        monitor.report(100, 1234.5678, 4, 16)

        latest = monitor.history.records[-1]
        assert latest.generation == 100
        assert latest.fitness == 1234.5678
        assert latest.parent_pool_size == 4
        assert latest.genome_pool_size == 16
        assert latest.memory_mb > 0

    def test_report_logs_progress_line(self, caplog):
        """Test each report emits a generation/loss line"""
        monitor = ProgressMonitor()
        with caplog.at_level(logging.INFO, logger="monitoring"):
            monitor.report(7, 42.0, 2, 4)

        messages = [r.getMessage() for r in caplog.records]
        assert "generation 7 | loss 42.0000" in messages
        progress = next(
            r for r in caplog.records if r.getMessage().startswith("generation")
        )
        assert progress.event_type == "generation_progress"
        assert progress.generation == 7

    def test_shared_history(self):
        history = RunHistory()
        monitor = ProgressMonitor(history)
        monitor.report(0, 1.0, 1, 1)
        assert len(history) == 1
