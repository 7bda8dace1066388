"""
Monitoring module for pixel-evolve.
Provides progress reporting and run history export.
"""

from .metrics import GenerationRecord, ProgressMonitor, RunHistory

__all__ = ["ProgressMonitor", "RunHistory", "GenerationRecord"]
