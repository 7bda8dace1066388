"""
pixel-evolve - Evolve images toward a target with a genetic algorithm.
"""

from evolution import (
    AcceptancePolicy,
    EvolutionConfig,
    EvolutionEngine,
    EvolutionResult,
    Genome,
    Population,
    PopulationConfig,
)

__version__ = "0.1.0"

__all__ = [
    "EvolutionEngine",
    "EvolutionConfig",
    "EvolutionResult",
    "Population",
    "PopulationConfig",
    "Genome",
    "AcceptancePolicy",
]
