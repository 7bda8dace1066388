"""
Selection and acceptance for pixel-evolve.
Elitist truncation of sorted generations and the generation replacement rule.
"""

import logging
from typing import List, Sequence

from evolution.errors import require
from evolution.fitness import mean_fitness
from evolution.genome import Genome
from evolution.interfaces import AcceptancePolicy

logger = logging.getLogger(__name__)


def sort_by_fitness(genomes: Sequence[Genome]) -> List[Genome]:
    """Return genomes ordered ascending by fitness (index 0 is fittest)."""
    return sorted(genomes, key=lambda genome: genome.fitness)


def select_parents(generation: Sequence[Genome], k: int) -> List[Genome]:
    """
    Select the K fittest genomes of a generation sorted ascending by fitness.

    Selection is deterministic truncation; no sampling is involved.
    """
    require(k > 0, "Parent pool size must be positive", parent_pool_size=k)
    require(
        len(generation) >= k,
        "Generation is smaller than the parent pool",
        generation_size=len(generation),
        parent_pool_size=k,
    )
    return list(generation[:k])


def generation_statistic(
    generation: Sequence[Genome], policy: AcceptancePolicy, k: int
) -> float:
    """Fitness statistic of a sorted generation under the given policy."""
    if policy == AcceptancePolicy.MEAN_TOP_K:
        return mean_fitness(select_parents(generation, k))
    require(len(generation) > 0, "Generation must not be empty")
    return generation[0].fitness


def should_accept(
    current: Sequence[Genome],
    offspring: Sequence[Genome],
    policy: AcceptancePolicy,
    k: int,
) -> bool:
    """Offspring replace the current generation only when strictly better."""
    current_score = generation_statistic(current, policy, k)
    offspring_score = generation_statistic(offspring, policy, k)
    accepted = offspring_score < current_score
    logger.debug(
        f"Acceptance ({policy.value}): current={current_score:.4f} "
        f"offspring={offspring_score:.4f} accepted={accepted}"
    )
    return accepted
