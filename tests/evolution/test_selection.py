"""
Unit tests for truncation selection and the acceptance rule.
"""

import numpy as np
import pytest

from evolution.errors import InvalidConfigError
from evolution.genome import Genome
from evolution.interfaces import AcceptancePolicy
from evolution.selection import (
    generation_statistic,
    select_parents,
    should_accept,
    sort_by_fitness,
)


def make_generation(target, offsets):
    """Genomes whose loss grows with each offset (1x1 grey target)."""
    return [
        Genome(np.full((1, 1, 3), offset, dtype=np.uint8), target=target)
        for offset in offsets
    ]


@pytest.fixture
def target():
    return Genome.from_pixels(np.zeros((1, 1, 3), dtype=np.uint8))


class TestSelectParents:
    """Test suite for select_parents"""

    def test_returns_first_k(self, target):
        """Test truncation returns the K first genomes in order"""
        generation = sort_by_fitness(make_generation(target, [40, 10, 30, 20, 50]))
        parents = select_parents(generation, 3)

        assert len(parents) == 3
        assert parents == generation[:3]
        assert max(p.fitness for p in parents) <= min(
            g.fitness for g in generation[3:]
        )

    def test_returns_new_list(self, target):
        """Test the caller's generation is not exposed for mutation"""
        generation = make_generation(target, [1, 2, 3])
        parents = select_parents(generation, 3)
        parents.pop()

        assert len(generation) == 3

    @pytest.mark.parametrize("k", [0, -2])
    def test_rejects_non_positive_k(self, target, k):
        """Test K must be positive"""
        with pytest.raises(InvalidConfigError):
            select_parents(make_generation(target, [1, 2]), k)

    def test_rejects_small_generation(self, target):
        """Test the generation must hold at least K genomes"""
        with pytest.raises(InvalidConfigError):
            select_parents(make_generation(target, [1, 2]), 3)

    def test_sort_by_fitness(self, target):
        """Test ascending ordering with index 0 fittest"""
        ordered = sort_by_fitness(make_generation(target, [9, 3, 6]))
        losses = [g.fitness for g in ordered]
        assert losses == sorted(losses)


class TestAcceptance:
    """Test suite for the generation acceptance rule"""

    def test_best_statistic(self, target):
        """Test BEST uses the fittest genome"""
        generation = sort_by_fitness(make_generation(target, [2, 4, 6]))
        assert generation_statistic(generation, AcceptancePolicy.BEST, 2) == (
            generation[0].fitness
        )

    def test_mean_top_k_statistic(self, target):
        """Test MEAN_TOP_K averages the parent pool"""
        generation = sort_by_fitness(make_generation(target, [2, 4, 6]))
        expected = (generation[0].fitness + generation[1].fitness) / 2
        assert generation_statistic(
            generation, AcceptancePolicy.MEAN_TOP_K, 2
        ) == pytest.approx(expected)

    def test_strictly_better_offspring_accepted(self, target):
        """Test lower offspring loss wins"""
        current = sort_by_fitness(make_generation(target, [5, 6]))
        offspring = sort_by_fitness(make_generation(target, [4, 9]))
        assert should_accept(current, offspring, AcceptancePolicy.BEST, 1)

    def test_equal_offspring_rejected(self, target):
        """Test ties keep the current generation"""
        current = sort_by_fitness(make_generation(target, [5, 6]))
        offspring = sort_by_fitness(make_generation(target, [5, 7]))
        assert offspring[0].fitness == current[0].fitness
        assert not should_accept(current, offspring, AcceptancePolicy.BEST, 1)

    def test_worse_offspring_rejected(self, target):
        """Test higher offspring loss loses"""
        current = sort_by_fitness(make_generation(target, [1, 2]))
        offspring = sort_by_fitness(make_generation(target, [3, 4]))
        assert not should_accept(current, offspring, AcceptancePolicy.BEST, 1)

    def test_policies_can_disagree(self, target):
        """Test the mean policy looks beyond the single best genome"""
        current = sort_by_fitness(make_generation(target, [3, 3]))
        offspring = sort_by_fitness(make_generation(target, [2, 9]))

        assert should_accept(current, offspring, AcceptancePolicy.BEST, 2)
        assert not should_accept(current, offspring, AcceptancePolicy.MEAN_TOP_K, 2)
