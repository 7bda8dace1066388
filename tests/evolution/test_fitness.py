"""
Unit tests for pixel distance fitness and the array-level operators.
"""

import numpy as np
import pytest

from evolution.errors import InvalidConfigError
from evolution.fitness import mean_fitness, pixel_distance_loss, pixel_distances
from evolution.operators import mutate_pixels, random_pixels, uniform_crossover


def solid(width, height, color):
    grid = np.zeros((height, width, 3), dtype=np.uint8)
    grid[:, :] = color
    return grid


class TestPixelDistanceLoss:
    """Test suite for pixel_distance_loss"""

    def test_identical_grids_score_zero(self):
        """Test that a grid compared with itself has zero loss"""
        rng = np.random.default_rng(7)
        grid = rng.integers(0, 256, size=(5, 4, 3), dtype=np.uint8)
        assert pixel_distance_loss(grid, grid.copy()) == 0.0

    def test_euclidean_distance_per_pixel(self):
        """Test the per-pixel distance is the RGB Euclidean norm"""
        target = solid(1, 1, (0, 0, 0))
        pixels = solid(1, 1, (3, 4, 0))
        assert pixel_distance_loss(pixels, target) == 5.0

    def test_sum_over_pixels(self):
        """Test that distances are summed over the whole grid"""
        target = solid(3, 2, (0, 0, 0))
        pixels = solid(3, 2, (3, 4, 0))
        assert pixel_distance_loss(pixels, target) == 30.0

    def test_no_uint8_wraparound(self):
        """Test that channel differences are computed without overflow"""
        target = solid(1, 1, (255, 255, 255))
        pixels = solid(1, 1, (0, 0, 0))
        expected = round(float(np.sqrt(3 * 255**2)), 4)
        assert pixel_distance_loss(pixels, target) == expected

    def test_rounded_to_four_decimals(self):
        """Test loss is rounded to 4 decimal places"""
        target = solid(1, 1, (0, 0, 0))
        pixels = solid(1, 1, (1, 1, 0))
        assert pixel_distance_loss(pixels, target) == 1.4142

    def test_strictly_increasing_in_channel_difference(self):
        """Test loss grows strictly with a single channel's difference"""
        target = solid(2, 2, (100, 100, 100))
        losses = []
        for delta in range(0, 156, 5):
            pixels = target.copy()
            pixels[1, 0, 2] = 100 + delta
            losses.append(pixel_distance_loss(pixels, target))

        assert losses[0] == 0.0
        assert all(b > a for a, b in zip(losses, losses[1:]))

    def test_non_negative(self):
        """Test loss is non-negative for random grids"""
        rng = np.random.default_rng(3)
        for _ in range(10):
            a = rng.integers(0, 256, size=(3, 3, 3), dtype=np.uint8)
            b = rng.integers(0, 256, size=(3, 3, 3), dtype=np.uint8)
            assert pixel_distance_loss(a, b) >= 0.0

    def test_shape_mismatch_rejected(self):
        """Test grids of different shape cannot be compared"""
        with pytest.raises(InvalidConfigError):
            pixel_distances(solid(2, 2, (0, 0, 0)), solid(3, 2, (0, 0, 0)))

    def test_mean_fitness_of_empty_generation(self):
        """Test averaging an empty generation is rejected"""
        with pytest.raises(InvalidConfigError):
            mean_fitness([])


class TestOperators:
    """Test suite for seeding, mutation and crossover of pixel grids"""

    def setup_method(self):
        self.rng = np.random.default_rng(42)
        self.palette = ((255, 0, 0), (0, 255, 0), (0, 0, 255))

    def test_random_pixels_use_palette(self):
        """Test every seeded pixel comes from the palette"""
        grid = random_pixels(6, 4, self.palette, self.rng)

        assert grid.shape == (4, 6, 3)
        assert grid.dtype == np.uint8
        colors = {tuple(int(c) for c in px) for px in grid.reshape(-1, 3)}
        assert colors <= set(self.palette)

    def test_random_pixels_reject_bad_dimensions(self):
        """Test non-positive dimensions are rejected"""
        with pytest.raises(InvalidConfigError):
            random_pixels(0, 4, self.palette, self.rng)
        with pytest.raises(InvalidConfigError):
            random_pixels(4, -1, self.palette, self.rng)

    def test_random_pixels_reject_empty_palette(self):
        """Test an empty palette is rejected"""
        with pytest.raises(InvalidConfigError):
            random_pixels(2, 2, (), self.rng)

    def test_mutate_zero_rate_is_noop(self):
        """Test a zero mutation rate leaves the grid untouched"""
        grid = random_pixels(5, 5, self.palette, self.rng)
        before = grid.copy()

        assert mutate_pixels(grid, 0.0, self.rng) == 0
        assert np.array_equal(grid, before)

    def test_mutate_full_rate_touches_every_pixel(self):
        """Test a rate of 1 selects every pixel"""
        grid = random_pixels(5, 3, self.palette, self.rng)
        assert mutate_pixels(grid, 1.0, self.rng) == 15

    def test_mutate_writes_in_place(self):
        """Test mutation modifies the given grid"""
        grid = solid(8, 8, (1, 2, 3))
        count = mutate_pixels(grid, 0.5, self.rng)

        changed = np.any(grid != np.array([1, 2, 3], dtype=np.uint8), axis=-1)
        assert count > 0
        assert np.count_nonzero(changed) <= count

    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_mutate_rejects_out_of_range_rate(self, rate):
        """Test rates outside [0, 1] are rejected"""
        with pytest.raises(InvalidConfigError):
            mutate_pixels(solid(2, 2, (0, 0, 0)), rate, self.rng)

    def test_crossover_takes_pixels_from_parents(self):
        """Test each child pixel equals one of the parents' pixels"""
        first = solid(10, 10, (255, 0, 0))
        second = solid(10, 10, (0, 0, 255))
        child = uniform_crossover(first, second, self.rng)

        from_first = np.all(child == first, axis=-1)
        from_second = np.all(child == second, axis=-1)
        assert np.all(from_first | from_second)
        # 100 fair coin flips never all land on one side in practice
        assert from_first.any() and from_second.any()

    def test_crossover_allocates_new_grid(self):
        """Test crossover never aliases a parent"""
        first = solid(3, 3, (10, 10, 10))
        second = solid(3, 3, (20, 20, 20))
        child = uniform_crossover(first, second, self.rng)
        child[:] = 0

        assert np.all(first == 10)
        assert np.all(second == 20)

    def test_crossover_shape_mismatch_rejected(self):
        """Test parents of different shape cannot be crossed"""
        with pytest.raises(InvalidConfigError):
            uniform_crossover(solid(2, 2, (0, 0, 0)), solid(2, 3, (0, 0, 0)), self.rng)
