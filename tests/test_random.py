"""
Tests for the deterministic random source.

Run with: python -m pytest tests/test_random.py -v
"""

import math
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from neuroevo.core.random import (
    DEFAULT_SEED,
    LCG_INCREMENT,
    LCG_MODULUS,
    LCG_MULTIPLIER,
    Random,
    gaussian_deviate,
)
from neuroevo.errors import DomainError


class TestUniform:
    """Tests for the LCG uniform stream."""

    def test_first_draw_matches_lcg_step(self):
        rng = Random(42)
        expected = (LCG_MULTIPLIER * 42 + LCG_INCREMENT) % LCG_MODULUS
        assert rng.random() == expected / LCG_MODULUS

    def test_default_seed(self):
        assert Random().seed == DEFAULT_SEED
        assert Random().random() == Random(DEFAULT_SEED).random()

    def test_same_seed_same_sequence(self):
        a, b = Random(123), Random(123)
        assert [a.random() for _ in range(50)] == [b.random() for _ in range(50)]

    def test_different_seeds_differ(self):
        a, b = Random(1), Random(2)
        assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]

    def test_range(self):
        rng = Random(7)
        for _ in range(1000):
            value = rng.random()
            assert 0.0 <= value < 1.0

    def test_set_seed_restarts_stream(self):
        rng = Random(5)
        first = [rng.random() for _ in range(3)]
        rng.set_seed(5)
        assert [rng.random() for _ in range(3)] == first


class TestRandomInt:
    """Tests for integer draws."""

    def test_bounds(self):
        rng = Random(11)
        values = {rng.random_int(3, 7) for _ in range(500)}
        assert values == {3, 4, 5, 6}

    def test_single_value_range(self):
        rng = Random(11)
        assert rng.random_int(4, 5) == 4

    @pytest.mark.parametrize("low,high", [(5, 5), (6, 2)])
    def test_invalid_bounds(self, low, high):
        with pytest.raises(DomainError):
            Random(1).random_int(low, high)


class TestGaussian:
    """Tests for Box-Muller deviates and the cached spare."""

    def test_pair_uses_two_uniform_draws(self):
        rng = Random(3)
        rng.random_gaussian()
        rng.random_gaussian()  # served from the spare

        reference = Random(3)
        reference.random()
        reference.random()
        assert rng.random() == reference.random()

    def test_set_seed_clears_spare(self):
        rng = Random(9)
        first = rng.random_gaussian()
        rng.set_seed(9)
        assert rng.random_gaussian() == first

    def test_mean_and_std_applied(self):
        rng = Random(21)
        samples = [rng.random_gaussian(10.0, 2.0) for _ in range(4000)]
        mean = sum(samples) / len(samples)
        var = sum((s - mean) ** 2 for s in samples) / len(samples)
        assert mean == pytest.approx(10.0, abs=0.25)
        assert var ** 0.5 == pytest.approx(2.0, abs=0.25)

    def test_zero_std_returns_mean(self):
        rng = Random(4)
        assert rng.random_gaussian(3.5, 0.0) == pytest.approx(3.5)
        assert rng.random_gaussian(3.5, 0.0) == pytest.approx(3.5)


class TestChoiceAndShuffle:
    """Tests for sequence helpers."""

    def test_choice_returns_member(self):
        rng = Random(8)
        items = ['a', 'b', 'c']
        for _ in range(20):
            assert rng.choice(items) in items

    def test_choice_empty(self):
        with pytest.raises(DomainError):
            Random(8).choice([])

    def test_shuffle_is_permutation(self):
        rng = Random(8)
        items = list(range(20))
        result = rng.shuffle(items)
        assert result is items
        assert sorted(items) == list(range(20))

    def test_shuffle_deterministic(self):
        a = Random(99).shuffle(list(range(10)))
        b = Random(99).shuffle(list(range(10)))
        assert a == b

    def test_shuffle_short_sequences(self):
        rng = Random(1)
        assert rng.shuffle([]) == []
        assert rng.shuffle([1]) == [1]


class TestState:
    """Tests for snapshot and restore."""

    def test_restore_resumes_stream(self):
        rng = Random(17)
        rng.random()
        rng.random_gaussian()  # leaves a spare cached
        state = rng.get_state()

        expected = [rng.random_gaussian(), rng.random(), rng.random_gaussian()]

        other = Random(0)
        other.set_state(state)
        assert [other.random_gaussian(), other.random(), other.random_gaussian()] == expected
        assert other.seed == 17


class TestGaussianDeviate:
    """Tests for the stateless Box-Muller helper."""

    def test_unit_draw_gives_mean(self):
        # u1 = 1 - 0.0 = 1 gives log(1) = 0
        assert gaussian_deviate(lambda: 0.0, mean=2.0, std=1.0) == pytest.approx(2.0)

    def test_cosine_form_with_mean_and_std(self):
        values = iter([0.3, 0.6])
        expected = ((-2.0 * math.log(0.7)) ** 0.5) * math.cos(2.0 * math.pi * 0.6) * 1.5 + 0.25
        assert gaussian_deviate(lambda: next(values), 0.25, 1.5) == pytest.approx(expected)

    def test_uses_exactly_two_draws(self):
        source = Random(13)
        gaussian_deviate(source.random)
        reference = Random(13)
        reference.random()
        reference.random()
        assert source.random() == reference.random()
