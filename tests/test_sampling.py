import random
from collections import Counter

import pytest

from sampling import DegenerateWeightDistribution, DiscreteDistribution, gaussian_distribution


class ExplodingRandom(random.Random):
    def random(self):
        raise AssertionError("no draw expected")


def test_gaussian_zero_deviation_returns_mean():
    assert gaussian_distribution(10, 0, ExplodingRandom()) == 10
    assert gaussian_distribution(10, -3, ExplodingRandom()) == 10


def test_gaussian_moments():
    rng = random.Random(1)
    samples = [gaussian_distribution(5.0, 2.0, rng) for _ in range(20000)]
    mean = sum(samples) / len(samples)
    var = sum((s - mean) ** 2 for s in samples) / len(samples)
    assert mean == pytest.approx(5.0, abs=0.1)
    assert var ** 0.5 == pytest.approx(2.0, abs=0.1)


def test_uniform_weights_draw_evenly():
    dist = DiscreteDistribution([1, 1, 1, 1], random.Random(0))
    trials = 40000
    counts = Counter(dist.draw() for _ in range(trials))
    assert set(counts) == {0, 1, 2, 3}
    for idx in range(4):
        assert counts[idx] / trials == pytest.approx(0.25, abs=0.02)


def test_draw_follows_weights():
    dist = DiscreteDistribution([3, 1], random.Random(2))
    trials = 20000
    counts = Counter(dist.draw() for _ in range(trials))
    assert counts[0] / trials == pytest.approx(0.75, abs=0.02)


def test_zero_weight_is_never_drawn():
    dist = DiscreteDistribution([1, 0, 1], random.Random(3))
    assert 1 not in {dist.draw() for _ in range(5000)}


def test_cumulative_table_excludes_last_entry():
    dist = DiscreteDistribution([1, 1, 2])
    assert len(dist) == 3
    assert list(dist.cumulative) == pytest.approx([0.0, 0.25, 0.5])


@pytest.mark.parametrize("weights", [
    [],
    [0, 0, 0],
    [1, float("nan")],
    [1, float("inf")],
    [1, -1],
])
def test_degenerate_weights_raise(weights):
    with pytest.raises(DegenerateWeightDistribution):
        DiscreteDistribution(weights)


def test_degenerate_weights_is_value_error():
    assert issubclass(DegenerateWeightDistribution, ValueError)
