import math
import random

import numpy as np


class DegenerateWeightDistribution(ValueError):
    """Weights cannot be turned into a probability distribution"""


def gaussian_distribution(mean, deviation, rng=random):
    """Draw one normal variate with the Box-Muller transform"""
    if deviation <= 0:
        return mean

    # 1 - random() lies in (0, 1], keeps the log finite
    u1 = 1.0 - rng.random()
    u2 = rng.random()
    z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)

    return z * deviation + mean


class DiscreteDistribution:
    """Draws integer indices with probability proportional to their weight.

    Behaves like C++'s std::discrete_distribution: the weights are normalised,
    a cumulative table starting at 0 (and without the closing 1.0) is built,
    and every draw returns the last index whose cumulative value is below a
    uniform sample.
    """

    def __init__(self, weights, rng=random):
        self.rng = rng

        weights = np.asarray(weights, dtype=float)
        if weights.size == 0:
            raise DegenerateWeightDistribution("no weights given")
        if not np.all(np.isfinite(weights)):
            raise DegenerateWeightDistribution("weights must be finite")
        if np.any(weights < 0):
            raise DegenerateWeightDistribution("weights must be non-negative")

        total = weights.sum()
        if not total > 0:
            raise DegenerateWeightDistribution("weights sum to zero")

        probabilities = weights / total
        self.cumulative = np.concatenate(([0.0], np.cumsum(probabilities)[:-1]))

    def __len__(self):
        return len(self.cumulative)

    def draw(self):
        r = self.rng.random()
        idx = int(np.searchsorted(self.cumulative, r, side='left')) - 1
        return max(idx, 0)
