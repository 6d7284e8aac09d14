import logging
import math
import random
import threading
import time
from dataclasses import dataclass

import numpy as np

from geometry import Point, distance, get_intersection
from sampling import DegenerateWeightDistribution, DiscreteDistribution, gaussian_distribution

logger = logging.getLogger(__name__)

MAX_PARTICLE_VELOCITY = 200.0       # units per second
DEFAULT_POSITION_STD = 30.0         # per axis, for initialisation and reinjection
REINJECTION_FRACTION = 0.01         # share of the population reseeded on each trigger
INITIAL_RADIUS = 15.0
RADIUS_PERCENTILE = 0.9
MIN_DISTANCE = 1e-6


class InvalidConfiguration(ValueError):
    """Raised when a ParticleFilter is built with unusable parameters"""


class Particle:
    """A weighted position hypothesis.

    ``id`` is the particle's slot in the population. It is reassigned on every
    resample and says nothing about which particle it descended from.
    """

    def __init__(self, id, position, weight=1.0):
        self.id = id
        self.position = position
        self.weight = weight

    def __repr__(self):
        return f"Particle(id={self.id}, position={tuple(self.position)}, weight={self.weight:.4g})"


@dataclass(frozen=True)
class Wall:
    """Segment that particles may not move through in a single step"""
    start: Point
    end: Point


@dataclass(frozen=True)
class ApproximatedPosition:
    position: Point
    radius: float


def estimate_position(particles):
    """Centroid of the particles and the radius holding ~90% of them"""
    positions = np.array([p.position for p in particles], dtype=float)
    centroid = positions.mean(axis=0)

    distances = np.sort(np.hypot(*(positions - centroid).T))
    idx = int(math.floor(RADIUS_PERCENTILE * len(distances)))

    return ApproximatedPosition(Point(float(centroid[0]), float(centroid[1])), float(distances[idx]))


class ParticleFilter:
    def __init__(self, num_particles, wall, clock=time.monotonic, rng=None,
                 position_std=DEFAULT_POSITION_STD, max_velocity=MAX_PARTICLE_VELOCITY,
                 reinjection_fraction=REINJECTION_FRACTION):
        if num_particles <= 0:
            raise InvalidConfiguration(f"num_particles must be positive, got {num_particles}")
        if position_std < 0:
            raise InvalidConfiguration(f"position_std must be non-negative, got {position_std}")
        if max_velocity < 0:
            raise InvalidConfiguration(f"max_velocity must be non-negative, got {max_velocity}")
        if not 0 <= reinjection_fraction <= 1:
            raise InvalidConfiguration(f"reinjection_fraction must be in [0, 1], got {reinjection_fraction}")

        self.num_particles = num_particles
        self.wall = wall
        self.clock = clock
        self.rng = rng if rng is not None else random.Random()

        self.position_std = position_std
        self.max_velocity = max_velocity
        self.reinjection_fraction = reinjection_fraction

        self.particles = []
        self.last_prediction_time = None
        self._estimate = None

        self._reinjection_due = False
        self._reinjection_lock = threading.Lock()

    @property
    def is_initialized(self):
        return self.last_prediction_time is not None

    @property
    def estimate(self):
        """Last returned estimate, None before the first prediction"""
        return self._estimate

    @property
    def reinjection_due(self):
        return self._reinjection_due

    def request_reinjection(self):
        """Ask for a share of the population to be reseeded at the next resample.

        Meant to be called by the host's periodic scheduler, possibly from
        another thread.
        """
        with self._reinjection_lock:
            self._reinjection_due = True

    def _consume_reinjection(self):
        with self._reinjection_lock:
            due = self._reinjection_due
            self._reinjection_due = False
        return due

    def predict_position(self, measurement):
        measurement = Point(*measurement)

        if not self.is_initialized:
            self._estimate = ApproximatedPosition(measurement, INITIAL_RADIUS)
            self.initialize_particles_around(measurement)
            self.last_prediction_time = self.clock()
        else:
            now = self.clock()
            dt = now - self.last_prediction_time
            self.last_prediction_time = now
            self._transition_model(dt)

        self._perception_model(measurement)
        self._resample()

        self._estimate = self.estimate_position()
        logger.debug("measurement %s -> estimate %s", measurement, self._estimate)
        return self._estimate

    def initialize_particles_around(self, center):
        """Spread the population as a Gaussian around center, all weights 1"""
        self.particles = [
            Particle(idx, self._gaussian_point(center), 1.0)
            for idx in range(self.num_particles)
        ]

    def _gaussian_point(self, center):
        return Point(
            gaussian_distribution(center.x, self.position_std, self.rng),
            gaussian_distribution(center.y, self.position_std, self.rng),
        )

    def _transition_model(self, dt):
        """Move every particle at a random speed and heading, stalling at the wall"""
        if dt < 0:
            logger.warning("clock went backwards by %.3fs, skipping motion", -dt)
            dt = 0.0

        stalled = 0
        for particle in self.particles:
            old = particle.position
            speed = self.rng.uniform(0, self.max_velocity)
            heading = self.rng.uniform(0, 2 * math.pi)
            candidate = Point(
                old.x + speed * dt * math.cos(heading),
                old.y + speed * dt * math.sin(heading),
            )

            if get_intersection(old, candidate, self.wall.start, self.wall.end).intersects:
                stalled += 1
            else:
                particle.position = candidate

        logger.debug("transition dt=%.3fs, %d particles stalled at the wall", dt, stalled)

    def _perception_model(self, measurement):
        for particle in self.particles:
            d = distance(particle.position, measurement)
            particle.weight = 1.0 / max(d, MIN_DISTANCE)

    def _resample(self):
        """Multinomial resampling, reseeding a few particles when a reinjection is due"""
        previous = self.particles
        n = len(previous)

        try:
            weights_dist = DiscreteDistribution([p.weight for p in previous], self.rng)
        except DegenerateWeightDistribution as e:
            logger.warning("degenerate particle weights (%s), resampling uniformly", e)
            weights_dist = DiscreteDistribution(np.ones(n), self.rng)

        if self._consume_reinjection():
            kept = int(math.floor((1 - self.reinjection_fraction) * n))
        else:
            kept = n

        particles = []
        for i in range(kept):
            drawn = previous[weights_dist.draw()]
            particles.append(Particle(i, drawn.position, drawn.weight))

        center = self._estimate.position
        for i in range(kept, n):
            particles.append(Particle(i, self._gaussian_point(center), 1.0))

        if kept < n:
            logger.debug("reinjected %d particles around %s", n - kept, center)

        self.particles = particles

    def estimate_position(self):
        return estimate_position(self.particles)
