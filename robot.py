import random

import pygame

from geometry import Point
from sampling import gaussian_distribution


class Robot:
    def __init__(self, x, y, sensor_std=8.0, dropout_prob=0.2, rng=None):
        self.x = x
        self.y = y
        self.radius = 10
        self.speed = 4
        # AR tracking noise and share of frames with no reading
        self.sensor_std = sensor_std
        self.dropout_prob = dropout_prob
        self.rng = rng if rng is not None else random.Random()

    @property
    def position(self):
        return Point(self.x, self.y)

    def move(self, keys, map_simulation):
        """Move with WASD, refusing steps that would cross the wall"""
        dx = dy = 0
        if keys[pygame.K_w]:
            dy -= self.speed
        if keys[pygame.K_s]:
            dy += self.speed
        if keys[pygame.K_a]:
            dx -= self.speed
        if keys[pygame.K_d]:
            dx += self.speed

        target = Point(self.x + dx, self.y + dy)
        if (dx or dy) and not map_simulation.blocks(self.position, target):
            self.x, self.y = map_simulation.clamp(target)

    def ar_measurement(self):
        """Noisy position from the AR sensor, or None when tracking drops out"""
        if self.rng.random() < self.dropout_prob:
            return None
        return Point(
            gaussian_distribution(self.x, self.sensor_std, self.rng),
            gaussian_distribution(self.y, self.sensor_std, self.rng),
        )

    def draw(self, screen):
        # Draw transparent circle with stroke
        circle_surface = pygame.Surface((self.radius * 2 + 2, self.radius * 2 + 2), pygame.SRCALPHA)
        pygame.draw.circle(circle_surface, (0, 0, 255, 40), (self.radius + 1, self.radius + 1), self.radius)
        pygame.draw.circle(circle_surface, (0, 0, 255, 255), (self.radius + 1, self.radius + 1), self.radius, 2)
        screen.blit(circle_surface, (int(self.x - self.radius - 1), int(self.y - self.radius - 1)))
