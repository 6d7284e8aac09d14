import random
from collections import defaultdict

import pygame

from geometry import Point
from map_simulation import MapSimulation
from robot import Robot


def pressed(*keys):
    state = defaultdict(bool)
    for key in keys:
        state[key] = True
    return state


def test_wall_blocks_crossing_moves():
    world = MapSimulation(800, 600, 20)
    assert world.blocks(Point(390, 100), Point(410, 100))
    assert not world.blocks(Point(390, 500), Point(410, 500))


def test_robot_cannot_walk_through_wall():
    world = MapSimulation(800, 600, 20)
    robot = Robot(398, 100)
    robot.move(pressed(pygame.K_d), world)
    assert (robot.x, robot.y) == (398, 100)

    robot.move(pressed(pygame.K_a), world)
    assert (robot.x, robot.y) == (394, 100)


def test_robot_stays_inside_room():
    world = MapSimulation(800, 600, 20)
    robot = Robot(22, 300)
    robot.move(pressed(pygame.K_a), world)
    assert robot.x == world.margin


def test_ar_measurement_dropouts():
    robot = Robot(100, 100, sensor_std=5.0, dropout_prob=0.5, rng=random.Random(0))
    readings = [robot.ar_measurement() for _ in range(2000)]
    missing = sum(r is None for r in readings)
    assert 800 < missing < 1200

    xs = [r.x for r in readings if r is not None]
    assert abs(sum(xs) / len(xs) - 100) < 1


def test_ar_measurement_without_noise_is_exact():
    robot = Robot(12, 34, sensor_std=0.0, dropout_prob=0.0)
    assert robot.ar_measurement() == Point(12, 34)
