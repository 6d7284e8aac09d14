import math
from typing import NamedTuple, Optional


class Point(NamedTuple):
    x: float
    y: float


class Intersection(NamedTuple):
    """Result of a segment test: either no hit, or the hit point"""
    intersects: bool
    point: Optional[Point] = None


NO_INTERSECTION = Intersection(False)


def squared_distance(p1, p2):
    dx = p1[0] - p2[0]
    dy = p1[1] - p2[1]
    return dx * dx + dy * dy


def distance(p1, p2):
    """Euclidean distance between two points"""
    return math.sqrt(squared_distance(p1, p2))


def get_intersection(p0, p1, p2, p3):
    """Intersect segment p0-p1 with segment p2-p3.

    Both segments are parametrised and solved for s and t; the segments meet
    when both parameters fall in [0, 1]. Parallel or coincident segments have
    no unique solution and are reported as not intersecting.
    """
    x0, y0 = p0
    x1, y1 = p1
    x2, y2 = p2
    x3, y3 = p3

    s1_x, s1_y = x1 - x0, y1 - y0
    s2_x, s2_y = x3 - x2, y3 - y2

    denominator = -s2_x * s1_y + s1_x * s2_y
    if denominator == 0:
        return NO_INTERSECTION

    s = (-s1_y * (x0 - x2) + s1_x * (y0 - y2)) / denominator
    t = (s2_x * (y0 - y2) - s2_y * (x0 - x2)) / denominator
    if not (math.isfinite(s) and math.isfinite(t)):
        return NO_INTERSECTION

    if 0 <= s <= 1 and 0 <= t <= 1:
        return Intersection(True, Point(x0 + t * s1_x, y0 + t * s1_y))

    return NO_INTERSECTION
