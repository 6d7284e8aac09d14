import pygame

from geometry import Point, get_intersection
from particle_filter import Wall


class MapSimulation:
    def __init__(self, width, height, grid_size, wall=None):
        self.width = width
        self.height = height
        self.grid_size = grid_size
        self.line_thickness = 5
        self.margin = 20
        # Single wall splitting the room, open at the bottom
        self.wall = wall or Wall(Point(width / 2, 0), Point(width / 2, height * 0.7))

    def blocks(self, start, end):
        """Check if moving from start to end would pass through the wall"""
        return get_intersection(start, end, self.wall.start, self.wall.end).intersects

    def clamp(self, point):
        """Keep a point inside the room margins"""
        x = min(max(point[0], self.margin), self.width - self.margin)
        y = min(max(point[1], self.margin), self.height - self.margin)
        return Point(x, y)

    def draw_grid(self, screen):
        for x in range(0, self.width, self.grid_size):
            pygame.draw.line(screen, (0, 110, 0), (x, 0), (x, self.height), 1)
        for y in range(0, self.height, self.grid_size):
            pygame.draw.line(screen, (0, 110, 0), (0, y), (self.width, y), 1)

    def draw_map(self, screen):
        screen.fill((0, 128, 0))  # Background green for field
        self.draw_grid(screen)
        pygame.draw.line(screen, (255, 255, 255),
                         self.wall.start, self.wall.end,
                         self.line_thickness)
