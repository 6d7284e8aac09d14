import pygame
import logging
import os
from datetime import datetime
from geometry import distance
from robot import Robot
from map_simulation import MapSimulation
from particle_filter import ParticleFilter

NUM_PARTICLES = 1000
REINJECTION_INTERVAL_MS = 1000
REINJECTION_EVENT = pygame.USEREVENT + 1

# Setup logging
log_folder = 'logs'
os.makedirs(log_folder, exist_ok=True)
log_filename = os.path.join(log_folder, f'pf_log_{datetime.now().strftime("%Y%m%d_%H%M%S")}.txt')
logging.basicConfig(
    filename=log_filename,
    level=logging.INFO,
    format='%(asctime)s - %(message)s'
)


def calculate_estimate_statistics(estimate, robot):
    """Compare the filter estimate against the true position"""
    if estimate is None:
        return None

    return {
        'estimated_x': estimate.position.x,
        'estimated_y': estimate.position.y,
        'radius': estimate.radius,
        'position_error': distance(estimate.position, robot.position),
    }


def draw_particles(screen, particles, color=(255, 0, 255), size=2):
    for p in particles:
        pygame.draw.circle(screen, color, (int(p.position.x), int(p.position.y)), size)


def draw_estimate(screen, estimate, robot, measurement):
    """Draw the estimate circle, the last AR reading and statistics"""
    stats = calculate_estimate_statistics(estimate, robot)
    if stats is None:
        return None

    center = (int(stats['estimated_x']), int(stats['estimated_y']))
    pygame.draw.circle(screen, (0, 255, 0), center, max(int(stats['radius']), 1), 1)
    pygame.draw.circle(screen, (0, 255, 0), center, 5, 1)
    pygame.draw.line(screen, (0, 255, 0), (robot.x, robot.y), center, 1)

    if measurement is not None:
        pygame.draw.circle(screen, (255, 255, 0), (int(measurement.x), int(measurement.y)), 4)

    font = pygame.font.Font(None, 24)
    stats_texts = [
        f"Estimated Position: ({stats['estimated_x']:.1f}, {stats['estimated_y']:.1f})",
        f"Radius (90%): {stats['radius']:.1f}px",
        f"Position Error: {stats['position_error']:.1f}px",
    ]

    for i, text in enumerate(stats_texts):
        surface = font.render(text, True, (255, 255, 255))
        screen.blit(surface, (10, 10 + i * 25))

    return stats


def log_statistics(stats, frame_count):
    if stats:
        logging.info(
            f"Frame {frame_count} - "
            f"Estimated Position: ({stats['estimated_x']:.2f}, {stats['estimated_y']:.2f}) | "
            f"Error: {stats['position_error']:.2f}px | "
            f"Radius: {stats['radius']:.2f}px"
        )


def main():
    pygame.init()
    width, height = 800, 600
    screen = pygame.display.set_mode((width, height))
    clock = pygame.time.Clock()

    map_simulation = MapSimulation(width, height, 20)
    robot = Robot(200, 300)
    pf = ParticleFilter(NUM_PARTICLES, map_simulation.wall)

    # The filter owns no timer, the event loop pumps its reinjection trigger
    pygame.time.set_timer(REINJECTION_EVENT, REINJECTION_INTERVAL_MS)

    frame_count = 0
    measurement = None
    running = True
    while running:
        frame_count += 1
        map_simulation.draw_map(screen)

        keys = pygame.key.get_pressed()
        robot.move(keys, map_simulation)

        reading = robot.ar_measurement()
        if reading is not None:
            measurement = reading
            pf.predict_position(measurement)

        draw_particles(screen, pf.particles)
        stats = draw_estimate(screen, pf.estimate, robot, measurement)
        if stats and frame_count % 30 == 0:  # Log every 30 frames
            log_statistics(stats, frame_count)

        robot.draw(screen)

        pygame.display.flip()
        clock.tick(60)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == REINJECTION_EVENT:
                pf.request_reinjection()

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_r:
                    # Reset robot and start a fresh filter on the next reading
                    robot = Robot(200, 300)
                    pf = ParticleFilter(NUM_PARTICLES, map_simulation.wall)
                    measurement = None
                    logging.info("Filter reset at frame %d", frame_count)

    pygame.quit()

if __name__ == "__main__":
    main()
