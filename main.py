# main.py

import logging
import sys

import numpy as np
import pygame

import constants
import logger_setup
from config_loader import ConfigError, load_config
from controls import ControlSurface
from forces import configure_worker_threads
from renderer import Renderer
from simulation import Simulation

# Get the application's dedicated logger
logger = logging.getLogger("nbody_sim")


def run_frame_loop(simulation: Simulation, controls: ControlSurface, renderer: Renderer, clock):
    """
    Drives the simulation until it exits: input, physics step, draw.
    Diagnostics are logged every DIAGNOSTIC_LOG_INTERVAL frames.
    """
    initial_energy = simulation.get_total_energy()
    logger.info(f"Initial total energy: {initial_energy:.2f}")

    # Prime the clock so the first frame does not count startup time.
    clock.tick(constants.FPS)

    while simulation.is_running:
        # --- Input ---
        controls.handle_events(pygame.event.get())
        if not simulation.is_running:
            break
        controls.apply_held_keys(pygame.key.get_pressed())

        # --- Physics ---
        frame_delta_time = clock.tick(constants.FPS) / 1000.0
        simulation.step(frame_delta_time)

        # --- Logging (throttled) ---
        if simulation.frame_count % constants.DIAGNOSTIC_LOG_INTERVAL == 0:
            ke = simulation.get_total_kinetic_energy()
            pe = simulation.get_total_potential_energy()
            total_energy = ke + pe
            momentum = simulation.get_total_momentum()
            central = simulation.central_body()
            logger.debug(
                f"Frame={simulation.frame_count}, "
                f"SimTime={simulation.simulated_time:.3f}, "
                f"Substeps={simulation.last_plan.count}, "
                f"Kinetic={ke:.2f}, "
                f"Potential={pe:.2f}, "
                f"TotalEnergy={total_energy:.2f}, "
                f"Drift={total_energy - initial_energy:+.2f}, "
                f"Momentum=({momentum[0]:.3f}, {momentum[1]:.3f}), "
                f"CentralPos=({central.position[0]:.3f}, {central.position[1]:.3f}), "
                f"CentralSpeed={np.linalg.norm(central.velocity):.3f}, "
                f"FPS={clock.get_fps():.1f}"
            )

        # --- Drawing ---
        renderer.draw(simulation.bodies(), simulation.params)
        pygame.display.flip()


def main(config_path='config.json'):
    """
    Main function to initialize and run the N-body simulation.
    """
    # --- Setup ---
    # Validated before logging is configured from it.
    try:
        config = load_config(config_path)
    except ConfigError as exc:
        logger_setup.setup_fallback_logging()
        logger.critical(f"Invalid configuration: {exc}")
        return 1

    try:
        logger_setup.setup_logging(config)
    except OSError as exc:
        logger_setup.setup_fallback_logging()
        logger.critical(f"Could not create the run log for {config['run_id']!r}: {exc}")
        return 1
    sim_config = config['simulation']

    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {config}")

    # Initialize the master random number generator (RNG)
    rng = np.random.default_rng(config['master_seed'])
    logger.info(f"Master RNG initialized with seed: {config['master_seed']}")

    configure_worker_threads(sim_config['worker_threads'])
    simulation = Simulation.from_config(sim_config, rng)

    # --- Initialization ---
    pygame.init()
    screen = pygame.display.set_mode((constants.WIDTH, constants.HEIGHT))
    pygame.display.set_caption(constants.TITLE)
    clock = pygame.time.Clock()

    controls = ControlSurface(simulation)
    renderer = Renderer(screen, sim_config['min_mass'], sim_config['max_mass'])

    try:
        run_frame_loop(simulation, controls, renderer, clock)
    finally:
        logger.info("Application shutting down.")
        pygame.quit()
    return 0

if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
