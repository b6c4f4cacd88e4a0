# controls.py

import logging

import pygame

import constants

logger = logging.getLogger("nbody_sim")

# Held key -> (parameter, factor applied once per frame while held)
KEY_BINDINGS = {
    pygame.K_EQUALS: ('time_scale', constants.CONTROL_INCREASE_FACTOR),
    pygame.K_KP_PLUS: ('time_scale', constants.CONTROL_INCREASE_FACTOR),
    pygame.K_MINUS: ('time_scale', constants.CONTROL_DECREASE_FACTOR),
    pygame.K_KP_MINUS: ('time_scale', constants.CONTROL_DECREASE_FACTOR),
    pygame.K_1: ('gravity_strength', constants.CONTROL_DECREASE_FACTOR),
    pygame.K_2: ('gravity_strength', constants.CONTROL_INCREASE_FACTOR),
}

EXIT_KEYS = (pygame.K_ESCAPE,)


class ControlSurface:
    """
    Maps keyboard input to the simulation's two adjustable scalars.

    Adjustments are multiplicative and applied every frame a key is held, so
    holding a key ramps the value smoothly. The simulation clamps the result.
    Only time_scale, gravity_strength and the exit request are ever touched.
    """
    def __init__(self, simulation, bindings=None):
        self.simulation = simulation
        self.bindings = KEY_BINDINGS if bindings is None else bindings

    def handle_events(self, events):
        """Consumes a batch of pygame events. QUIT or ESC ends the run."""
        for event in events:
            if event.type == pygame.QUIT:
                logger.info("Window closed by user.")
                self.simulation.exit()
            elif event.type == pygame.KEYDOWN and event.key in EXIT_KEYS:
                logger.info("Exit key pressed.")
                self.simulation.exit()

    def apply_held_keys(self, pressed):
        """
        Applies every bound key that is currently held.

        - Inputs: pressed - indexable by key code, truthy when held
          (the value returned by pygame.key.get_pressed()).
        """
        factors = {'time_scale': 1.0, 'gravity_strength': 1.0}
        for key, (parameter, factor) in self.bindings.items():
            if pressed[key]:
                factors[parameter] *= factor

        params = self.simulation.params
        if factors['time_scale'] != 1.0:
            self.simulation.set_time_scale(params.time_scale * factors['time_scale'])
        if factors['gravity_strength'] != 1.0:
            self.simulation.set_gravity_strength(params.gravity_strength * factors['gravity_strength'])
