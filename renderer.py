# renderer.py

import numpy as np
import pygame

import constants

GLOW_ALPHA = 90  # Alpha of the halo drawn behind each body (0-255)


def mass_to_color(mass: float, min_mass: float, max_mass: float):
    """
    Blue for the lightest bodies, red for the heaviest.
    Masses outside [min_mass, max_mass] are clamped to the ends of the gradient.
    """
    if max_mass > min_mass:
        t = float(np.clip((mass - min_mass) / (max_mass - min_mass), 0.0, 1.0))
    else:
        t = 0.0
    r = int(t * 255)
    g = int((1.0 - t * t) * 200)
    b = int((1.0 - t) * 255)
    return (r, g, b)


# Drawing coordinates are clamped well outside the window so far-flung bodies
# stay inside the integer range pygame accepts.
SCREEN_COORD_LIMIT = 1 << 15


def world_to_screen(position):
    """Maps world coordinates (origin at the center of the screen) to pixels."""
    x = position[0] / constants.SPACE_SCALE + constants.WIDTH / 2
    y = position[1] / constants.SPACE_SCALE + constants.HEIGHT / 2
    return (
        int(np.clip(x, -SCREEN_COORD_LIMIT, SCREEN_COORD_LIMIT)),
        int(np.clip(y, -SCREEN_COORD_LIMIT, SCREEN_COORD_LIMIT)),
    )


class Renderer:
    """
    Draws a read-only view of the bodies every frame.
    Never writes to the simulation state.
    """
    def __init__(self, screen: pygame.Surface, min_mass: float, max_mass: float):
        self.screen = screen
        self.min_mass = min_mass
        self.max_mass = max_mass
        self.glow_surface = pygame.Surface((constants.WIDTH, constants.HEIGHT), pygame.SRCALPHA)

    def _draw_pass(self, surface: pygame.Surface, view, is_glow_pass: bool):
        """
        Draws every body onto `surface`. The glow pass draws translucent halos,
        the main pass draws solid discs. Orbiters first, central body last.
        """
        num_bodies = view.positions.shape[0]
        for i in list(range(1, num_bodies)) + ([0] if num_bodies > 0 else []):
            radius = float(view.radii[i])
            if i == 0:
                color = constants.CENTRAL_COLOR
                glow_radius = radius * constants.CENTRAL_GLOW_FACTOR
            else:
                color = mass_to_color(view.masses[i], self.min_mass, self.max_mass)
                glow_radius = radius + constants.ORBITER_GLOW_PADDING

            center = world_to_screen(view.positions[i])
            if is_glow_pass:
                pygame.draw.circle(surface, (*color, GLOW_ALPHA), center, max(1, int(glow_radius)))
            else:
                pygame.draw.circle(surface, color, center, max(1, int(radius)))

    def draw(self, view, params):
        self.screen.fill(constants.BACKGROUND)

        self.glow_surface.fill((0, 0, 0, 0))
        self._draw_pass(self.glow_surface, view, is_glow_pass=True)
        self.screen.blit(self.glow_surface, (0, 0))

        self._draw_pass(self.screen, view, is_glow_pass=False)

        pygame.display.set_caption(
            f"{constants.TITLE} - Speed: {params.time_scale:.1f}x (+/-) - "
            f"Gravity: {params.gravity_strength:.1f}x (1/2) - ESC to exit"
        )
