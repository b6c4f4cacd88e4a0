# constants.py

"""
Application Constants

This module defines static configuration values for the application's framework
and the default physics constants used when config.json omits a value.
These are not expected to change between simulation runs.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable. Simulation units are
  arbitrary "screen units" for distance and seconds for time.
"""

# Screen dimensions
WIDTH = 1920  # Pixels
HEIGHT = 1080  # Pixels

# Framerate
FPS = 60  # Frames per second

# World-to-screen scale (world units per pixel)
SPACE_SCALE = 1.0

# Colors (RGB)
BACKGROUND = (0, 0, 8)       # Very dark blue
CENTRAL_COLOR = (255, 170, 51)  # Orange, used for body 0

# Window Title
TITLE = "N-Body Simulation"

# --- Physics defaults ---
BASE_G = 100.0           # Base gravitational constant (G0)
SOFTENING = 5.0          # Softening length, world units
MAX_STABLE_DT = 0.008    # Largest integration substep, seconds of simulation time
MAX_SUBSTEPS = 64        # Upper bound on substeps per rendered frame

# Body radius is RADIUS_SCALE * cbrt(mass)
RADIUS_SCALE = 1.5

# --- Default initial conditions ---
NUM_BODIES = 500
CENTRAL_MASS = 2000.0
MIN_MASS = 1.0
MAX_MASS = 80.0
SHELL_COUNT = 6
SHELL_SPACING = 150.0    # Distance between orbital shells
SHELL_JITTER = 30.0      # Uniform +/- jitter applied within a shell

# --- Control surface ---
# Multiplicative step applied per frame while a control key is held.
CONTROL_INCREASE_FACTOR = 1.1
CONTROL_DECREASE_FACTOR = 0.9

MIN_TIME_SCALE = 0.01
MAX_TIME_SCALE = 100.0
MIN_GRAVITY_STRENGTH = 0.01
MAX_GRAVITY_STRENGTH = 100.0

# Visual Effects
# Glow radius multipliers relative to a body's drawn radius.
CENTRAL_GLOW_FACTOR = 2.0
ORBITER_GLOW_PADDING = 2  # Pixels beyond the body's radius

# Frames between diagnostic log lines
DIAGNOSTIC_LOG_INTERVAL = 100
