"""Project-wide constants for the attractor simulation."""

DEFAULT_PARTICLE_COUNT = 50
MIN_PARTICLE_COUNT = 1
MAX_PARTICLE_COUNT = 200
PARTICLE_COUNT_STEP = 5

DEFAULT_TRAIL_CAPACITY = 100

DEFAULT_DT = 0.01
DEFAULT_TIME_SCALE = 1.0
TIME_SCALE_FLOOR = 0.1  # must stay > 0, a zero step freezes the ensemble
TIME_SCALE_CEILING = 5.0
TIME_SCALE_STEP = 0.1

DEFAULT_SYSTEM = "lorenz"

SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600
BACKGROUND_RGB = (0.1, 0.1, 0.15)
COLOR_CHANNEL_RANGE = (0.5, 1.0)
