"""
Configuration constants.

Centralizes the default parameters of every generation strategy.
Organized by strategy for easy tuning. Strategy constructors read these as
their keyword-argument defaults, so changing a value here changes the default
for every caller that doesn't pass one explicitly.
"""

from typing import Literal

from levelforge.environment.tile_types import TileTypeID

# =============================================================================
# GENERAL
# =============================================================================

# RANDOM_SEED = None
RANDOM_SEED = "levelforge"

# Default surface dimensions used by the command-line runner
MAP_WIDTH = 64
MAP_HEIGHT = 48

# Seconds to pause between generation units when pacing a visualization.
# 0 runs at full speed.
STEP_DELAY = 0.0

# =============================================================================
# BSP ROOM PLACEMENT
# =============================================================================

# Tree depth. Leaf count is 2 ** BSP_SPLIT_DEPTH.
BSP_SPLIT_DEPTH = 4

# (width, height) limits for rooms placed inside leaves
BSP_ROOM_MIN_SIZE = (4, 4)
BSP_ROOM_MAX_SIZE = (8, 8)

# A dimension at least twice this size, and longer than the other one,
# is always the one that gets cut. Below that the axis is a coin flip.
BSP_MIN_LEAF_SIZE = 6

# Split position as a fraction of the dimension being cut
BSP_SPLIT_RATIO_RANGE = (0.4, 0.6)

# =============================================================================
# SIMPLE ROOM PLACEMENT
# =============================================================================

# Placement attempts, not a guaranteed room count
SCATTER_MAX_ROOMS = 10

SCATTER_ROOM_MIN_SIZE = (4, 4)
SCATTER_ROOM_MAX_SIZE = (8, 8)

# Empty cells kept between any two accepted rooms
SCATTER_SPACING = 2

# =============================================================================
# CELLULAR AUTOMATA
# =============================================================================

# Probability that an interior cell starts alive
CA_FILL_CHANCE = 0.45

# Neighbor-count cutoffs (0-8). Out-of-grid neighbors count as alive.
CA_BIRTH_THRESHOLD = 4
CA_DEATH_THRESHOLD = 3

# Pin the outer ring dead on initialization and after every step
CA_BORDER_WALLS = True

CA_STEP_COUNT = 5

CA_ALIVE_TILE = TileTypeID.GRASS
CA_DEAD_TILE = TileTypeID.ROCK

# =============================================================================
# NOISE TERRAIN
# =============================================================================

NOISE_ALGORITHM: Literal["perlin", "simplex", "wavelet"] = "simplex"
NOISE_IMPLEMENTATION: Literal["simple", "fbm", "turbulence"] = "fbm"

NOISE_FREQUENCY = 0.0296
NOISE_AMPLITUDE = 1.1

# Fractal layering
NOISE_OCTAVES = 2
NOISE_LACUNARITY = 1.2
NOISE_GAIN = 0.5

# Ascending category cutoffs in [-1, 1]. Values above the grass height are rock.
NOISE_WATER_HEIGHT = -0.92
NOISE_SAND_HEIGHT = -0.41
NOISE_GRASS_HEIGHT = 0.58
NOISE_ROCK_HEIGHT = 1.0

# Rows classified per generation unit
NOISE_ROWS_PER_STEP = 8
