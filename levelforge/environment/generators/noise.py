"""Noise-driven terrain classification.

A coherent noise field from ``tcod.noise`` is sampled once per cell, scaled by
``amplitude`` and clamped to [-1, 1]. Each value is then mapped to a terrain
category by testing ascending heights in order:

    value <= water -> WATER
    value <= sand  -> SAND
    value <= grass -> GRASS
    otherwise      -> ROCK

Heights are used as given. If they are not ascending, some categories are
simply never selected.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import tcod.noise
from PIL import Image

from levelforge import config
from levelforge.environment.tile_types import TileTypeID

from .base import GenerationMethod, GenerationStep

if TYPE_CHECKING:
    from levelforge.environment.surface import GridSurface
    from levelforge.types import TileCoord
    from levelforge.util.rng import RNGStream

logger = logging.getLogger(__name__)

NOISE_ALGORITHMS = {
    "perlin": tcod.noise.Algorithm.PERLIN,
    "simplex": tcod.noise.Algorithm.SIMPLEX,
    "wavelet": tcod.noise.Algorithm.WAVELET,
}

NOISE_IMPLEMENTATIONS = {
    "simple": tcod.noise.Implementation.SIMPLE,
    "fbm": tcod.noise.Implementation.FBM,
    "turbulence": tcod.noise.Implementation.TURBULENCE,
}

# libtcod's own default, used when gain can't be expressed as a Hurst exponent
_DEFAULT_HURST = 0.5


def hurst_for_gain(gain: float, lacunarity: float) -> float:
    """Convert a per-octave amplitude gain into libtcod's Hurst exponent.

    libtcod weights octave ``i`` by ``lacunarity ** (-hurst * i)``, so a gain
    ``g`` per octave needs ``hurst = -log(g) / log(lacunarity)``.
    """
    if gain <= 0 or lacunarity <= 0 or math.isclose(lacunarity, 1.0):
        return _DEFAULT_HURST
    return -math.log(gain) / math.log(lacunarity)


@dataclass(frozen=True)
class TerrainHeights:
    """Ascending cutoffs that split noise values into terrain categories.

    Attributes:
        water: Values at or below this are water.
        sand: Values at or below this (and above water) are sand.
        grass: Values at or below this (and above sand) are grass.
        rock: Top of the rock band. Noise is clamped to [-1, 1], so with the
            default of 1.0 everything above ``grass`` is rock.
    """

    water: float = config.NOISE_WATER_HEIGHT
    sand: float = config.NOISE_SAND_HEIGHT
    grass: float = config.NOISE_GRASS_HEIGHT
    rock: float = config.NOISE_ROCK_HEIGHT

    def classify(self, value: float) -> TileTypeID:
        if value <= self.water:
            return TileTypeID.WATER
        if value <= self.sand:
            return TileTypeID.SAND
        if value <= self.grass:
            return TileTypeID.GRASS
        return TileTypeID.ROCK


class NoiseTerrainGenerator(GenerationMethod):
    """Classifies every cell into water, sand, grass or rock from a noise field.

    The sampled field is kept in ``noise_map`` after the pass so values can be
    queried with value_at() or exported with save_debug_image().
    """

    name = "noise"

    def __init__(
        self,
        algorithm: str = config.NOISE_ALGORITHM,
        implementation: str = config.NOISE_IMPLEMENTATION,
        frequency: float = config.NOISE_FREQUENCY,
        amplitude: float = config.NOISE_AMPLITUDE,
        octaves: int = config.NOISE_OCTAVES,
        lacunarity: float = config.NOISE_LACUNARITY,
        gain: float = config.NOISE_GAIN,
        heights: TerrainHeights | None = None,
        rows_per_step: int = config.NOISE_ROWS_PER_STEP,
    ) -> None:
        self.algorithm = algorithm
        self.implementation = implementation
        self.frequency = frequency
        self.amplitude = amplitude
        self.octaves = octaves
        self.lacunarity = lacunarity
        self.gain = gain
        self.heights = heights if heights is not None else TerrainHeights()
        self.rows_per_step = rows_per_step
        self.noise_map: np.ndarray | None = None

    def create_noise(self, seed: int) -> tcod.noise.Noise:
        return tcod.noise.Noise(
            dimensions=2,
            algorithm=NOISE_ALGORITHMS[self.algorithm],
            implementation=NOISE_IMPLEMENTATIONS[self.implementation],
            hurst=hurst_for_gain(self.gain, self.lacunarity),
            lacunarity=self.lacunarity,
            octaves=self.octaves,
            seed=seed,
        )

    def build_noise_map(
        self, width: TileCoord, height: TileCoord, seed: int
    ) -> np.ndarray:
        """Sample, scale and clamp the field for every cell. Shape: (width, height)."""
        noise = self.create_noise(seed)
        ogrid = [
            np.arange(width, dtype=np.float32) * self.frequency,
            np.arange(height, dtype=np.float32) * self.frequency,
        ]
        values = noise.sample_ogrid(ogrid) * self.amplitude
        self.noise_map = np.clip(values, -1.0, 1.0).astype(np.float32)
        return self.noise_map

    def value_at(self, x: TileCoord, y: TileCoord) -> float:
        """Cached noise value at a cell, or 0.0 outside the map or before a pass."""
        if self.noise_map is None:
            return 0.0
        width, height = self.noise_map.shape
        if not (0 <= x < width and 0 <= y < height):
            return 0.0
        return float(self.noise_map[x, y])

    def steps(self, surface: GridSurface, rng: RNGStream) -> Iterator[GenerationStep]:
        self.noise_map = None
        noise_map = self.build_noise_map(
            surface.width, surface.height, rng.range(0, 2**31)
        )

        rows = max(1, self.rows_per_step)
        for index, start_y in enumerate(range(0, surface.height, rows)):
            end_y = min(start_y + rows, surface.height)
            for x in range(surface.width):
                for y in range(start_y, end_y):
                    surface.set_tile(x, y, self.heights.classify(noise_map[x, y]))
            yield GenerationStep("rows", index)

    def save_debug_image(self, path: str | Path, alpha: float = 1.0) -> None:
        """Save the cached noise map as a grayscale PNG (-1 black, +1 white)."""
        if self.noise_map is None:
            raise RuntimeError("No noise map yet - run a generation pass first")

        gray = np.round((self.noise_map + 1.0) * 0.5 * 255).astype(np.uint8)
        # (width, height) -> (height, width) for PIL's row-major layout
        image = Image.fromarray(np.ascontiguousarray(gray.T))
        if alpha < 1.0:
            image.putalpha(round(max(0.0, alpha) * 255))
        image.save(path)
        logger.info(
            f"Noise debug image {self.noise_map.shape[0]}x{self.noise_map.shape[1]} "
            f"saved to {path}"
        )
