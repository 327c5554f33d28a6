from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from levelforge.environment.generators.noise import (
    NoiseTerrainGenerator,
    TerrainHeights,
    hurst_for_gain,
)
from levelforge.environment.surface import GridSurface
from levelforge.environment.tile_types import TileTypeID
from levelforge.util.rng import RNGProvider


class TestTerrainHeights:
    def test_classify_bands(self) -> None:
        heights = TerrainHeights(water=-0.9, sand=-0.4, grass=0.5, rock=1.0)

        assert heights.classify(-0.95) == TileTypeID.WATER
        assert heights.classify(-0.9) == TileTypeID.WATER
        assert heights.classify(-0.4) == TileTypeID.SAND
        assert heights.classify(0.5) == TileTypeID.GRASS
        assert heights.classify(0.9) == TileTypeID.ROCK

    def test_rock_height_does_not_cap_rock(self) -> None:
        heights = TerrainHeights(water=-0.9, sand=-0.4, grass=0.5, rock=0.6)

        assert heights.classify(1.0) == TileTypeID.ROCK

    def test_misordered_heights_skip_categories(self) -> None:
        heights = TerrainHeights(water=0.5, sand=-0.5, grass=0.8, rock=1.0)

        assert heights.classify(-0.7) == TileTypeID.WATER
        assert heights.classify(0.6) == TileTypeID.GRASS
        values = np.linspace(-1.0, 1.0, 201)
        assert TileTypeID.SAND not in {heights.classify(v) for v in values}


class TestHurstForGain:
    def test_half_gain_doubling_lacunarity(self) -> None:
        assert hurst_for_gain(0.5, 2.0) == pytest.approx(1.0)

    def test_degenerate_lacunarity_uses_default(self) -> None:
        assert hurst_for_gain(0.5, 1.0) == 0.5
        assert hurst_for_gain(0.0, 2.0) == 0.5


class TestNoiseTerrainGenerator:
    def test_noise_map_shape_and_range(self, stream) -> None:
        method = NoiseTerrainGenerator()
        surface = GridSurface(24, 16)

        method.generate(surface, stream)

        assert method.noise_map.shape == (24, 16)
        assert method.noise_map.dtype == np.float32
        assert method.noise_map.min() >= -1.0
        assert method.noise_map.max() <= 1.0

    def test_tiles_follow_classification(self, stream) -> None:
        method = NoiseTerrainGenerator(frequency=0.15)
        surface = GridSurface(24, 16)

        method.generate(surface, stream)

        for x in range(24):
            for y in range(16):
                expected = method.heights.classify(method.noise_map[x, y])
                assert surface.tiles[x, y] == expected
        assert surface.count(TileTypeID.EMPTY) == 0

    def test_value_at(self, stream) -> None:
        method = NoiseTerrainGenerator()
        assert method.value_at(0, 0) == 0.0

        method.generate(GridSurface(8, 8), stream)

        assert method.value_at(3, 4) == pytest.approx(float(method.noise_map[3, 4]))
        assert method.value_at(8, 0) == 0.0
        assert method.value_at(-1, 2) == 0.0

    @pytest.mark.parametrize(
        ("height", "rows_per_step", "expected"),
        [(10, 4, 3), (16, 8, 2), (1, 8, 1), (5, 1, 5)],
    )
    def test_one_unit_per_row_chunk(
        self, stream, height: int, rows_per_step: int, expected: int
    ) -> None:
        method = NoiseTerrainGenerator(rows_per_step=rows_per_step)
        surface = GridSurface(6, height)

        assert method.generate(surface, stream) == expected
        assert surface.count(TileTypeID.EMPTY) == 0

    def test_zero_amplitude_is_flat_grass(self, stream) -> None:
        method = NoiseTerrainGenerator(amplitude=0.0)
        surface = GridSurface(12, 12)

        method.generate(surface, stream)

        assert surface.count(TileTypeID.GRASS) == 144

    def test_large_amplitude_is_clamped(self, stream) -> None:
        method = NoiseTerrainGenerator(amplitude=1000.0, frequency=0.2)

        method.generate(GridSurface(20, 20), stream)

        assert np.all(np.abs(method.noise_map) <= 1.0)
        assert np.count_nonzero(np.abs(method.noise_map) == 1.0) > 200

    def test_same_seed_same_terrain(self) -> None:
        first = GridSurface(32, 24)
        second = GridSurface(32, 24)

        NoiseTerrainGenerator().generate(first, RNGProvider(11).get("map.noise"))
        NoiseTerrainGenerator().generate(second, RNGProvider(11).get("map.noise"))

        np.testing.assert_array_equal(first.tiles, second.tiles)

    @pytest.mark.parametrize("algorithm", ["perlin", "simplex", "wavelet"])
    @pytest.mark.parametrize("implementation", ["simple", "fbm", "turbulence"])
    def test_all_noise_kinds_produce_terrain(
        self, stream, algorithm: str, implementation: str
    ) -> None:
        method = NoiseTerrainGenerator(
            algorithm=algorithm, implementation=implementation, frequency=0.1
        )
        surface = GridSurface(16, 16)

        method.generate(surface, stream)

        assert surface.count(TileTypeID.EMPTY) == 0


class TestDebugImage:
    def test_requires_a_pass(self, tmp_path: Path) -> None:
        with pytest.raises(RuntimeError, match="No noise map"):
            NoiseTerrainGenerator().save_debug_image(tmp_path / "noise.png")

    def test_opaque_grayscale(self, stream, tmp_path: Path) -> None:
        method = NoiseTerrainGenerator()
        method.generate(GridSurface(20, 10), stream)
        path = tmp_path / "noise.png"

        method.save_debug_image(path)

        with Image.open(path) as image:
            assert image.size == (20, 10)
            assert image.mode == "L"

    def test_translucent_grayscale(self, stream, tmp_path: Path) -> None:
        method = NoiseTerrainGenerator()
        method.generate(GridSurface(20, 10), stream)
        path = tmp_path / "noise.png"

        method.save_debug_image(path, alpha=0.5)

        with Image.open(path) as image:
            assert image.mode == "LA"
            assert image.getpixel((0, 0))[1] == 128
