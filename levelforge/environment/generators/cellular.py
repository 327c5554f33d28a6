"""Cellular automata cave and terrain generation.

Creates organic terrain (caves, rubble fields, rocky outcroppings) using
iterative neighbor-counting rules.

Algorithm:
1. Initialize the grid with random noise (``fill_chance`` alive)
2. For each step:
   - Count alive neighbors in the 8-directional Moore neighborhood.
     Neighbors outside the grid count as alive.
   - An alive cell survives if neighbors >= death_threshold
   - A dead cell is born if neighbors >= birth_threshold
3. Optionally, extract connected regions with find_regions()

Tuning guide:
- fill_chance=0.45, step_count=4 -> balanced caves
- fill_chance=0.35, step_count=5 -> more open areas
- fill_chance=0.55, step_count=3 -> tighter, more enclosed

State lives in two same-shaped boolean arrays. Each step writes the next
generation into the spare array and then swaps the two, so no cell is read
after being overwritten within a step.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from typing import TYPE_CHECKING

import numpy as np

from levelforge import config
from levelforge.environment.tile_types import TileTypeID

from .base import GenerationMethod, GenerationStep

if TYPE_CHECKING:
    from levelforge.environment.surface import GridSurface
    from levelforge.types import TileCoord, TilePos
    from levelforge.util.rng import RNGStream

logger = logging.getLogger(__name__)

_NEIGHBOUR_OFFSETS = [
    (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)
]
_CARDINAL_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def border_mask(width: TileCoord, height: TileCoord) -> np.ndarray:
    """Boolean array that is True on the outer ring of cells."""
    mask = np.zeros((width, height), dtype=bool, order="F")
    if width == 0 or height == 0:
        return mask
    mask[0, :] = True
    mask[-1, :] = True
    mask[:, 0] = True
    mask[:, -1] = True
    return mask


class CellularAutomataGenerator(GenerationMethod):
    """Grows cave-like terrain with a birth/survival rule."""

    name = "cellular"

    def __init__(
        self,
        fill_chance: float = config.CA_FILL_CHANCE,
        birth_threshold: int = config.CA_BIRTH_THRESHOLD,
        death_threshold: int = config.CA_DEATH_THRESHOLD,
        border_walls: bool = config.CA_BORDER_WALLS,
        step_count: int = config.CA_STEP_COUNT,
        alive_tile: TileTypeID = config.CA_ALIVE_TILE,
        dead_tile: TileTypeID = config.CA_DEAD_TILE,
    ) -> None:
        self.fill_chance = fill_chance
        self.birth_threshold = birth_threshold
        self.death_threshold = death_threshold
        self.border_walls = border_walls
        self.step_count = step_count
        self.alive_tile = alive_tile
        self.dead_tile = dead_tile

        self._current = np.zeros((0, 0), dtype=bool)
        self._next = np.zeros((0, 0), dtype=bool)
        self._border = np.zeros((0, 0), dtype=bool)

    @property
    def state(self) -> np.ndarray:
        """The current generation. Shape: (width, height). True means alive."""
        return self._current

    def set_state(self, state: np.ndarray) -> None:
        """Replace the current generation, e.g. with a hand-made pattern."""
        self._current = np.array(state, dtype=bool, order="F")
        self._next = np.zeros_like(self._current)
        self._border = border_mask(*self._current.shape)

    def initialize(self, width: TileCoord, height: TileCoord, rng: RNGStream) -> None:
        """Seed a fresh width x height state from ``fill_chance``."""
        self._current = np.zeros((width, height), dtype=bool, order="F")
        self._next = np.zeros_like(self._current)
        self._border = border_mask(width, height)

        for x in range(width):
            for y in range(height):
                if self.border_walls and self._border[x, y]:
                    continue
                self._current[x, y] = rng.chance(self.fill_chance)

    def neighbour_counts(self) -> np.ndarray:
        """Alive Moore neighbors of every cell, counting off-grid cells as alive."""
        width, height = self._current.shape
        padded = np.pad(self._current, 1, mode="constant", constant_values=True)
        counts = np.zeros((width, height), dtype=np.uint8)
        for dx, dy in _NEIGHBOUR_OFFSETS:
            counts += padded[1 + dx : 1 + dx + width, 1 + dy : 1 + dy + height]
        return counts

    def simulate_step(self) -> None:
        """Advance the automaton by one generation."""
        counts = self.neighbour_counts()
        thresholds = np.where(
            self._current, self.death_threshold, self.birth_threshold
        )
        np.greater_equal(counts, thresholds, out=self._next)
        if self.border_walls:
            self._next[self._border] = False

        self._current, self._next = self._next, self._current

    def flood_fill(
        self, start: TilePos, target_state: bool, visited: np.ndarray
    ) -> set[TilePos]:
        """Collect the 4-connected cells matching ``target_state`` around ``start``.

        ``visited`` is updated in place so repeated calls never revisit a cell.
        """
        width, height = self._current.shape
        region: set[TilePos] = set()
        queue = deque([start])
        visited[start] = True
        while queue:
            cx, cy = queue.popleft()
            region.add((cx, cy))
            for dx, dy in _CARDINAL_OFFSETS:
                nx, ny = cx + dx, cy + dy
                if (
                    0 <= nx < width
                    and 0 <= ny < height
                    and not visited[nx, ny]
                    and self._current[nx, ny] == target_state
                ):
                    visited[nx, ny] = True
                    queue.append((nx, ny))
        return region

    def find_regions(self, target_state: bool = True) -> list[set[TilePos]]:
        """Split all cells in ``target_state`` into maximal 4-connected regions."""
        width, height = self._current.shape
        visited = np.zeros((width, height), dtype=bool, order="F")
        regions: list[set[TilePos]] = []
        for x in range(width):
            for y in range(height):
                if not visited[x, y] and self._current[x, y] == target_state:
                    regions.append(self.flood_fill((x, y), target_state, visited))
        logger.debug(
            f"Found {len(regions)} regions of "
            f"{'alive' if target_state else 'dead'} cells"
        )
        return regions

    def paint(self, surface: GridSurface) -> None:
        """Write the alive and dead tiles for the current state onto ``surface``."""
        surface.fill_mask(self._current, self.alive_tile)
        surface.fill_mask(~self._current, self.dead_tile)

    def post_process(self, surface: GridSurface) -> None:
        """Hook run after the last step. Does nothing by default.

        Subclasses can use find_regions() here to fill small pockets or
        connect caves.
        """

    def steps(self, surface: GridSurface, rng: RNGStream) -> Iterator[GenerationStep]:
        self.initialize(surface.width, surface.height, rng)
        self.paint(surface)
        yield GenerationStep("initialize")

        for step in range(self.step_count):
            self.simulate_step()
            self.paint(surface)
            yield GenerationStep("simulate", step)

        self.post_process(surface)
        logger.debug(
            f"Automaton finished {self.step_count} steps with "
            f"{int(np.count_nonzero(self._current))} alive cells"
        )
        yield GenerationStep("post_process")
