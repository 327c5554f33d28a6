from __future__ import annotations

from collections import deque
from random import Random

import numpy as np

from levelforge.environment.surface import GridSurface
from levelforge.environment.tile_types import TileTypeID


class FixedRNG:
    """Stand-in RNG whose integer draws always return ``value`` clamped to range."""

    def __init__(self, value: int) -> None:
        self.value = value

    def range(self, start: int, stop: int) -> int:
        if stop <= start:
            return start
        return min(max(self.value, start), stop - 1)


class RangeChanceRNG:
    """Seeded RNG offering only the integer-range and boolean-chance draws."""

    def __init__(self, seed: int) -> None:
        self._random = Random(seed)

    def range(self, start: int, stop: int) -> int:
        if stop <= start:
            return start
        return self._random.randrange(start, stop)

    def chance(self, probability: float) -> bool:
        return self._random.random() < probability


def walkable_mask(surface: GridSurface) -> np.ndarray:
    return (surface.tiles == TileTypeID.ROOM) | (surface.tiles == TileTypeID.CORRIDOR)


def count_components(mask: np.ndarray) -> int:
    """Number of 4-connected True components in ``mask``."""
    width, height = mask.shape
    seen = np.zeros_like(mask, dtype=bool)
    components = 0
    for x in range(width):
        for y in range(height):
            if not mask[x, y] or seen[x, y]:
                continue
            components += 1
            queue = deque([(x, y)])
            seen[x, y] = True
            while queue:
                cx, cy = queue.popleft()
                for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
                    nx, ny = cx + dx, cy + dy
                    if (
                        0 <= nx < width
                        and 0 <= ny < height
                        and mask[nx, ny]
                        and not seen[nx, ny]
                    ):
                        seen[nx, ny] = True
                        queue.append((nx, ny))
    return components
