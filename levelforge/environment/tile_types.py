"""
Tile categories written onto a surface by the generators.

This module defines:
- `TileTypeID`: the small integer category stored per cell. `GridSurface`
  keeps a NumPy array of these IDs rather than any richer per-cell object.
- `TileAppearance`: a structured dtype describing how a category is drawn
  in text (glyph) and image (RGB) previews.
- Lookup helpers that convert a whole map of IDs into glyphs or colors in
  one vectorized step.
"""

from __future__ import annotations

from enum import IntEnum

import numpy as np


class TileTypeID(IntEnum):
    """Category of a single surface cell."""

    EMPTY = 0
    GROUND = 1
    ROOM = 2
    CORRIDOR = 3
    WATER = 4
    SAND = 5
    GRASS = 6
    ROCK = 7


# Structure for the preview appearance of a tile category.
TileAppearance = np.dtype(
    [
        ("ch", np.int32),  # Character code (e.g., ord('#'))
        ("rgb", "3B"),  # Preview color: 3 unsigned bytes (0-255 each)
    ]
)

_APPEARANCES: dict[TileTypeID, tuple[str, tuple[int, int, int]]] = {
    TileTypeID.EMPTY: (" ", (0, 0, 0)),
    TileTypeID.GROUND: (".", (70, 110, 60)),
    TileTypeID.ROOM: ("#", (200, 190, 160)),
    TileTypeID.CORRIDOR: ("+", (150, 130, 100)),
    TileTypeID.WATER: ("~", (40, 90, 200)),
    TileTypeID.SAND: (":", (220, 200, 130)),
    TileTypeID.GRASS: ('"', (80, 170, 70)),
    TileTypeID.ROCK: ("^", (110, 110, 115)),
}

# Indexed by TileTypeID value.
APPEARANCE_TABLE = np.array(
    [
        (ord(_APPEARANCES[tile_id][0]), _APPEARANCES[tile_id][1])
        for tile_id in TileTypeID
    ],
    dtype=TileAppearance,
)


def glyph_map(tile_map: np.ndarray) -> np.ndarray:
    """Converts a map of TileTypeIDs into a map of character codes."""
    return APPEARANCE_TABLE["ch"][tile_map]


def color_map(tile_map: np.ndarray) -> np.ndarray:
    """Converts a map of TileTypeIDs into an RGB map with a trailing axis of 3."""
    return APPEARANCE_TABLE["rgb"][tile_map]
