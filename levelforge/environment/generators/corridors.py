"""Dog-leg corridor carving shared by the room-based generators."""

from __future__ import annotations

from typing import TYPE_CHECKING

from levelforge.environment.tile_types import TileTypeID

if TYPE_CHECKING:
    from levelforge.environment.surface import GridSurface
    from levelforge.types import TileCoord, TilePos
    from levelforge.util.rng import RNGStream


def carve_h_tunnel(
    surface: GridSurface,
    x1: TileCoord,
    x2: TileCoord,
    y: TileCoord,
    tile: TileTypeID = TileTypeID.CORRIDOR,
) -> None:
    for x in range(min(x1, x2), max(x1, x2) + 1):
        surface.set_tile(x, y, tile)


def carve_v_tunnel(
    surface: GridSurface,
    y1: TileCoord,
    y2: TileCoord,
    x: TileCoord,
    tile: TileTypeID = TileTypeID.CORRIDOR,
) -> None:
    for y in range(min(y1, y2), max(y1, y2) + 1):
        surface.set_tile(x, y, tile)


def carve_dog_leg(
    surface: GridSurface,
    start: TilePos,
    end: TilePos,
    rng: RNGStream,
    tile: TileTypeID = TileTypeID.CORRIDOR,
) -> bool:
    """Carve an L-shaped corridor from ``start`` to ``end``.

    A coin flip picks the leg order. Horizontal-first runs along start's row
    and turns at end's column; vertical-first runs along start's column and
    turns at end's row. Cells outside the surface are skipped.

    Returns:
        True if the horizontal leg was carved first.
    """
    start_x, start_y = start
    end_x, end_y = end
    horizontal_first = rng.range(0, 2) == 0
    if horizontal_first:
        carve_h_tunnel(surface, start_x, end_x, start_y, tile)
        carve_v_tunnel(surface, start_y, end_y, end_x, tile)
    else:
        carve_v_tunnel(surface, start_y, end_y, start_x, tile)
        carve_h_tunnel(surface, start_x, end_x, end_y, tile)
    return horizontal_first
