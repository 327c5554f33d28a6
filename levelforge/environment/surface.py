"""Grid surface that generators write their output onto."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from levelforge.environment import tile_types
from levelforge.environment.tile_types import TileTypeID
from levelforge.types import TileCoord
from levelforge.util.coordinates import Rect, is_valid_tile_pos


class GridSurface:
    """A width x height grid of tile categories.

    Cells can be absent: ``present`` marks which coordinates exist. Writes to
    absent or out-of-range cells are silently ignored, so generators never
    need to bounds-check before writing.

    Attributes:
        width: Surface width in tiles.
        height: Surface height in tiles.
        tiles: 2D numpy array of TileTypeID values. Shape: (width, height).
        present: 2D boolean array, True where a cell exists.
    """

    def __init__(
        self,
        width: TileCoord,
        height: TileCoord,
        present: np.ndarray | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.tiles = np.full(
            (width, height),
            fill_value=TileTypeID.EMPTY,
            dtype=np.uint8,
            order="F",
        )
        if present is None:
            present = np.ones((width, height), dtype=bool, order="F")
        elif present.shape != (width, height):
            raise ValueError(
                f"Presence mask shape {present.shape} does not match "
                f"surface size {(width, height)}"
            )
        self.present = present

    @property
    def bounds(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    def try_get_cell(self, x: TileCoord, y: TileCoord) -> TileTypeID | None:
        """Return the cell's category, or None if the cell doesn't exist."""
        if not is_valid_tile_pos((x, y), self.width, self.height):
            return None
        if not self.present[x, y]:
            return None
        return TileTypeID(self.tiles[x, y])

    def set_ground(self, x: TileCoord, y: TileCoord) -> None:
        self.set_tile(x, y, TileTypeID.GROUND)

    def fill_ground(self) -> None:
        """Mark every present cell as ground."""
        for x in range(self.width):
            for y in range(self.height):
                self.set_ground(x, y)

    def set_tile(self, x: TileCoord, y: TileCoord, tile: TileTypeID) -> None:
        if self.try_get_cell(x, y) is None:
            return
        self.tiles[x, y] = tile

    def fill_rect(self, rect: Rect, tile: TileTypeID) -> None:
        """Write ``tile`` to every present cell of ``rect``."""
        for x, y in rect.cells():
            self.set_tile(x, y, tile)

    def fill_mask(self, mask: np.ndarray, tile: TileTypeID) -> None:
        """Write ``tile`` to every present cell where ``mask`` is True."""
        self.tiles[mask & self.present] = tile

    def count(self, tile: TileTypeID) -> int:
        return int(np.count_nonzero(self.tiles == tile))

    # -------------------------------------------------------------------------
    # Previews
    # -------------------------------------------------------------------------

    def to_text(self) -> str:
        """Render the surface as rows of glyphs, top row first."""
        glyphs = tile_types.glyph_map(self.tiles)
        return "\n".join(
            "".join(chr(glyphs[x, y]) for x in range(self.width))
            for y in range(self.height)
        )

    def save_image(self, path: str | Path, scale: int = 4) -> None:
        """Save an RGB preview with each tile drawn as a ``scale`` pixel square."""
        # (width, height, 3) -> (height, width, 3) for PIL's row-major layout
        rgb = np.ascontiguousarray(tile_types.color_map(self.tiles).transpose(1, 0, 2))
        image = Image.fromarray(rgb)
        if scale > 1:
            image = image.resize(
                (self.width * scale, self.height * scale), Image.Resampling.NEAREST
            )
        image.save(path)
