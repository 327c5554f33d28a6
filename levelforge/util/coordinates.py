"""Integer rectangles and bounds helpers for tile coordinates."""

from __future__ import annotations

from collections.abc import Iterator

from levelforge.types import TileCoord, TilePos


class Rect:
    """Rectangle/bounding box in tile coordinates.

    ``x1``/``y1`` are inclusive, ``x2``/``y2`` are exclusive, so a rectangle
    covers ``width * height`` cells.
    """

    def __init__(self, x: TileCoord, y: TileCoord, w: TileCoord, h: TileCoord) -> None:
        self.x1: TileCoord = x
        self.y1: TileCoord = y
        self.x2: TileCoord = x + w
        self.y2: TileCoord = y + h

    @classmethod
    def from_bounds(
        cls, x1: TileCoord, y1: TileCoord, x2: TileCoord, y2: TileCoord
    ) -> Rect:
        """Create a Rect from corner coordinates (x1, y1, x2, y2)."""
        width = x2 - x1
        height = y2 - y1
        return cls(x1, y1, width, height)

    @property
    def width(self) -> TileCoord:
        return self.x2 - self.x1

    @property
    def height(self) -> TileCoord:
        return self.y2 - self.y1

    @property
    def area(self) -> int:
        return self.width * self.height

    def center(self) -> TilePos:
        """Center point rounded to the nearest tile (halves round to even)."""
        return (round(self.x1 + self.width / 2), round(self.y1 + self.height / 2))

    def overlaps(self, other: Rect) -> bool:
        """True if the two rectangles share at least one cell.

        Rectangles that only touch along an edge do not overlap.
        """
        return (
            other.x2 > self.x1
            and other.x1 < self.x2
            and other.y2 > self.y1
            and other.y1 < self.y2
        )

    def contains(self, other: Rect) -> bool:
        """True if ``other`` lies entirely inside this rectangle."""
        return (
            self.x1 <= other.x1
            and self.y1 <= other.y1
            and other.x2 <= self.x2
            and other.y2 <= self.y2
        )

    def expanded(self, margin: TileCoord) -> Rect:
        """Return a copy grown by ``margin`` cells on every side."""
        return Rect.from_bounds(
            self.x1 - margin, self.y1 - margin, self.x2 + margin, self.y2 + margin
        )

    def cells(self) -> Iterator[TilePos]:
        """Yield every covered cell, column by column."""
        for x in range(self.x1, self.x2):
            for y in range(self.y1, self.y2):
                yield (x, y)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rect):
            return NotImplemented
        return (self.x1, self.y1, self.x2, self.y2) == (
            other.x1,
            other.y1,
            other.x2,
            other.y2,
        )

    def __hash__(self) -> int:
        return hash((self.x1, self.y1, self.x2, self.y2))

    def __repr__(self) -> str:
        return f"Rect(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"


# =============================================================================
# BOUNDS CHECKING HELPERS
# =============================================================================


def is_valid_tile_pos(pos: TilePos, width: TileCoord, height: TileCoord) -> bool:
    """Check if tile position is within surface bounds."""
    x, y = pos
    return 0 <= x < width and 0 <= y < height
