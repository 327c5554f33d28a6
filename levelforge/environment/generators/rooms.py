"""Dungeon-style map generation with randomly scattered rooms and corridors."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from itertools import pairwise
from typing import TYPE_CHECKING

from levelforge import config
from levelforge.environment.tile_types import TileTypeID
from levelforge.util.coordinates import Rect

from .base import GenerationMethod, GenerationStep
from .corridors import carve_dog_leg

if TYPE_CHECKING:
    from levelforge.environment.surface import GridSurface
    from levelforge.types import TileSize
    from levelforge.util.rng import RNGStream

logger = logging.getLogger(__name__)


class SimpleRoomPlacementGenerator(GenerationMethod):
    """Scatters non-overlapping rooms and chains them with corridors.

    Every attempt draws one candidate room. Candidates that leave the surface
    or come within ``spacing`` cells of an accepted room are dropped without a
    retry, so crowded surfaces end up with fewer than ``max_rooms`` rooms.
    Accepted rooms are then joined in the order they were placed.
    """

    name = "rooms"

    def __init__(
        self,
        max_rooms: int = config.SCATTER_MAX_ROOMS,
        room_min_size: TileSize = config.SCATTER_ROOM_MIN_SIZE,
        room_max_size: TileSize = config.SCATTER_ROOM_MAX_SIZE,
        spacing: int = config.SCATTER_SPACING,
    ) -> None:
        self.max_rooms = max_rooms
        self.room_min_size = room_min_size
        self.room_max_size = room_max_size
        self.spacing = spacing
        self.rooms: list[Rect] = []

    def can_place_room(self, surface: GridSurface, room: Rect) -> bool:
        if not surface.bounds.contains(room):
            return False
        return not any(
            existing.expanded(self.spacing).overlaps(room) for existing in self.rooms
        )

    def _random_room(self, surface: GridSurface, rng: RNGStream) -> Rect:
        min_w, min_h = self.room_min_size
        max_w, max_h = self.room_max_size
        w = rng.range(min_w, max_w + 1)
        h = rng.range(min_h, max_h + 1)

        x = rng.range(0, surface.width - w + 1)
        y = rng.range(0, surface.height - h + 1)
        return Rect(x, y, w, h)

    def steps(self, surface: GridSurface, rng: RNGStream) -> Iterator[GenerationStep]:
        self.rooms = []
        surface.fill_ground()
        yield GenerationStep("ground")

        for attempt in range(self.max_rooms):
            new_room = self._random_room(surface, rng)
            if self.can_place_room(surface, new_room):
                surface.fill_rect(new_room, TileTypeID.ROOM)
                self.rooms.append(new_room)
            yield GenerationStep("attempt", attempt)

        logger.debug(
            f"Placed {len(self.rooms)} of {self.max_rooms} attempted rooms "
            f"on a {surface.width}x{surface.height} surface"
        )

        for previous, room in pairwise(self.rooms):
            carve_dog_leg(surface, previous.center(), room.center(), rng)
        yield GenerationStep("corridors")
