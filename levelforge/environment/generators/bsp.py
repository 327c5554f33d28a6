"""Binary space partitioning room placement.

The surface is recursively cut into a binary tree of rectangles to a fixed
depth. Every leaf gets one room, and rooms are joined bottom-up: each internal
node carves one dog-leg corridor between a room of its first subtree and a
room of its second subtree. Because every internal node contributes exactly
one corridor, all rooms end up connected through the tree.

Known limitation: the room chosen to represent a subtree is always the room of
its first descendant leaf (following first children down), not the room
closest to the split line. Corridors can therefore be longer than needed and
cross other rooms.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from levelforge import config
from levelforge.environment.tile_types import TileTypeID
from levelforge.util.coordinates import Rect

from .base import GenerationMethod, GenerationStep
from .corridors import carve_dog_leg

if TYPE_CHECKING:
    from levelforge.environment.surface import GridSurface
    from levelforge.types import TilePos, TileSize
    from levelforge.util.rng import RNGStream

logger = logging.getLogger(__name__)


def choose_split_axis(
    bounds: Rect, rng: RNGStream, min_leaf_size: int
) -> bool | None:
    """Decide which dimension of ``bounds`` to cut.

    Returns:
        True to cut the width (left/right halves), False to cut the height
        (top/bottom halves), or None if neither dimension can be cut.
    """
    width, height = bounds.width, bounds.height
    if width >= 2 * min_leaf_size and width > height:
        split_width = True
    elif height >= 2 * min_leaf_size and height > width:
        split_width = False
    else:
        split_width = rng.chance(0.5)

    # A one-cell dimension has no interior cut position.
    if split_width and width < 2:
        split_width = False
    elif not split_width and height < 2:
        split_width = True
    if (split_width and width < 2) or (not split_width and height < 2):
        return None
    return split_width


def split_bounds(
    bounds: Rect,
    rng: RNGStream,
    min_leaf_size: int = config.BSP_MIN_LEAF_SIZE,
    ratio_range: tuple[float, float] = config.BSP_SPLIT_RATIO_RANGE,
) -> tuple[Rect, Rect] | None:
    """Cut ``bounds`` into two non-empty rectangles that exactly tile it.

    The cut lands on a whole cell between the two fractions of ``ratio_range``
    of the chosen dimension, clamped so both halves keep at least one cell.
    """
    split_width = choose_split_axis(bounds, rng, min_leaf_size)
    if split_width is None:
        return None

    length = bounds.width if split_width else bounds.height
    low, high = ratio_range
    cut = rng.range(math.ceil(length * low), math.floor(length * high) + 1)
    cut = max(1, min(length - 1, cut))

    if split_width:
        first = Rect(bounds.x1, bounds.y1, cut, bounds.height)
        second = Rect(bounds.x1 + cut, bounds.y1, bounds.width - cut, bounds.height)
    else:
        first = Rect(bounds.x1, bounds.y1, bounds.width, cut)
        second = Rect(bounds.x1, bounds.y1 + cut, bounds.width, bounds.height - cut)
    return first, second


def create_room_within(
    bounds: Rect, rng: RNGStream, min_size: TileSize, max_size: TileSize
) -> Rect | None:
    """Pick a room rectangle that fits entirely inside ``bounds``.

    Room width and height are drawn from ``[min, min(bounds, max)]``. Returns
    None if ``bounds`` is smaller than ``min_size`` in either dimension.
    """
    min_w, min_h = min_size
    max_w, max_h = max_size
    if bounds.width < min_w or bounds.height < min_h:
        return None

    room_w = rng.range(min_w, min(bounds.width, max_w) + 1)
    room_h = rng.range(min_h, min(bounds.height, max_h) + 1)

    # Upper bound stays above x1 so a room that fills the leaf still samples.
    x = rng.range(bounds.x1, max(bounds.x1 + 1, bounds.x2 - room_w + 1))
    y = rng.range(bounds.y1, max(bounds.y1 + 1, bounds.y2 - room_h + 1))
    return Rect(x, y, room_w, room_h)


@dataclass(eq=False)
class BspNode:
    """One rectangle of the partition tree.

    A node is either a leaf (no children) or has exactly two children whose
    bounds tile its own. Only leaves get a room.

    Attributes:
        bounds: Area covered by this node.
        children: The two halves produced by splitting, or None for a leaf.
        room: Room placed in this leaf, contained in ``bounds``.
        room_is_fallback: True when the leaf was too small for a room and its
            whole bounds were used instead.
    """

    bounds: Rect
    children: tuple[BspNode, BspNode] | None = None
    room: Rect | None = None
    room_is_fallback: bool = False

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    @property
    def room_center(self) -> TilePos:
        return (self.room or self.bounds).center()

    def split(
        self,
        depth: int,
        rng: RNGStream,
        min_leaf_size: int = config.BSP_MIN_LEAF_SIZE,
        ratio_range: tuple[float, float] = config.BSP_SPLIT_RATIO_RANGE,
    ) -> None:
        """Split this node recursively until ``depth`` levels are below it."""
        if depth <= 0:
            return

        halves = split_bounds(self.bounds, rng, min_leaf_size, ratio_range)
        if halves is None:
            logger.warning(f"Cannot split {self.bounds}, leaving it as a leaf")
            return

        first, second = halves
        self.children = (BspNode(first), BspNode(second))
        for child in self.children:
            child.split(depth - 1, rng, min_leaf_size, ratio_range)

    def get_leaves(self) -> Iterator[BspNode]:
        """Yield every leaf below this node, first subtree before second."""
        if self.children is None:
            yield self
            return
        for child in self.children:
            yield from child.get_leaves()

    def place_room(
        self, rng: RNGStream, min_size: TileSize, max_size: TileSize
    ) -> Rect:
        """Create and store this leaf's room.

        A leaf smaller than ``min_size`` keeps its own bounds as the room and
        is flagged with ``room_is_fallback``.
        """
        room = create_room_within(self.bounds, rng, min_size, max_size)
        if room is None:
            logger.warning(
                f"Leaf {self.bounds} is smaller than minimum room size {min_size}, "
                "using the leaf bounds"
            )
            room = self.bounds
            self.room_is_fallback = True
        else:
            self.room_is_fallback = False
        self.room = room
        return room

    def first_room_center(self) -> TilePos:
        """Room center of the leaf reached by always following the first child."""
        node = self
        while node.children is not None:
            node = node.children[0]
        return node.room_center

    def connect_nodes(self, connect: Callable[[TilePos, TilePos], object]) -> None:
        """Connect sibling subtrees bottom-up, one call per internal node."""
        if self.children is None:
            return
        first, second = self.children
        first.connect_nodes(connect)
        second.connect_nodes(connect)
        connect(first.first_room_center(), second.first_room_center())


class BspRoomPlacementGenerator(GenerationMethod):
    """Places one room per BSP leaf and joins sibling rooms with corridors."""

    name = "bsp"

    def __init__(
        self,
        split_depth: int = config.BSP_SPLIT_DEPTH,
        room_min_size: TileSize = config.BSP_ROOM_MIN_SIZE,
        room_max_size: TileSize = config.BSP_ROOM_MAX_SIZE,
        min_leaf_size: int = config.BSP_MIN_LEAF_SIZE,
        split_ratio_range: tuple[float, float] = config.BSP_SPLIT_RATIO_RANGE,
    ) -> None:
        self.split_depth = split_depth
        self.room_min_size = room_min_size
        self.room_max_size = room_max_size
        self.min_leaf_size = min_leaf_size
        self.split_ratio_range = split_ratio_range
        self.root: BspNode | None = None

    def steps(self, surface: GridSurface, rng: RNGStream) -> Iterator[GenerationStep]:
        self.root = None
        surface.fill_ground()
        yield GenerationStep("ground")

        self.root = BspNode(surface.bounds)
        self.root.split(
            self.split_depth, rng, self.min_leaf_size, self.split_ratio_range
        )

        leaves = list(self.root.get_leaves())
        for index, leaf in enumerate(leaves):
            room = leaf.place_room(rng, self.room_min_size, self.room_max_size)
            surface.fill_rect(room, TileTypeID.ROOM)
            yield GenerationStep("room", index)

        def connect(start: TilePos, end: TilePos) -> None:
            carve_dog_leg(surface, start, end, rng)

        self.root.connect_nodes(connect)
        logger.debug(f"BSP pass placed {len(leaves)} rooms at depth {self.split_depth}")
        yield GenerationStep("corridors")
