"""Factory for creating generation strategies by name.

Available strategies:
- "bsp": Binary space partitioning rooms joined through the tree
- "rooms": Randomly scattered rooms chained in placement order
- "cellular": Cellular automata caves
- "noise": Noise-classified water/sand/grass/rock terrain
"""

from __future__ import annotations

from typing import Any

from .base import GenerationMethod
from .bsp import BspRoomPlacementGenerator
from .cellular import CellularAutomataGenerator
from .noise import NoiseTerrainGenerator
from .rooms import SimpleRoomPlacementGenerator

GENERATORS: dict[str, type[GenerationMethod]] = {
    BspRoomPlacementGenerator.name: BspRoomPlacementGenerator,
    SimpleRoomPlacementGenerator.name: SimpleRoomPlacementGenerator,
    CellularAutomataGenerator.name: CellularAutomataGenerator,
    NoiseTerrainGenerator.name: NoiseTerrainGenerator,
}


def create_generator(name: str, **params: Any) -> GenerationMethod:
    """Create a strategy by name.

    Args:
        name: One of the keys of GENERATORS.
        **params: Constructor arguments overriding the config defaults.

    Returns:
        A configured GenerationMethod ready to run.

    Raises:
        ValueError: If the strategy name is not recognized.
    """
    try:
        generator_class = GENERATORS[name]
    except KeyError:
        raise ValueError(f"Unknown generator name: {name!r}") from None
    return generator_class(**params)
