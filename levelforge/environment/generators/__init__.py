"""Level and terrain generation algorithms for levelforge.

This package provides four interchangeable strategies:
- BspRoomPlacementGenerator: Rooms in the leaves of a BSP tree
- SimpleRoomPlacementGenerator: Greedy random room scattering
- CellularAutomataGenerator: Cave smoothing with a birth/survival rule
- NoiseTerrainGenerator: Terrain categories from a coherent noise field

Every strategy runs as a sequence of small units driven by run_generation(),
which checks a CancellationToken between units.
"""

from .base import (
    CancellationToken,
    GenerationCancelled,
    GenerationMethod,
    GenerationStep,
    run_generation,
)
from .bsp import BspNode, BspRoomPlacementGenerator
from .cellular import CellularAutomataGenerator
from .corridors import carve_dog_leg
from .factory import GENERATORS, create_generator
from .noise import NoiseTerrainGenerator, TerrainHeights
from .rooms import SimpleRoomPlacementGenerator

__all__ = [
    "GENERATORS",
    "BspNode",
    "BspRoomPlacementGenerator",
    "CancellationToken",
    "CellularAutomataGenerator",
    "GenerationCancelled",
    "GenerationMethod",
    "GenerationStep",
    "NoiseTerrainGenerator",
    "SimpleRoomPlacementGenerator",
    "TerrainHeights",
    "carve_dog_leg",
    "create_generator",
    "run_generation",
]
