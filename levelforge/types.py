from __future__ import annotations

# =============================================================================
# TILE-BASED COORDINATE SYSTEMS (Always integers)
# =============================================================================

TileCoord = int  # Always integer tile position

# Surface coordinates - absolute positions on the generated grid
TilePos = tuple[TileCoord, TileCoord]  # Example: (5, 3) = tile 5,3 on the surface

# Width/height pair used for room size limits
TileSize = tuple[TileCoord, TileCoord]  # Example: (4, 6) = 4 wide, 6 tall

# =============================================================================
# UTILITY TYPES
# =============================================================================

# Master seed accepted by the RNG provider. None means system entropy.
RandomSeed = int | str | None
