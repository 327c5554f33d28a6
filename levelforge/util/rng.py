"""Deterministic random number generation with isolated streams.

Each generation strategy draws from its own random stream derived from a
master seed. This ensures that:

1. A generated level is fully reproducible from the same master seed
2. Changes to one strategy's random consumption don't cascade to others
3. Adding/removing strategies doesn't shift other strategies' sequences

Usage:
    # At startup
    from levelforge.util import rng
    rng.init(config.RANDOM_SEED)

    # Hand a stream to a generation pass
    stream = rng.get("map.bsp")
    method.generate(surface, stream)

    # After rng.reset(), cached references automatically use the new stream

Domain naming convention (hierarchical):
    - "map.bsp", "map.rooms", "map.cellular", "map.noise"
"""

from __future__ import annotations

import zlib
from random import Random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from levelforge.types import RandomSeed


class RNGStream:
    """Proxy that delegates to the current RNG for a domain.

    This wrapper allows callers to cache a reference that survives rng.reset().
    All method calls are forwarded to the underlying Random instance,
    which is looked up fresh each time from the provider.
    """

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self._domain = domain

    def _rng(self) -> Random:
        """Get the current underlying RNG."""
        return self._provider._get_raw(self._domain)

    # -------------------------------------------------------------------------
    # Generation draws
    # -------------------------------------------------------------------------

    def range(self, start: int, stop: int) -> int:
        """Return random integer N such that start <= N < stop.

        An empty range (stop <= start) returns start instead of raising, so a
        misconfigured size limit degrades the output rather than aborting it.
        """
        if stop <= start:
            return start
        return self._rng().randrange(start, stop)

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self._rng().random() < probability


class RNGProvider:
    """Provides isolated RNG streams for different generation strategies.

    Each domain gets its own Random instance derived deterministically
    from the master seed. Domains are identified by string names.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, Random] = {}
        self._proxies: dict[str, RNGStream] = {}

    def get(self, domain: str) -> RNGStream:
        """Get an RNG stream for the named domain.

        Returns a proxy object that can be cached. The proxy automatically
        uses the current underlying RNG, even after reset().

        Args:
            domain: Hierarchical name like "map.bsp" or "map.noise"

        Returns:
            An RNGStream proxy exposing the generation draws
        """
        if domain not in self._proxies:
            self._proxies[domain] = RNGStream(self, domain)
        return self._proxies[domain]

    def _get_raw(self, domain: str) -> Random:
        """Get the raw Random instance for a domain (internal use)."""
        if domain not in self._streams:
            if self._master_seed is None:
                # No seed: use system entropy for non-deterministic behavior
                self._streams[domain] = Random()
            else:
                # crc32 rather than hash(): hash() is randomized per session
                # via PYTHONHASHSEED
                derived_seed = zlib.crc32(f"{self._master_seed}:{domain}".encode())
                self._streams[domain] = Random(derived_seed)
        return self._streams[domain]

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Reset all streams with a new master seed.

        Existing RNGStream proxies remain valid and will use the new streams.

        Args:
            master_seed: New master seed for all streams
        """
        self._master_seed = master_seed
        self._streams.clear()


# =============================================================================
# Module-level API
# =============================================================================

_provider: RNGProvider | None = None


def init(master_seed: RandomSeed = None) -> None:
    """Initialize the global RNG provider with a master seed.

    If a provider already exists, resets it instead of creating a new one.
    This ensures cached RNGStream proxies continue to work after init().

    Args:
        master_seed: The master seed for all random streams.
            Can be int, str, or None for non-deterministic behavior.
    """
    global _provider
    if _provider is not None:
        _provider.reset(master_seed)
    else:
        _provider = RNGProvider(master_seed)


def get(domain: str) -> RNGStream:
    """Get an RNG stream for the named domain.

    If the RNG provider hasn't been initialized yet, it will be auto-initialized
    with a default seed (None, which gives non-deterministic behavior).

    Args:
        domain: Hierarchical name like "map.bsp" or "map.noise"

    Returns:
        An RNGStream proxy exposing the generation draws
    """
    global _provider
    if _provider is None:
        _provider = RNGProvider(None)
    return _provider.get(domain)


def reset(master_seed: RandomSeed = None) -> None:
    """Reset all RNG streams with a new master seed.

    Existing cached RNGStream references remain valid.

    Args:
        master_seed: New master seed for all streams
    """
    if _provider is None:
        raise RuntimeError("RNG not initialized - call rng.init() first")
    _provider.reset(master_seed)
