from __future__ import annotations

from collections.abc import Iterator

import pytest

from levelforge.util import rng
from levelforge.util.rng import RNGProvider, RNGStream


@pytest.fixture(autouse=True)
def reset_global_rng() -> Iterator[None]:
    """Drop the global RNG provider before and after each test."""
    rng._provider = None
    yield
    rng._provider = None


@pytest.fixture
def stream() -> RNGStream:
    """A deterministic stream independent of the global provider."""
    return RNGProvider(1234).get("tests")
