"""Base classes and the cooperative driver for generation strategies.

A generation pass is a Python generator: each strategy's ``steps()`` performs
one unit of work (one room, one simulation step, one chunk of rows) and then
yields a `GenerationStep`. The driver, `run_generation`, resumes the pass one
unit at a time and checks the cancellation token before every resume. Work
already applied to the surface is never rolled back.
"""

from __future__ import annotations

import abc
import logging
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from levelforge.environment.surface import GridSurface
    from levelforge.util.rng import RNGStream

logger = logging.getLogger(__name__)


class GenerationCancelled(Exception):
    """Raised when a generation pass is aborted through its CancellationToken.

    The surface keeps every mutation made by units that finished before the
    abort.
    """

    pass


class CancellationToken:
    """Cooperative cancellation flag shared between a pass and its owner."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise GenerationCancelled


@dataclass(frozen=True)
class GenerationStep:
    """Marker yielded after one unit of generation work.

    Attributes:
        kind: What the unit did, e.g. "room", "simulate", "rows".
        index: Zero-based position of this unit among units of the same kind.
    """

    kind: str
    index: int = 0


class GenerationMethod(abc.ABC):
    """Abstract base class for generation strategies."""

    # Short name used for RNG domains and the command-line runner.
    name: ClassVar[str]

    @abc.abstractmethod
    def steps(self, surface: GridSurface, rng: RNGStream) -> Iterator[GenerationStep]:
        """Run one generation pass, yielding after every unit of work.

        Any state from a previous pass must be discarded before the first
        unit, so one instance can be reused for many passes.
        """
        raise NotImplementedError

    def generate(
        self,
        surface: GridSurface,
        rng: RNGStream,
        cancel: CancellationToken | None = None,
    ) -> int:
        """Run a whole pass without pacing. Returns the number of units run."""
        return run_generation(self, surface, rng, cancel)


def run_generation(
    method: GenerationMethod,
    surface: GridSurface,
    rng: RNGStream,
    cancel: CancellationToken | None = None,
    on_step: Callable[[GenerationStep], None] | None = None,
    step_delay: float = 0.0,
) -> int:
    """Drive ``method`` over ``surface`` one unit at a time.

    Args:
        method: The strategy to run.
        surface: Surface to write onto.
        rng: Random stream for this pass.
        cancel: Checked before each unit starts. Once set, the pass stops
            and GenerationCancelled is raised.
        on_step: Called after every finished unit, e.g. to redraw a preview.
        step_delay: Seconds to sleep after every unit.

    Returns:
        The number of units completed.

    Raises:
        GenerationCancelled: If ``cancel`` was set before the pass finished.
    """
    pass_steps = method.steps(surface, rng)
    completed = 0
    try:
        while True:
            if cancel is not None:
                cancel.raise_if_cancelled()
            try:
                step = next(pass_steps)
            except StopIteration:
                break
            completed += 1
            if on_step is not None:
                on_step(step)
            if step_delay > 0:
                time.sleep(step_delay)
    except GenerationCancelled:
        logger.debug(f"{method.name} cancelled after {completed} units")
        raise
    finally:
        pass_steps.close()

    logger.debug(f"{method.name} finished in {completed} units")
    return completed
