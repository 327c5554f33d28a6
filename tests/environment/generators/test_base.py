"""Tests for the cooperative generation driver and the strategy factory."""

from __future__ import annotations

import time
from collections.abc import Iterator

import numpy as np
import pytest

from levelforge.environment.generators import (
    GENERATORS,
    BspRoomPlacementGenerator,
    CancellationToken,
    CellularAutomataGenerator,
    GenerationCancelled,
    GenerationMethod,
    GenerationStep,
    NoiseTerrainGenerator,
    SimpleRoomPlacementGenerator,
    create_generator,
    run_generation,
)
from levelforge.environment.surface import GridSurface
from levelforge.environment.tile_types import TileTypeID
from levelforge.util.rng import RNGProvider
from tests.helpers import RangeChanceRNG


class CountingMethod(GenerationMethod):
    """Yields ``units`` steps and records whether its generator was closed."""

    name = "counting"

    def __init__(self, units: int) -> None:
        self.units = units
        self.started = 0
        self.closed = False

    def steps(self, surface, rng) -> Iterator[GenerationStep]:
        try:
            for index in range(self.units):
                self.started += 1
                surface.set_tile(index, 0, TileTypeID.ROOM)
                yield GenerationStep("unit", index)
        finally:
            self.closed = True


class TestRunGeneration:
    def test_returns_unit_count(self, stream) -> None:
        method = CountingMethod(4)

        assert run_generation(method, GridSurface(5, 1), stream) == 4
        assert method.closed

    def test_on_step_sees_every_unit_in_order(self, stream) -> None:
        seen: list[GenerationStep] = []

        run_generation(
            BspRoomPlacementGenerator(split_depth=2),
            GridSurface(40, 30),
            stream,
            on_step=seen.append,
        )

        assert [step.kind for step in seen] == ["ground"] + ["room"] * 4 + [
            "corridors"
        ]
        assert [step.index for step in seen if step.kind == "room"] == [0, 1, 2, 3]

    def test_pre_cancelled_token_leaves_surface_untouched(self, stream) -> None:
        method = CountingMethod(3)
        surface = GridSurface(5, 1)
        cancel = CancellationToken()
        cancel.cancel()

        with pytest.raises(GenerationCancelled):
            run_generation(method, surface, stream, cancel=cancel)

        assert method.started == 0
        assert surface.count(TileTypeID.EMPTY) == 5

    def test_cancel_between_units_keeps_finished_work(self, stream) -> None:
        method = CountingMethod(5)
        surface = GridSurface(5, 1)
        cancel = CancellationToken()

        def on_step(step: GenerationStep) -> None:
            if step.index == 1:
                cancel.cancel()

        with pytest.raises(GenerationCancelled):
            run_generation(method, surface, stream, cancel=cancel, on_step=on_step)

        assert method.started == 2
        assert method.closed
        assert surface.count(TileTypeID.ROOM) == 2

    @pytest.mark.parametrize("finished_units", [1, 2, 5, 10])
    def test_cancelled_pass_matches_partial_manual_pass(
        self, finished_units: int
    ) -> None:
        cancelled_surface = GridSurface(64, 48)
        manual_surface = GridSurface(64, 48)
        cancel = CancellationToken()
        completed = 0

        def on_step(step: GenerationStep) -> None:
            nonlocal completed
            completed += 1
            if completed == finished_units:
                cancel.cancel()

        with pytest.raises(GenerationCancelled):
            run_generation(
                BspRoomPlacementGenerator(),
                cancelled_surface,
                RNGProvider(21).get("map.bsp"),
                cancel=cancel,
                on_step=on_step,
            )

        manual_steps = BspRoomPlacementGenerator().steps(
            manual_surface, RNGProvider(21).get("map.bsp")
        )
        for _ in range(finished_units):
            next(manual_steps)

        np.testing.assert_array_equal(cancelled_surface.tiles, manual_surface.tiles)

    def test_step_delay_sleeps_once_per_unit(self, stream, monkeypatch) -> None:
        delays: list[float] = []
        monkeypatch.setattr(time, "sleep", delays.append)

        run_generation(CountingMethod(3), GridSurface(5, 1), stream, step_delay=0.25)

        assert delays == [0.25, 0.25, 0.25]

    def test_no_sleep_without_delay(self, stream, monkeypatch) -> None:
        delays: list[float] = []
        monkeypatch.setattr(time, "sleep", delays.append)

        run_generation(CountingMethod(3), GridSurface(5, 1), stream)

        assert delays == []

    def test_errors_inside_a_unit_propagate(self, stream) -> None:
        class Broken(GenerationMethod):
            name = "broken"

            def steps(self, surface, rng) -> Iterator[GenerationStep]:
                yield GenerationStep("ok")
                raise ValueError("bad unit")

        with pytest.raises(ValueError, match="bad unit"):
            run_generation(Broken(), GridSurface(2, 2), stream)


class TestCancellationToken:
    def test_starts_clear(self) -> None:
        token = CancellationToken()

        assert not token.cancelled
        token.raise_if_cancelled()

    def test_cancel_is_sticky(self) -> None:
        token = CancellationToken()
        token.cancel()

        assert token.cancelled
        with pytest.raises(GenerationCancelled):
            token.raise_if_cancelled()


class TestFactory:
    @pytest.mark.parametrize(
        ("name", "expected_class"),
        [
            ("bsp", BspRoomPlacementGenerator),
            ("rooms", SimpleRoomPlacementGenerator),
            ("cellular", CellularAutomataGenerator),
            ("noise", NoiseTerrainGenerator),
        ],
    )
    def test_create_generator(self, name: str, expected_class: type) -> None:
        assert isinstance(create_generator(name), expected_class)

    def test_params_override_defaults(self) -> None:
        method = create_generator("bsp", split_depth=2)

        assert method.split_depth == 2

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown generator name: 'maze'"):
            create_generator("maze")

    @pytest.mark.parametrize("name", sorted(GENERATORS))
    def test_runs_with_range_and_chance_draws_only(self, name: str) -> None:
        surface = GridSurface(64, 48)

        units = create_generator(name).generate(surface, RangeChanceRNG(1))

        assert units > 0
        assert surface.count(TileTypeID.EMPTY) == 0
