"""Command-line runner: generate one level and print or save it."""

from __future__ import annotations

import argparse
import logging

from levelforge import config
from levelforge.environment.generators import (
    GENERATORS,
    CancellationToken,
    GenerationCancelled,
    GenerationStep,
    NoiseTerrainGenerator,
    create_generator,
    run_generation,
)
from levelforge.environment.surface import GridSurface
from levelforge.util import rng

logger = logging.getLogger("levelforge")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="levelforge", description="Generate a 2D level or terrain map"
    )
    parser.add_argument(
        "method", choices=sorted(GENERATORS), help="Generation strategy"
    )
    parser.add_argument("--width", type=int, default=config.MAP_WIDTH)
    parser.add_argument("--height", type=int, default=config.MAP_HEIGHT)
    parser.add_argument(
        "--seed", type=str, default=config.RANDOM_SEED, help="Master random seed"
    )
    parser.add_argument(
        "--step-delay",
        type=float,
        default=config.STEP_DELAY,
        help="Seconds to pause after every generation unit",
    )
    parser.add_argument(
        "--max-units",
        type=int,
        default=None,
        help="Cancel the pass after this many units",
    )
    parser.add_argument(
        "--watch", action="store_true", help="Print the map after every unit"
    )
    parser.add_argument("--image", type=str, help="Save a PNG preview to this path")
    parser.add_argument(
        "--noise-image",
        type=str,
        help="Save the raw noise map as a grayscale PNG (noise method only)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    method = create_generator(args.method)
    if args.noise_image and not isinstance(method, NoiseTerrainGenerator):
        parser.error("--noise-image requires the noise method")

    rng.init(args.seed)
    surface = GridSurface(args.width, args.height)
    cancel = CancellationToken()
    completed = 0

    def on_step(step: GenerationStep) -> None:
        nonlocal completed
        completed += 1
        if args.watch:
            print(f"-- {step.kind} {step.index}")
            print(surface.to_text())
        if args.max_units is not None and completed >= args.max_units:
            cancel.cancel()

    try:
        run_generation(
            method,
            surface,
            rng.get(f"map.{method.name}"),
            cancel=cancel,
            on_step=on_step,
            step_delay=args.step_delay,
        )
    except GenerationCancelled:
        logger.info(f"Generation cancelled after {completed} units")

    print(surface.to_text())
    if args.image:
        surface.save_image(args.image)
        logger.info(f"Preview saved to {args.image}")
    if args.noise_image and isinstance(method, NoiseTerrainGenerator):
        method.save_debug_image(args.noise_image)


if __name__ == "__main__":
    main()
