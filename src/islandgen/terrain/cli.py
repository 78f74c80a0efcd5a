"""Command-line interface for island generation."""

import argparse
import logging
import sys
import time
import tomllib
from pathlib import Path

import structlog


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for island generation."""
    parser = argparse.ArgumentParser(
        description="Generate a procedural island map"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="TOML file with generation constraints (optional)",
    )
    parser.add_argument("--width", type=int, default=None, help="World width")
    parser.add_argument("--height", type=int, default=None, help="World height")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--sea-level", type=float, default=None, help="Sea level threshold (0-1)"
    )
    parser.add_argument(
        "--max-retries", type=int, default=None, help="Attempts before giving up"
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="island.npz",
        help="Output path (default: island.npz)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )

    args = parser.parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )

    # Import here to avoid slow startup for --help
    from ..exceptions import GenerationExhausted, InvalidConstraintsError
    from .config import GenerationConstraints, load_constraints
    from .generator import generate
    from .persistence import save_result

    overrides = {
        "width": args.width,
        "height": args.height,
        "seed": args.seed,
        "sea_level": args.sea_level,
        "max_retries": args.max_retries,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}

    try:
        if args.config:
            base = load_constraints(Path(args.config)).model_dump()
        else:
            base = {}
        constraints = GenerationConstraints.from_mapping({**base, **overrides})
    except (FileNotFoundError, tomllib.TOMLDecodeError, InvalidConstraintsError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    output_path = Path(args.output)

    print(
        f"Generating {constraints.width}x{constraints.height} island "
        f"with seed {constraints.seed}"
    )

    start_time = time.time()
    try:
        result = generate(constraints)
    except GenerationExhausted as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    gen_time = time.time() - start_time

    print(
        f"Generation complete in {gen_time:.1f}s after {result.attempts} attempt(s): "
        f"{len(result.lands)} lands, {len(result.seas)} seas"
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    save_result(output_path, result, constraints)

    print(f"Saved to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
