"""Main terrain generation orchestration.

A generation request runs the full pipeline (noise, classification,
smoothing, region detection, contour tracing) and checks the result against
the request's constraints. Attempts that fall outside the constraints are
discarded and retried with a seed drawn from the orchestrator's own stream.
"""

import asyncio
import time
from dataclasses import dataclass, replace

import numpy as np
import structlog
from numpy.typing import NDArray

from ..exceptions import GenerationExhausted
from ..prng import RandomStream
from .classification import classify, land_fraction
from .config import GenerationConstraints
from .noise import diamond_square
from .regions import Region, detect_lands, detect_seas, filter_by_size
from .smoothing import smooth
from .validation import (
    ConstraintViolation,
    check_land_count,
    check_land_fraction,
    check_sea_count,
)

logger = structlog.get_logger()

MOISTURE_ROUGHNESS = 2.0
SMOOTHING_MIN_NEIGHBOURS = 4


@dataclass(frozen=True)
class GenerationResult:
    """Result of a successful generation request.

    Arrays are read-only; ``seed`` is the seed of the attempt that succeeded.
    """

    heights: NDArray[np.float32]
    moisture: NDArray[np.float32]
    terrain: NDArray[np.uint8]
    seas: tuple[Region, ...]
    lands: tuple[Region, ...]
    seed: int
    attempts: int = 1

    @property
    def width(self) -> int:
        return self.terrain.shape[1]

    @property
    def height(self) -> int:
        return self.terrain.shape[0]


@dataclass(frozen=True)
class AttemptSucceeded:
    """Attempt outcome carrying a result that met every constraint."""

    result: GenerationResult


@dataclass(frozen=True)
class AttemptFailed:
    """Attempt outcome carrying the first constraint it broke."""

    violation: ConstraintViolation


AttemptOutcome = AttemptSucceeded | AttemptFailed


def _freeze(array: NDArray) -> NDArray:
    array.flags.writeable = False
    return array


def run_attempt(constraints: GenerationConstraints, seed: int) -> AttemptOutcome:
    """Run the pipeline once with the given seed.

    Args:
        constraints: Generation constraints.
        seed: Seed for this attempt.

    Returns:
        AttemptSucceeded with the result, or AttemptFailed with the first
        violated constraint.
    """
    rng = RandomStream(seed)
    width, height = constraints.width, constraints.height

    heights = diamond_square(
        width, height, rng.int(), roughness=constraints.noise_roughness
    )
    moisture = diamond_square(width, height, rng.int(), roughness=MOISTURE_ROUGHNESS)

    terrain = classify(heights, constraints.sea_level)
    fraction = land_fraction(terrain)
    logger.debug("terrain_classified", seed=seed, land_fraction=round(fraction, 4))

    violation = check_land_fraction(fraction, constraints)
    if violation is not None:
        return AttemptFailed(violation)

    terrain = smooth(
        terrain,
        min_neighbours=SMOOTHING_MIN_NEIGHBOURS,
        iterations=constraints.max_smoothing_iterations,
    )

    terrain, all_seas = detect_seas(terrain)
    seas = filter_by_size(all_seas, constraints.min_sea_size, constraints.max_sea_size)
    logger.debug("seas_detected", seed=seed, found=len(all_seas), kept=len(seas))

    violation = check_sea_count(seas, constraints)
    if violation is not None:
        return AttemptFailed(violation)

    all_lands = detect_lands(terrain)
    lands = filter_by_size(
        all_lands, constraints.min_land_size, constraints.max_land_size
    )
    logger.debug("lands_detected", seed=seed, found=len(all_lands), kept=len(lands))

    violation = check_land_count(lands, constraints)
    if violation is not None:
        return AttemptFailed(violation)

    return AttemptSucceeded(
        GenerationResult(
            heights=_freeze(heights),
            moisture=_freeze(moisture),
            terrain=_freeze(terrain),
            seas=tuple(seas),
            lands=tuple(lands),
            seed=seed,
        )
    )


def generate(constraints: GenerationConstraints) -> GenerationResult:
    """Generate terrain satisfying the constraints, retrying as needed.

    Args:
        constraints: Generation constraints.

    Returns:
        GenerationResult of the first attempt that met every constraint.

    Raises:
        GenerationExhausted: If ``max_retries`` attempts all failed.
    """
    rng = RandomStream(constraints.seed)
    seed = constraints.seed

    logger.info(
        "generation_started",
        seed=seed,
        width=constraints.width,
        height=constraints.height,
    )

    attempt = 0
    while True:
        logger.debug("attempt_started", attempt=attempt + 1, seed=seed)
        start = time.perf_counter()
        outcome = run_attempt(constraints, seed)
        duration_ms = (time.perf_counter() - start) * 1000
        attempt += 1

        if isinstance(outcome, AttemptSucceeded):
            result = outcome.result
            logger.info(
                "generation_succeeded",
                seed=seed,
                attempts=attempt,
                seas=len(result.seas),
                lands=len(result.lands),
                duration_ms=round(duration_ms, 1),
            )
            return replace(result, attempts=attempt)

        logger.debug(
            "attempt_rejected",
            attempt=attempt,
            seed=seed,
            reason=outcome.violation.message,
            duration_ms=round(duration_ms, 1),
        )

        if attempt >= constraints.max_retries:
            logger.warning(
                "generation_exhausted", seed=constraints.seed, attempts=attempt
            )
            raise GenerationExhausted(attempts=attempt, seed=constraints.seed)

        seed = rng.int()


async def generate_async(constraints: GenerationConstraints) -> GenerationResult:
    """Run :func:`generate` in a worker thread.

    Each call is independent; cancelling the awaiting task abandons the
    request and its result is discarded.
    """
    return await asyncio.to_thread(generate, constraints)
