"""Fractal noise synthesis for height and moisture fields.

Implements midpoint displacement (diamond-square) on a 2^n + 1 working grid,
driven by a :class:`~islandgen.prng.RandomStream` so that a seed always maps
to the same field.
"""

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from ..prng import RandomStream


def working_size(width: int, height: int) -> int:
    """Smallest 2^n + 1 (n >= 1) strictly greater than both dimensions."""
    min_size = max(width, height)
    size = 1
    exp = 1
    while size <= min_size:
        size = 2**exp + 1
        exp += 1
    return size


def diamond_square(
    width: int,
    height: int,
    seed: int,
    roughness: float = 0.5,
    jitter: float = 0.0,
    corners: Sequence[float] | None = None,
) -> NDArray[np.float32]:
    """Generate a fractal noise field using midpoint displacement.

    The field is synthesized on a square grid of side 2^n + 1 and the
    top-left ``width x height`` block is returned. Detail outside that block
    is discarded rather than scaled down, so per-cell values for a seed do not
    depend on the requested size within one power-of-two band.

    Args:
        width: Output width in tiles.
        height: Output height in tiles.
        seed: Seed for the random stream.
        roughness: Displacement scale, shrinking with the step size.
        jitter: Fixed displacement added at every step.
        corners: Optional values for the top-left, top-right, bottom-left
            and bottom-right corners. Drawn from the stream when omitted.

    Returns:
        2D array of shape (height, width) with values in [0, 1].
    """
    rng = RandomStream(seed)
    size = working_size(width, height)
    field = np.zeros((size, size), dtype=np.float64)

    last = size - 1
    if corners is not None:
        if len(corners) != 4:
            raise ValueError(f"Expected 4 corner values, got {len(corners)}")
        field[0, 0], field[0, last], field[last, 0], field[last, last] = corners
    else:
        field[0, 0] = rng.float(0, 1)
        field[0, last] = rng.float(0, 1)
        field[last, 0] = rng.float(0, 1)
        field[last, last] = rng.float(0, 1)

    step = size - 1
    while step > 1:
        # Displacement decreases with step size
        r = (step / size) * roughness + jitter
        _diamond_step(field, step, r, rng)
        _square_step(field, step, r, rng)
        step //= 2

    np.clip(field, 0.0, 1.0, out=field)

    if size == width and size == height:
        return field.astype(np.float32)

    return field[:height, :width].astype(np.float32)


def _diamond_step(
    field: NDArray[np.float64],
    step: int,
    r: float,
    rng: RandomStream,
) -> None:
    """Set every sub-square centre to its corner mean plus a displacement.

    Draws are consumed one per sub-square in row-major order.
    """
    size = field.shape[0]
    half = step // 2
    n = (size - 1) // step

    corners = field[0:size:step, 0:size:step]
    mean = (
        corners[:-1, :-1] + corners[:-1, 1:] + corners[1:, :-1] + corners[1:, 1:]
    ) / 4.0

    offsets = rng.floats(n * n, -r, r).reshape(n, n)
    field[half:size:step, half:size:step] = mean + offsets


def _square_step(
    field: NDArray[np.float64],
    step: int,
    r: float,
    rng: RandomStream,
) -> None:
    """Set every edge midpoint from adjacent corners and centres.

    Sub-squares are visited row-major and each consumes four draws, in the
    order top, left, right, bottom. A midpoint shared by two sub-squares is
    written twice; the later sub-square wins, so interior midpoints take the
    "top" value of the square below them or the "left" value of the square
    to their right. Midpoints on the grid edge average three samples.
    """
    size = field.shape[0]
    half = step // 2
    n = (size - 1) // step

    corners = field[0:size:step, 0:size:step]
    centres = field[half:size:step, half:size:step].copy()

    offsets = rng.floats(n * n * 4, -r, r).reshape(n, n, 4)

    # Top midpoints: rows 0, step, ..., size - 1 - step
    top = corners[:-1, :-1] + centres + corners[:-1, 1:]
    top[1:] += centres[:-1]
    top[0] /= 3.0
    top[1:] /= 4.0

    # Left midpoints: columns 0, step, ..., size - 1 - step
    left = corners[:-1, :-1] + centres + corners[1:, :-1]
    left[:, 1:] += centres[:, :-1]
    left[:, 0] /= 3.0
    left[:, 1:] /= 4.0

    # Right and bottom grid edges only ever see three samples
    right = (corners[:-1, n] + centres[:, n - 1] + corners[1:, n]) / 3.0
    bottom = (centres[n - 1, :] + corners[n, :-1] + corners[n, 1:]) / 3.0

    field[0 : size - 1 : step, half:size:step] = top + offsets[:, :, 0]
    field[half:size:step, 0 : size - 1 : step] = left + offsets[:, :, 1]
    field[half:size:step, size - 1] = right + offsets[:, n - 1, 2]
    field[size - 1, half:size:step] = bottom + offsets[n - 1, :, 3]
