"""Cellular automaton smoothing of a terrain grid."""

import logging

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

logger = logging.getLogger(__name__)

# 8-connected, exclude center
_NEIGHBOUR_KERNEL = np.array([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=np.int32)


def count_same_neighbours(terrain: NDArray[np.uint8]) -> NDArray[np.int32]:
    """Count neighbours sharing each cell's value.

    Neighbours outside the grid count as sharing the cell's value, which
    biases edge cells toward keeping their state.

    Args:
        terrain: Binary terrain grid.

    Returns:
        Per-cell count in [0, 8].
    """
    land = (terrain != 0).astype(np.int32)
    land_neighbours = ndimage.convolve(land, _NEIGHBOUR_KERNEL, mode="constant", cval=0)
    in_bounds = ndimage.convolve(
        np.ones_like(land), _NEIGHBOUR_KERNEL, mode="constant", cval=0
    )
    out_of_bounds = 8 - in_bounds

    same_in_bounds = np.where(land == 1, land_neighbours, in_bounds - land_neighbours)
    return same_in_bounds + out_of_bounds


def smooth(
    terrain: NDArray[np.uint8],
    min_neighbours: int = 4,
    iterations: int = 1,
) -> NDArray[np.uint8]:
    """Flip cells with too few same-valued neighbours.

    Each round is computed entirely from the previous round's grid. Stops
    early once a round makes no flips.

    Args:
        terrain: Binary terrain grid. Not modified.
        min_neighbours: Cells with fewer same-valued neighbours are flipped.
        iterations: Maximum number of rounds.

    Returns:
        Smoothed terrain grid.
    """
    current = terrain.copy()

    for i in range(iterations):
        flips = count_same_neighbours(current) < min_neighbours
        flip_count = int(np.count_nonzero(flips))

        if flip_count == 0:
            logger.debug(f"Smoothing stable after {i} rounds")
            break

        current = np.where(flips, current ^ 1, current).astype(np.uint8)
        logger.debug(f"Smoothing round {i + 1}: {flip_count} flips")

    return current
