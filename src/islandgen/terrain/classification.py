"""Terrain classification: land or water from a height field."""

from enum import IntEnum

import numpy as np
from numpy.typing import NDArray


class TerrainType(IntEnum):
    """Binary terrain classes stored as uint8 grid values."""

    WATER = 0
    LAND = 1


def classify(
    heights: NDArray[np.float32],
    sea_level: float = 0.5,
) -> NDArray[np.uint8]:
    """Threshold a height field into a terrain grid.

    Args:
        heights: Height field, shape (height, width).
        sea_level: Cells strictly above this are land.

    Returns:
        2D array of TerrainType values as uint8.
    """
    return np.where(heights > sea_level, TerrainType.LAND, TerrainType.WATER).astype(
        np.uint8
    )


def land_fraction(terrain: NDArray[np.uint8]) -> float:
    """Fraction of cells classified as land."""
    if terrain.size == 0:
        return 0.0
    return float(np.count_nonzero(terrain == TerrainType.LAND)) / terrain.size
