"""Shared test fixtures for islandgen tests."""

from typing import Callable

import numpy as np
import pytest
from numpy.typing import NDArray

from islandgen.terrain.config import GenerationConstraints


@pytest.fixture
def make_grid() -> Callable[..., NDArray[np.uint8]]:
    """Build a terrain grid from rows of text, '#' for land and '.' for water.

        make_grid(
            ".....",
            ".##..",
            ".....",
        )
    """

    def _make(*rows: str) -> NDArray[np.uint8]:
        return np.array(
            [[1 if c == "#" else 0 for c in row] for row in rows], dtype=np.uint8
        )

    return _make


@pytest.fixture
def relaxed_constraints() -> GenerationConstraints:
    """Small 50x50 request that any attempt satisfies."""
    return GenerationConstraints(
        seed=42,
        width=50,
        height=50,
        sea_level=0.5,
        max_retries=10,
        min_percent_land=0.0,
        max_percent_land=1.0,
        min_lands=0,
        min_seas=0,
    )


@pytest.fixture
def impossible_constraints() -> GenerationConstraints:
    """Request that no attempt can satisfy, with a budget of three attempts."""
    return GenerationConstraints(
        seed=42,
        width=33,
        height=33,
        max_retries=3,
        min_percent_land=0.0,
        min_lands=10**9,
    )
