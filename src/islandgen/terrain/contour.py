"""Moore-neighbour boundary tracing for connected regions."""

import numpy as np
from numpy.typing import NDArray

from ..exceptions import ContourTraceError
from .classification import TerrainType

# Clockwise ring of (dx, dy) offsets:
# 0 1 2
# 7   3
# 6 5 4
MOORE_NEIGHBOURHOOD: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
)


def _ring_start(px: int, py: int, bx: int, by: int) -> int:
    """Index in the ring to resume scanning from, given the backtrack cell."""
    if px > bx:
        return 7  # Approached from the left
    if px < bx:
        return 3  # Approached from the right
    if py > by:
        return 1  # Approached from above
    if py < by:
        return 5  # Approached from below
    return 0


def trace(
    terrain: NDArray[np.uint8],
    x: int,
    y: int,
    target: int = TerrainType.LAND,
) -> tuple[int, ...]:
    """Trace the outer boundary of the region containing (x, y), clockwise.

    The start cell must be the first cell of its region in row-major order,
    so the cell to its left is never part of the region. Regions joined only
    through single-cell bridges may be cut short at the bridge.

    Args:
        terrain: Terrain grid, shape (height, width).
        x: Start column.
        y: Start row.
        target: Terrain value that belongs to the region.

    Returns:
        Flat cell indices (x + y * width) of the boundary. Consecutive cells
        are 8-neighbours and the last entry is the start cell.

    Raises:
        ContourTraceError: If the walk does not return to the start cell.
    """
    height, width = terrain.shape
    start = x + y * width

    px, py = x, y
    bx, by = x - 1, y

    path: list[int] = []
    max_steps = 8 * width * height + 8

    for _ in range(max_steps):
        offset = _ring_start(px, py, bx, by)
        bx, by = px, py

        for i in range(len(MOORE_NEIGHBOURHOOD)):
            dx, dy = MOORE_NEIGHBOURHOOD[(i + offset) % len(MOORE_NEIGHBOURHOOD)]
            nx = px + dx
            ny = py + dy

            if 0 <= nx < width and 0 <= ny < height and terrain[ny, nx] == target:
                px, py = nx, ny
                n = nx + ny * width
                if not path or path[-1] != n:
                    path.append(n)
                break

            bx, by = nx, ny

        if px == x and py == y:
            break
    else:
        raise ContourTraceError(
            f"Boundary trace from ({x}, {y}) did not close within {max_steps} steps"
        )

    # An isolated cell has no neighbours to walk to
    if not path:
        path.append(start)

    return tuple(path)
