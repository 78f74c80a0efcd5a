"""Region detection: border-connected seas and connected land masses.

Both passes flood fill over 8-connected neighbours with an explicit stack,
so memory use is bounded by the grid size rather than the call depth.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np
from numpy.typing import NDArray

from .classification import TerrainType
from .contour import trace

logger = logging.getLogger(__name__)

# (dx, dy) offsets of the 8 surrounding cells
_NEIGHBOUR_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)


@dataclass(frozen=True)
class Region:
    """A connected set of same-typed cells.

    Cells are flat indices ``x + y * width``. Land regions also carry their
    clockwise outer boundary; seas have an empty boundary.
    """

    id: int
    tiles: frozenset[int]
    width: int
    boundary: tuple[int, ...] = ()

    @property
    def size(self) -> int:
        return len(self.tiles)

    def coordinates(self) -> NDArray[np.int32]:
        """Tile coordinates as an (n, 2) array of x, y in index order."""
        indices = np.fromiter(sorted(self.tiles), dtype=np.int64, count=len(self.tiles))
        return np.column_stack((indices % self.width, indices // self.width)).astype(
            np.int32
        )

    def points(self) -> NDArray[np.float32]:
        """Boundary as an (n, 2) array of x, y, ready for polygon rendering."""
        indices = np.asarray(self.boundary, dtype=np.int64)
        return np.column_stack((indices % self.width, indices // self.width)).astype(
            np.float32
        )

    def bounds(self) -> tuple[int, int, int, int]:
        """Inclusive bounding box (x0, y0, x1, y1)."""
        coords = self.coordinates()
        x0, y0 = coords.min(axis=0)
        x1, y1 = coords.max(axis=0)
        return int(x0), int(y0), int(x1), int(y1)

    def center(self) -> tuple[float, float]:
        """Centre of the bounding box."""
        x0, y0, x1, y1 = self.bounds()
        return x0 + (x1 - x0) / 2, y0 + (y1 - y0) / 2

    def centroid(self) -> tuple[float, float]:
        """Mean boundary point, or mean tile position without a boundary."""
        coords = self.points() if self.boundary else self.coordinates()
        x, y = coords.astype(np.float64).mean(axis=0)
        return float(x), float(y)


def _flood_fill(
    cells: list[int],
    width: int,
    height: int,
    start: int,
    value: int,
    visited: bytearray,
) -> set[int]:
    """Collect every cell 8-connected to ``start`` through ``value`` cells.

    Marks collected cells in ``visited``; already visited cells are skipped.
    """
    visited[start] = 1
    tiles = {start}
    stack = [start]

    while stack:
        i = stack.pop()
        x = i % width
        y = i // width

        for dx, dy in _NEIGHBOUR_OFFSETS:
            nx = x + dx
            ny = y + dy
            if 0 <= nx < width and 0 <= ny < height:
                n = nx + ny * width
                if not visited[n] and cells[n] == value:
                    visited[n] = 1
                    tiles.add(n)
                    stack.append(n)

    return tiles


def _border_cells(width: int, height: int) -> Iterable[int]:
    """Flat indices of the grid border in row-major order."""
    for y in range(height):
        if y == 0 or y == height - 1:
            yield from range(y * width, (y + 1) * width)
        else:
            yield y * width
            if width > 1:
                yield y * width + width - 1


def detect_seas(
    terrain: NDArray[np.uint8],
) -> tuple[NDArray[np.uint8], list[Region]]:
    """Find water bodies reachable from the grid border.

    Every water cell on the border that has not been reached yet starts a
    new sea. Afterwards the grid is rebuilt so that only sea cells are water:
    enclosed water (lakes) becomes land and belongs to no sea.

    Args:
        terrain: Binary terrain grid, shape (height, width). Not modified.

    Returns:
        Tuple of (reclassified terrain grid, seas with ids from 1).
    """
    height, width = terrain.shape
    cells = terrain.ravel().tolist()
    ocean = bytearray(width * height)
    seas: list[Region] = []
    sea_id = 1

    for i in _border_cells(width, height):
        if ocean[i] or cells[i] != TerrainType.WATER:
            continue

        tiles = _flood_fill(cells, width, height, i, TerrainType.WATER, ocean)
        seas.append(Region(id=sea_id, tiles=frozenset(tiles), width=width))
        sea_id += 1

    ocean_mask = np.frombuffer(bytes(ocean), dtype=np.uint8).reshape(height, width)
    reclassified = np.where(
        ocean_mask == 1, TerrainType.WATER, TerrainType.LAND
    ).astype(np.uint8)

    absorbed = int(np.count_nonzero(terrain == TerrainType.WATER)) - int(
        np.count_nonzero(ocean_mask)
    )
    logger.debug(f"Detected {len(seas)} seas, absorbed {absorbed} enclosed water tiles")

    return reclassified, seas


def detect_lands(terrain: NDArray[np.uint8]) -> list[Region]:
    """Find connected land masses and trace their boundaries.

    Args:
        terrain: Binary terrain grid, shape (height, width).

    Returns:
        Land regions with ids from 0, in row-major discovery order.
    """
    height, width = terrain.shape
    cells = terrain.ravel().tolist()
    seen = bytearray(width * height)
    lands: list[Region] = []
    land_id = 0

    for i, value in enumerate(cells):
        if value != TerrainType.LAND or seen[i]:
            continue

        tiles = _flood_fill(cells, width, height, i, TerrainType.LAND, seen)
        boundary = trace(terrain, i % width, i // width, TerrainType.LAND)
        lands.append(
            Region(id=land_id, tiles=frozenset(tiles), width=width, boundary=boundary)
        )
        land_id += 1

    logger.debug(f"Detected {len(lands)} lands")
    return lands


def filter_by_size(
    regions: list[Region],
    min_size: float,
    max_size: float,
) -> list[Region]:
    """Keep regions whose tile count lies within [min_size, max_size]."""
    return [region for region in regions if min_size <= region.size <= max_size]
