"""Result persistence: save and load generated worlds."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from .config import GenerationConstraints
from .generator import GenerationResult
from .regions import Region

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def _regions_to_json(regions: tuple[Region, ...]) -> bytes:
    data = [
        {
            "id": region.id,
            "tiles": sorted(region.tiles),
            "boundary": list(region.boundary),
        }
        for region in regions
    ]
    return json.dumps(data).encode("utf-8")


def _regions_from_json(raw: np.ndarray, width: int) -> tuple[Region, ...]:
    data = json.loads(raw.tobytes().decode("utf-8"))
    return tuple(
        Region(
            id=entry["id"],
            tiles=frozenset(entry["tiles"]),
            width=width,
            boundary=tuple(entry["boundary"]),
        )
        for entry in data
    )


def save_result(
    path: Path,
    result: GenerationResult,
    constraints: GenerationConstraints,
) -> None:
    """Save a generation result to disk.

    Uses numpy's compressed .npz format for efficient storage.

    Args:
        path: Output path (should end with .npz).
        result: Generation result to store.
        constraints: Constraints the result was generated with.
    """
    metadata = {
        "version": FORMAT_VERSION,
        "seed": result.seed,
        "requested_seed": constraints.seed,
        "attempts": result.attempts,
        "width": result.width,
        "height": result.height,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    np.savez_compressed(
        path,
        heights=result.heights,
        moisture=result.moisture,
        terrain=result.terrain,
        seas=np.frombuffer(_regions_to_json(result.seas), dtype=np.uint8),
        lands=np.frombuffer(_regions_to_json(result.lands), dtype=np.uint8),
        metadata=np.frombuffer(json.dumps(metadata).encode("utf-8"), dtype=np.uint8),
    )

    file_size = path.stat().st_size / 1024
    logger.info(f"Saved world to {path} ({file_size:.1f} KB)")


def load_result(path: Path) -> tuple[GenerationResult, dict]:
    """Load a generation result from disk.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (GenerationResult, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"World file not found: {path}")

    with np.load(path) as data:
        for name in ("heights", "moisture", "terrain"):
            if name not in data.files:
                raise ValueError(f"Invalid world file: missing '{name}' array")

        heights = data["heights"]
        moisture = data["moisture"]
        terrain = data["terrain"]
        width = terrain.shape[1]

        seas = _regions_from_json(data["seas"], width) if "seas" in data.files else ()
        lands = _regions_from_json(data["lands"], width) if "lands" in data.files else ()

        if "metadata" in data.files:
            metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))
        else:
            metadata = {}

    for array in (heights, moisture, terrain):
        array.flags.writeable = False

    result = GenerationResult(
        heights=heights,
        moisture=moisture,
        terrain=terrain,
        seas=seas,
        lands=lands,
        seed=metadata.get("seed", 0),
        attempts=metadata.get("attempts", 1),
    )

    logger.info(f"Loaded world from {path}: {width}x{terrain.shape[0]}")
    return result, metadata
