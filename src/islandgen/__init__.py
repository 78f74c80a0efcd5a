"""Procedural island and continent map generation."""

from .exceptions import (
    ContourTraceError,
    GenerationExhausted,
    InvalidConstraintsError,
    IslandGenError,
)
from .prng import RandomStream
from .terrain import (
    GenerationConstraints,
    GenerationResult,
    Region,
    TerrainType,
    generate,
    generate_async,
)

__all__ = [
    # Generation
    "GenerationConstraints",
    "GenerationResult",
    "Region",
    "TerrainType",
    "generate",
    "generate_async",
    # Random
    "RandomStream",
    # Exceptions
    "IslandGenError",
    "InvalidConstraintsError",
    "GenerationExhausted",
    "ContourTraceError",
]
