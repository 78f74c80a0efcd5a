"""Procedural island terrain generation package.

This package implements the generation pipeline for island worlds: fractal
height and moisture fields, land/water classification, smoothing, sea and land
region detection, and boundary contours for each land mass.
"""

from .classification import TerrainType, classify, land_fraction
from .config import GenerationConstraints, load_constraints
from .contour import trace
from .generator import (
    AttemptFailed,
    AttemptSucceeded,
    GenerationResult,
    generate,
    generate_async,
    run_attempt,
)
from .noise import diamond_square
from .persistence import load_result, save_result
from .regions import Region, detect_lands, detect_seas, filter_by_size
from .smoothing import smooth
from .validation import ConstraintViolation

__all__ = [
    "AttemptFailed",
    "AttemptSucceeded",
    "ConstraintViolation",
    "GenerationConstraints",
    "GenerationResult",
    "Region",
    "TerrainType",
    "classify",
    "detect_lands",
    "detect_seas",
    "diamond_square",
    "filter_by_size",
    "generate",
    "generate_async",
    "land_fraction",
    "load_constraints",
    "load_result",
    "run_attempt",
    "save_result",
    "smooth",
    "trace",
]
