"""Generation constraint models and TOML loading."""

import math
import tomllib
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..exceptions import InvalidConstraintsError

UNBOUNDED = math.inf


class GenerationConstraints(BaseModel, frozen=True, extra="forbid"):
    """Complete, immutable configuration for one generation request."""

    seed: int = Field(default=42, description="Random seed for reproducibility")
    width: int = Field(default=200, gt=0, description="World width in tiles")
    height: int = Field(default=200, gt=0, description="World height in tiles")

    sea_level: float = Field(
        default=0.5, allow_inf_nan=False, description="Heights above this are land"
    )
    noise_roughness: float = Field(
        default=0.9, allow_inf_nan=False, description="Elevation noise roughness"
    )
    max_smoothing_iterations: int = Field(
        default=100, ge=0, description="Cap on cellular automaton rounds"
    )

    min_lands: int = Field(default=1, ge=0, description="Minimum number of lands")
    max_lands: float = Field(
        default=UNBOUNDED, ge=0, description="Maximum number of lands"
    )
    min_seas: int = Field(default=0, ge=0, description="Minimum number of seas")
    max_seas: float = Field(
        default=UNBOUNDED, ge=0, description="Maximum number of seas"
    )

    min_percent_land: float = Field(
        default=0.3, ge=0.0, le=1.0, description="Minimum land fraction (0-1)"
    )
    max_percent_land: float = Field(
        default=1.0, ge=0.0, le=1.0, description="Maximum land fraction (0-1)"
    )

    min_land_size: int = Field(default=20, ge=0, description="Minimum tiles per land")
    max_land_size: float = Field(
        default=UNBOUNDED, ge=0, description="Maximum tiles per land"
    )
    min_sea_size: int = Field(default=20, ge=0, description="Minimum tiles per sea")
    max_sea_size: float = Field(
        default=UNBOUNDED, ge=0, description="Maximum tiles per sea"
    )

    max_retries: int = Field(
        default=1000, ge=1, description="Attempts before giving up"
    )

    @model_validator(mode="after")
    def _check_ranges(self) -> "GenerationConstraints":
        pairs = [
            ("min_lands", "max_lands"),
            ("min_seas", "max_seas"),
            ("min_percent_land", "max_percent_land"),
            ("min_land_size", "max_land_size"),
            ("min_sea_size", "max_sea_size"),
        ]
        for low, high in pairs:
            if getattr(self, low) > getattr(self, high):
                raise ValueError(
                    f"{low} ({getattr(self, low)}) exceeds {high} ({getattr(self, high)})"
                )
        return self

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GenerationConstraints":
        """Build constraints from a plain mapping.

        Raises:
            InvalidConstraintsError: If any value is missing, malformed or
                out of range.
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise InvalidConstraintsError(str(e)) from e


def load_constraints(config_path: Path) -> GenerationConstraints:
    """Load generation constraints from a TOML file.

    Values are read from a ``[generation]`` table when present, otherwise
    from the top level of the document.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed GenerationConstraints.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        InvalidConstraintsError: If values fail validation.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return GenerationConstraints.from_mapping(data.get("generation", data))
