"""Per-attempt constraint checks.

Checks return a :class:`ConstraintViolation` describing the first broken
constraint, or ``None``. Violations are ordinary values so the retry loop can
branch on them without exceptions.
"""

from dataclasses import dataclass

from .config import GenerationConstraints
from .regions import Region


@dataclass(frozen=True)
class ConstraintViolation:
    """A generation attempt that fell outside the configured bounds."""

    constraint: str
    expected: tuple[float, float]
    actual: float

    @property
    def message(self) -> str:
        low, high = self.expected
        if self.actual < low:
            return f"Wanted at least {low} {self.constraint}, got {self.actual}"
        return f"Wanted at most {high} {self.constraint}, got {self.actual}"


def _check_range(
    constraint: str,
    actual: float,
    low: float,
    high: float,
) -> ConstraintViolation | None:
    if low <= actual <= high:
        return None
    return ConstraintViolation(constraint=constraint, expected=(low, high), actual=actual)


def check_land_fraction(
    fraction: float,
    constraints: GenerationConstraints,
) -> ConstraintViolation | None:
    """Check the share of land cells."""
    return _check_range(
        "land fraction",
        fraction,
        constraints.min_percent_land,
        constraints.max_percent_land,
    )


def check_sea_count(
    seas: list[Region],
    constraints: GenerationConstraints,
) -> ConstraintViolation | None:
    """Check the number of size-filtered seas."""
    return _check_range("seas", len(seas), constraints.min_seas, constraints.max_seas)


def check_land_count(
    lands: list[Region],
    constraints: GenerationConstraints,
) -> ConstraintViolation | None:
    """Check the number of size-filtered lands."""
    return _check_range(
        "lands", len(lands), constraints.min_lands, constraints.max_lands
    )
