"""Custom exceptions for island generation."""


class IslandGenError(Exception):
    """Base exception for island generation errors."""

    pass


class InvalidConstraintsError(IslandGenError, ValueError):
    """Raised when generation constraints are malformed or inconsistent."""

    pass


class GenerationExhausted(IslandGenError):
    """Raised when no attempt satisfied the constraints within the retry budget."""

    def __init__(self, attempts: int, seed: int):
        self.attempts = attempts
        self.seed = seed
        super().__init__(
            f"Could not generate terrain in {attempts} attempts (seed {seed})"
        )


class ContourTraceError(IslandGenError):
    """Raised when a boundary trace fails to return to its start cell."""

    pass
