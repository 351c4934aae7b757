"""
Exceptions raised by the particle filtering core.

All of them signal a violated caller contract and are raised at the call
site; nothing here is retried.
"""


class ParticleFilterError(Exception):
    """Base class for all library errors."""


class DimensionMismatchError(ParticleFilterError, ValueError):
    """
    A dimension does not match what the receiving object requires.

    Raised when resizing a fixed-dimension sampler, when a weight delta does
    not match the particle count, or when locations have the wrong shape.
    """

    def __init__(self, expected: int, actual: int, what: str = "dimension"):
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what} mismatch: expected {expected}, got {actual}")


class ParticleIndexError(ParticleFilterError, IndexError):
    """Particle index outside [0, size())."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"particle index {index} out of range for {size} particles")


class NumericInstabilityError(ParticleFilterError, FloatingPointError):
    """Non-finite values reached log-weight normalization."""
