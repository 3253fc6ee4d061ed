"""
Construction errors for bounds objects.

Bounds objects validate their parameters exactly once, at construction. A
violated invariant rejects the whole object: the constructor raises
BoundsError, while the result-returning ``create`` factories wrap the same
outcome in a BoundsResult so callers can branch without exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class Violation(Enum):
    """Construction invariants a bounds object can fail."""
    WRONG_PARAMETER_COUNT = "wrong_parameter_count"
    NAN_PARAMETER = "nan_parameter"
    NEGATIVE_LENGTH = "negative_length"
    INVERTED_X = "inverted_x"
    INVERTED_Y = "inverted_y"
    NOT_A_DIAMOND = "not_a_diamond"
    INVALID_FIRST_AXIS = "invalid_first_axis"
    INVALID_SECOND_AXIS = "invalid_second_axis"
    INVALID_PHI_SECTOR = "invalid_phi_sector"
    UNNORMALIZED_PHI = "unnormalized_phi"
    INVALID_RADIAL_SETUP = "invalid_radial_setup"
    HALF_WIDTH_EXCEEDS_RADIUS = "half_width_exceeds_radius"


class BoundsError(ValueError):
    """Raised when bounds parameters violate a construction invariant."""

    def __init__(self, shape: str, violation: Violation, message: str):
        super().__init__(f"{shape}: {message}")
        self.shape = shape
        self.violation = violation
        self.message = message


@dataclass(frozen=True)
class BoundsResult:
    """
    Outcome of a checked construction.

    Exactly one of ``bounds`` and ``violation`` is set.
    """
    bounds: Optional[Any] = None
    violation: Optional[Violation] = None
    shape: str = ""
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.violation is None

    def unwrap(self):
        """Return the bounds or raise the recorded rejection."""
        if self.violation is not None:
            raise BoundsError(self.shape, self.violation, self.message)
        return self.bounds

    @classmethod
    def from_error(cls, error: BoundsError) -> "BoundsResult":
        return cls(violation=error.violation, shape=error.shape, message=error.message)
