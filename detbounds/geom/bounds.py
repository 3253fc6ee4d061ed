"""
Common contract of 2D bounds.

SurfaceBounds is the abstract base of every planar and disc bounds type. A
bounds object is an immutable value: a fixed-size tuple of float parameters
indexed by the shape's ``BoundValues`` enum, validated once at construction,
plus an eagerly computed bounding box. Concrete types only implement the
invariant check, the canonical-frame transforms and the tessellation.
"""

import math
from abc import ABC, abstractmethod
from enum import Enum, IntEnum
from typing import List, Sequence, Tuple, Type, Union

import numpy as np

from ..core.boundary_check import BoundaryCheck
from ..core.errors import BoundsError, BoundsResult, Violation


ON_SURFACE_TOLERANCE = 1e-4

# Zero-tolerance check used when callers do not pass a policy
DEFAULT_CHECK = BoundaryCheck(True)

LocalPosition = Union[Sequence[float], np.ndarray]


class BoundsType(Enum):
    """Discriminant of the closed set of 2D bounds types."""
    RECTANGLE = "rectangle"
    DIAMOND = "diamond"
    ELLIPSE = "ellipse"
    DISC = "disc"
    DISC_TRAPEZOID = "disc_trapezoid"


class SurfaceBounds(ABC):
    """
    Abstract immutable 2D bounds.

    Subclasses define ``BoundValues`` (an IntEnum over the parameter vector)
    and ``_DUMP_LABELS`` (names used by the text dump), and implement
    ``_check_consistency``, ``type``, ``inside``, ``distance_to_boundary``,
    ``vertices`` and ``_compute_bounding_box``.
    """

    BoundValues: Type[IntEnum]
    _DUMP_LABELS: Tuple[str, ...] = ()

    def _setup(self, values: Sequence[float]) -> None:
        """Validate and store the parameter vector, then freeze the instance."""
        values = tuple(float(v) for v in values)
        if len(values) != len(self.BoundValues):
            self._reject(Violation.WRONG_PARAMETER_COUNT,
                         f"expected {len(self.BoundValues)} values, got {len(values)}.")
        if any(math.isnan(v) for v in values):
            self._reject(Violation.NAN_PARAMETER, "NaN parameter provided.")
        self._values = values
        self._check_consistency()
        self._derive()
        self._bounding_box = self._compute_bounding_box()
        self._frozen = True

    def __setattr__(self, name, value):
        if self.__dict__.get("_frozen", False):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _reject(self, violation: Violation, message: str):
        raise BoundsError(type(self).__name__, violation, message)

    def _require(self, condition: bool, violation: Violation, message: str) -> None:
        if not condition:
            self._reject(violation, message)

    @abstractmethod
    def _check_consistency(self) -> None:
        """Raise BoundsError if the stored values violate an invariant."""

    def _derive(self) -> None:
        """Hook for additional derived quantities, computed before freezing."""

    @abstractmethod
    def _compute_bounding_box(self):
        """Return the enclosing RectangleBounds."""

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_values(cls, values: Sequence[float]) -> "SurfaceBounds":
        """
        Build bounds from a parameter vector in canonical order.

        ``cls.from_values(b.values())`` reproduces ``b`` exactly.
        """
        values = list(values)
        if len(values) != len(cls.BoundValues):
            raise BoundsError(cls.__name__, Violation.WRONG_PARAMETER_COUNT,
                              f"expected {len(cls.BoundValues)} values, got {len(values)}.")
        return cls._from_checked_values(values)

    @classmethod
    def _from_checked_values(cls, values: List[float]) -> "SurfaceBounds":
        return cls(*values)

    @classmethod
    def create(cls, *args, **kwargs) -> BoundsResult:
        """
        Checked construction that reports invariant violations as a value.

        Takes the same arguments as the constructor.
        """
        try:
            return BoundsResult(bounds=cls(*args, **kwargs))
        except BoundsError as error:
            return BoundsResult.from_error(error)

    @classmethod
    def create_from_values(cls, values: Sequence[float]) -> BoundsResult:
        """Checked counterpart of from_values."""
        try:
            return BoundsResult(bounds=cls.from_values(values))
        except BoundsError as error:
            return BoundsResult.from_error(error)

    def clone(self) -> "SurfaceBounds":
        """Independent copy with identical parameters."""
        return type(self).from_values(self._values)

    def __copy__(self):
        return self.clone()

    def __deepcopy__(self, memo):
        return self.clone()

    # ------------------------------------------------------------------
    # Common contract
    # ------------------------------------------------------------------

    @abstractmethod
    def type(self) -> BoundsType:
        """Shape family discriminant."""

    def values(self) -> List[float]:
        """Copy of the parameter vector in canonical order."""
        return list(self._values)

    def get(self, index: IntEnum) -> float:
        """
        Single parameter access.

        :param index: Member of this shape's BoundValues enum
        :raises IndexError: If index does not name a parameter of this shape
        """
        if isinstance(index, IntEnum) and not isinstance(index, self.BoundValues):
            raise IndexError(f"{index!r} is not a {type(self).__name__} parameter")
        try:
            return self._values[self.BoundValues(index)]
        except ValueError:
            raise IndexError(f"{index!r} is not a {type(self).__name__} parameter") from None

    @abstractmethod
    def inside(self, local: LocalPosition, bcheck: BoundaryCheck = DEFAULT_CHECK) -> bool:
        """
        Whether a local position is inside the bounds.

        :param local: Local position in the surface frame
        :param bcheck: Boundary check policy deciding the tolerance
        """

    @abstractmethod
    def distance_to_boundary(self, local: LocalPosition) -> float:
        """Signed distance to the boundary, > 0 outside and <= 0 inside."""

    @abstractmethod
    def vertices(self, segments: int = 1) -> np.ndarray:
        """
        Counter-clockwise polygon approximating the boundary.

        :param segments: Number of segments used to approximate curved lines
        :return: (N, 2) array of vertices
        """

    def bounding_box(self):
        """Cached axis-aligned RectangleBounds enclosing the shape."""
        return self._bounding_box

    # ------------------------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, SurfaceBounds):
            return NotImplemented
        return type(self) is type(other) and self._values == other._values

    def __hash__(self):
        return hash((type(self).__name__, self._values))

    def __str__(self) -> str:
        labels = ", ".join(self._DUMP_LABELS)
        numbers = ", ".join(f"{v:.7f}" for v in self._values)
        return f"{type(self).__name__}:  ({labels}) = ({numbers})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}.from_values({list(self._values)!r})"


class DiscBounds(SurfaceBounds):
    """Bounds of disc surfaces, queried in polar (r, phi) local coordinates."""

    @abstractmethod
    def r_min(self) -> float:
        """Inner radius."""

    @abstractmethod
    def r_max(self) -> float:
        """Outer radius."""

    @abstractmethod
    def covers_full_azimuth(self) -> bool:
        """Whether the bounds cover the full 2pi in phi."""

    @abstractmethod
    def binning_value_phi(self) -> float:
        """Reference phi for binning."""

    def inside_radial_bounds(self, r: float, tolerance: float = 0.0) -> bool:
        """Whether a radius lies in (r_min, r_max) widened by ``tolerance``."""
        return r + tolerance > self.r_min() and r - tolerance < self.r_max()

    def binning_value_r(self) -> float:
        """Reference radius for binning."""
        return 0.5 * (self.r_min() + self.r_max())


def as_local(local: LocalPosition) -> np.ndarray:
    """Convert a local position to a float array of shape (2,)."""
    point = np.asarray(local, dtype=float).reshape(-1)
    if point.shape != (2,):
        raise ValueError(f"Local position must have 2 components, got {point.shape[0]}")
    return point
