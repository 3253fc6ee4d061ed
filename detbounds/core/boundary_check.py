"""
Boundary check policy.

A BoundaryCheck decides whether a local position lies inside an axis-aligned
box or a convex polygon, optionally accepting points within an absolute
tolerance or within a covariance-scaled (chi2) tolerance of the boundary. It
also provides the signed distance primitives every bounds type delegates to.
Bounds objects only transform the query point into their canonical frame;
all tolerance handling lives here.
"""

import math
from enum import Enum
from typing import Sequence, Union

import numpy as np


ArrayLike2D = Union[Sequence[float], np.ndarray]


class BoundaryCheckType(Enum):
    """Tolerance model of a BoundaryCheck."""
    NONE = "none"
    ABSOLUTE = "absolute"
    CHI2 = "chi2"


class BoundaryCheck:
    """
    Tolerance-aware containment predicate and distance metric.

    Instances are immutable and can be shared freely between threads.
    """

    __slots__ = ("_type", "_tolerance", "_weight")

    def __init__(self, check_local0: bool = True, check_local1: bool = None,
                 tolerance0: float = 0.0, tolerance1: float = 0.0):
        """
        Build an absolute-tolerance check.

        :param check_local0: Whether the first local coordinate is checked
        :param check_local1: Whether the second local coordinate is checked
                             (defaults to check_local0)
        :param tolerance0: Absolute tolerance on the first coordinate
        :param tolerance1: Absolute tolerance on the second coordinate
        """
        if check_local1 is None:
            check_local1 = check_local0
        checked = bool(check_local0) or bool(check_local1)
        self._type = BoundaryCheckType.ABSOLUTE if checked else BoundaryCheckType.NONE
        self._tolerance = np.array([
            abs(tolerance0) if check_local0 else np.inf,
            abs(tolerance1) if check_local1 else np.inf,
        ])
        self._weight = np.eye(2)

    @classmethod
    def none(cls) -> "BoundaryCheck":
        """A check that accepts every point."""
        return cls(False, False)

    @classmethod
    def absolute(cls, tolerance0: float = 0.0, tolerance1: float = 0.0) -> "BoundaryCheck":
        """Check both coordinates with the given absolute tolerances."""
        return cls(True, True, tolerance0, tolerance1)

    @classmethod
    def chi2(cls, covariance: np.ndarray, sigma_max: float = 1.0) -> "BoundaryCheck":
        """
        Covariance-scaled check.

        A point outside the region is accepted when the Mahalanobis distance
        to the closest boundary point does not exceed ``sigma_max``.

        :param covariance: 2x2 covariance of the local position
        :param sigma_max: Accepted number of standard deviations
        """
        cov = np.asarray(covariance, dtype=float)
        if cov.shape != (2, 2):
            raise ValueError(f"Covariance must be 2x2, got shape {cov.shape}")
        return cls._build(BoundaryCheckType.CHI2,
                          np.array([abs(sigma_max), 0.0]),
                          np.linalg.pinv(cov))

    @classmethod
    def _build(cls, check_type: BoundaryCheckType, tolerance: np.ndarray,
               weight: np.ndarray) -> "BoundaryCheck":
        check = cls.__new__(cls)
        check._type = check_type
        check._tolerance = tolerance
        check._weight = weight
        return check

    @property
    def type(self) -> BoundaryCheckType:
        return self._type

    @property
    def tolerance(self) -> np.ndarray:
        """Per-coordinate tolerance (inf for unchecked coordinates)."""
        return self._tolerance.copy()

    @property
    def weight(self) -> np.ndarray:
        """Metric used for closest-point searches (inverse covariance for chi2)."""
        return self._weight.copy()

    def transformed(self, jacobian: np.ndarray) -> "BoundaryCheck":
        """
        Express this check in another local frame.

        :param jacobian: 2x2 Jacobian d(new coordinates)/d(old coordinates)
        :return: New BoundaryCheck acting on the new coordinates
        """
        jac = np.asarray(jacobian, dtype=float)
        if self._type is BoundaryCheckType.NONE:
            return self
        if self._type is BoundaryCheckType.ABSOLUTE:
            abs_jac = np.abs(jac)
            with np.errstate(invalid="ignore"):
                terms = abs_jac * self._tolerance[np.newaxis, :]
            # 0 * inf means the coordinate does not contribute
            terms[abs_jac == 0.0] = 0.0
            return self._build(self._type, terms.sum(axis=1), self._weight)
        covariance = np.linalg.pinv(self._weight)
        new_cov = jac @ covariance @ jac.T
        return self._build(self._type, self._tolerance.copy(), np.linalg.pinv(new_cov))

    # ------------------------------------------------------------------
    # Box primitives
    # ------------------------------------------------------------------

    def is_inside(self, point: ArrayLike2D, lower_left: ArrayLike2D,
                  upper_right: ArrayLike2D) -> bool:
        """
        Check a point against an axis-aligned box [lower_left, upper_right].

        Points on the boundary are inside.
        """
        if self._type is BoundaryCheckType.NONE:
            return True
        p = np.asarray(point, dtype=float)
        ll = np.asarray(lower_left, dtype=float)
        ur = np.asarray(upper_right, dtype=float)
        if _inside_rectangle(p, ll, ur):
            return True
        if self._type is BoundaryCheckType.CHI2:
            closest = self._closest_on_polygon(p, _rectangle_vertices(ll, ur))
        else:
            closest = _closest_on_rectangle(p, ll, ur)
        return self.is_tolerated(closest - p)

    def distance(self, point: ArrayLike2D, lower_left: ArrayLike2D,
                 upper_right: ArrayLike2D) -> float:
        """
        Signed distance to the boundary of an axis-aligned box.

        :return: Negative or zero inside, positive outside
        """
        p = np.asarray(point, dtype=float)
        ll = np.asarray(lower_left, dtype=float)
        ur = np.asarray(upper_right, dtype=float)
        if self._type is BoundaryCheckType.CHI2:
            return self.distance_to_polygon(p, _rectangle_vertices(ll, ur))
        d = math.sqrt(self._squared_norm(p - _closest_on_rectangle(p, ll, ur)))
        return -d if _inside_rectangle(p, ll, ur) else d

    # ------------------------------------------------------------------
    # Convex polygon primitives (vertices in counter-clockwise order)
    # ------------------------------------------------------------------

    def is_inside_polygon(self, point: ArrayLike2D, vertices: np.ndarray) -> bool:
        """Check a point against a convex, counter-clockwise polygon."""
        if self._type is BoundaryCheckType.NONE:
            return True
        p = np.asarray(point, dtype=float)
        verts = np.asarray(vertices, dtype=float)
        if _inside_convex_polygon(p, verts):
            return True
        return self.is_tolerated(self._closest_on_polygon(p, verts) - p)

    def distance_to_polygon(self, point: ArrayLike2D, vertices: np.ndarray) -> float:
        """Signed distance to a convex, counter-clockwise polygon."""
        p = np.asarray(point, dtype=float)
        verts = np.asarray(vertices, dtype=float)
        d = math.sqrt(self._squared_norm(p - self._closest_on_polygon(p, verts)))
        return -d if _inside_convex_polygon(p, verts) else d

    # ------------------------------------------------------------------

    def is_tolerated(self, delta: ArrayLike2D) -> bool:
        """Whether an offset to the closest boundary point is within tolerance."""
        if self._type is BoundaryCheckType.NONE:
            return True
        d = np.asarray(delta, dtype=float)
        if self._type is BoundaryCheckType.ABSOLUTE:
            return bool(abs(d[0]) <= self._tolerance[0] and abs(d[1]) <= self._tolerance[1])
        return self._squared_norm(d) <= self._tolerance[0] ** 2

    def _squared_norm(self, v: np.ndarray) -> float:
        return float(v @ self._weight @ v)

    def _closest_on_polygon(self, point: np.ndarray, vertices: np.ndarray) -> np.ndarray:
        best = vertices[0]
        best_d = np.inf
        n = len(vertices)
        for i in range(n):
            a = vertices[i]
            b = vertices[(i + 1) % n]
            ab = b - a
            denom = float(ab @ self._weight @ ab)
            if denom > 0.0:
                t = float((point - a) @ self._weight @ ab) / denom
                t = min(max(t, 0.0), 1.0)
            else:
                t = 0.0
            candidate = a + t * ab
            d = self._squared_norm(point - candidate)
            if d < best_d:
                best, best_d = candidate, d
        return best

    def __eq__(self, other):
        if not isinstance(other, BoundaryCheck):
            return NotImplemented
        return (self._type is other._type
                and np.array_equal(self._tolerance, other._tolerance)
                and np.array_equal(self._weight, other._weight))

    def __hash__(self):
        return hash((self._type, tuple(self._tolerance), tuple(self._weight.ravel())))

    def __repr__(self) -> str:
        return f"BoundaryCheck(type={self._type.value}, tolerance={self._tolerance.tolist()})"


def _inside_rectangle(point: np.ndarray, ll: np.ndarray, ur: np.ndarray) -> bool:
    return bool(ll[0] <= point[0] <= ur[0] and ll[1] <= point[1] <= ur[1])


def _rectangle_vertices(ll: np.ndarray, ur: np.ndarray) -> np.ndarray:
    return np.array([[ll[0], ll[1]], [ur[0], ll[1]], [ur[0], ur[1]], [ll[0], ur[1]]])


def _closest_on_rectangle(point: np.ndarray, ll: np.ndarray, ur: np.ndarray) -> np.ndarray:
    """Euclidean closest point on the rectangle boundary."""
    if not _inside_rectangle(point, ll, ur):
        return np.clip(point, ll, ur)
    # inside: project onto the nearest edge
    gaps = (point[0] - ll[0], ur[0] - point[0], point[1] - ll[1], ur[1] - point[1])
    edge = int(np.argmin(gaps))
    closest = point.copy()
    if edge == 0:
        closest[0] = ll[0]
    elif edge == 1:
        closest[0] = ur[0]
    elif edge == 2:
        closest[1] = ll[1]
    else:
        closest[1] = ur[1]
    return closest


def _inside_convex_polygon(point: np.ndarray, vertices: np.ndarray) -> bool:
    if _signed_area(vertices) <= 0.0:
        # a collapsed polygon has no interior, only its outline
        return _on_outline(point, vertices)
    n = len(vertices)
    for i in range(n):
        a = vertices[i]
        b = vertices[(i + 1) % n]
        cross = (b[0] - a[0]) * (point[1] - a[1]) - (b[1] - a[1]) * (point[0] - a[0])
        if cross < 0.0:
            return False
    return True


def _signed_area(vertices: np.ndarray) -> float:
    x, y = vertices[:, 0], vertices[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def _on_outline(point: np.ndarray, vertices: np.ndarray) -> bool:
    n = len(vertices)
    for i in range(n):
        a = vertices[i]
        ab = vertices[(i + 1) % n] - a
        denom = float(ab @ ab)
        t = min(max(float((point - a) @ ab) / denom, 0.0), 1.0) if denom > 0.0 else 0.0
        if np.array_equal(a + t * ab, point):
            return True
    return False
