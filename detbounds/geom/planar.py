"""
Planar bounds in Cartesian local coordinates.

This module provides RectangleBounds, DiamondBounds and EllipseBounds. All
three take local positions as (x, y) and delegate the final accept/reject
decision to a BoundaryCheck.
"""

import math
from enum import IntEnum
from typing import List, Sequence

import numpy as np

from ..core.boundary_check import BoundaryCheck, BoundaryCheckType
from ..core.errors import Violation
from ..utils.periodic import radian_sym
from .bounds import (
    BoundsType, SurfaceBounds, LocalPosition, DEFAULT_CHECK, ON_SURFACE_TOLERANCE, as_local,
)
from . import vertex


class RectangleBounds(SurfaceBounds):
    """Axis-aligned rectangle given by its lower left and upper right corner."""

    class BoundValues(IntEnum):
        MIN_X = 0
        MIN_Y = 1
        MAX_X = 2
        MAX_Y = 3

    def __init__(self, half_x: float, half_y: float):
        """
        Rectangle symmetric around the origin.

        :param half_x: Half length in x
        :param half_y: Half length in y
        """
        self._setup((-half_x, -half_y, half_x, half_y))

    @classmethod
    def from_min_max(cls, min_corner: Sequence[float], max_corner: Sequence[float]) -> "RectangleBounds":
        """
        Rectangle from its lower left and upper right corner.

        :param min_corner: (min_x, min_y)
        :param max_corner: (max_x, max_y)
        """
        return cls._from_checked_values([min_corner[0], min_corner[1], max_corner[0], max_corner[1]])

    @classmethod
    def _from_checked_values(cls, values: List[float]) -> "RectangleBounds":
        bounds = cls.__new__(cls)
        bounds._setup(values)
        return bounds

    def _check_consistency(self) -> None:
        v = self._values
        self._require(v[self.BoundValues.MIN_X] <= v[self.BoundValues.MAX_X],
                      Violation.INVERTED_X, "invalid local x setup.")
        self._require(v[self.BoundValues.MIN_Y] <= v[self.BoundValues.MAX_Y],
                      Violation.INVERTED_Y, "invalid local y setup.")

    def _derive(self) -> None:
        self._min = np.array(self._values[0:2])
        self._max = np.array(self._values[2:4])
        self._min.flags.writeable = False
        self._max.flags.writeable = False

    def _compute_bounding_box(self) -> "RectangleBounds":
        return self

    def type(self) -> BoundsType:
        return BoundsType.RECTANGLE

    def min(self) -> np.ndarray:
        """Lower left corner."""
        return self._min

    def max(self) -> np.ndarray:
        """Upper right corner."""
        return self._max

    def half_length_x(self) -> float:
        return 0.5 * (self._max[0] - self._min[0])

    def half_length_y(self) -> float:
        return 0.5 * (self._max[1] - self._min[1])

    def inside(self, local: LocalPosition, bcheck: BoundaryCheck = DEFAULT_CHECK) -> bool:
        return bcheck.is_inside(as_local(local), self._min, self._max)

    def distance_to_boundary(self, local: LocalPosition) -> float:
        return DEFAULT_CHECK.distance(as_local(local), self._min, self._max)

    def vertices(self, segments: int = 1) -> np.ndarray:
        """Four corners counter-clockwise from the lower left; segments is ignored."""
        (x0, y0), (x1, y1) = self._min, self._max
        return np.array([[x0, y0], [x1, y0], [x1, y1], [x0, y1]])

    def __str__(self) -> str:
        return (f"RectangleBounds:  (hlX, hlY) = "
                f"({self.half_length_x():.7f}, {self.half_length_y():.7f})\n"
                f"(lower left, upper right):\n"
                f"{self._min[0]:.7f} {self._min[1]:.7f}\n"
                f"{self._max[0]:.7f} {self._max[1]:.7f}")


class DiamondBounds(SurfaceBounds):
    """
    Convex hexagon symmetric about the y axis.

    The shape is the union of a lower trapezoid (from y = -half_y_neg to 0)
    and an upper trapezoid (from 0 to y = half_y_pos) sharing the widest
    edge at y = 0.
    """

    class BoundValues(IntEnum):
        HALF_LENGTH_X_NEG_Y = 0
        HALF_LENGTH_X_ZERO_Y = 1
        HALF_LENGTH_X_POS_Y = 2
        HALF_LENGTH_Y_NEG = 3
        HALF_LENGTH_Y_POS = 4

    _DUMP_LABELS = ("halfXatYneg", "halfXatYzero", "halfXatYpos", "halfYneg", "halfYpos")

    def __init__(self, half_x_neg_y: float, half_x_zero_y: float, half_x_pos_y: float,
                 half_y_neg: float, half_y_pos: float):
        """
        :param half_x_neg_y: Half length in x at y = -half_y_neg
        :param half_x_zero_y: Half length in x at y = 0
        :param half_x_pos_y: Half length in x at y = half_y_pos
        :param half_y_neg: Extent into negative y
        :param half_y_pos: Extent into positive y
        """
        self._setup((half_x_neg_y, half_x_zero_y, half_x_pos_y, half_y_neg, half_y_pos))

    def _check_consistency(self) -> None:
        self._require(all(v >= 0.0 for v in self._values),
                      Violation.NEGATIVE_LENGTH, "negative half length provided.")
        x_neg, x_zero, x_pos = self._values[0:3]
        self._require(x_neg <= x_zero and x_pos <= x_zero,
                      Violation.NOT_A_DIAMOND, "not a diamond shape.")

    def _derive(self) -> None:
        x1, x2, x3, y1, y3 = self._values
        # counter-clockwise, starting at the lower left
        corners = np.array([[-x1, -y1], [x1, -y1], [x2, 0.0],
                            [x3, y3], [-x3, y3], [-x2, 0.0]])
        corners.flags.writeable = False
        self._corners = corners
        self._halves = (corners[[0, 1, 2, 5]], corners[[5, 2, 3, 4]])

    def _compute_bounding_box(self) -> RectangleBounds:
        x_max = max(self._values[0:3])
        return RectangleBounds.from_min_max(
            (-x_max, -self.get(self.BoundValues.HALF_LENGTH_Y_NEG)),
            (x_max, self.get(self.BoundValues.HALF_LENGTH_Y_POS)))

    def type(self) -> BoundsType:
        return BoundsType.DIAMOND

    def inside(self, local: LocalPosition, bcheck: BoundaryCheck = DEFAULT_CHECK) -> bool:
        point = as_local(local)
        lower, upper = self._halves
        return bcheck.is_inside_polygon(point, lower) or bcheck.is_inside_polygon(point, upper)

    def distance_to_boundary(self, local: LocalPosition) -> float:
        return DEFAULT_CHECK.distance_to_polygon(as_local(local), self._corners)

    def vertices(self, segments: int = 1) -> np.ndarray:
        """Six corners counter-clockwise from the lower left; segments is ignored."""
        return self._corners.copy()


class EllipseBounds(SurfaceBounds):
    """
    Elliptical ring sector.

    The ring lies between an inner ellipse with semi-axes (min_r0, min_r1)
    and an outer ellipse with semi-axes (max_r0, max_r1), restricted to the
    polar sector [average_phi - half_phi, average_phi + half_phi].
    """

    class BoundValues(IntEnum):
        MIN_R0 = 0
        MAX_R0 = 1
        MIN_R1 = 2
        MAX_R1 = 3
        HALF_PHI_SECTOR = 4
        AVERAGE_PHI = 5

    _DUMP_LABELS = ("innerRadius0", "outerRadius0", "innerRadius1", "outerRadius1",
                    "hPhiSector", "averagePhi")

    def __init__(self, min_r0: float, max_r0: float, min_r1: float, max_r1: float,
                 half_phi: float = math.pi, average_phi: float = 0.0):
        """
        :param min_r0: Inner radius along x
        :param max_r0: Outer radius along x
        :param min_r1: Inner radius along y
        :param max_r1: Outer radius along y
        :param half_phi: Half opening angle of the sector, in [0, pi]
        :param average_phi: Sector center, already normalized to [-pi, pi)
        """
        self._setup((min_r0, max_r0, min_r1, max_r1, half_phi, average_phi))

    def _check_consistency(self) -> None:
        min_r0, max_r0, min_r1, max_r1, half_phi, avg_phi = self._values
        self._require(min(min_r0, max_r0, min_r1, max_r1) >= 0.0,
                      Violation.NEGATIVE_LENGTH, "negative radius provided.")
        self._require(min_r0 * max_r0 >= 0.0 and min_r0 <= max_r0,
                      Violation.INVALID_FIRST_AXIS, "invalid first coordinate.")
        self._require(min_r1 * max_r1 >= 0.0 and min_r1 <= max_r1,
                      Violation.INVALID_SECOND_AXIS, "invalid second coordinate.")
        self._require(0.0 <= half_phi <= math.pi,
                      Violation.INVALID_PHI_SECTOR, "invalid phi sector setup.")
        self._require(avg_phi == radian_sym(avg_phi),
                      Violation.UNNORMALIZED_PHI, "invalid phi positioning.")

    def _compute_bounding_box(self) -> RectangleBounds:
        return RectangleBounds(self._values[self.BoundValues.MAX_R0],
                               self._values[self.BoundValues.MAX_R1])

    def type(self) -> BoundsType:
        return BoundsType.ELLIPSE

    def _full_sector(self) -> bool:
        return self._values[self.BoundValues.HALF_PHI_SECTOR] >= math.pi

    def _has_inner(self) -> bool:
        return (self._values[self.BoundValues.MIN_R0] > 0.0
                and self._values[self.BoundValues.MIN_R1] > 0.0)

    def inside(self, local: LocalPosition, bcheck: BoundaryCheck = DEFAULT_CHECK) -> bool:
        """
        Ring test widened by tolerance[0], sector test widened by tolerance[1].

        The origin is treated as the apex of the sector. A chi2 check is not
        covariance-weighted here: its tolerance is ``(sigma_max, 0)``, so
        ``sigma_max`` widens the ring as an absolute length and the sector
        is not widened.
        """
        if bcheck.type is BoundaryCheckType.NONE:
            return True
        x, y = as_local(local)
        tol0, tol1 = bcheck.tolerance
        min_r0, max_r0, min_r1, max_r1, half_phi, avg_phi = self._values

        inside_phi = True
        if not self._full_sector() and (x != 0.0 or y != 0.0):
            dphi = radian_sym(math.atan2(y, x) - avg_phi)
            inside_phi = abs(dphi) <= half_phi + tol1

        inner0, inner1 = min_r0 - tol0, min_r1 - tol0
        inside_inner = inner0 <= 0.0 or inner1 <= 0.0 or _level(x, y, inner0, inner1) >= 1.0
        inside_outer = _level(x, y, max_r0 + tol0, max_r1 + tol0) <= 1.0
        return inside_phi and inside_inner and inside_outer

    def distance_to_boundary(self, local: LocalPosition) -> float:
        """
        Signed distance along the radial ray through the point.

        Exact for circles; for eccentric ellipses it is a radial estimate
        whose sign always matches the zero-tolerance inside test.
        """
        x, y = as_local(local)
        min_r0, max_r0, min_r1, max_r1, half_phi, avg_phi = self._values
        r = math.hypot(x, y)

        if max_r0 == 0.0 or max_r1 == 0.0:
            # degenerate outer ellipse: a segment along one axis
            d_outer = math.hypot(max(abs(x) - max_r0, 0.0), max(abs(y) - max_r1, 0.0))
        elif r == 0.0:
            d_outer = -min(max_r0, max_r1)
        else:
            d_outer = r - _ray_radius(x / r, y / r, max_r0, max_r1)

        d_inner = -math.inf
        if self._has_inner():
            if r == 0.0:
                d_inner = min(min_r0, min_r1)
            else:
                d_inner = _ray_radius(x / r, y / r, min_r0, min_r1) - r

        d_phi = -math.inf
        if not self._full_sector():
            if r == 0.0:
                # the apex of the sector
                d_phi = 0.0
            else:
                excess = abs(radian_sym(math.atan2(y, x) - avg_phi)) - half_phi
                d_phi = r * math.sin(excess) if excess < 0.5 * math.pi else r

        return max(d_outer, d_inner, d_phi)

    def vertices(self, segments: int = 1) -> np.ndarray:
        """
        Outer arc counter-clockwise, then the inner arc (or the center of a
        sector without inner ellipse) walked back.

        :param segments: Number of segments per full turn; the axis
                         intersections and sector edges are always included
        """
        segments = vertex.check_segments(segments)
        min_r0, max_r0, min_r1, max_r1, half_phi, avg_phi = self._values
        closed = abs(half_phi - math.pi) < ON_SURFACE_TOLERANCE
        if max_r0 == 0.0 or max_r1 == 0.0:
            return np.array(self._bounding_box.vertices())
        refs = [avg_phi] if avg_phi != 0.0 else []
        borders = vertex.phi_segments(avg_phi - half_phi, avg_phi + half_phi, refs)

        points = vertex.bow(vertex.ellipse(max_r0, max_r1), borders, segments,
                            closed=not closed or self._has_inner())
        if self._has_inner():
            points += vertex.bow(vertex.ellipse(min_r0, min_r1), borders, segments,
                                 reverse=True, closed=True)
        elif not closed:
            points.append(np.zeros(2))
        return np.array(points)


def _level(x: float, y: float, a: float, b: float) -> float:
    """(x/a)^2 + (y/b)^2, with zero semi-axes admitting only points on the other axis."""
    total = 0.0
    for coord, axis in ((x, a), (y, b)):
        if coord == 0.0:
            continue
        if axis <= 0.0:
            return math.inf
        total += (coord / axis) ** 2
    return total


def _ray_radius(cos_phi: float, sin_phi: float, a: float, b: float) -> float:
    """Distance from the center to the ellipse boundary along a direction."""
    return 1.0 / math.sqrt((cos_phi / a) ** 2 + (sin_phi / b) ** 2)
