"""
Disc bounds in polar (r, phi) local coordinates.
"""

import math
import warnings
from enum import IntEnum
from typing import List, Tuple

import numpy as np

from ..core.boundary_check import BoundaryCheck, BoundaryCheckType
from ..core.errors import Violation
from ..utils.periodic import radian_sym
from .bounds import (
    BoundsType, DiscBounds, LocalPosition, DEFAULT_CHECK, ON_SURFACE_TOLERANCE, as_local,
)
from .planar import RectangleBounds
from . import vertex


class RadialBounds(DiscBounds):
    """
    Full disc, ring or ring sector.

    The sector spans ``average_phi - half_phi_sector`` to
    ``average_phi + half_phi_sector``.
    """

    class BoundValues(IntEnum):
        MIN_R = 0
        MAX_R = 1
        AVERAGE_PHI = 2
        HALF_PHI_SECTOR = 3

    _DUMP_LABELS = ("innerRadius", "outerRadius", "averagePhi", "hPhiSector")

    def __init__(self, min_r: float, max_r: float, half_phi: float = math.pi,
                 avg_phi: float = 0.0):
        """
        :param min_r: Inner radius (0 for a full disc)
        :param max_r: Outer radius
        :param half_phi: Half opening angle of the sector, at most pi
        :param avg_phi: Central phi of the sector, normalized to [-pi, pi)
        """
        r0, r1 = abs(min_r), abs(max_r)
        if r0 > r1:
            warnings.warn(f"RadialBounds: inner radius {r0} exceeds outer radius {r1}, "
                          f"swapping them.", UserWarning)
            r0, r1 = r1, r0
        self._setup((r0, r1, radian_sym(avg_phi), abs(half_phi)))

    @classmethod
    def _from_checked_values(cls, values: List[float]) -> "RadialBounds":
        v = cls.BoundValues
        return cls(values[v.MIN_R], values[v.MAX_R], values[v.HALF_PHI_SECTOR],
                   values[v.AVERAGE_PHI])

    def _check_consistency(self) -> None:
        self._require(self.half_phi_sector() <= math.pi, Violation.INVALID_PHI_SECTOR,
                      f"half phi sector {self.half_phi_sector()} exceeds pi.")
        self._require(math.isfinite(self.average_phi()), Violation.UNNORMALIZED_PHI,
                      "average phi must be finite.")

    def _compute_bounding_box(self) -> RectangleBounds:
        corners = self.vertices(1)
        return RectangleBounds.from_min_max(corners.min(axis=0), corners.max(axis=0))

    def type(self) -> BoundsType:
        return BoundsType.DISC

    def r_min(self) -> float:
        return self._values[self.BoundValues.MIN_R]

    def r_max(self) -> float:
        return self._values[self.BoundValues.MAX_R]

    def average_phi(self) -> float:
        return self._values[self.BoundValues.AVERAGE_PHI]

    def half_phi_sector(self) -> float:
        return self._values[self.BoundValues.HALF_PHI_SECTOR]

    def covers_full_azimuth(self) -> bool:
        return self.half_phi_sector() == math.pi

    def binning_value_phi(self) -> float:
        return self.average_phi()

    def _shifted(self, local: LocalPosition) -> np.ndarray:
        r, phi = as_local(local)
        return np.array([r, radian_sym(phi - self.average_phi())])

    def _box(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        half = self.half_phi_sector()
        return (self.r_min(), -half), (self.r_max(), half)

    def inside(self, local: LocalPosition, bcheck: BoundaryCheck = DEFAULT_CHECK) -> bool:
        lower, upper = self._box()
        return bcheck.is_inside(self._shifted(local), lower, upper)

    def distance_to_boundary(self, local: LocalPosition) -> float:
        lower, upper = self._box()
        return DEFAULT_CHECK.distance(self._shifted(local), lower, upper)

    def vertices(self, segments: int = 1) -> np.ndarray:
        segments = vertex.check_segments(segments)
        min_r, max_r = self.r_min(), self.r_max()
        avg, half = self.average_phi(), self.half_phi_sector()
        full = self.covers_full_azimuth()
        if full:
            borders = vertex.phi_segments()
        else:
            borders = vertex.phi_segments(avg - half, avg + half, [avg])

        # a negligible inner radius of a sector collapses into the apex
        collapsed = not full and min_r < ON_SURFACE_TOLERANCE
        with_inner = min_r > 0.0 and not collapsed
        points = vertex.bow(vertex.circle(max_r), borders, segments,
                            closed=not full or with_inner)
        if with_inner:
            points += vertex.bow(vertex.circle(min_r), borders, segments, reverse=True)
        elif collapsed:
            points.append(np.zeros(2))
        return np.array(points)


class DiscTrapezoidBounds(DiscBounds):
    """
    Trapezoid on a disc, symmetric around ``average_phi``.

    The two parallel sides are centred on the ``average_phi`` ray with their
    end points on the inner and outer radius. ``stereo`` rotates the
    trapezoid about its own centre.
    """

    class BoundValues(IntEnum):
        HALF_LENGTH_X_MIN_R = 0
        HALF_LENGTH_X_MAX_R = 1
        MIN_R = 2
        MAX_R = 3
        AVERAGE_PHI = 4
        STEREO = 5

    _DUMP_LABELS = ("halfXminR", "halfXmaxR", "minR", "maxR", "averagePhi", "stereo")

    def __init__(self, half_x_min_r: float, half_x_max_r: float, min_r: float, max_r: float,
                 avg_phi: float = 0.5 * math.pi, stereo: float = 0.0):
        """
        :param half_x_min_r: Half length of the side at the inner radius
        :param half_x_max_r: Half length of the side at the outer radius
        :param min_r: Inner radius
        :param max_r: Outer radius
        :param avg_phi: Direction of the symmetry axis, normalized to [-pi, pi)
        :param stereo: Stereo angle
        """
        self._setup((half_x_min_r, half_x_max_r, min_r, max_r, avg_phi, stereo))

    def _check_consistency(self) -> None:
        hx_min, hx_max, min_r, max_r, avg_phi, _ = self._values
        self._require(not (min_r < 0.0 or max_r <= 0.0 or min_r > max_r),
                      Violation.INVALID_RADIAL_SETUP,
                      f"invalid radial setup minR={min_r}, maxR={max_r}.")
        self._require(not (hx_min < 0.0 or hx_max <= 0.0), Violation.NEGATIVE_LENGTH,
                      f"half lengths must be positive, got ({hx_min}, {hx_max}).")
        self._require(hx_min <= min_r and hx_max <= max_r,
                      Violation.HALF_WIDTH_EXCEEDS_RADIUS,
                      "half length exceeds the radius it sits on.")
        self._require(math.isfinite(avg_phi) and avg_phi == radian_sym(avg_phi),
                      Violation.UNNORMALIZED_PHI,
                      f"average phi {avg_phi} is not normalized.")
        y_min = math.sqrt(min_r ** 2 - hx_min ** 2)
        y_max = math.sqrt(max_r ** 2 - hx_max ** 2)
        self._require(y_min <= y_max, Violation.INVALID_RADIAL_SETUP,
                      "outer side lies below the inner side.")

    def _derive(self) -> None:
        hx_min, hx_max, min_r, max_r, _, _ = self._values
        y_min = math.sqrt(min_r ** 2 - hx_min ** 2)
        y_max = math.sqrt(max_r ** 2 - hx_max ** 2)
        self._y_range = (y_min, y_max)
        corners = np.array([[-hx_min, y_min], [hx_min, y_min],
                            [hx_max, y_max], [-hx_max, y_max]])
        corners.flags.writeable = False
        self._corners = corners

    def _compute_bounding_box(self) -> RectangleBounds:
        corners = self.vertices()
        return RectangleBounds.from_min_max(corners.min(axis=0), corners.max(axis=0))

    def type(self) -> BoundsType:
        return BoundsType.DISC_TRAPEZOID

    def half_length_x_min_r(self) -> float:
        return self._values[self.BoundValues.HALF_LENGTH_X_MIN_R]

    def half_length_x_max_r(self) -> float:
        return self._values[self.BoundValues.HALF_LENGTH_X_MAX_R]

    def r_min(self) -> float:
        return self._values[self.BoundValues.MIN_R]

    def r_max(self) -> float:
        return self._values[self.BoundValues.MAX_R]

    def average_phi(self) -> float:
        return self._values[self.BoundValues.AVERAGE_PHI]

    def stereo(self) -> float:
        return self._values[self.BoundValues.STEREO]

    def r_center(self) -> float:
        """Distance of the trapezoid centre from the disc origin."""
        return 0.5 * (self._y_range[0] + self._y_range[1])

    def half_length_y(self) -> float:
        """Half length of the trapezoid along its symmetry axis."""
        return 0.5 * (self._y_range[1] - self._y_range[0])

    def half_phi_sector(self) -> float:
        """Largest half opening angle seen from the disc origin."""
        angles = [math.asin(hx / r) for hx, r in ((self.half_length_x_min_r(), self.r_min()),
                                                   (self.half_length_x_max_r(), self.r_max()))
                  if r > 0.0]
        return max(angles)

    def covers_full_azimuth(self) -> bool:
        return False

    def binning_value_phi(self) -> float:
        return self.average_phi()

    def _stereo_rotation(self, angle: float) -> np.ndarray:
        c, s = math.cos(angle), math.sin(angle)
        return np.array([[c, -s], [s, c]])

    def to_local_cartesian(self, local: LocalPosition) -> np.ndarray:
        """
        Map a polar position to the trapezoid frame.

        The y axis points along ``average_phi``, the x axis to its right, and
        the stereo rotation is undone around the trapezoid centre.
        """
        r, phi = as_local(local)
        avg = self.average_phi()
        xy = np.array([r * math.sin(avg - phi), r * math.cos(phi - avg)])
        if self.stereo() == 0.0:
            return xy
        center = np.array([0.0, self.r_center()])
        return self._stereo_rotation(-self.stereo()) @ (xy - center) + center

    def jacobian_to_local_cartesian(self, local: LocalPosition) -> np.ndarray:
        """
        Jacobian d(x, y)/d(r, phi) of to_local_cartesian.

        :return: 2x2 array, rows (x, y), columns (r, phi)
        """
        r, phi = as_local(local)
        delta = self.average_phi() - phi
        jacobian = np.array([[math.sin(delta), -r * math.cos(delta)],
                             [math.cos(delta), r * math.sin(delta)]])
        if self.stereo() == 0.0:
            return jacobian
        return self._stereo_rotation(-self.stereo()) @ jacobian

    def inside(self, local: LocalPosition, bcheck: BoundaryCheck = DEFAULT_CHECK) -> bool:
        if bcheck.type is BoundaryCheckType.NONE:
            return True
        check = bcheck.transformed(self.jacobian_to_local_cartesian(local))
        return check.is_inside_polygon(self.to_local_cartesian(local), self._corners)

    def distance_to_boundary(self, local: LocalPosition) -> float:
        return DEFAULT_CHECK.distance_to_polygon(self.to_local_cartesian(local), self._corners)

    def vertices(self, segments: int = 1) -> np.ndarray:
        """
        The four corners in the disc xy frame, counter-clockwise.

        :param segments: Ignored, all edges are straight
        """
        corners = np.array(self._corners)
        if self.stereo() != 0.0:
            center = np.array([0.0, self.r_center()])
            corners = (corners - center) @ self._stereo_rotation(self.stereo()).T + center
        avg = self.average_phi()
        # trapezoid x axis and symmetry axis expressed in the disc frame
        x_axis = np.array([math.sin(avg), -math.cos(avg)])
        y_axis = np.array([math.cos(avg), math.sin(avg)])
        return np.outer(corners[:, 0], x_axis) + np.outer(corners[:, 1], y_axis)
