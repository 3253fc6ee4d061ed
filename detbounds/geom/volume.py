"""
Volume bounds.

DoubleTrapezoidVolumeBounds describes a prism whose cross section in the xy
plane is a diamond (two trapezoids sharing their longest side at y = 0) and
which extends symmetrically in z. It can be decomposed into the eight planar
faces that enclose it, each carrying its own 2D bounds and placement.
"""

import math
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.boundary_check import BoundaryCheck
from ..core.errors import BoundsError, BoundsResult, Violation
from .bounds import SurfaceBounds
from .planar import DiamondBounds, RectangleBounds


class VolumeBoundsType(Enum):
    """Discriminant of volume bounds."""
    DOUBLE_TRAPEZOID = "double_trapezoid"


@dataclass(frozen=True, eq=False)
class BoundaryFace:
    """
    One planar face of a volume.

    :param face: Which face of the volume this is
    :param bounds: 2D bounds in the face's local frame
    :param transform: 4x4 placement; its columns are the local x, y and z
                      axes (z being the outward normal) and the centre
    """
    face: "DoubleTrapezoidVolumeBounds.Face"
    bounds: SurfaceBounds
    transform: np.ndarray

    @property
    def center(self) -> np.ndarray:
        return self.transform[:3, 3].copy()

    @property
    def normal(self) -> np.ndarray:
        return self.transform[:3, 2].copy()


@dataclass(frozen=True, eq=False)
class Polyhedron:
    """Vertices and faces (indices into vertices, outward counter-clockwise)."""
    vertices: np.ndarray
    faces: List[Tuple[int, ...]]

    def extent(self) -> Tuple[np.ndarray, np.ndarray]:
        """Axis-aligned minimum and maximum corner."""
        return self.vertices.min(axis=0), self.vertices.max(axis=0)


def _as_transform(transform: Optional[np.ndarray]) -> np.ndarray:
    if transform is None:
        return np.eye(4)
    matrix = np.asarray(transform, dtype=float)
    if matrix.shape != (4, 4):
        raise ValueError(f"Transform must be 4x4, got shape {matrix.shape}")
    return matrix


def _placement(x_axis: np.ndarray, y_axis: np.ndarray, z_axis: np.ndarray,
               center: np.ndarray) -> np.ndarray:
    matrix = np.eye(4)
    matrix[:3, 0] = x_axis
    matrix[:3, 1] = y_axis
    matrix[:3, 2] = z_axis
    matrix[:3, 3] = center
    return matrix


class DoubleTrapezoidVolumeBounds:
    """
    Double trapezoid prism.

    The cross section spans y from ``-2 * half_y1`` (side of length
    ``2 * min_half_x``) through y = 0 (side of length ``2 * med_half_x``) to
    ``2 * half_y2`` (side of length ``2 * max_half_x``). Faces at negative x
    are attached to the angles alpha1/alpha2, those at positive x to
    beta1/beta2 (which equal alpha1/alpha2 by symmetry).
    """

    class BoundValues(IntEnum):
        MIN_HALF_X = 0
        MED_HALF_X = 1
        MAX_HALF_X = 2
        HALF_Y1 = 3
        HALF_Y2 = 4
        HALF_Z = 5
        ALPHA1 = 6
        ALPHA2 = 7

    class Face(IntEnum):
        NEGATIVE_Z = 0
        POSITIVE_Z = 1
        ALPHA1 = 2
        ALPHA2 = 3
        BETA1 = 4
        BETA2 = 5
        BOTTOM_ZX = 6
        TOP_ZX = 7

    # cross-section edge (start corner, end corner) of each side face
    _EDGES = {
        Face.ALPHA1: (5, 0),
        Face.ALPHA2: (4, 5),
        Face.BETA1: (1, 2),
        Face.BETA2: (2, 3),
        Face.BOTTOM_ZX: (0, 1),
        Face.TOP_ZX: (3, 4),
    }

    def __init__(self, min_half_x: float, med_half_x: float, max_half_x: float,
                 half_y1: float, half_y2: float, half_z: float):
        """
        :param min_half_x: Half length in x at y = -2 * half_y1
        :param med_half_x: Half length in x at y = 0
        :param max_half_x: Half length in x at y = 2 * half_y2
        :param half_y1: Half height of the lower trapezoid
        :param half_y2: Half height of the upper trapezoid
        :param half_z: Half length in z
        """
        values = tuple(float(v) for v in (min_half_x, med_half_x, max_half_x,
                                          half_y1, half_y2, half_z))
        if any(math.isnan(v) for v in values):
            self._reject(Violation.NAN_PARAMETER, "NaN parameter provided.")
        if any(v < 0.0 for v in values):
            self._reject(Violation.NEGATIVE_LENGTH, "negative half length provided.")
        if not all(v > 0.0 for v in values[1:]):
            self._reject(Violation.NEGATIVE_LENGTH,
                         "only the minimal half length in x may be zero.")
        if values[0] > values[1] or values[2] > values[1]:
            self._reject(Violation.NOT_A_DIAMOND, "cross section is not a diamond.")
        alpha1 = math.atan2(values[1] - values[0], 2.0 * values[3])
        alpha2 = math.atan2(values[1] - values[2], 2.0 * values[4])
        self._values = values + (alpha1, alpha2)
        self._cross_section = DiamondBounds(values[0], values[1], values[2],
                                            2.0 * values[3], 2.0 * values[4])
        self._frozen = True

    def __setattr__(self, name, value):
        if self.__dict__.get("_frozen", False):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _reject(self, violation: Violation, message: str):
        raise BoundsError(type(self).__name__, violation, message)

    @classmethod
    def from_values(cls, values: Sequence[float]) -> "DoubleTrapezoidVolumeBounds":
        """
        Build from a full parameter vector.

        The opening angles are always recomputed from the lengths.
        """
        values = list(values)
        if len(values) != len(cls.BoundValues):
            raise BoundsError(cls.__name__, Violation.WRONG_PARAMETER_COUNT,
                              f"expected {len(cls.BoundValues)} values, got {len(values)}.")
        return cls(*values[:6])

    @classmethod
    def create(cls, *args, **kwargs) -> BoundsResult:
        """Checked construction returning a BoundsResult."""
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

    def clone(self) -> "DoubleTrapezoidVolumeBounds":
        return type(self).from_values(self._values)

    def __copy__(self):
        return self.clone()

    def __deepcopy__(self, memo):
        return self.clone()

    def type(self) -> VolumeBoundsType:
        return VolumeBoundsType.DOUBLE_TRAPEZOID

    def values(self) -> List[float]:
        return list(self._values)

    def get(self, index: IntEnum) -> float:
        """
        :raises IndexError: If index does not name a parameter of this volume
        """
        if isinstance(index, IntEnum) and not isinstance(index, self.BoundValues):
            raise IndexError(f"{index!r} is not a {type(self).__name__} parameter")
        try:
            return self._values[self.BoundValues(index)]
        except ValueError:
            raise IndexError(f"{index!r} is not a {type(self).__name__} parameter") from None

    def min_half_length_x(self) -> float:
        return self._values[self.BoundValues.MIN_HALF_X]

    def med_half_length_x(self) -> float:
        return self._values[self.BoundValues.MED_HALF_X]

    def max_half_length_x(self) -> float:
        return self._values[self.BoundValues.MAX_HALF_X]

    def half_length_y1(self) -> float:
        return self._values[self.BoundValues.HALF_Y1]

    def half_length_y2(self) -> float:
        return self._values[self.BoundValues.HALF_Y2]

    def half_length_z(self) -> float:
        return self._values[self.BoundValues.HALF_Z]

    def alpha1(self) -> float:
        return self._values[self.BoundValues.ALPHA1]

    def alpha2(self) -> float:
        return self._values[self.BoundValues.ALPHA2]

    # ------------------------------------------------------------------
    # Containment
    # ------------------------------------------------------------------

    def inside(self, position: Sequence[float], tolerance: float = 0.0) -> bool:
        """
        Whether a position in the volume frame lies inside.

        :param position: (x, y, z)
        :param tolerance: Absolute tolerance applied on every axis
        """
        x, y, z = np.asarray(position, dtype=float).reshape(3)
        if abs(z) > self.half_length_z() + tolerance:
            return False
        if y < -2.0 * self.half_length_y1() - tolerance:
            return False
        if y > 2.0 * self.half_length_y2() + tolerance:
            return False
        check = BoundaryCheck(True, True, tolerance, tolerance)
        return self._cross_section.inside((x, y), check)

    # ------------------------------------------------------------------
    # Face bounds
    # ------------------------------------------------------------------

    def face_xy_diamond_bounds(self) -> DiamondBounds:
        """Bounds of both z caps."""
        return self._cross_section

    def face_alpha1_rectangle_bounds(self) -> RectangleBounds:
        return RectangleBounds(self.half_length_y1() / math.cos(self.alpha1()),
                               self.half_length_z())

    def face_alpha2_rectangle_bounds(self) -> RectangleBounds:
        return RectangleBounds(self.half_length_y2() / math.cos(self.alpha2()),
                               self.half_length_z())

    def face_beta1_rectangle_bounds(self) -> RectangleBounds:
        return self.face_alpha1_rectangle_bounds()

    def face_beta2_rectangle_bounds(self) -> RectangleBounds:
        return self.face_alpha2_rectangle_bounds()

    def face_zx_rectangle_bounds_bottom(self) -> RectangleBounds:
        return RectangleBounds(self.half_length_z(), self.min_half_length_x())

    def face_zx_rectangle_bounds_top(self) -> RectangleBounds:
        return RectangleBounds(self.half_length_z(), self.max_half_length_x())

    def _face_bounds(self, face: "DoubleTrapezoidVolumeBounds.Face") -> SurfaceBounds:
        Face = self.Face
        return {
            Face.NEGATIVE_Z: self.face_xy_diamond_bounds,
            Face.POSITIVE_Z: self.face_xy_diamond_bounds,
            Face.ALPHA1: self.face_alpha1_rectangle_bounds,
            Face.ALPHA2: self.face_alpha2_rectangle_bounds,
            Face.BETA1: self.face_beta1_rectangle_bounds,
            Face.BETA2: self.face_beta2_rectangle_bounds,
            Face.BOTTOM_ZX: self.face_zx_rectangle_bounds_bottom,
            Face.TOP_ZX: self.face_zx_rectangle_bounds_top,
        }[face]()

    # ------------------------------------------------------------------
    # Decomposition
    # ------------------------------------------------------------------

    def _face_placement(self, face: "DoubleTrapezoidVolumeBounds.Face") -> np.ndarray:
        half_z = self.half_length_z()
        z_axis = np.array([0.0, 0.0, 1.0])
        if face is self.Face.POSITIVE_Z:
            return _placement(np.array([1.0, 0.0, 0.0]), np.array([0.0, 1.0, 0.0]),
                              z_axis, np.array([0.0, 0.0, half_z]))
        if face is self.Face.NEGATIVE_Z:
            # rotated by pi around y
            return _placement(np.array([-1.0, 0.0, 0.0]), np.array([0.0, 1.0, 0.0]),
                              -z_axis, np.array([0.0, 0.0, -half_z]))
        if face is self.Face.BOTTOM_ZX:
            normal = np.array([0.0, -1.0, 0.0])
            center = np.array([0.0, -2.0 * self.half_length_y1(), 0.0])
            return _placement(z_axis, np.cross(normal, z_axis), normal, center)
        if face is self.Face.TOP_ZX:
            normal = np.array([0.0, 1.0, 0.0])
            center = np.array([0.0, 2.0 * self.half_length_y2(), 0.0])
            return _placement(z_axis, np.cross(normal, z_axis), normal, center)

        corners = self._cross_section.vertices()
        start, end = (corners[i] for i in self._EDGES[face])
        dx, dy = end - start
        length = math.hypot(dx, dy)
        normal = np.array([dy / length, -dx / length, 0.0])
        center = np.array([0.5 * (start[0] + end[0]), 0.5 * (start[1] + end[1]), 0.0])
        x_axis = np.cross(z_axis, normal)
        return _placement(x_axis, z_axis, normal, center)

    def decompose_to_surfaces(self, transform: Optional[np.ndarray] = None) -> List[BoundaryFace]:
        """
        The eight enclosing faces, ordered as the Face enum.

        :param transform: Optional 4x4 placement of the volume
        :return: List of BoundaryFace
        """
        matrix = _as_transform(transform)
        return [BoundaryFace(face, self._face_bounds(face), matrix @ self._face_placement(face))
                for face in self.Face]

    def polyhedron(self, transform: Optional[np.ndarray] = None) -> Polyhedron:
        """
        Polyhedral representation: 12 vertices and 8 faces.

        Vertices 0-5 are the cross-section corners at -half_z, 6-11 the same
        corners at +half_z. Faces follow the Face enum order.
        """
        matrix = _as_transform(transform)
        corners = self._cross_section.vertices()
        half_z = self.half_length_z()
        local = np.vstack([np.column_stack([corners, np.full(6, -half_z)]),
                           np.column_stack([corners, np.full(6, half_z)])])
        global_vertices = local @ matrix[:3, :3].T + matrix[:3, 3]

        faces = [(5, 4, 3, 2, 1, 0), (6, 7, 8, 9, 10, 11)]
        for face in list(self.Face)[2:]:
            a, b = self._EDGES[face]
            faces.append((a, b, b + 6, a + 6))
        return Polyhedron(global_vertices, faces)

    def bounding_box(self, transform: Optional[np.ndarray] = None,
                     envelope: Sequence[float] = (0.0, 0.0, 0.0)) -> Tuple[np.ndarray, np.ndarray]:
        """
        Axis-aligned box enclosing the (transformed) volume.

        :param envelope: Extra margin added on each side per axis
        :return: (min corner, max corner)
        """
        vmin, vmax = self.polyhedron(transform).extent()
        margin = np.asarray(envelope, dtype=float)
        return vmin - margin, vmax + margin

    # ------------------------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, DoubleTrapezoidVolumeBounds):
            return NotImplemented
        return self._values == other._values

    def __hash__(self):
        return hash((type(self).__name__, self._values))

    def __str__(self) -> str:
        numbers = ", ".join(f"{v:.5f}" for v in self._values[:6])
        return (f"{type(self).__name__}: (minHalfX, medHalfX, maxHalfX, halfY1, halfY2, halfZ)"
                f" = ({numbers})")

    def __repr__(self) -> str:
        return f"{type(self).__name__}.from_values({list(self._values)!r})"
