import copy
import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from detbounds import (
    BoundsError, DiamondBounds, DoubleTrapezoidVolumeBounds, RectangleBounds, Violation,
    VolumeBoundsType,
)

Face = DoubleTrapezoidVolumeBounds.Face


def make_volume():
    return DoubleTrapezoidVolumeBounds(1.0, 3.0, 2.0, 1.0, 1.5, 5.0)


class TestConstruction:
    def test_values_include_derived_angles(self):
        volume = make_volume()
        values = volume.values()
        assert len(values) == 8
        assert values[:6] == [1.0, 3.0, 2.0, 1.0, 1.5, 5.0]
        assert volume.alpha1() == pytest.approx(math.pi / 4)
        assert volume.alpha2() == pytest.approx(math.atan2(1.0, 3.0))
        assert volume.type() is VolumeBoundsType.DOUBLE_TRAPEZOID

    def test_round_trip_recomputes_angles(self):
        volume = make_volume()
        assert DoubleTrapezoidVolumeBounds.from_values(volume.values()) == volume
        assert DoubleTrapezoidVolumeBounds.from_values([1.0, 3.0, 2.0, 1.0, 1.5, 5.0, 0.0, 0.0]) == volume

    def test_wrong_parameter_count(self):
        result = DoubleTrapezoidVolumeBounds.create_from_values([1.0, 2.0])
        assert result.violation is Violation.WRONG_PARAMETER_COUNT

    @pytest.mark.parametrize("args, violation", [
        ((4.0, 3.0, 2.0, 1.0, 1.0, 1.0), Violation.NOT_A_DIAMOND),
        ((1.0, 3.0, 2.0, -1.0, 1.0, 1.0), Violation.NEGATIVE_LENGTH),
        ((1.0, 3.0, 2.0, 1.0, 1.0, 0.0), Violation.NEGATIVE_LENGTH),
        ((1.0, float('nan'), 2.0, 1.0, 1.0, 1.0), Violation.NAN_PARAMETER),
    ])
    def test_rejections(self, args, violation):
        with pytest.raises(BoundsError) as excinfo:
            DoubleTrapezoidVolumeBounds(*args)
        assert excinfo.value.violation is violation
        assert not DoubleTrapezoidVolumeBounds.create(*args).ok

    def test_get(self):
        volume = make_volume()
        assert volume.get(DoubleTrapezoidVolumeBounds.BoundValues.HALF_Z) == 5.0
        assert volume.get(1) == 3.0
        with pytest.raises(IndexError):
            volume.get(8)
        with pytest.raises(IndexError):
            volume.get(DiamondBounds.BoundValues.HALF_LENGTH_X_ZERO_Y)

    def test_value_semantics(self):
        volume = make_volume()
        with pytest.raises(AttributeError):
            volume._values = ()
        assert copy.deepcopy(volume) == volume
        assert hash(volume.clone()) == hash(volume)

    def test_dump(self):
        text = str(make_volume())
        assert text.startswith("DoubleTrapezoidVolumeBounds: (minHalfX, medHalfX, maxHalfX")
        assert "(1.00000, 3.00000, 2.00000, 1.00000, 1.50000, 5.00000)" in text


class TestInside:
    volume = make_volume()

    def test_points(self):
        for point in [(0.0, 0.0, 0.0), (2.9, 0.0, 4.9), (2.5, 1.5, 0.0), (0.0, -2.0, -5.0)]:
            assert self.volume.inside(point)
        for point in [(0.0, 0.0, 5.1), (0.0, -2.1, 0.0), (0.0, 3.1, 0.0), (2.7, 1.5, 0.0)]:
            assert not self.volume.inside(point)

    def test_tolerance(self):
        assert self.volume.inside((0.0, 0.0, 5.1), tolerance=0.2)
        assert self.volume.inside((0.0, 3.1, 0.0), tolerance=0.2)
        assert self.volume.inside((3.1, 0.0, 0.0), tolerance=0.2)


class TestDecomposition:
    volume = make_volume()

    def test_eight_faces_in_fixed_order(self):
        faces = self.volume.decompose_to_surfaces()
        assert [f.face for f in faces] == list(Face)
        again = self.volume.decompose_to_surfaces()
        for a, b in zip(faces, again):
            assert a.bounds == b.bounds
            assert_allclose(a.transform, b.transform)

    def test_face_bounds(self):
        faces = self.volume.decompose_to_surfaces()
        diamond = DiamondBounds(1.0, 3.0, 2.0, 2.0, 3.0)
        assert faces[Face.NEGATIVE_Z].bounds == diamond
        assert faces[Face.POSITIVE_Z].bounds == diamond
        assert faces[Face.ALPHA1].bounds.half_length_x() == pytest.approx(math.sqrt(2.0))
        assert faces[Face.ALPHA1].bounds == faces[Face.BETA1].bounds
        assert faces[Face.ALPHA2].bounds.half_length_x() == pytest.approx(0.5 * math.sqrt(10.0))
        assert faces[Face.BOTTOM_ZX].bounds == RectangleBounds(5.0, 1.0)
        assert faces[Face.TOP_ZX].bounds == RectangleBounds(5.0, 2.0)

    def test_outward_normals(self):
        faces = self.volume.decompose_to_surfaces()
        expected = {
            Face.NEGATIVE_Z: (0.0, 0.0, -1.0),
            Face.POSITIVE_Z: (0.0, 0.0, 1.0),
            Face.ALPHA1: (-1.0 / math.sqrt(2.0), -1.0 / math.sqrt(2.0), 0.0),
            Face.BETA1: (1.0 / math.sqrt(2.0), -1.0 / math.sqrt(2.0), 0.0),
            Face.ALPHA2: (-3.0 / math.sqrt(10.0), 1.0 / math.sqrt(10.0), 0.0),
            Face.BETA2: (3.0 / math.sqrt(10.0), 1.0 / math.sqrt(10.0), 0.0),
            Face.BOTTOM_ZX: (0.0, -1.0, 0.0),
            Face.TOP_ZX: (0.0, 1.0, 0.0),
        }
        for face in faces:
            assert_allclose(face.normal, expected[face.face], atol=1e-12)
            inward = face.center - 0.01 * face.normal
            outward = face.center + 0.01 * face.normal
            assert self.volume.inside(inward)
            assert not self.volume.inside(outward)

    def test_placements_are_rotations(self):
        for face in self.volume.decompose_to_surfaces():
            rotation = face.transform[:3, :3]
            assert_allclose(rotation @ rotation.T, np.eye(3), atol=1e-12)
            assert np.linalg.det(rotation) == pytest.approx(1.0)

    def test_face_outlines_lie_on_the_volume(self):
        for face in self.volume.decompose_to_surfaces():
            for x, y in face.bounds.vertices():
                point = face.transform @ np.array([x, y, 0.0, 1.0])
                assert self.volume.inside(point[:3], tolerance=1e-9)

    def test_volume_transform_is_applied(self):
        transform = np.eye(4)
        transform[:3, 3] = (1.0, 2.0, 3.0)
        plain = self.volume.decompose_to_surfaces()
        moved = self.volume.decompose_to_surfaces(transform)
        for a, b in zip(plain, moved):
            assert_allclose(b.center, a.center + (1.0, 2.0, 3.0))
            assert_allclose(b.normal, a.normal)

    def test_transform_must_be_4x4(self):
        with pytest.raises(ValueError):
            self.volume.decompose_to_surfaces(np.eye(3))


class TestPolyhedron:
    volume = make_volume()

    def test_counts_and_extent(self):
        poly = self.volume.polyhedron()
        assert poly.vertices.shape == (12, 3)
        assert len(poly.faces) == 8
        vmin, vmax = poly.extent()
        assert_allclose(vmin, [-3.0, -2.0, -5.0])
        assert_allclose(vmax, [3.0, 3.0, 5.0])

    def test_faces_point_outward(self):
        poly = self.volume.polyhedron()
        for face in poly.faces:
            points = poly.vertices[list(face)]
            normal = np.zeros(3)
            for a, b in zip(points, np.roll(points, -1, axis=0)):
                normal += np.cross(a, b)
            assert normal @ points.mean(axis=0) > 0.0

    def test_bounding_box_with_envelope(self):
        vmin, vmax = self.volume.bounding_box(envelope=(0.5, 0.5, 0.5))
        assert_allclose(vmin, [-3.5, -2.5, -5.5])
        assert_allclose(vmax, [3.5, 3.5, 5.5])

    def test_bounding_box_with_rotation(self):
        transform = np.eye(4)
        transform[:3, :3] = [[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]]
        vmin, vmax = self.volume.bounding_box(transform)
        assert_allclose(vmin, [-3.0, -3.0, -5.0])
        assert_allclose(vmax, [2.0, 3.0, 5.0])
