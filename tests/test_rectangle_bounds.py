import copy

import numpy as np
import pytest
from numpy.testing import assert_allclose

from detbounds import (
    BoundaryCheck, BoundsError, BoundsType, DiamondBounds, RectangleBounds, Violation,
)


class TestRectangleConstruction:
    def test_symmetric_constructor(self):
        bounds = RectangleBounds(10.0, 5.0)
        assert bounds.values() == [-10.0, -5.0, 10.0, 5.0]
        assert bounds.type() is BoundsType.RECTANGLE
        assert bounds.half_length_x() == 10.0
        assert bounds.half_length_y() == 5.0

    def test_from_min_max(self):
        bounds = RectangleBounds.from_min_max((-1.0, 0.0), (3.0, 2.0))
        assert_allclose(bounds.min(), [-1.0, 0.0])
        assert_allclose(bounds.max(), [3.0, 2.0])
        assert bounds.half_length_x() == 2.0

    def test_round_trip_through_values(self):
        bounds = RectangleBounds.from_min_max((-1.0, 0.5), (3.0, 2.0))
        assert RectangleBounds.from_values(bounds.values()) == bounds

    def test_inverted_x_is_rejected(self):
        with pytest.raises(BoundsError) as excinfo:
            RectangleBounds.from_values([1.0, 0.0, -1.0, 1.0])
        assert excinfo.value.violation is Violation.INVERTED_X

    def test_checked_construction_reports_violation(self):
        result = RectangleBounds.create_from_values([0.0, 2.0, 1.0, 1.0])
        assert not result.ok
        assert result.violation is Violation.INVERTED_Y
        assert result.bounds is None
        with pytest.raises(BoundsError):
            result.unwrap()

    def test_checked_construction_success(self):
        result = RectangleBounds.create(1.0, 2.0)
        assert result.ok
        assert result.unwrap() == RectangleBounds(1.0, 2.0)

    def test_wrong_parameter_count(self):
        with pytest.raises(BoundsError) as excinfo:
            RectangleBounds.from_values([1.0, 2.0, 3.0])
        assert excinfo.value.violation is Violation.WRONG_PARAMETER_COUNT

    def test_nan_is_rejected(self):
        with pytest.raises(BoundsError) as excinfo:
            RectangleBounds(float('nan'), 1.0)
        assert excinfo.value.violation is Violation.NAN_PARAMETER

    def test_bounds_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            RectangleBounds(-1.0, 1.0)


class TestRectangleValueSemantics:
    def test_immutable(self):
        bounds = RectangleBounds(1.0, 1.0)
        with pytest.raises(AttributeError):
            bounds._values = (0.0, 0.0, 0.0, 0.0)
        with pytest.raises(ValueError):
            bounds.min()[0] = 5.0

    def test_clone_and_copy(self):
        bounds = RectangleBounds(2.0, 3.0)
        for other in (bounds.clone(), copy.copy(bounds), copy.deepcopy(bounds)):
            assert other == bounds
            assert other is not bounds
            assert hash(other) == hash(bounds)

    def test_values_is_a_copy(self):
        bounds = RectangleBounds(2.0, 3.0)
        values = bounds.values()
        values[0] = 100.0
        assert bounds.values()[0] == -2.0

    def test_get(self):
        bounds = RectangleBounds(10.0, 5.0)
        assert bounds.get(RectangleBounds.BoundValues.MAX_X) == 10.0
        assert bounds.get(1) == -5.0
        with pytest.raises(IndexError):
            bounds.get(DiamondBounds.BoundValues.HALF_LENGTH_X_NEG_Y)
        with pytest.raises(IndexError):
            bounds.get(7)

    def test_dump(self):
        text = str(RectangleBounds(10.0, 5.0))
        assert text.startswith("RectangleBounds:  (hlX, hlY) = (10.0000000, 5.0000000)")
        assert "-10.0000000 -5.0000000" in text


class TestRectangleQueries:
    bounds = RectangleBounds(10.0, 5.0)

    def test_inside(self):
        assert self.bounds.inside((0.0, 0.0))
        assert self.bounds.inside((10.0, 0.0))
        assert not self.bounds.inside((10.0001, 0.0))
        assert self.bounds.inside((10.0001, 0.0), BoundaryCheck.absolute(0.001, 0.001))
        assert self.bounds.inside(np.array([-3.0, 4.0]))

    def test_distance(self):
        assert self.bounds.distance_to_boundary((15.0, 0.0)) == pytest.approx(5.0)
        assert self.bounds.distance_to_boundary((0.0, 0.0)) == pytest.approx(-5.0)
        assert self.bounds.distance_to_boundary((10.0, 5.0)) == pytest.approx(0.0)

    def test_point_symmetry(self):
        for x, y in [(3.0, 4.0), (9.9, -5.1), (10.5, 1.0), (-2.0, 6.0)]:
            assert self.bounds.inside((x, y)) == self.bounds.inside((-x, -y))
            assert self.bounds.distance_to_boundary((x, y)) == pytest.approx(
                self.bounds.distance_to_boundary((-x, -y)))

    def test_inside_matches_distance_sign(self):
        for x in np.linspace(-12.0, 12.0, 13):
            for y in np.linspace(-7.0, 7.0, 11):
                assert self.bounds.inside((x, y)) == (self.bounds.distance_to_boundary((x, y)) <= 0.0)

    def test_vertices_counter_clockwise(self):
        assert_allclose(self.bounds.vertices(), [[-10, -5], [10, -5], [10, 5], [-10, 5]])

    def test_bounding_box_is_itself(self):
        assert self.bounds.bounding_box() == self.bounds

    def test_local_position_must_be_2d(self):
        with pytest.raises(ValueError):
            self.bounds.inside((1.0, 2.0, 3.0))
