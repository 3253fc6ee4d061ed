import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from detbounds.geom import vertex
from detbounds.utils.periodic import symmetric_delta


class TestPhiSegments:
    def test_full_range_uses_quarters(self):
        assert vertex.phi_segments() == list(vertex.QUARTERS)

    def test_sector_contains_axis_crossing(self):
        borders = vertex.phi_segments(-math.pi / 4, math.pi / 4)
        assert borders == [-math.pi / 4, 0.0, math.pi / 4]

    def test_sector_across_the_cut(self):
        borders = vertex.phi_segments(2.5, 3.5)
        assert borders[0] == 2.5 and borders[-1] == 3.5
        assert borders[1] == pytest.approx(math.pi)

    def test_reference_inserted_and_sorted(self):
        borders = vertex.phi_segments(-1.0, 1.0, [0.5])
        assert borders == sorted(borders)
        assert 0.5 in borders

    def test_reference_close_to_border_is_skipped(self):
        borders = vertex.phi_segments(-1.0, 1.0, [1e-9])
        assert borders == [-1.0, 0.0, 1.0]


def test_segment_count_is_per_full_turn():
    assert vertex.segment_count(0.0, math.pi, 72) == 36
    assert vertex.segment_count(0.0, 0.01, 72) == 1


def test_check_segments_clamps_with_warning():
    with pytest.warns(UserWarning):
        assert vertex.check_segments(0) == 1
    assert vertex.check_segments(12) == 12


def test_bow_closed_and_open():
    borders = [0.0, math.pi / 2]
    circle = vertex.circle(2.0)
    open_arc = vertex.bow(circle, borders, 4, closed=False)
    closed_arc = vertex.bow(circle, borders, 4, closed=True)
    assert len(closed_arc) == len(open_arc) + 1
    assert_allclose(closed_arc[-1], [0.0, 2.0], atol=1e-12)


def test_ellipse_points_lie_on_ellipse():
    point_at = vertex.ellipse(3.0, 2.0)
    for phi in np.linspace(-math.pi, math.pi, 13):
        x, y = point_at(phi)
        assert (x / 3.0) ** 2 + (y / 2.0) ** 2 == pytest.approx(1.0)
        assert abs(symmetric_delta(math.atan2(y, x), phi)) < 1e-9
