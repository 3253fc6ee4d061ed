import math

import pytest

from detbounds import (
    BoundsType, DiamondBounds, DiscTrapezoidBounds, EllipseBounds, RadialBounds,
    RectangleBounds, make_bounds,
)
from detbounds.geom.factory import BOUNDS_CLASSES, bounds_class


SHAPES = [
    RectangleBounds.from_min_max((-1.0, -2.0), (3.0, 4.0)),
    DiamondBounds(1.0, 3.0, 2.0, 2.0, 3.0),
    EllipseBounds(1.0, 3.0, 0.5, 2.0, 1.0, -0.5),
    RadialBounds(2.0, 10.0, 0.7, -1.2),
    DiscTrapezoidBounds(1.0, 2.0, 4.0, 8.0, 0.3, 0.1),
]


def test_dispatch_table_covers_every_type():
    assert set(BOUNDS_CLASSES) == set(BoundsType)


@pytest.mark.parametrize("bounds", SHAPES, ids=lambda b: type(b).__name__)
def test_rebuild_from_type_and_values(bounds):
    rebuilt = make_bounds(bounds.type(), bounds.values())
    assert type(rebuilt) is type(bounds)
    assert rebuilt == bounds
    assert rebuilt.bounding_box() == bounds.bounding_box()


def test_lookup_by_name():
    assert bounds_class("disc") is RadialBounds
    assert bounds_class("DISC_TRAPEZOID") is DiscTrapezoidBounds
    bounds = make_bounds("ellipse", [0.0, 3.0, 0.0, 2.0, math.pi, 0.0])
    assert isinstance(bounds, EllipseBounds)


def test_unknown_type():
    with pytest.raises(ValueError):
        bounds_class("hexagon")
