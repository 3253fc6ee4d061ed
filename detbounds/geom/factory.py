"""
Reconstruction of 2D bounds from their type discriminant and parameters.
"""

from typing import Dict, Sequence, Type, Union

from .bounds import BoundsType, SurfaceBounds
from .disc import DiscTrapezoidBounds, RadialBounds
from .planar import DiamondBounds, EllipseBounds, RectangleBounds


BOUNDS_CLASSES: Dict[BoundsType, Type[SurfaceBounds]] = {
    BoundsType.RECTANGLE: RectangleBounds,
    BoundsType.DIAMOND: DiamondBounds,
    BoundsType.ELLIPSE: EllipseBounds,
    BoundsType.DISC: RadialBounds,
    BoundsType.DISC_TRAPEZOID: DiscTrapezoidBounds,
}


def bounds_class(bounds_type: Union[BoundsType, str]) -> Type[SurfaceBounds]:
    """
    Look up the bounds class of a type.

    :param bounds_type: BoundsType member or its string value (e.g. "disc")
    :raises ValueError: For an unknown type name
    """
    if not isinstance(bounds_type, BoundsType):
        try:
            bounds_type = BoundsType(str(bounds_type).lower())
        except ValueError:
            known = ", ".join(t.value for t in BoundsType)
            raise ValueError(f"Unknown bounds type '{bounds_type}'. Known types: {known}") from None
    return BOUNDS_CLASSES[bounds_type]


def make_bounds(bounds_type: Union[BoundsType, str], values: Sequence[float]) -> SurfaceBounds:
    """
    Build bounds from ``(b.type(), b.values())``.

    :param bounds_type: Shape family
    :param values: Parameter vector in the family's canonical order
    :return: New bounds equal to the original
    """
    return bounds_class(bounds_type).from_values(values)
