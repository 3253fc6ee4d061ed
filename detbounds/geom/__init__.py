from .bounds import (
    BoundsType,
    SurfaceBounds,
    DiscBounds,
    DEFAULT_CHECK,
    ON_SURFACE_TOLERANCE,
)
from .planar import RectangleBounds, DiamondBounds, EllipseBounds
from .disc import RadialBounds, DiscTrapezoidBounds
from .volume import (
    VolumeBoundsType,
    DoubleTrapezoidVolumeBounds,
    BoundaryFace,
    Polyhedron,
)
from .factory import BOUNDS_CLASSES, bounds_class, make_bounds
