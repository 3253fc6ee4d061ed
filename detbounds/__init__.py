__version__ = '0.1.0'

# Policy and errors
from detbounds.core import BoundaryCheck, BoundaryCheckType, BoundsError, BoundsResult, Violation
from detbounds.utils.periodic import radian_sym, radian_pos, wrap_periodic, difference_periodic

# Bounds
from detbounds.geom import (
    BoundsType,
    SurfaceBounds,
    DiscBounds,
    RectangleBounds,
    DiamondBounds,
    EllipseBounds,
    RadialBounds,
    DiscTrapezoidBounds,
    VolumeBoundsType,
    DoubleTrapezoidVolumeBounds,
    BoundaryFace,
    Polyhedron,
    make_bounds,
)
from detbounds.config import CheckConfig, load_config
from detbounds.viz import plot_outline, plot_volume

__all__ = [
    'BoundaryCheck', 'BoundaryCheckType', 'BoundsError', 'BoundsResult', 'Violation',
    'radian_sym', 'radian_pos', 'wrap_periodic', 'difference_periodic',
    'BoundsType', 'SurfaceBounds', 'DiscBounds',
    'RectangleBounds', 'DiamondBounds', 'EllipseBounds',
    'RadialBounds', 'DiscTrapezoidBounds',
    'VolumeBoundsType', 'DoubleTrapezoidVolumeBounds', 'BoundaryFace', 'Polyhedron',
    'make_bounds', 'CheckConfig', 'load_config', 'plot_outline', 'plot_volume',
]
