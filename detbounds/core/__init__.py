from .boundary_check import BoundaryCheck, BoundaryCheckType
from .errors import BoundsError, BoundsResult, Violation
