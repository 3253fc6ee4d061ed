from .periodic import (
    TWO_PI,
    wrap_periodic,
    radian_pos,
    radian_sym,
    normalize,
    difference_periodic,
    symmetric_delta,
)
