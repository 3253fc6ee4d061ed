"""
Periodic angle helpers.

All azimuthal quantities in detbounds are stored in the canonical symmetric
range [-pi, pi). These helpers map arbitrary angles into that range and
compute shortest signed differences between angles.
"""

import math


TWO_PI = 2.0 * math.pi


def wrap_periodic(value: float, start: float, period: float) -> float:
    """
    Map a value into the half-open range [start, start + period).

    Values already inside the range are returned untouched, so a normalized
    angle is bit-identical to its own normalization.

    :param value: Value to wrap
    :param start: Lower edge of the range
    :param period: Length of the range
    :return: Wrapped value
    """
    if not math.isfinite(value):
        return value
    diff = value - start
    if 0.0 <= diff < period:
        return value
    wrapped = value - period * math.floor(diff / period)
    # floor() rounding can land exactly on the open upper edge
    if wrapped >= start + period:
        wrapped -= period
    return wrapped


def radian_pos(angle: float) -> float:
    """Map an angle into [0, 2pi)."""
    return wrap_periodic(angle, 0.0, TWO_PI)


def radian_sym(angle: float) -> float:
    """Map an angle into [-pi, pi)."""
    return wrap_periodic(angle, -math.pi, TWO_PI)


normalize = radian_sym


def difference_periodic(lhs: float, rhs: float, period: float) -> float:
    """
    Shortest signed difference lhs - rhs for a periodic quantity.

    :return: Difference in [-period/2, period/2)
    """
    delta = math.fmod(lhs - rhs, period)
    if 2.0 * delta < -period:
        delta += period
    elif period <= 2.0 * delta:
        delta -= period
    return delta


def symmetric_delta(lhs: float, rhs: float) -> float:
    """Shortest signed angular difference lhs - rhs in [-pi, pi)."""
    return difference_periodic(lhs, rhs, TWO_PI)
