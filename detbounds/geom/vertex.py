"""
Tessellation helpers for curved boundaries.

Arcs are split at the sector edges and at the coordinate axes so that the
extremal points of a shape are always part of its polygon, regardless of how
many segments were requested.
"""

import math
import warnings
from typing import Callable, Iterable, List

import numpy as np


QUARTERS = (-math.pi, -0.5 * math.pi, 0.0, 0.5 * math.pi, math.pi)


def phi_segments(phi_min: float = -math.pi, phi_max: float = math.pi,
                 phi_refs: Iterable[float] = (), phi_tolerance: float = 1e-6) -> List[float]:
    """
    Split an azimuthal range at the quarter angles it contains.

    :param phi_min: Lower edge of the range
    :param phi_max: Upper edge of the range
    :param phi_refs: Additional reference angles that must appear as
                     segment borders (e.g. the average phi of a sector)
    :param phi_tolerance: Reference angles closer than this to an existing
                          border are not inserted again
    :return: Sorted list of segment borders, first/last being the range edges
    """
    if phi_min != -math.pi or phi_max != math.pi:
        borders = [phi_min]
        # axis crossings strictly inside the range, also beyond +-pi
        k = math.floor(phi_min / (0.5 * math.pi)) + 1
        while k * 0.5 * math.pi < phi_max:
            quarter = k * 0.5 * math.pi
            if quarter > phi_min:
                borders.append(quarter)
            k += 1
        borders.append(phi_max)
    else:
        borders = list(QUARTERS)

    refs = list(phi_refs)
    if refs:
        for ref in refs:
            if all(abs(border - ref) >= phi_tolerance for border in borders):
                borders.append(ref)
        borders.sort()
    return borders


def segment_count(phi1: float, phi2: float, segments: int) -> int:
    """Number of straight segments for an arc, ``segments`` being per full turn."""
    return max(int(abs(phi2 - phi1) / (2.0 * math.pi) * segments), 1)


def circle(radius: float) -> Callable[[float], np.ndarray]:
    """Point generator on a circle of the given radius."""
    def point_at(phi: float) -> np.ndarray:
        return np.array([radius * math.cos(phi), radius * math.sin(phi)])
    return point_at


def ellipse(rx: float, ry: float) -> Callable[[float], np.ndarray]:
    """
    Point generator on an axis-aligned ellipse, parameterized by polar angle.

    Using the polar angle (not the eccentric anomaly) keeps sector edges at
    exactly the azimuth where the containment test cuts.
    """
    def point_at(phi: float) -> np.ndarray:
        c, s = math.cos(phi), math.sin(phi)
        r = 1.0 / math.sqrt((c / rx) ** 2 + (s / ry) ** 2)
        return np.array([r * c, r * s])
    return point_at


def arc_points(point_at: Callable[[float], np.ndarray], phi1: float, phi2: float,
               segments: int, include_end: bool = False) -> List[np.ndarray]:
    """
    Points along an arc from phi1 to phi2.

    :param point_at: Maps an angle to a boundary point
    :param segments: Requested number of segments per full turn
    :param include_end: Also emit the point at phi2
    """
    segs = segment_count(phi1, phi2, segments)
    step = (phi2 - phi1) / segs
    stop = segs + 1 if include_end else segs
    return [point_at(phi1 + i * step) for i in range(stop)]


def check_segments(segments: int) -> int:
    """Clamp a requested segment count to at least one."""
    segments = int(segments)
    if segments < 1:
        warnings.warn(f"Requested {segments} segments; using 1 instead.", UserWarning)
        return 1
    return segments


def bow(point_at: Callable[[float], np.ndarray], borders: List[float], segments: int,
        reverse: bool = False, closed: bool = True) -> List[np.ndarray]:
    """
    Tessellate an arc passing through all ``borders``.

    :param borders: Ascending segment borders from phi_segments
    :param reverse: Walk the arc from the last border to the first
    :param closed: Emit the final end point of the arc
    """
    pairs = list(zip(borders[:-1], borders[1:]))
    if reverse:
        pairs = [(b, a) for a, b in reversed(pairs)]
    points = []
    for i, (phi1, phi2) in enumerate(pairs):
        last = i == len(pairs) - 1
        points.extend(arc_points(point_at, phi1, phi2, segments, include_end=last and closed))
    return points
