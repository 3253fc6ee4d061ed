"""
Configuration and scene loading.

A scene file is YAML with an optional ``config`` mapping (see CheckConfig)
and lists of ``shapes`` and ``volumes``. Each entry names a ``type`` and
either the canonical ``values`` vector or constructor ``params``, plus
optional ``points`` to evaluate:

.. code-block:: yaml

    config:
      tolerance0: 0.1
      segments: 72
    shapes:
      - name: plate
        type: rectangle
        params: {half_x: 10, half_y: 5}
        points: [[0, 0], [10.05, 0]]
    volumes:
      - name: module
        type: double_trapezoid
        params: {min_half_x: 1, med_half_x: 3, max_half_x: 2,
                 half_y1: 1, half_y2: 1, half_z: 5}
        points: [[0, 0, 0]]
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping, Optional

import numpy as np
import yaml

from .core.boundary_check import BoundaryCheck
from .core.errors import BoundsResult
from .geom.factory import bounds_class
from .geom.volume import DoubleTrapezoidVolumeBounds, VolumeBoundsType


VOLUME_CLASSES = {
    VolumeBoundsType.DOUBLE_TRAPEZOID: DoubleTrapezoidVolumeBounds,
}


@dataclass
class CheckConfig:
    """
    Settings for evaluating scenes.

    :param tolerance0: Absolute tolerance on the first local coordinate
    :param tolerance1: Absolute tolerance on the second local coordinate
    :param segments: Segments per full turn used to tessellate curved edges
    :param covariance: Optional 2x2 covariance; switches to a chi2 check
    :param sigma_max: Accepted standard deviations for the chi2 check
    """
    tolerance0: float = 0.0
    tolerance1: float = 0.0
    segments: int = 72
    covariance: Optional[List[List[float]]] = None
    sigma_max: float = 1.0

    def __post_init__(self):
        if self.tolerance0 < 0 or self.tolerance1 < 0:
            raise ValueError(f"Tolerances must be non-negative, got "
                             f"({self.tolerance0}, {self.tolerance1})")
        if int(self.segments) < 1:
            raise ValueError(f"segments must be at least 1, got {self.segments}")
        if self.covariance is not None and np.shape(self.covariance) != (2, 2):
            raise ValueError(f"covariance must be 2x2, got shape {np.shape(self.covariance)}")

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "CheckConfig":
        """
        Build from a plain mapping, e.g. the ``config`` section of a scene.

        :raises ValueError: On unknown keys
        """
        if not mapping:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**dict(mapping))

    def boundary_check(self) -> BoundaryCheck:
        """Policy described by this configuration."""
        if self.covariance is not None:
            return BoundaryCheck.chi2(np.asarray(self.covariance, dtype=float), self.sigma_max)
        return BoundaryCheck.absolute(self.tolerance0, self.tolerance1)


def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    return data or {}


def load_config(path: str) -> CheckConfig:
    """
    Read a CheckConfig from YAML.

    Accepts either a bare mapping of settings or a scene with a ``config``
    section.
    """
    data = load_yaml(path)
    if 'config' in data:
        data = data['config']
    return CheckConfig.from_mapping(data)


def build_shape(entry: Mapping[str, Any]) -> BoundsResult:
    """
    Checked construction of 2D bounds from a scene entry.

    :param entry: Mapping with ``type`` and either ``values`` or ``params``
    :raises ValueError: If the entry names an unknown type or has no parameters
    """
    cls = bounds_class(entry['type'])
    if 'values' in entry:
        return cls.create_from_values(entry['values'])
    if 'params' in entry:
        return cls.create(**entry['params'])
    raise ValueError(f"Shape entry {entry.get('name', entry['type'])!r} needs 'values' or 'params'")


def build_volume(entry: Mapping[str, Any]) -> BoundsResult:
    """Checked construction of volume bounds from a scene entry."""
    try:
        cls = VOLUME_CLASSES[VolumeBoundsType(str(entry['type']).lower())]
    except ValueError:
        known = ", ".join(t.value for t in VolumeBoundsType)
        raise ValueError(f"Unknown volume type '{entry['type']}'. Known types: {known}") from None
    if 'values' in entry:
        values = list(entry['values'])
        # the opening angles are derived, accept the six lengths alone
        if len(values) == 6:
            return cls.create(*values)
        return cls.create_from_values(values)
    if 'params' in entry:
        return cls.create(**entry['params'])
    raise ValueError(f"Volume entry {entry.get('name', entry['type'])!r} needs 'values' or 'params'")
