import math
import os

import pytest
try:
    import matplotlib  # type: ignore
    HAS_MPL = hasattr(matplotlib, 'use')
    try:
        import mpl_toolkits.mplot3d  # noqa: F401
        HAS_MPL_3D = True
    except Exception:
        HAS_MPL_3D = False
except Exception:
    HAS_MPL = False
    HAS_MPL_3D = False

from detbounds import DoubleTrapezoidVolumeBounds, EllipseBounds, RadialBounds


@pytest.mark.skipif(not HAS_MPL, reason="matplotlib not available")
def test_plot_outline_draws_and_saves(tmp_path):
    from detbounds.viz import plot_outline
    bounds = RadialBounds(2.0, 10.0, math.pi / 3, 0.5)
    fig, ax = plot_outline(bounds, segments=36)
    assert fig is not None and ax is not None
    assert len(ax.lines) == 2

    out = str(tmp_path / 'outline.png')
    plot_outline(EllipseBounds(0.0, 3.0, 0.0, 2.0), save=out, show_bounding_box=False)
    assert os.path.exists(out)


@pytest.mark.skipif(not (HAS_MPL and HAS_MPL_3D), reason="matplotlib 3D backend not available")
def test_plot_volume(tmp_path):
    from detbounds.viz import plot_volume
    out = str(tmp_path / 'volume.png')
    fig, ax = plot_volume(DoubleTrapezoidVolumeBounds(1.0, 3.0, 2.0, 1.0, 1.5, 5.0), save=out)
    assert fig is not None and ax is not None
    assert os.path.exists(out)
