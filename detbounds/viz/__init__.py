from .outline import plot_outline, plot_volume

__all__ = ['plot_outline', 'plot_volume']
