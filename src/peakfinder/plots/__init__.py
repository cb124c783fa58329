"""peakfinder plotting module."""

from peakfinder.plots.peaks import HAS_MATPLOTLIB, plot_peaks, save_peak_plot

__all__ = ["HAS_MATPLOTLIB", "plot_peaks", "save_peak_plot"]
