"""
Peak Plotting

Diagnostic figure of a curve with the located peak positions marked.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np

try:
    import matplotlib.pyplot as plt
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False

from peakfinder.core.spectrum import Spectrum


PEAK_STYLE = {
    "color": "#d62728",
    "linestyle": "--",
    "linewidth": 1.0,
    "alpha": 0.8,
}


def _check_matplotlib():
    if not HAS_MATPLOTLIB:
        raise ImportError("matplotlib is required for plotting. Install with: pip install matplotlib")


def plot_peaks(
    spectrum: Spectrum,
    peaks: Sequence[float],
    ax=None,
    title: Optional[str] = None,
    xlabel: str = "Position",
    ylabel: str = "Value",
):
    """
    Plot the curve and a vertical marker at every peak position.

    Parameters
    ----------
    spectrum : Spectrum
        Curve to draw.
    peaks : sequence of float
        Peak positions, in the same units as ``spectrum.positions``.
    ax : matplotlib Axes, optional
        Axes to draw into; a new figure is created if omitted.

    Returns
    -------
    fig, ax
    """
    _check_matplotlib()
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 5))
    else:
        fig = ax.figure

    ax.plot(spectrum.positions, spectrum.values, color="#1f77b4", linewidth=1.2, label="curve")
    for i, position in enumerate(peaks):
        ax.axvline(position, label="peaks" if i == 0 else None, **PEAK_STYLE)

    if len(peaks):
        marker_y = np.interp(peaks, spectrum.positions, spectrum.values)
        ax.plot(peaks, marker_y, "v", color=PEAK_STYLE["color"], markersize=6)

    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    if title:
        ax.set_title(title)
    ax.grid(True, alpha=0.3, linestyle="--")
    ax.legend(loc="best")
    return fig, ax


def save_peak_plot(
    spectrum: Spectrum,
    peaks: Sequence[float],
    path: Union[str, Path],
    title: Optional[str] = None,
    dpi: int = 150,
) -> Path:
    """Render :func:`plot_peaks` to an image file and close the figure."""
    fig, _ = plot_peaks(spectrum, peaks, title=title)
    path = Path(path)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return path
