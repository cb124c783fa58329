"""peakfinder package entry."""

from importlib.metadata import version

from peakfinder.analysis.peak_search import PeakSearchConfig, analyze_peaks, search_peaks
from peakfinder.core.spectrum import Spectrum

__all__ = ["__version__", "PeakSearchConfig", "Spectrum", "analyze_peaks", "search_peaks"]

try:
    __version__ = version("peakfinder")
except Exception:  # fallback for editable installs before metadata exists
    __version__ = "0.1.0"
