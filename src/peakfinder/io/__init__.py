"""Text file input and output."""

from peakfinder.io.export import export_spectrum, write_peaks, write_two_column
from peakfinder.io.readers import read_two_column

__all__ = ["read_two_column", "write_two_column", "export_spectrum", "write_peaks"]
