"""Core data structures: index ranges, interval scaling and the spectrum container."""

from peakfinder.core.ranges import UNIT_INTERVAL, DataRange, Interval, Scaling
from peakfinder.core.spectrum import Spectrum
from peakfinder.core.windows import full_width

__all__ = [
    "DataRange",
    "Interval",
    "Scaling",
    "UNIT_INTERVAL",
    "Spectrum",
    "full_width",
]
