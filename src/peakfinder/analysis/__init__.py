"""peakfinder analysis module: local fits, root finding and the peak search."""

from peakfinder.analysis.polyfit import (
    QuadraticFit,
    fit_quadratic,
    select_window_around_pivot,
)

from peakfinder.analysis.zero_crossing import (
    find_bracket,
    find_zero_crossing,
)

from peakfinder.analysis.peak_search import (
    PeakSearchConfig,
    PeakSearchResult,
    RefinedPeak,
    RefinementMethod,
    analyze_peaks,
    concave_regions,
    estimate_second_derivative,
    estimate_second_derivative_slope,
    refine_region,
    search_peaks,
)

from peakfinder.analysis.smoothing import (
    SmoothingConfig,
    gaussian_smooth,
    savitzky_golay_smooth,
)

__all__ = [
    # Local fitting
    "QuadraticFit",
    "fit_quadratic",
    "select_window_around_pivot",
    # Root finding
    "find_bracket",
    "find_zero_crossing",
    # Peak search
    "PeakSearchConfig",
    "PeakSearchResult",
    "RefinedPeak",
    "RefinementMethod",
    "analyze_peaks",
    "concave_regions",
    "estimate_second_derivative",
    "estimate_second_derivative_slope",
    "refine_region",
    "search_peaks",
    # Smoothing
    "SmoothingConfig",
    "gaussian_smooth",
    "savitzky_golay_smooth",
]
