"""
Peak Search by Local Curvature

Locates local maxima of a sampled curve with sub-sample precision:

1. positions are normalized to [0, 1] for well-conditioned power sums,
2. the second derivative ``d2`` is estimated at every sample from a local
   quadratic fit, then its slope ``fd2`` from a second fit against ``d2``,
3. maximal runs of ``d2 < 0`` at least three samples long are candidate
   peaks,
4. each candidate is refined by the vertex of a quadratic fit of ``d2``
   around its most negative sample, else by the zero crossing of ``fd2``,
   else by the midpoint of the run.

The input curve should already be smoothed (see ``peakfinder.analysis.smoothing``).
"""

from __future__ import annotations

import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from peakfinder.analysis.polyfit import fit_quadratic, select_window_around_pivot
from peakfinder.analysis.zero_crossing import find_zero_crossing
from peakfinder.core.ranges import UNIT_INTERVAL, DataRange, Scaling

logger = logging.getLogger(__name__)

ArrayLike = Union[Sequence[float], NDArray]

MIN_REGION_LENGTH = 3


class RefinementMethod(str, Enum):
    """How a candidate region's peak position was obtained."""

    QUADRATIC = "quadratic"
    ROOT = "root"
    MIDPOINT = "midpoint"


@dataclass
class PeakSearchConfig:
    """
    Tuning of the peak search.

    Attributes
    ----------
    max_workers : int, optional
        Threads used for the derivative passes (None lets the executor pick,
        1 disables threading).
    parallel_threshold : int
        Inputs with fewer samples are processed inline.
    normalized_output : bool
        Report positions in the normalized [0, 1] domain instead of the
        original position units.
    rounding_margin : float
        A window of ``d2`` whose spread is within this multiple of the
        rounding error bound of its fits is constant up to roundoff: its
        slope is exactly zero and it has no vertex.
    """

    max_workers: Optional[int] = None
    parallel_threshold: int = 2048
    normalized_output: bool = False
    rounding_margin: float = 4.0

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.rounding_margin < 0:
            raise ValueError(f"rounding_margin must be non-negative, got {self.rounding_margin}")

    @classmethod
    def default(cls) -> "PeakSearchConfig":
        return cls()

    @classmethod
    def serial(cls) -> "PeakSearchConfig":
        """Single-threaded configuration."""
        return cls(max_workers=1)


@dataclass
class RefinedPeak:
    """A peak position together with the candidate region it came from."""

    position: float
    region: DataRange
    method: RefinementMethod
    pivot_index: int

    def __repr__(self) -> str:
        return (
            f"RefinedPeak(position={self.position:.6g}, "
            f"indices={self.region.start_inclusive}..{self.region.end_inclusive}, "
            f"method={self.method.value})"
        )


@dataclass
class PeakSearchResult:
    """Peaks plus the intermediate curves of one search."""

    peaks: List[RefinedPeak]
    scaling: Scaling
    scaled_positions: NDArray
    second_derivative: NDArray
    second_derivative_slope: NDArray
    second_derivative_error: Optional[NDArray] = None
    regions: List[DataRange] = field(default_factory=list)

    @property
    def positions(self) -> List[float]:
        return [peak.position for peak in self.peaks]


def _validate_inputs(
    positions: ArrayLike, values: ArrayLike, half_width: int
) -> Tuple[NDArray, NDArray]:
    x = np.asarray(positions, dtype=float)
    y = np.asarray(values, dtype=float)
    if x.ndim != 1 or y.ndim != 1:
        raise ValueError("positions and values must be one-dimensional")
    if x.size != y.size:
        raise ValueError(f"positions and values must be of equal length ({x.size} != {y.size})")
    if x.size < 3:
        raise ValueError(f"at least 3 points are required, got {x.size}")
    if isinstance(half_width, bool) or not isinstance(half_width, (int, np.integer)):
        raise ValueError(f"half_width must be an integer, got {half_width!r}")
    if half_width <= 0:
        raise ValueError(f"half_width must be positive, got {half_width}")
    return x, y


def _is_flat(
    segment: NDArray,
    error: Optional[NDArray] = None,
    margin: float = PeakSearchConfig.rounding_margin,
) -> bool:
    """
    Whether ``segment`` is constant up to its rounding error.

    Without an error estimate only an exactly constant segment is flat.
    """
    spread = float(np.ptp(segment))
    if error is None:
        return spread == 0
    return spread <= margin * float(np.max(error))


def _fan_out(n: int, compute_chunk: Callable[[int, int], None], config: PeakSearchConfig) -> None:
    """Run ``compute_chunk(lo, hi)`` over contiguous chunks of ``range(n)`` and wait for all."""
    if config.max_workers == 1 or n < config.parallel_threshold:
        compute_chunk(0, n)
        return

    workers = config.max_workers or min(32, (os.cpu_count() or 1) + 4)
    chunk = math.ceil(n / workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(compute_chunk, lo, min(lo + chunk, n)) for lo in range(0, n, chunk)
        ]
        for future in futures:
            future.result()


def _second_derivative_pass(
    x: NDArray,
    y: NDArray,
    half_width: int,
    config: PeakSearchConfig,
) -> Tuple[NDArray, NDArray]:
    n = len(x)
    d2 = np.zeros(n)
    d2_error = np.zeros(n)

    def compute(lo: int, hi: int) -> None:
        for i in range(lo, hi):
            window = select_window_around_pivot(0, n - 1, i, half_width)
            if window is None:
                continue
            start, length = window
            if _is_flat(y[start:start + length]):
                continue
            fit = fit_quadratic(x, y, start, length)
            if fit is not None:
                d2[i] = fit.second_derivative
                d2_error[i] = 2.0 * fit.a2_rounding_error

    _fan_out(n, compute, config)
    return d2, d2_error


def estimate_second_derivative(
    x: NDArray,
    y: NDArray,
    half_width: int,
    config: Optional[PeakSearchConfig] = None,
) -> NDArray:
    """
    Second derivative at every sample from a local quadratic fit.

    Samples whose window cannot be fitted (too little data, singular window)
    get 0, as do samples whose window of ``y`` is exactly constant.
    """
    d2, _ = _second_derivative_pass(x, y, half_width, config or PeakSearchConfig())
    return d2


def estimate_second_derivative_slope(
    x: NDArray,
    d2: NDArray,
    half_width: int,
    config: Optional[PeakSearchConfig] = None,
    d2_error: Optional[NDArray] = None,
) -> NDArray:
    """
    Slope of ``d2`` at every sample, fitted the same way as ``d2`` itself.

    Samples without a usable fit are NaN. A window of ``d2`` that is
    constant up to ``d2_error`` (exactly constant when no error is given)
    has slope 0.
    """
    config = config or PeakSearchConfig()
    n = len(x)
    fd2 = np.full(n, np.nan)

    def compute(lo: int, hi: int) -> None:
        for i in range(lo, hi):
            window = select_window_around_pivot(0, n - 1, i, half_width)
            if window is None:
                continue
            start, length = window
            fit = fit_quadratic(x, d2, start, length)
            if fit is None:
                continue
            stop = start + length
            error = d2_error[start:stop] if d2_error is not None else None
            if _is_flat(d2[start:stop], error, config.rounding_margin):
                fd2[i] = 0.0
            else:
                fd2[i] = fit.derivative(x[i])

    _fan_out(n, compute, config)
    return fd2


def concave_regions(d2: ArrayLike, min_length: int = MIN_REGION_LENGTH) -> List[DataRange]:
    """
    Maximal runs of strictly negative ``d2`` with at least ``min_length`` samples.

    Shorter runs are dropped.
    """
    regions: List[DataRange] = []
    run_start: Optional[int] = None
    for i, value in enumerate(d2):
        if value < 0:
            if run_start is None:
                run_start = i
            continue
        if run_start is not None:
            if i - run_start >= min_length:
                regions.append(DataRange.from_start_and_end(run_start, i - 1))
            run_start = None
    if run_start is not None and len(d2) - run_start >= min_length:
        regions.append(DataRange.from_start_and_end(run_start, len(d2) - 1))
    return regions


def refine_region(
    x: NDArray,
    d2: NDArray,
    fd2: NDArray,
    region: DataRange,
    half_width: int,
    d2_error: Optional[NDArray] = None,
    rounding_margin: float = PeakSearchConfig.rounding_margin,
) -> RefinedPeak:
    """
    Peak position of one candidate region.

    Tries the vertex of a quadratic fit of ``d2`` around its minimum, then
    the zero crossing of ``fd2``, then the midpoint of the region. Always
    returns a peak. A ``d2`` window that is constant up to ``d2_error`` has
    no vertex.
    """
    start, end = region.start_inclusive, region.end_inclusive
    pivot = start + int(np.argmin(d2[start:end + 1]))
    x_min, x_max = x[start], x[end]

    approximation_half_width = min((region.length - 1) // 2, half_width)
    window = select_window_around_pivot(start, end, pivot, approximation_half_width)
    fit = fit_quadratic(x, d2, *window) if window is not None else None
    if fit is not None:
        lo, hi = window[0], window[0] + window[1]
        error = d2_error[lo:hi] if d2_error is not None else None
        vertex = None if _is_flat(d2[lo:hi], error, rounding_margin) else fit.vertex()
        if vertex is not None and x_min <= vertex <= x_max:
            return RefinedPeak(float(vertex), region, RefinementMethod.QUADRATIC, pivot)

    root = find_zero_crossing(x, fd2, region, half_width)
    if root is not None:
        return RefinedPeak(float(root), region, RefinementMethod.ROOT, pivot)

    midpoint = (x_min + x_max) / 2.0
    return RefinedPeak(float(midpoint), region, RefinementMethod.MIDPOINT, pivot)


def analyze_peaks(
    positions: ArrayLike,
    values: ArrayLike,
    half_width: int,
    config: Optional[PeakSearchConfig] = None,
) -> PeakSearchResult:
    """
    Run the full peak search and keep the intermediate curves.

    See :func:`search_peaks` for the parameters.
    """
    config = config or PeakSearchConfig()
    x_raw, y = _validate_inputs(positions, values, half_width)

    scaling = Scaling.for_data(x_raw, UNIT_INTERVAL)
    x = scaling.scaled(x_raw)

    d2, d2_error = _second_derivative_pass(x, y, half_width, config)
    fd2 = estimate_second_derivative_slope(x, d2, half_width, config, d2_error)

    regions = concave_regions(d2)
    logger.debug("%d candidate regions in %d samples", len(regions), len(x))

    peaks: List[RefinedPeak] = []
    for region in regions:
        peak = refine_region(x, d2, fd2, region, half_width, d2_error, config.rounding_margin)
        if not config.normalized_output:
            peak.position = scaling.unscale(peak.position)
        logger.debug("Region %d..%d refined by %s at %.6g",
                     region.start_inclusive, region.end_inclusive, peak.method.value, peak.position)
        peaks.append(peak)

    return PeakSearchResult(
        peaks=peaks,
        scaling=scaling,
        scaled_positions=x,
        second_derivative=d2,
        second_derivative_slope=fd2,
        second_derivative_error=d2_error,
        regions=regions,
    )


def search_peaks(
    positions: ArrayLike,
    values: ArrayLike,
    half_width: int,
    config: Optional[PeakSearchConfig] = None,
) -> List[float]:
    """
    Find the peak positions of a sampled curve.

    Parameters
    ----------
    positions : array_like
        Sample positions, assumed strictly increasing (not checked).
    values : array_like
        Sample values, already smoothed if needed.
    half_width : int
        Half-width (> 0) of the local fitting windows, which span
        ``2 * half_width + 1`` samples.
    config : PeakSearchConfig, optional
        Threading and output options.

    Returns
    -------
    List[float]
        One position per concave region, in ascending index order. Empty if
        the curve has no concave run of three or more samples.

    Raises
    ------
    ValueError
        If the arrays differ in length, hold fewer than 3 points, or
        ``half_width`` is not a positive integer.

    Examples
    --------
    >>> search_peaks([0, 1, 2, 3, 4, 5, 6], [0, 5, 8, 9, 8, 5, 0], half_width=1)
    [3.0]
    """
    return analyze_peaks(positions, values, half_width, config).positions
