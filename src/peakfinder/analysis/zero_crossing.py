"""
Zero-crossing search on a sampled curve.

The first sign change inside a region is bracketed between two adjacent
samples and resolved with a local quadratic fit, falling back to the secant
through the bracketing samples.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Union

from numpy.typing import NDArray

from peakfinder.analysis.polyfit import fit_quadratic, select_window_around_pivot
from peakfinder.core.ranges import DataRange

logger = logging.getLogger(__name__)

ArrayLike = Union[Sequence[float], NDArray]


def find_bracket(values: ArrayLike, region: DataRange) -> Optional[int]:
    """
    Index ``i`` of the first adjacent pair ``(i, i + 1)`` in ``region`` with
    ``values[i] * values[i + 1] <= 0``, so an exact zero sample counts.
    """
    for i in range(region.start_inclusive, region.end_inclusive):
        if values[i] * values[i + 1] <= 0:
            return i
    return None


def find_zero_crossing(
    positions: ArrayLike,
    values: ArrayLike,
    region: DataRange,
    half_width: int,
) -> Optional[float]:
    """
    Position where the curve ``values`` first crosses zero within ``region``.

    Parameters
    ----------
    positions : array_like
        Sample positions.
    values : array_like
        Curve values; NaN samples never form a bracket.
    region : DataRange
        Region of interest, at least 3 samples long.
    half_width : int
        Half-width of the quadratic approximation window.

    Returns
    -------
    float or None
        The root, or None if there is no sign change or no root inside
        ``[positions[region.start], positions[region.end]]``.

    Raises
    ------
    ValueError
        If the arrays differ in length, the region is shorter than 3 samples
        or reaches past the arrays, or ``half_width`` is negative.
    """
    if len(positions) != len(values):
        raise ValueError(
            f"positions and values must be of equal length ({len(positions)} != {len(values)})"
        )
    if region.length < 3:
        raise ValueError(f"region must span at least 3 points, got {region.length}")
    if region.end_inclusive >= len(positions):
        raise ValueError(
            f"region end {region.end_inclusive} is outside the data (length {len(positions)})"
        )
    if half_width < 0:
        raise ValueError(f"half_width must be non-negative, got {half_width}")

    left = find_bracket(values, region)
    if left is None:
        return None

    root = _quadratic_root(positions, values, left, region, half_width)
    if root is not None:
        return root
    return _secant_root(positions, values, left, region)


def _in_region(x: float, positions: ArrayLike, region: DataRange) -> bool:
    return positions[region.start_inclusive] <= x <= positions[region.end_inclusive]


def _quadratic_root(
    positions: ArrayLike,
    values: ArrayLike,
    left: int,
    region: DataRange,
    half_width: int,
) -> Optional[float]:
    window = select_window_around_pivot(
        region.start_inclusive, region.end_inclusive, left, half_width
    )
    if window is None:
        return None
    fit = fit_quadratic(positions, values, *window)
    if fit is None:
        return None

    a0, a1, a2 = fit.coefficients
    if a2 == 0:
        if a1 == 0:
            return None
        root = -a0 / a1
        return root if _in_region(root, positions, region) else None

    discriminant = a1 * a1 - 4.0 * a0 * a2
    if discriminant < 0:
        return None
    sqrt_discriminant = math.sqrt(discriminant)
    for root in (
        (-a1 - sqrt_discriminant) / (2.0 * a2),
        (-a1 + sqrt_discriminant) / (2.0 * a2),
    ):
        if _in_region(root, positions, region):
            return root
    return None


def _secant_root(
    positions: ArrayLike, values: ArrayLike, left: int, region: DataRange
) -> Optional[float]:
    right = left + 1
    denominator = values[right] - values[left]
    if denominator == 0:
        # both samples are zero; the secant is the zero line itself
        return None
    x = (values[right] * positions[left] - values[left] * positions[right]) / denominator
    if _in_region(x, positions, region):
        return float(x)
    logger.debug("Secant root %.6g falls outside region %s", x, region)
    return None
