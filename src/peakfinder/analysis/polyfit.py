"""
Local Second-Degree Polynomial Fitting

Least-squares fit of

    y = a0 + a1 * x + a2 * x²

over a contiguous window of samples. The normal equations are solved in
closed form with Cramer's rule from seven power-sum accumulators, so no
matrix is formed or inverted. Positions should be normalized (e.g. to
[0, 1]) beforehand so that the sums up to Σx⁴ stay well conditioned.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from peakfinder.core.windows import full_width

MIN_POINTS = 3
DET_ZERO_PRECISION = 1e-35

ArrayLike = Union[Sequence[float], NDArray]


@dataclass(frozen=True)
class QuadraticFit:
    """
    Power sums of one fitting window and the coefficients derived from them.

    Built by :func:`fit_quadratic`; the coefficients are computed on first
    access and cached.

    Attributes
    ----------
    sum_x, sum_y, sum_xy, sum_x2, sum_x2y, sum_x3, sum_x4 : float
        Power-sum accumulators over the window.
    det : float
        Determinant of the normal equations (Cramer's-rule form).
    n_points : int
        Number of samples in the window.
    a2_magnitude, det_magnitude : float
        Sums of the absolute values of the terms that cancel in the ``a2``
        numerator and in ``det``; they scale the rounding error bound.
    """

    sum_x: float
    sum_y: float
    sum_xy: float
    sum_x2: float
    sum_x2y: float
    sum_x3: float
    sum_x4: float
    det: float
    n_points: int
    a2_magnitude: float = 0.0
    det_magnitude: float = 0.0

    @cached_property
    def a0(self) -> float:
        """Constant term."""
        value = (
            self.sum_x3 ** 2 * self.sum_y
            + self.sum_x2 ** 2 * self.sum_x2y
            - self.sum_x3 * (self.sum_x * self.sum_x2y + self.sum_x2 * self.sum_xy)
            + self.sum_x4 * (-self.sum_x2 * self.sum_y + self.sum_x * self.sum_xy)
        )
        return value / self.det

    @cached_property
    def a1(self) -> float:
        """Linear coefficient."""
        n = self.n_points
        value = (
            n * self.sum_x3 * self.sum_x2y
            - self.sum_x2 * (self.sum_x3 * self.sum_y + self.sum_x * self.sum_x2y)
            + self.sum_x2 ** 2 * self.sum_xy
            + self.sum_x4 * (self.sum_x * self.sum_y - n * self.sum_xy)
        )
        return value / self.det

    @cached_property
    def a2(self) -> float:
        """Quadratic coefficient."""
        n = self.n_points
        value = (
            self.sum_x2 ** 2 * self.sum_y
            - self.sum_x * self.sum_x3 * self.sum_y
            + self.sum_x ** 2 * self.sum_x2y
            + n * self.sum_x3 * self.sum_xy
            - self.sum_x2 * (n * self.sum_x2y + self.sum_x * self.sum_xy)
        )
        return value / self.det

    @cached_property
    def a2_rounding_error(self) -> float:
        """
        First-order bound on the floating-point error of ``a2``.

        Cancellation in the power-sum products is what limits the closed
        form, so the bound grows with the term magnitudes relative to
        ``|det|``. Differences in ``a2`` below it carry no information.
        """
        units = (3 * self.n_points + 8) * np.finfo(float).eps
        return units * (self.a2_magnitude + abs(self.a2) * self.det_magnitude) / abs(self.det)

    @property
    def coefficients(self) -> Tuple[float, float, float]:
        return self.a0, self.a1, self.a2

    def evaluate(self, x):
        return self.a0 + self.a1 * x + self.a2 * x * x

    def derivative(self, x):
        return 2.0 * self.a2 * x + self.a1

    @property
    def second_derivative(self) -> float:
        return 2.0 * self.a2

    def vertex(self) -> Optional[float]:
        """Position of the extremum, or None for a straight line."""
        if self.a2 == 0:
            return None
        return -self.a1 / (2.0 * self.a2)


def fit_quadratic(
    positions: ArrayLike,
    values: ArrayLike,
    start: int,
    length: int,
) -> Optional[QuadraticFit]:
    """
    Fit a second-degree polynomial to ``length`` samples starting at ``start``.

    Parameters
    ----------
    positions : array_like
        Sample positions.
    values : array_like
        Sample values, same length as ``positions``.
    start : int
        Index of the first sample of the window.
    length : int
        Number of samples in the window (at least 3).

    Returns
    -------
    QuadraticFit or None
        None when the window is numerically singular (``|det| < 1e-35``),
        e.g. fewer than three distinct positions.

    Raises
    ------
    ValueError
        On unequal array lengths, a window reaching past the arrays, or fewer
        than three points.
    """
    if len(positions) != len(values):
        raise ValueError(
            f"positions and values must be of equal length ({len(positions)} != {len(values)})"
        )
    if start < 0 or start + length > len(positions):
        raise ValueError(
            f"window [{start}, {start + length}) exceeds the data bounds [0, {len(positions)})"
        )
    if length < MIN_POINTS:
        raise ValueError(f"a quadratic fit needs at least {MIN_POINTS} points, got {length}")

    x = np.asarray(positions[start:start + length], dtype=float)
    y = np.asarray(values[start:start + length], dtype=float)
    x2 = x * x

    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    sum_xy = float(np.sum(x * y))
    sum_x2 = float(np.sum(x2))
    sum_x2y = float(np.sum(x2 * y))
    sum_x3 = float(np.sum(x2 * x))
    sum_x4 = float(np.sum(x2 * x2))

    det = (
        sum_x2 ** 3
        + sum_x4 * sum_x ** 2
        - 2.0 * sum_x2 * sum_x * sum_x3
        + length * (sum_x3 ** 2 - sum_x4 * sum_x2)
    )
    if abs(det) < DET_ZERO_PRECISION:
        return None

    ax = np.abs(x)
    ay = np.abs(y)
    abs_x = float(np.sum(ax))
    abs_x3 = float(np.sum(x2 * ax))
    abs_y = float(np.sum(ay))
    abs_xy = float(np.sum(ax * ay))
    abs_x2y = float(np.sum(x2 * ay))
    a2_magnitude = (
        sum_x2 ** 2 * abs_y
        + abs_x * abs_x3 * abs_y
        + abs_x ** 2 * abs_x2y
        + length * abs_x3 * abs_xy
        + sum_x2 * (length * abs_x2y + abs_x * abs_xy)
    )
    det_magnitude = (
        sum_x2 ** 3
        + sum_x4 * abs_x ** 2
        + 2.0 * sum_x2 * abs_x * abs_x3
        + length * (abs_x3 ** 2 + sum_x4 * sum_x2)
    )

    return QuadraticFit(
        sum_x=sum_x,
        sum_y=sum_y,
        sum_xy=sum_xy,
        sum_x2=sum_x2,
        sum_x2y=sum_x2y,
        sum_x3=sum_x3,
        sum_x4=sum_x4,
        det=det,
        n_points=length,
        a2_magnitude=a2_magnitude,
        det_magnitude=det_magnitude,
    )


def select_window_around_pivot(
    region_start: int,
    region_end: int,
    pivot_index: int,
    half_width: int,
) -> Optional[Tuple[int, int]]:
    """
    Place a fixed-size window around ``pivot_index`` inside a region.

    The window is centred on the pivot and then shifted, never shrunk, so
    that it lies within ``[region_start, region_end]``.

    Returns
    -------
    (start, length) or None
        None when ``half_width < 1`` or the region is shorter than the
        full window width.
    """
    if half_width < 1:
        return None
    length = full_width(half_width)
    if region_end - region_start + 1 < length:
        return None

    start = max(pivot_index - half_width, region_start)
    if start + length - 1 > region_end:
        start = region_end - length + 1
    return start, length
