"""
Pre-smoothing filters applied to a curve before the peak search.

- Savitzky-Golay least-squares convolution
- Gaussian convolution with zero padding outside the data
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np
from numpy.typing import NDArray
from scipy import signal
from scipy.ndimage import gaussian_filter1d

logger = logging.getLogger(__name__)

SMOOTHING_METHODS = ("none", "savgol", "gaussian")


def savitzky_golay_smooth(
    values: Union[Sequence[float], NDArray],
    window_size: int = 5,
    polynomial_order: int = 2,
) -> NDArray:
    """
    Apply a Savitzky-Golay smoothing filter.

    Parameters
    ----------
    values : array_like
        Input curve.
    window_size : int
        Odd number of samples in the fitting window, greater than
        ``polynomial_order``.
    polynomial_order : int
        Order of the local polynomial.

    Returns
    -------
    NDArray
        Smoothed curve. A window longer than the data leaves it unchanged.

    References
    ----------
    A. Savitzky, M.J.E. Golay, "Smoothing and Differentiation of Data by
    Simplified Least Squares Procedures", Analytical Chemistry 36 (1964) 1627.
    """
    if window_size % 2 == 0 or window_size <= polynomial_order:
        raise ValueError("Window size must be odd and greater than polynomial order.")
    data = np.asarray(values, dtype=float)
    if window_size > data.size:
        logger.warning(
            "Savitzky-Golay window (%d) exceeds data length (%d); skipping smoothing",
            window_size, data.size,
        )
        return data.copy()
    return signal.savgol_filter(data, window_size, polynomial_order, mode="interp")


def gaussian_smooth(values: Union[Sequence[float], NDArray], sigma: float = 1.0) -> NDArray:
    """
    Convolve with a normalized Gaussian kernel reaching
    ``max(int(6 * sigma), 3) // 2`` samples to each side; samples beyond the
    ends count as zero.
    """
    if sigma <= 0:
        raise ValueError(f"sigma must be positive, got {sigma}")
    data = np.asarray(values, dtype=float)
    kernel_size = max(int(6 * sigma), 3)
    radius = kernel_size // 2
    return gaussian_filter1d(data, sigma=sigma, mode="constant", cval=0.0, radius=radius)


@dataclass
class SmoothingConfig:
    """Which pre-smoothing filter to run and its parameters."""

    method: str = "none"
    window_size: int = 5
    polynomial_order: int = 2
    sigma: float = 1.0

    def __post_init__(self):
        if self.method not in SMOOTHING_METHODS:
            raise ValueError(f"Unknown smoothing method '{self.method}'. Available: {list(SMOOTHING_METHODS)}")

    @classmethod
    def savgol(cls, window_size: int = 5, polynomial_order: int = 2) -> "SmoothingConfig":
        return cls(method="savgol", window_size=window_size, polynomial_order=polynomial_order)

    @classmethod
    def gaussian(cls, sigma: float = 1.0) -> "SmoothingConfig":
        return cls(method="gaussian", sigma=sigma)

    def apply(self, values: Union[Sequence[float], NDArray]) -> NDArray:
        if self.method == "savgol":
            return savitzky_golay_smooth(values, self.window_size, self.polynomial_order)
        if self.method == "gaussian":
            return gaussian_smooth(values, self.sigma)
        return np.asarray(values, dtype=float).copy()
