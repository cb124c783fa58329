"""Sampled curve container."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from peakfinder.analysis.peak_search import PeakSearchConfig


@dataclass
class Spectrum:
    """
    Parallel position/value arrays of a sampled curve.

    Attributes
    ----------
    positions : NDArray
        Sample positions (x axis), expected to increase.
    values : NDArray
        Sample values (y axis), e.g. log10 intensity.
    """

    positions: NDArray
    values: NDArray

    def __post_init__(self):
        self.positions = np.asarray(self.positions, dtype=float)
        self.values = np.asarray(self.values, dtype=float)
        if self.positions.shape != self.values.shape:
            raise ValueError(
                f"positions and values must be of equal length "
                f"({self.positions.size} != {self.values.size})"
            )

    @property
    def n_points(self) -> int:
        return int(self.positions.size)

    def __len__(self) -> int:
        return self.n_points

    def with_values(self, values: NDArray) -> "Spectrum":
        """New spectrum sharing the positions, e.g. after smoothing."""
        return Spectrum(self.positions.copy(), values)

    def find_peaks(
        self, half_width: int, config: Optional["PeakSearchConfig"] = None
    ) -> List[float]:
        from peakfinder.analysis.peak_search import search_peaks

        return search_peaks(self.positions, self.values, half_width, config=config)
