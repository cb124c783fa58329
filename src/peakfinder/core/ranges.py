"""
Index ranges, value intervals and interval scaling.

- DataRange: inclusive index interval over a sample array
- Interval: ordered pair of bounds with a width
- Scaling: affine map of data from its own interval onto a target interval
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class DataRange:
    """
    Inclusive index interval.

    Use :meth:`from_start_and_length` or :meth:`from_start_and_end` rather
    than the constructor so the three fields stay consistent.

    Attributes
    ----------
    start_inclusive : int
        Zero-based first index.
    end_inclusive : int
        Zero-based last index.
    length : int
        Number of indices covered, always >= 1.
    """

    start_inclusive: int
    end_inclusive: int
    length: int

    @classmethod
    def from_start_and_length(cls, start: int, length: int) -> "DataRange":
        if start < 0:
            raise ValueError(f"start must be non-negative, got {start}")
        if length <= 0:
            raise ValueError(f"length must be positive, got {length}")
        return cls(start, start + length - 1, length)

    @classmethod
    def from_start_and_end(cls, start: int, end: int) -> "DataRange":
        if start < 0:
            raise ValueError(f"start must be non-negative, got {start}")
        if end < start:
            raise ValueError(f"end ({end}) must not be lower than start ({start})")
        return cls(start, end, end - start + 1)

    @classmethod
    def covering(cls, array: Sequence) -> "DataRange":
        """Range spanning every index of ``array``."""
        return cls.from_start_and_length(0, len(array))

    def __contains__(self, index: int) -> bool:
        return self.start_inclusive <= index <= self.end_inclusive

    def indices(self) -> range:
        return range(self.start_inclusive, self.end_inclusive + 1)


@dataclass(frozen=True, init=False)
class Interval:
    """Closed value interval; bounds given in reverse order are swapped."""

    min: float
    max: float

    def __init__(self, lower: float, upper: float):
        if lower > upper:
            lower, upper = upper, lower
        object.__setattr__(self, "min", float(lower))
        object.__setattr__(self, "max", float(upper))

    @property
    def width(self) -> float:
        return self.max - self.min


UNIT_INTERVAL = Interval(0.0, 1.0)


@dataclass(frozen=True)
class Scaling:
    """
    Affine map from the ``source`` interval of some data onto ``target``.

    A scaling is built for one particular data set with :meth:`for_data`.
    When every source value is identical the scaling is degenerate and
    collapses the data onto ``target.min``.
    """

    source: Interval
    target: Interval

    @classmethod
    def for_data(
        cls,
        source_values: Union[Sequence[float], NDArray],
        target: Union[Interval, Tuple[float, float]] = UNIT_INTERVAL,
    ) -> "Scaling":
        """
        Create a scaling for ``source_values`` onto ``target``.

        Parameters
        ----------
        source_values : array_like
            Data the scaling will be applied to.
        target : Interval or (min, max)
            Target interval. A tuple with ``min > max`` is rejected.
        """
        if not isinstance(target, Interval):
            target_min, target_max = target
            if target_min > target_max:
                raise ValueError(
                    f"target max ({target_max}) must not be lower than target min ({target_min})"
                )
            target = Interval(target_min, target_max)

        data = np.asarray(source_values, dtype=float)
        if data.size == 0:
            raise ValueError("Cannot build a scaling for empty data")
        return cls(source=Interval(float(np.min(data)), float(np.max(data))), target=target)

    @property
    def is_degenerate(self) -> bool:
        return self.source.width == 0

    def scale_in_place(self, data: Union[list, NDArray]) -> None:
        """
        Map ``data`` (a float array or a list) onto the target interval, overwriting it.

        Raises
        ------
        ValueError
            If ``data`` is an ndarray of a non-floating dtype, which cannot
            hold the scaled values.
        """
        if isinstance(data, np.ndarray) and not np.issubdtype(data.dtype, np.floating):
            raise ValueError(f"scale_in_place needs a floating-point array, got dtype {data.dtype}")
        if self.is_degenerate:
            data[:] = [self.target.min] * len(data)
            return
        multiplier = self.target.width / self.source.width
        if isinstance(data, np.ndarray):
            data -= self.source.min
            data *= multiplier
            data += self.target.min
            return
        for i, value in enumerate(data):
            data[i] = (value - self.source.min) * multiplier + self.target.min

    def scaled(self, data: Union[Sequence[float], NDArray]) -> NDArray:
        """Return a scaled float copy of ``data``."""
        result = np.array(data, dtype=float)
        self.scale_in_place(result)
        return result

    def unscale(self, data: Union[float, Sequence[float], NDArray]):
        """
        Map target-domain values back to source units.

        A degenerate scaling has no inverse; everything maps to ``source.min``.
        Scalars come back as ``float``, sequences as float arrays.
        """
        values = np.asarray(data, dtype=float)
        if self.is_degenerate or self.target.width == 0:
            result = np.full_like(values, self.source.min)
        else:
            multiplier = self.source.width / self.target.width
            result = (values - self.target.min) * multiplier + self.source.min
        if result.ndim == 0:
            return float(result)
        return result
