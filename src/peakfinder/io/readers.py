"""Readers for two-column spectrum text files."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import List, Union

from peakfinder.core.spectrum import Spectrum

logger = logging.getLogger(__name__)


def read_two_column(path: Union[str, Path], log_values: bool = True) -> Spectrum:
    """
    Read a whitespace-separated ``position value`` file.

    Lines that do not hold exactly two numbers are skipped with a warning.

    Parameters
    ----------
    path : str or Path
        File to read.
    log_values : bool
        Store ``log10(value)`` instead of the raw value. Lines with a
        non-positive value are then skipped.

    Returns
    -------
    Spectrum
        Positions and values in file order.
    """
    path = Path(path)
    positions: List[float] = []
    values: List[float] = []
    skipped = 0

    with path.open("r", encoding="utf-8", errors="replace") as f:
        for line_number, line in enumerate(f, start=1):
            fields = line.split()
            if not fields:
                continue
            if len(fields) != 2:
                logger.warning("%s:%d: skipping line without exactly two values: %r",
                               path.name, line_number, line.rstrip())
                skipped += 1
                continue
            try:
                x = float(fields[0])
                y = float(fields[1])
            except ValueError:
                logger.warning("%s:%d: skipping invalid line: %r", path.name, line_number, line.rstrip())
                skipped += 1
                continue
            if log_values:
                if y <= 0:
                    logger.warning("%s:%d: skipping non-positive value %g (log transform)",
                                   path.name, line_number, y)
                    skipped += 1
                    continue
                y = math.log10(y)
            positions.append(x)
            values.append(y)

    logger.info("Read %d points from %s (%d lines skipped)", len(positions), path, skipped)
    return Spectrum(positions, values)
