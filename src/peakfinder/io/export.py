"""Writers for two-column spectrum text files and peak lists."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence, Union

from peakfinder.core.spectrum import Spectrum

logger = logging.getLogger(__name__)


def write_two_column(
    path: Union[str, Path],
    positions: Sequence[float],
    values: Sequence[float],
) -> Path:
    """Write one ``position value`` line per sample."""
    if len(positions) != len(values):
        raise ValueError(
            f"positions and values must be of equal length ({len(positions)} != {len(values)})"
        )
    if len(positions) == 0:
        raise ValueError("Nothing to export: data is empty")

    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        for x, y in zip(positions, values):
            f.write(f"{float(x)!r} {float(y)!r}\n")
    logger.info("Wrote %d points to %s", len(positions), path)
    return path


def export_spectrum(spectrum: Spectrum, path: Union[str, Path]) -> Path:
    return write_two_column(path, spectrum.positions, spectrum.values)


def write_peaks(path: Union[str, Path], peaks: Sequence[float]) -> Path:
    """Write one peak position per line; an empty list gives an empty file."""
    path = Path(path)
    path.write_text("".join(f"{float(p)!r}\n" for p in peaks), encoding="utf-8")
    logger.info("Wrote %d peak positions to %s", len(peaks), path)
    return path
