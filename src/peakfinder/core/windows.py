"""Window width helpers shared by the local fitting routines."""

from __future__ import annotations


def full_width(half_width: int) -> int:
    """
    Convert a symmetric half-width into an odd full window length.

    Parameters
    ----------
    half_width : int
        Number of points on each side of the window centre.

    Returns
    -------
    int
        ``2 * half_width + 1``

    Raises
    ------
    ValueError
        If ``half_width`` is negative.
    """
    if half_width < 0:
        raise ValueError(f"half_width must be non-negative, got {half_width}")
    return 2 * half_width + 1
