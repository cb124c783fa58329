"""Tests for the zero-crossing root finder."""

import math

import numpy as np
import pytest

from peakfinder.analysis.zero_crossing import find_bracket, find_zero_crossing
from peakfinder.core.ranges import DataRange


class TestFindBracket:
    """Tests for sign-change bracketing."""

    def test_first_sign_change(self):
        values = [3.0, 1.0, -1.0, 2.0, -2.0]
        assert find_bracket(values, DataRange.covering(values)) == 1

    def test_exact_zero_sample_brackets(self):
        values = [1.0, 0.0, -1.0]
        assert find_bracket(values, DataRange.covering(values)) == 0

    def test_no_sign_change(self):
        values = [1.0, 2.0, 3.0, 4.0]
        assert find_bracket(values, DataRange.covering(values)) is None

    def test_restricted_to_region(self):
        values = [1.0, -1.0, -2.0, -3.0, 4.0]
        assert find_bracket(values, DataRange.from_start_and_end(1, 4)) == 3

    def test_nan_never_brackets(self):
        values = [np.nan, np.nan, -1.0, 1.0, 2.0]
        assert find_bracket(values, DataRange.covering(values)) == 2


class TestFindZeroCrossing:
    """Tests for find_zero_crossing."""

    def test_linear_curve(self):
        """A locally linear curve is solved from the fitted line."""
        positions = [0.0, 1.0, 2.0, 3.0, 4.0]
        values = [x - 1.5 for x in positions]
        root = find_zero_crossing(positions, values, DataRange.covering(positions), 1)
        assert root == pytest.approx(1.5)

    def test_quadratic_curve(self):
        positions = np.linspace(0.0, 3.0, 7)
        values = positions ** 2 - 2.0
        root = find_zero_crossing(positions, values, DataRange.covering(positions), 1)
        assert root == pytest.approx(math.sqrt(2.0), abs=1e-9)

    def test_exact_zero_sample(self):
        positions = [0.0, 1.0, 2.0, 3.0]
        values = [1.0, 0.0, -1.0, -2.0]
        root = find_zero_crossing(positions, values, DataRange.covering(positions), 1)
        assert root == pytest.approx(1.0)

    def test_secant_fallback_without_window(self):
        """Half-width 0 gives no fitting window, so the secant is used."""
        positions = [0.0, 1.0, 2.0, 3.0]
        values = [-2.0, -1.0, 3.0, 4.0]
        root = find_zero_crossing(positions, values, DataRange.covering(positions), 0)
        assert root == pytest.approx(1.25)

    def test_secant_fallback_when_window_too_wide(self):
        positions = [0.0, 1.0, 2.0, 3.0]
        values = [-2.0, -1.0, 3.0, 4.0]
        root = find_zero_crossing(positions, values, DataRange.covering(positions), 5)
        assert root == pytest.approx(1.25)

    def test_no_sign_change(self):
        positions = [0.0, 1.0, 2.0, 3.0]
        values = [1.0, 2.0, 1.5, 0.5]
        assert find_zero_crossing(positions, values, DataRange.covering(positions), 1) is None

    def test_all_zero_curve_has_no_root(self):
        """A zero line brackets everywhere but has no isolated root."""
        positions = [0.0, 1.0, 2.0, 3.0]
        values = [0.0, 0.0, 0.0, 0.0]
        assert find_zero_crossing(positions, values, DataRange.covering(positions), 1) is None

    def test_root_within_region_bounds(self):
        positions = np.linspace(0.0, 1.0, 21)
        values = 0.3 - positions ** 2
        region = DataRange.from_start_and_end(5, 15)
        root = find_zero_crossing(positions, values, region, 2)
        assert positions[5] <= root <= positions[15]
        assert root == pytest.approx(math.sqrt(0.3), abs=1e-9)

    def test_unequal_lengths_rejected(self):
        with pytest.raises(ValueError):
            find_zero_crossing([0.0, 1.0, 2.0], [0.0, 1.0], DataRange.from_start_and_length(0, 3), 1)

    def test_short_region_rejected(self):
        with pytest.raises(ValueError):
            find_zero_crossing([0.0, 1.0, 2.0], [1.0, -1.0, 1.0], DataRange.from_start_and_length(0, 2), 1)

    def test_region_past_end_rejected(self):
        with pytest.raises(ValueError):
            find_zero_crossing([0.0, 1.0, 2.0], [1.0, -1.0, 1.0], DataRange.from_start_and_length(0, 4), 1)

    def test_negative_half_width_rejected(self):
        with pytest.raises(ValueError):
            find_zero_crossing([0.0, 1.0, 2.0], [1.0, -1.0, 1.0], DataRange.from_start_and_length(0, 3), -1)
