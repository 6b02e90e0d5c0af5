"""
Curve Intersection Tests
========================
Unit tests for the first crossing of two sampled curves.
"""

import pytest

from diacv.modules.intersection import (
    NO_INTERSECTION,
    NO_OVERLAP,
    NOT_ENOUGH_POINTS,
    find_curve_intersection,
)


class TestCurveIntersection:
    """Test suite for find_curve_intersection."""

    def test_straight_lines(self):
        result = find_curve_intersection([0, 10], [0, 10], [0, 10], [10, 0])

        assert len(result) == 1
        x0, y0 = result[0]
        assert x0 == pytest.approx(5.0, abs=1e-6)
        assert y0 == pytest.approx(5.0, abs=1e-6)

    def test_cubic_curves(self):
        x = [0, 2, 4, 6, 8, 10]
        result = find_curve_intersection(x, x, x, [10 - v for v in x])
        assert result[0] == pytest.approx([5.0, 5.0], abs=1e-6)

    def test_pump_against_system_curve(self):
        q = [0, 10, 20, 30, 40]
        pump = [50 - 0.025 * v ** 2 for v in q]
        system = [0.1 * v ** 2 for v in q]

        x0, y0 = find_curve_intersection(q, pump, q, system)[0]
        assert x0 == pytest.approx(20.0, abs=1e-6)
        assert y0 == pytest.approx(40.0, abs=1e-6)

    def test_first_crossing_returned(self):
        # y = sin-like wave against y = 0.5 crosses more than once
        x = [0, 1, 2, 3, 4, 5, 6]
        wave = [0, 1, 0, -1, 0, 1, 0]
        flat = [0.5] * len(x)

        x0, _ = find_curve_intersection(x, wave, x, flat)[0]
        assert 0.0 < x0 < 1.0

    def test_result_on_both_curves(self):
        x1, y1 = [0, 5, 10], [2, 4, 9]
        x2, y2 = [0, 10], [8, 0]

        x0, y0 = find_curve_intersection(x1, y1, x2, y2)[0]
        assert y0 == pytest.approx(8 - 0.8 * x0, abs=1e-6)

    def test_unsorted_input(self):
        result = find_curve_intersection([10, 0], [10, 0], [10, 0], [0, 10])
        assert result[0] == pytest.approx([5.0, 5.0], abs=1e-6)

    def test_not_enough_points(self):
        assert find_curve_intersection([1], [1], [0, 10], [10, 0]) == NOT_ENOUGH_POINTS

    def test_no_overlap(self):
        assert find_curve_intersection([0, 1, 2], [0, 1, 2], [5, 6, 7], [7, 6, 5]) == NO_OVERLAP

    def test_no_intersection(self):
        x = [0, 5, 10]
        assert find_curve_intersection(x, x, x, [v + 10 for v in x]) == NO_INTERSECTION

    def test_error_messages_are_tagged(self):
        for message in (NOT_ENOUGH_POINTS, NO_OVERLAP, NO_INTERSECTION):
            assert message.startswith("#N/A - ")

    def test_non_numeric_input(self):
        result = find_curve_intersection([0, "a"], [0, 1], [0, 1], [1, 0])
        assert isinstance(result, str)
        assert result.startswith("#N/A - ")
