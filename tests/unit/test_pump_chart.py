"""
Pump Chart Tests
================
Unit tests for chart data, duty power and the operating point.
"""

import pytest

from diacv.modules.intersection import NOT_ENOUGH_POINTS
from diacv.modules.pump_chart import (
    PumpChartInput,
    build_chart_data,
    clean_points,
    duty_parabola,
    input_power_kw,
    nearest_duty,
    operating_point,
    render_pump_chart,
    shaft_power_kw,
    split_at_min_flow,
)


class TestChartHelpers:
    """Test suite for the chart building blocks."""

    def test_clean_points_skips_blank_rows(self):
        rows = [[0, 50], [10, None], None, [20, 40], [None, 1]]
        assert clean_points(rows) == [(0.0, 50.0), (20.0, 40.0)]

    def test_duty_parabola_passes_duty_point(self):
        parabola = duty_parabola(20, 40, points=30)
        assert parabola[0] == (0.0, 0.0)
        assert parabola[-1] == pytest.approx((20.0, 40.0))
        for q, h in parabola:
            assert h == pytest.approx(40 * (q / 20) ** 2)

    def test_duty_parabola_zero_flow(self):
        assert duty_parabola(0, 40) == [(0.0, 0.0)]

    def test_split_at_min_flow(self):
        thin, thick = split_at_min_flow([(0, 1), (10, 2), (20, 3)], 10)
        assert thin == [(0, 1), (10, 2)]
        assert thick == [(20, 3)]

    def test_nearest_duty(self):
        assert nearest_duty([(0, 50), (10, 48), (20, 40)], 12) == (12, 48)
        assert nearest_duty([], 12) == (12, 0.0)

    def test_power(self):
        p2 = shaft_power_kw(1000, 36, 20, 0.75)
        assert p2 == pytest.approx(1000 * 36 * 20 * 9.8 / (3.6e6 * 0.75))
        assert input_power_kw(p2, 0.9) == pytest.approx(p2 / 0.9)


class TestOperatingPoint:
    """Pump curve against the duty parabola."""

    def test_operating_point(self, sample_pump_curve):
        q, h = operating_point(clean_points(sample_pump_curve), 20, 40)
        assert q == pytest.approx(20.0, abs=1e-6)
        assert h == pytest.approx(40.0, abs=1e-6)

    def test_undersized_pump(self, sample_pump_curve):
        # Duty point above the pump curve: the pump settles at a lower flow
        q, h = operating_point(clean_points(sample_pump_curve), 10, 50)
        assert q < 20.0
        assert h == pytest.approx(50 * (q / 10) ** 2, rel=1e-6)

    def test_empty_curve(self):
        assert operating_point([], 20, 40) == NOT_ENOUGH_POINTS


class TestChartData:
    """Test suite for build_chart_data and rendering."""

    @pytest.fixture
    def chart(self, sample_pump_curve):
        return PumpChartInput(
            q0=20,
            h0=40,
            qh=clean_points(sample_pump_curve),
            eta=[(0, 0.0), (10, 0.5), (20, 0.75), (30, 0.7), (40, 0.5)],
            npsh=[(10, 1.5), (20, 2.0), (40, 4.0)],
            q_min=10,
            density=1000,
            eta_pump=0.75,
            motor_eff=0.9,
        )

    def test_series_split(self, chart):
        data = build_chart_data(chart)

        assert [q for q, _ in data["qh_thin"]] == [0.0, 10.0]
        assert [q for q, _ in data["qh_thick"]] == [20.0, 30.0, 40.0]
        assert len(data["eta_thin"]) + len(data["eta_thick"]) == len(chart.eta)

    def test_overall_efficiency(self, chart):
        data = build_chart_data(chart)

        overall = dict(data["eta_overall_thick"])
        assert overall[20] == pytest.approx(0.75 * 0.9)
        assert data["duty"]["eta_overall"] == (20, pytest.approx(0.675))

    def test_duty_values(self, chart):
        data = build_chart_data(chart)

        assert data["duty"]["qh"] == (20, 40.0)
        assert data["duty"]["npsh"] == (20, 2.0)

    def test_power_at_duty(self, chart):
        data = build_chart_data(chart)

        assert data["shaft_power_kw"] == pytest.approx(1000 * 20 * 40 * 9.8 / (3.6e6 * 0.75))
        assert data["input_power_kw"] == pytest.approx(data["shaft_power_kw"] / 0.9)

    def test_power_omitted_without_pump_efficiency(self, chart):
        chart.eta_pump = None
        data = build_chart_data(chart)

        assert data["shaft_power_kw"] is None
        assert data["input_power_kw"] is None

    def test_x_axis_range(self, chart):
        assert build_chart_data(chart)["x_max"] == pytest.approx(44.0)

    def test_render_png(self, chart):
        png = render_pump_chart(chart)
        assert png.startswith(b"\x89PNG")

    def test_render_head_only(self, chart):
        chart.eta = []
        chart.npsh = []
        assert render_pump_chart(chart).startswith(b"\x89PNG")
