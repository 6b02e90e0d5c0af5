"""
Pump Normalization Tests
========================
Unit tests for the viscosity corrections and the three normalization
families. A fake property lookup keeps the expected numbers exact:
μ(0 °C) = 2 mPa·s, μ(20 °C) = 1 mPa·s, ρ(T) = 1000 − (T − 20).
"""

import pytest

from diacv.modules.fluid_properties import VISCOSITY, barometric_pressure
from diacv.modules.normalization import (
    HANDBOOK,
    REFINED,
    handbook_viscosity_factors,
    normalize_flow_handbook,
    normalize_flow_refined,
    normalize_flow_scaled,
    normalize_head_handbook,
    normalize_head_refined,
    normalize_head_scaled,
    refined_viscosity_factors,
)


class TestViscosityCorrection:
    """The two corrections keep their own slopes."""

    def test_handbook_slopes(self):
        k_h, k_q = handbook_viscosity_factors(0.003, 0.001)
        assert k_h == pytest.approx(1.30)
        assert k_q == pytest.approx(1.20)

    def test_refined_slopes(self):
        k_h, k_q = refined_viscosity_factors(0.003, 0.001)
        assert k_h == pytest.approx(1.10)
        assert k_q == pytest.approx(1.06)

    def test_unity_at_reference(self):
        for correction in (HANDBOOK, REFINED):
            assert correction.factors(0.001, 0.001) == pytest.approx((1.0, 1.0))

    def test_factors_above_one_for_thicker_fluid(self):
        for correction in (HANDBOOK, REFINED):
            k_h, k_q = correction.factors(0.002, 0.001)
            assert k_h > 1.0
            assert k_q > 1.0

    def test_strategies_differ(self):
        assert HANDBOOK.factors(0.002) != REFINED.factors(0.002)


class TestRefinedNormalization:
    """Test suite for the refined (water reference) family."""

    def test_flow_cold_water(self, fake_properties):
        result = normalize_flow_refined(100, 0, properties=fake_properties)
        # μ ratio 2 → K_Q = 1.03
        assert result == pytest.approx(103.0)

    def test_flow_identity_at_reference(self, fake_properties):
        assert normalize_flow_refined(100, 20, properties=fake_properties) == pytest.approx(100.0)

    def test_flow_user_viscosity(self, fake_properties):
        result = normalize_flow_refined(100, 0, mu=0.003, properties=fake_properties)
        assert result == pytest.approx(106.0)

    def test_head_cold_water(self, fake_properties):
        result = normalize_head_refined(50, 0, properties=fake_properties)
        # ρ 1020 / 1000, K_H = 1.05
        assert result == pytest.approx(50 * 1.02 * 1.05)

    def test_head_with_solids(self, fake_properties):
        result = normalize_head_refined(50, 20, TSS=20000, D0=1000, properties=fake_properties)
        # 20 000 mg/L adds 20 kg/m³
        assert result == pytest.approx(50 * 1.02)

    def test_head_identity_at_reference(self, fake_properties):
        assert normalize_head_refined(50, 20, properties=fake_properties) == pytest.approx(50.0)

    def test_altitude_sets_operating_pressure(self, fake_properties):
        normalize_flow_refined(100, 30, altitude=1500, properties=fake_properties)

        pressures = [call[2] for call in fake_properties.calls if call[0] == VISCOSITY and call[1] == 30]
        assert pressures == [pytest.approx(barometric_pressure(1500))]

    def test_custom_reference_temperature(self, fake_properties):
        result = normalize_flow_refined(100, 0, T0=0, properties=fake_properties)
        assert result == pytest.approx(100.0)

    def test_non_numeric_returns_error(self, fake_properties):
        result = normalize_flow_refined("abc", 0, properties=fake_properties)
        assert isinstance(result, str)
        assert result.startswith("Error: ")


class TestHandbookNormalization:
    """Test suite for the rounded handbook family."""

    def test_flow(self, fake_properties):
        result = normalize_flow_handbook(100, 0, 0, 1000, 0, properties=fake_properties)
        assert result == 110.0

    def test_flow_rounded(self, fake_properties):
        result = normalize_flow_handbook(33.333, 0, 0, 1000, 0, properties=fake_properties)
        assert result == round(33.333 * 1.1, 2)

    def test_head(self, fake_properties):
        result = normalize_head_handbook(50, 0, 0, 1000, 0, properties=fake_properties)
        # ρ 1000 / 1000, K_H = 1.15
        assert result == pytest.approx(57.5)

    def test_head_requires_density(self, fake_properties):
        result = normalize_head_handbook(50, 0, 0, None, 0, properties=fake_properties)
        assert isinstance(result, str)
        assert result.startswith("Error: ")

    def test_flow_requires_density(self, fake_properties):
        result = normalize_flow_handbook(100, 0, 0, None, 0, properties=fake_properties)
        assert isinstance(result, str)
        assert result.startswith("Error: ")

    def test_flow_ignores_solids(self, fake_properties):
        clean = normalize_flow_handbook(100, 0, 0, 1000, 0, properties=fake_properties)
        laden = normalize_flow_handbook(100, 0, 50000, 1000, 0, properties=fake_properties)
        assert laden == clean

    def test_handbook_larger_than_refined(self, fake_properties):
        handbook = normalize_flow_handbook(100, 0, 0, 1000, 0, properties=fake_properties)
        refined = normalize_flow_refined(100, 0, properties=fake_properties)
        assert handbook > refined > 100


class TestScaledNormalization:
    """Test suite for the unrounded family with optional user viscosity."""

    def test_flow_base_fluid(self, fake_properties):
        result = normalize_flow_scaled(100, 0, 0, 1000, 0, properties=fake_properties)
        assert result == pytest.approx(110.0)

    def test_user_viscosity_keeps_ratio(self, fake_properties):
        # The user's fluid follows the base fluid's temperature trend
        base = normalize_flow_scaled(100, 0, 0, 1000, 0, properties=fake_properties)
        scaled = normalize_flow_scaled(100, 0, 0, 1000, 0, mu_init=0.005, properties=fake_properties)
        assert scaled == pytest.approx(base)

    def test_head_unrounded(self, fake_properties):
        result = normalize_head_scaled(33.333, 0, 1000, 1000, 0, properties=fake_properties)
        assert result == pytest.approx(33.333 * 1.001 * 1.15)

    def test_head_identity_at_reference(self, fake_properties):
        result = normalize_head_scaled(50, 20, 0, 1000, 0, properties=fake_properties)
        assert result == pytest.approx(50.0)
