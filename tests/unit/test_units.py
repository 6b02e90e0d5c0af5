"""
Unit Conversion Tests
"""

import pytest

from diacv.modules.units import INVALID_UNIT, convert, convert_pressure, find_unit_group


class TestPressureConversion:

    def test_bar_to_psi(self):
        assert convert_pressure(1, "psi") == pytest.approx(14.5038)

    def test_psi_to_bar(self):
        assert convert_pressure(14.5038, "bar", "psi") == pytest.approx(1.0)

    def test_between_non_base_units(self):
        assert convert_pressure(10.197, "kg_cm2", "m_aq") == pytest.approx(1.01972)

    def test_case_insensitive(self):
        assert convert_pressure(2, " PSI ") == pytest.approx(29.0076)

    def test_invalid_units(self):
        assert convert_pressure(1, "furlong") == INVALID_UNIT
        assert convert_pressure(1, "psi", "atm") == INVALID_UNIT

    def test_generic_convert(self):
        assert find_unit_group("m_aq") == "pressure"
        assert convert(1, "m_aq") == pytest.approx(10.197)
        assert find_unit_group("parsec") is None
