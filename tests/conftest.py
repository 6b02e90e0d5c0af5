"""
Pytest Configuration and Fixtures
==================================
Shared test fixtures for DIAC-V tests.
"""

import pytest
from fastapi.testclient import TestClient

from diacv.main import app
from diacv.modules.fluid_properties import DENSITY, VISCOSITY, FluidProperties


class FakeProperties(FluidProperties):
    """
    Linear water-like fluid, independent of pressure and fluid name:

        μ(T) = 0.001 × (40 − T) / 20    → 1 mPa·s at 20 °C, 2 mPa·s at 0 °C
        ρ(T) = 1000 − (T − 20)          → 1000 kg/m³ at 20 °C

    Every lookup is recorded in ``calls``.
    """

    def __init__(self):
        self.calls = []

    def props(self, prop, temperature_c, pressure_pa, fluid):
        self.calls.append((prop, temperature_c, pressure_pa, fluid))
        if prop == VISCOSITY:
            return 0.001 * (40.0 - temperature_c) / 20.0
        if prop == DENSITY:
            return 1000.0 - (temperature_c - 20.0)
        raise ValueError(f"Unknown property {prop}")


@pytest.fixture
def client():
    """FastAPI test client fixture."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def fake_properties():
    """Deterministic property lookup for normalization tests."""
    return FakeProperties()


@pytest.fixture
def parabola_curve():
    """Single-peaked curve y = 6x - x², peak 9 at x = 3."""
    return {
        "x_values": [0, 1, 2, 3, 4, 5, 6],
        "y_values": [0, 5, 8, 9, 8, 5, 0],
    }


@pytest.fixture
def square_curve():
    """y = x² sampled on 0..3."""
    return {
        "x_values": [0, 1, 2, 3],
        "y_values": [0, 1, 4, 9],
    }


@pytest.fixture
def sample_pipe_input():
    """100 m of 100 mm smooth pipe carrying 36 m³/h of water."""
    return {
        "length_horizontal": 100,
        "length_vertical": 0,
        "id_mm": 100,
        "flow_m3hr": 36,
        "density": 1000,
        "viscosity": 0.001,
        "roughness": 0,
    }


@pytest.fixture
def sample_pump_curve():
    """Q-H curve H = 50 − 0.025 Q², meets the duty parabola of (20, 40) at Q = 20."""
    return [[0, 50], [10, 47.5], [20, 40], [30, 27.5], [40, 10]]
