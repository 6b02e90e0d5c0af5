"""
DIAC-V Fluid Properties
=======================
Thermophysical property lookups used by pump normalization.

The lookup is an injectable object: any FluidProperties subclass
implementing ``props(prop, temperature_c, pressure_pa, fluid)`` can replace
the CoolProp-backed default.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import CoolProp.CoolProp as CP


# Standard atmosphere
P_SEA_LEVEL = 101325.0          # Pa
T_SEA_LEVEL_K = 288.15          # K
LAPSE_RATE = 0.0065             # K/m
BAROMETRIC_EXPONENT = 5.2561

KELVIN_OFFSET = 273.15

VISCOSITY = "V"                 # Pa·s
DENSITY = "D"                   # kg/m³


def celsius_to_kelvin(temperature_c: float) -> float:
    return temperature_c + KELVIN_OFFSET


def barometric_pressure(altitude_m: float) -> float:
    """
    Atmospheric pressure at altitude (barometric formula).

    P = 101325 × (1 − 0.0065 × h / 288.15)^5.2561

    Args:
        altitude_m: Altitude above sea level in meters

    Returns:
        Pressure in Pa
    """
    return P_SEA_LEVEL * (1 - LAPSE_RATE * altitude_m / T_SEA_LEVEL_K) ** BAROMETRIC_EXPONENT


class FluidProperties(ABC):
    """
    Base property lookup. Subclasses implement ``props``; viscosity and
    density are convenience accessors on top of it.
    """

    @abstractmethod
    def props(self, prop: str, temperature_c: float, pressure_pa: float, fluid: str) -> float:
        """Property ``prop`` (CoolProp output key) at T [°C] and P [Pa]."""

    def viscosity(self, temperature_c: float, pressure_pa: float = P_SEA_LEVEL,
                  fluid: str = "Water") -> float:
        """Dynamic viscosity in Pa·s."""
        return self.props(VISCOSITY, temperature_c, pressure_pa, fluid)

    def density(self, temperature_c: float, pressure_pa: float = P_SEA_LEVEL,
                fluid: str = "Water") -> float:
        """Density in kg/m³."""
        return self.props(DENSITY, temperature_c, pressure_pa, fluid)


class CoolPropProperties(FluidProperties):
    """Property lookup backed by CoolProp's ``PropsSI``."""

    def props(self, prop: str, temperature_c: float, pressure_pa: float, fluid: str) -> float:
        return float(
            CP.PropsSI(prop, "T", celsius_to_kelvin(temperature_c), "P", pressure_pa, fluid)
        )


def default_properties() -> FluidProperties:
    return CoolPropProperties()
