"""
DIAC-V Pump Normalization
=========================
Scale a measured duty point (flow, head) on the real fluid to the matching
point on the vendor's water curve at the reference temperature T0.

Two empirical viscosity corrections are in use and are NOT interchangeable:

- HANDBOOK: K_H = 1 + 0.15 × (μ/μ_ref − 1), K_Q = 1 + 0.10 × (μ/μ_ref − 1)
- REFINED:  K_H = 1 + 0.05 × (μ/μ_ref − 1), K_Q = 1 + 0.03 × (μ/μ_ref − 1)

Each normalization family below is tied to one of them, and existing vendor
charts were selected with those exact numbers.

Head additionally scales with the density ratio:
    H_norm = H × (ρ_actual / ρ_ref) × K_H
where ρ_actual = D0 + TSS/1000 (TSS in mg/L).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.results import returns_error_string
from .fluid_properties import (
    P_SEA_LEVEL,
    FluidProperties,
    barometric_pressure,
    default_properties,
)

WATER = "Water"
DEFAULT_REFERENCE_TEMP_C = 20.0
DEFAULT_MU_REF = 0.001          # Pa·s, water at ~20 °C


@dataclass(frozen=True)
class ViscosityCorrection:
    """Linear viscosity correction K = 1 + slope × (μ/μ_ref − 1)."""
    name: str
    head_slope: float
    flow_slope: float

    def factors(self, mu: float, mu_ref: float = DEFAULT_MU_REF) -> Tuple[float, float]:
        """
        Returns:
            Tuple of (K_H, K_Q). Both exceed 1 when μ > μ_ref.
        """
        ratio = mu / mu_ref
        k_h = 1.0 + self.head_slope * (ratio - 1.0)
        k_q = 1.0 + self.flow_slope * (ratio - 1.0)
        return k_h, k_q


HANDBOOK = ViscosityCorrection("handbook", head_slope=0.15, flow_slope=0.10)
REFINED = ViscosityCorrection("refined", head_slope=0.05, flow_slope=0.03)


def handbook_viscosity_factors(mu: float, mu_ref: float = DEFAULT_MU_REF) -> Tuple[float, float]:
    return HANDBOOK.factors(mu, mu_ref)


def refined_viscosity_factors(mu_actual: float, mu_ref: float) -> Tuple[float, float]:
    """
    Smaller slopes to avoid over-correcting 1–5 cP fluids.

    Example: μ_ref = 1 cP, μ = 3 cP → K_H = 1.10, K_Q = 1.06.
    """
    return REFINED.factors(mu_actual, mu_ref)


def _tss_density(d0: float, tss: float) -> float:
    # TSS in mg/L -> kg/m³ added to the carrier density
    return float(d0) + float(tss) / 1000.0


# ==============================================================================
# SCALED VISCOSITY (optional user viscosity at T0, HANDBOOK slopes, unrounded)
# ==============================================================================

def _scaled_viscosities(
    props: FluidProperties,
    t1: float,
    t0: float,
    altitude: float,
    fluid: str,
    mu_init: Optional[float],
) -> Tuple[float, float]:
    p_atm = barometric_pressure(float(altitude))
    fluid_mu_t1 = props.viscosity(float(t1), p_atm, fluid)
    fluid_mu_t0 = props.viscosity(float(t0), P_SEA_LEVEL, fluid)

    if mu_init is None:
        return fluid_mu_t1, fluid_mu_t0

    # The user's fluid follows the base fluid's temperature trend
    mu_init = float(mu_init)
    return fluid_mu_t1 * (mu_init / fluid_mu_t0), mu_init


@returns_error_string()
def normalize_flow_scaled(
    Q: float,
    T1: float,
    TSS: float,
    D0: float,
    altitude: float,
    fluid: str = WATER,
    T0: float = DEFAULT_REFERENCE_TEMP_C,
    mu_init: Optional[float] = None,
    properties: Optional[FluidProperties] = None,
) -> float:
    """
    Normalized flow Q × K_Q on the vendor's water curve.

    Args:
        Q: actual flow (m³/h)
        T1: operating temperature (°C)
        TSS: suspended solids (mg/L), not used for flow
        D0: base density at T1 (kg/m³), not used for flow
        altitude: site altitude (m), sets the operating pressure
        fluid: CoolProp fluid name
        T0: vendor reference temperature (°C)
        mu_init: user's fluid viscosity at T0 (Pa·s); None means the base fluid
        properties: property lookup (CoolProp when omitted)
    """
    props = properties or default_properties()
    mu_t1, mu_ref = _scaled_viscosities(props, T1, T0, altitude, fluid, mu_init)
    _, k_q = HANDBOOK.factors(mu_t1, mu_ref)
    return float(Q) * k_q


@returns_error_string()
def normalize_head_scaled(
    H: float,
    T1: float,
    TSS: float,
    D0: float,
    altitude: float,
    fluid: str = WATER,
    T0: float = DEFAULT_REFERENCE_TEMP_C,
    mu_init: Optional[float] = None,
    properties: Optional[FluidProperties] = None,
) -> float:
    """
    Normalized head H × (D1 / ρ_ref(T0)) × K_H with D1 = D0 + TSS/1000.

    Arguments as for normalize_flow_scaled.
    """
    props = properties or default_properties()
    mu_t1, mu_ref = _scaled_viscosities(props, T1, T0, altitude, fluid, mu_init)

    d1 = _tss_density(D0, TSS)
    d_ref = props.density(float(T0), P_SEA_LEVEL, fluid)

    k_h, _ = HANDBOOK.factors(mu_t1, mu_ref)
    return float(H) * (d1 / d_ref) * k_h


# ==============================================================================
# HANDBOOK (base fluid only, HANDBOOK slopes, rounded to 0.01)
# ==============================================================================

@returns_error_string()
def normalize_flow_handbook(
    Q: float,
    T1: float,
    TSS: float,
    D0: float,
    altitude: float,
    fluid: str = WATER,
    T0: float = DEFAULT_REFERENCE_TEMP_C,
    properties: Optional[FluidProperties] = None,
) -> float:
    """
    Normalized flow, rounded to 2 decimals.

    The solids-laden density is evaluated but does not enter the flow
    correction; a blank D0 is still an error.
    """
    props = properties or default_properties()
    _tss_density(D0, TSS)
    p_atm = barometric_pressure(float(altitude))

    mu_t1 = props.viscosity(float(T1), p_atm, fluid)
    mu_t0 = props.viscosity(float(T0), P_SEA_LEVEL, fluid)

    _, k_q = HANDBOOK.factors(mu_t1, mu_t0)
    return round(float(Q) * k_q, 2)


@returns_error_string()
def normalize_head_handbook(
    H: float,
    T1: float,
    TSS: float,
    D0: float,
    altitude: float,
    fluid: str = WATER,
    T0: float = DEFAULT_REFERENCE_TEMP_C,
    properties: Optional[FluidProperties] = None,
) -> float:
    """
    Normalized head, rounded to 2 decimals.

    Heavier or more viscous fluid gives a bigger head on the water curve.
    The vendor reference (μ and ρ at T0) is taken at sea level.
    """
    props = properties or default_properties()
    p_atm = barometric_pressure(float(altitude))

    mu_t1 = props.viscosity(float(T1), p_atm, fluid)
    mu_t0 = props.viscosity(float(T0), P_SEA_LEVEL, fluid)

    d1 = _tss_density(D0, TSS)
    d_ref = props.density(float(T0), P_SEA_LEVEL, fluid)

    k_h, _ = HANDBOOK.factors(mu_t1, mu_t0)
    return round(float(H) * (d1 / d_ref) * k_h, 2)


# ==============================================================================
# REFINED (water reference, REFINED slopes, blank inputs fall back to water)
# ==============================================================================

def _or_default(value, default):
    return default if value is None else float(value)


@returns_error_string()
def normalize_flow_refined(
    Q: float,
    T1: float,
    altitude: Optional[float] = None,
    TSS: Optional[float] = None,
    D0: Optional[float] = None,
    mu: Optional[float] = None,
    T0: Optional[float] = None,
    properties: Optional[FluidProperties] = None,
) -> float:
    """
    Normalized flow Q × K_Q against water at T0.

    Steps:
    1) altitude → local pressure P_alt (blank altitude = 0 m)
    2) μ_T1 = mu, or water at (T1, P_alt) when blank
    3) μ_ref = water at (T0, sea level), blank T0 = 20 °C
    4) K_Q from the REFINED correction

    TSS and D0 are accepted for a uniform signature but do not affect flow.
    """
    props = properties or default_properties()
    p_alt = barometric_pressure(_or_default(altitude, 0.0))
    t0 = _or_default(T0, DEFAULT_REFERENCE_TEMP_C)

    if mu is None:
        mu_t1 = props.viscosity(float(T1), p_alt, WATER)
    else:
        mu_t1 = float(mu)

    mu_ref = props.viscosity(t0, P_SEA_LEVEL, WATER)

    _, k_q = REFINED.factors(mu_t1, mu_ref)
    return float(Q) * k_q


@returns_error_string()
def normalize_head_refined(
    H: float,
    T1: float,
    altitude: Optional[float] = None,
    TSS: Optional[float] = None,
    D0: Optional[float] = None,
    mu: Optional[float] = None,
    T0: Optional[float] = None,
    properties: Optional[FluidProperties] = None,
) -> float:
    """
    Normalized head H × (D1 / ρ_ref) × K_H against water at T0.

    Blank D0 falls back to water density at (T1, P_alt); D1 = D0 + TSS/1000.
    """
    props = properties or default_properties()
    p_alt = barometric_pressure(_or_default(altitude, 0.0))
    t0 = _or_default(T0, DEFAULT_REFERENCE_TEMP_C)
    t1 = float(T1)

    mu_t1 = props.viscosity(t1, p_alt, WATER) if mu is None else float(mu)
    d0_t1 = props.density(t1, p_alt, WATER) if D0 is None else float(D0)
    d1 = _tss_density(d0_t1, _or_default(TSS, 0.0))

    mu_ref = props.viscosity(t0, P_SEA_LEVEL, WATER)
    d_ref = props.density(t0, P_SEA_LEVEL, WATER)

    k_h, _ = REFINED.factors(mu_t1, mu_ref)
    return float(H) * (d1 / d_ref) * k_h
