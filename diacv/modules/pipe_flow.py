"""
DIAC-V Pipe Pressure Drop
=========================
Darcy-Weisbach pressure drop for pump suction/discharge lines.

Implements:
- Darcy friction factor: laminar (f = 64/Re) or Colebrook-White
- Major loss + static head for a pipe segment
- Minor loss for fittings (elbows, reducers) from a loss coefficient K
- Multi-segment line totals

Formulas:
    v     = Q / (π D² / 4)
    Re    = ρ v D / μ
    ΔP_f  = f × (L / D) × ½ ρ v²
    ΔP_s  = ρ g Δz
    ΔP_K  = K × ½ ρ v²

The calculator raises PipeInputError for invalid input; the spreadsheet-style
functions at the bottom turn every failure into a "#ERROR: ..." string.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple, Union

from ..core.logger import get_logger
from ..core.results import PIPE_ERROR_PREFIX, returns_error_string

log = get_logger(__name__)

GRAVITY = 9.81                  # m/s²
PA_PER_BAR = 1e5
LAMINAR_LIMIT = 2300.0
TURBULENT_LIMIT = 4000.0
MIN_REYNOLDS = 1e-6
MIN_GEOMETRY = 1e-12


class FlowRegime(Enum):
    """Flow regime by Reynolds number."""
    STAGNANT = "stagnant"
    LAMINAR = "laminar"
    TURBULENT = "turbulent"


class PipeInputError(ValueError):
    """Invalid pipe or fitting input. The message is shown to the user as-is."""


# ==============================================================================
# FRICTION FACTOR
# ==============================================================================

def colebrook_white_friction_factor(
    Re: float,
    rel_roughness: float,
    max_iter: int = 20,
    tol: float = 1e-7,
) -> float:
    """
    Solve the Colebrook-White equation by fixed-point iteration on 1/√f:

        1/√f = −2 log10( ε/D / 3.7 + 2.51 / (Re √f) )

    Returns 0.0 for Re below the laminar limit.
    """
    if Re < LAMINAR_LIMIT:
        return 0.0

    inv_sqrt_f = 4.0  # initial guess => f ~ 0.0625
    for _ in range(max_iter):
        lhs = -2.0 * math.log10((rel_roughness / 3.7) + (2.51 / (Re * inv_sqrt_f)))
        if abs(lhs - inv_sqrt_f) < tol:
            inv_sqrt_f = lhs
            break
        inv_sqrt_f = lhs

    return 1.0 / (inv_sqrt_f ** 2)


def friction_factor(Re: float, rel_roughness: float) -> float:
    """
    Darcy friction factor.

    - Re < 1e-6  → 0 (no flow)
    - Re < 2300  → 64 / Re
    - otherwise  → Colebrook-White
    """
    if Re < MIN_REYNOLDS:
        return 0.0
    if Re < LAMINAR_LIMIT:
        return 64.0 / Re
    return colebrook_white_friction_factor(Re, rel_roughness)


def flow_regime(Re: float) -> FlowRegime:
    if Re < MIN_REYNOLDS:
        return FlowRegime.STAGNANT
    if Re < LAMINAR_LIMIT:
        return FlowRegime.LAMINAR
    return FlowRegime.TURBULENT


# ==============================================================================
# DATA CLASSES
# ==============================================================================

@dataclass
class Fitting:
    """A fitting on a segment, e.g. Fitting("ELBOW 90", "80", count=3)."""
    fitting_type: str
    size: str
    count: int = 1


@dataclass
class PipeSegment:
    """Input data for one straight pipe run."""
    length_horizontal_m: float
    length_vertical_m: float        # + if up, - if down
    id_mm: float
    flow_m3hr: float
    density: float                  # kg/m³
    viscosity: float                # Pa·s
    roughness_m: float              # absolute roughness
    id: str = "segment"
    fittings: List[Fitting] = field(default_factory=list)


@dataclass
class PipeFlowResult:
    """Results for one pipe segment."""
    pressure_drop_bar: float
    friction_drop_pa: float
    static_drop_pa: float
    velocity_m_s: float
    reynolds_number: float
    friction_factor: float
    regime: FlowRegime
    relative_roughness: float
    diameter_m: float
    effective_length_m: float
    notes: List[str] = field(default_factory=list)


@dataclass
class SystemResult:
    """Results for a line of pipe segments."""
    total_pressure_drop_bar: float
    pipe_pressure_drop_bar: float
    fitting_pressure_drop_bar: float
    total_length_m: float
    max_velocity_m_s: float
    segments: Dict[str, PipeFlowResult] = field(default_factory=dict)
    fittings: Dict[str, float] = field(default_factory=dict)
    notes: List[str] = field(default_factory=list)


# ==============================================================================
# CALCULATOR
# ==============================================================================

class DarcyWeisbachCalculator:
    """
    Pipe and fitting pressure drop calculator.

    Loss coefficients:
    - ELBOW 45 → K = 0.4
    - ELBOW 90 → K = 0.9
    - other elbows → K = 0
    - REDUCER "d1-d2" → K = 0.5 × |1 − (d2/d1)²|, velocity at the smaller bore
    - unknown fitting → no loss
    """

    ELBOW_K: Dict[str, float] = {
        "elbow 45": 0.4,
        "elbow 90": 0.9,
    }

    @staticmethod
    def area(diameter_m: float) -> float:
        return math.pi * (diameter_m ** 2) / 4.0

    @staticmethod
    def validate(segment: PipeSegment) -> None:
        if segment.flow_m3hr <= 0:
            raise PipeInputError("Flow must be > 0")
        if segment.id_mm <= 0:
            raise PipeInputError("ID must be > 0")
        if segment.density <= 0:
            raise PipeInputError("Density must be > 0")
        if segment.viscosity < 0:
            raise PipeInputError("Viscosity can't be negative")
        if segment.roughness_m < 0:
            raise PipeInputError("Roughness can't be negative")

    def calculate(self, segment: PipeSegment) -> PipeFlowResult:
        """
        Major loss + static head for one segment.

        The friction length is |L_h| + |L_v|; the static term uses the signed
        vertical length.

        Raises:
            PipeInputError: on invalid input
        """
        self.validate(segment)
        notes = []

        flow_m3s = segment.flow_m3hr / 3600.0
        diameter_m = segment.id_mm / 1000.0
        length = abs(segment.length_horizontal_m) + abs(segment.length_vertical_m)

        area = self.area(diameter_m)
        if area < MIN_GEOMETRY:
            raise PipeInputError("Cross-sectional area too small")

        velocity = flow_m3s / area
        rho = segment.density

        # Zero viscosity => no friction, static head only
        if segment.viscosity < MIN_GEOMETRY:
            Re = 0.0
            notes.append("Viscosity ~0: friction ignored, static head only")
        else:
            Re = rho * velocity * diameter_m / segment.viscosity

        rel_roughness = segment.roughness_m / diameter_m if diameter_m > MIN_GEOMETRY else 0.0
        f = friction_factor(Re, rel_roughness)
        regime = flow_regime(Re)

        if LAMINAR_LIMIT <= Re < TURBULENT_LIMIT:
            notes.append(f"Transitional flow (Re={Re:.0f}): Colebrook-White value is approximate")

        dp_friction = f * (length / diameter_m) * 0.5 * rho * (velocity ** 2)
        dp_static = rho * GRAVITY * segment.length_vertical_m

        return PipeFlowResult(
            pressure_drop_bar=(dp_friction + dp_static) / PA_PER_BAR,
            friction_drop_pa=dp_friction,
            static_drop_pa=dp_static,
            velocity_m_s=velocity,
            reynolds_number=Re,
            friction_factor=f,
            regime=regime,
            relative_roughness=rel_roughness,
            diameter_m=diameter_m,
            effective_length_m=length,
            notes=notes,
        )

    @classmethod
    def fitting_coefficient(cls, fitting_type: str, size: str) -> Tuple[float, float]:
        """
        Loss coefficient and velocity diameter for a fitting.

        Returns:
            Tuple of (K, diameter_m). diameter_m is 0 for unknown fittings.
        """
        ft = (fitting_type or "").strip().lower()

        if ft.startswith("elbow"):
            try:
                nominal_mm = float(size)
            except (TypeError, ValueError):
                raise PipeInputError("Elbow size not numeric")

            diameter_m = nominal_mm / 1000.0
            if diameter_m < MIN_GEOMETRY:
                raise PipeInputError("Invalid elbow diameter")
            return cls.ELBOW_K.get(ft, 0.0), diameter_m

        if ft == "reducer":
            matches = re.findall(r"\d+", str(size))
            if len(matches) != 2:
                raise PipeInputError("Invalid reducer size format, need '80-50'")

            d_in_mm = float(matches[0])
            d_out_mm = float(matches[1])
            diameter_m = min(d_in_mm, d_out_mm) / 1000.0
            if diameter_m < MIN_GEOMETRY:
                raise PipeInputError("Invalid reducer diameter")

            ratio_sq = (d_out_mm / d_in_mm) ** 2
            return 0.5 * abs(1.0 - ratio_sq), diameter_m

        log.debug(f"Unknown fitting type '{fitting_type}', treated as no loss")
        return 0.0, 0.0

    def fitting_loss(self, fitting_type: str, size: str, flow_m3hr: float, density: float) -> float:
        """
        Minor loss of one fitting in bar (pipe friction and viscosity ignored).

        Raises:
            PipeInputError: on invalid input
        """
        if flow_m3hr <= 0:
            raise PipeInputError("Flow must be > 0")
        if density <= 0:
            raise PipeInputError("Density must be > 0")

        K, diameter_m = self.fitting_coefficient(fitting_type, size)
        if diameter_m < MIN_GEOMETRY:
            return 0.0

        area = self.area(diameter_m)
        if area < MIN_GEOMETRY:
            raise PipeInputError("Fitting area too small")

        velocity = (flow_m3hr / 3600.0) / area
        return K * 0.5 * density * (velocity ** 2) / PA_PER_BAR

    def calculate_system(self, segments: List[PipeSegment]) -> SystemResult:
        """
        Pressure drop for an entire line: every segment's major loss and
        static head plus the minor losses of the fittings on it.

        Raises:
            PipeInputError: if no segment is given or an input is invalid
        """
        if not segments:
            raise PipeInputError("At least one pipe segment required")
        ids = [segment.id for segment in segments]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise PipeInputError(f"Duplicate segment id '{duplicates[0]}'")

        segment_results: Dict[str, PipeFlowResult] = {}
        fitting_losses: Dict[str, float] = {}
        pipe_total = 0.0
        fitting_total = 0.0
        total_length = 0.0
        notes = []

        for segment in segments:
            result = self.calculate(segment)
            segment_results[segment.id] = result
            pipe_total += result.pressure_drop_bar
            total_length += result.effective_length_m

            for fitting in segment.fittings:
                loss = fitting.count * self.fitting_loss(
                    fitting.fitting_type, fitting.size, segment.flow_m3hr, segment.density
                )
                key = f"{segment.id}:{fitting.fitting_type} {fitting.size}"
                fitting_losses[key] = fitting_losses.get(key, 0.0) + loss
                fitting_total += loss

            for note in result.notes:
                notes.append(f"[{segment.id}] {note}")

        return SystemResult(
            total_pressure_drop_bar=pipe_total + fitting_total,
            pipe_pressure_drop_bar=pipe_total,
            fitting_pressure_drop_bar=fitting_total,
            total_length_m=total_length,
            max_velocity_m_s=max(r.velocity_m_s for r in segment_results.values()),
            segments=segment_results,
            fittings=fitting_losses,
            notes=notes,
        )


_calculator = DarcyWeisbachCalculator()


# ==============================================================================
# SPREADSHEET-STYLE FUNCTIONS
# ==============================================================================

@returns_error_string(PIPE_ERROR_PREFIX)
def pipe_pressure_drop(
    length_horizontal,      # [m]
    length_vertical,        # [m] (+ if up, - if down)
    id_mm,                  # [mm] pipe inner diameter
    flow_m3hr,              # [m³/h]
    density,                # [kg/m³]
    viscosity,              # [Pa·s]
    roughness,              # [m] absolute pipe roughness
) -> Union[float, str]:
    """
    Pipe segment pressure drop in bar: major friction + static head.
    No minor losses; use fitting_pressure_drop for those.

    Returns "#ERROR: <message>" for invalid input.
    """
    try:
        segment = PipeSegment(
            length_horizontal_m=float(length_horizontal),
            length_vertical_m=float(length_vertical),
            id_mm=float(id_mm),
            flow_m3hr=float(flow_m3hr),
            density=float(density),
            viscosity=float(viscosity),
            roughness_m=float(roughness),
        )
    except (TypeError, ValueError):
        return f"{PIPE_ERROR_PREFIX}Non-numeric input"

    try:
        return _calculator.calculate(segment).pressure_drop_bar
    except PipeInputError as e:
        return f"{PIPE_ERROR_PREFIX}{e}"


@returns_error_string(PIPE_ERROR_PREFIX)
def fitting_pressure_drop(
    fitting_type: str,      # "ELBOW 45", "ELBOW 90", "REDUCER"
    size_str,               # "80" or "80-50"
    flow_m3hr,              # [m³/h]
    density,                # [kg/m³]
) -> Union[float, str]:
    """Fitting pressure drop in bar, velocity based on the nominal fitting bore."""
    try:
        flow_val = float(flow_m3hr)
        rho_val = float(density)
    except (TypeError, ValueError):
        return f"{PIPE_ERROR_PREFIX}Non-numeric flow or density"

    try:
        return _calculator.fitting_loss(fitting_type, size_str, flow_val, rho_val)
    except PipeInputError as e:
        return f"{PIPE_ERROR_PREFIX}{e}"

