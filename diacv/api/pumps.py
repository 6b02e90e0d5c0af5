"""
DIAC-V Pumps API
================
Duty point normalization and pump report chart.

Endpoints:
- POST /api/pumps/normalize        - flow or head to the vendor water curve
- POST /api/pumps/operating-point  - Q-H curve ∩ duty parabola
- POST /api/pumps/chart-data       - series for the report chart
- POST /api/pumps/chart.png        - rendered chart
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel, Field

from ..config import Settings, get_settings
from ..core.results import is_error
from ..modules import normalization as norm
from ..modules.fluid_properties import FluidProperties, default_properties
from ..modules.pump_chart import (
    PumpChartInput,
    build_chart_data,
    clean_points,
    operating_point,
    render_pump_chart,
)
from .schemas import CalcResponse, calc_response

router = APIRouter(prefix="/api/pumps", tags=["Pumps"])


def get_fluid_properties() -> FluidProperties:
    """Property lookup used by normalization (CoolProp)."""
    return default_properties()


class NormalizationStrategy(str, Enum):
    """Normalization families; each carries its own correction slopes."""
    SCALED = "scaled"        # handbook slopes, optional user viscosity, unrounded
    HANDBOOK = "handbook"    # handbook slopes, rounded to 0.01
    REFINED = "refined"      # refined slopes, water reference


class Quantity(str, Enum):
    FLOW = "flow"
    HEAD = "head"


class NormalizeRequest(BaseModel):
    """Duty value and operating conditions."""
    strategy: NormalizationStrategy = NormalizationStrategy.REFINED
    quantity: Quantity
    value: float = Field(..., description="Flow (m³/h) or head (m)")
    T1: float = Field(..., description="Operating temperature (°C)")
    altitude: Optional[float] = Field(None, description="Site altitude (m)")
    TSS: Optional[float] = Field(None, description="Suspended solids (mg/L)")
    D0: Optional[float] = Field(None, description="Base density at T1 (kg/m³)")
    mu: Optional[float] = Field(None, description="Fluid viscosity (Pa·s); at T0 for 'scaled'")
    T0: Optional[float] = Field(None, description="Vendor reference temperature (°C)")
    fluid: Optional[str] = Field(None, description="CoolProp fluid name")


class ChartRequest(BaseModel):
    """Two-column curves as [[q, y], ...]; null cells are skipped."""
    q0: float
    h0: float
    qh: List[List[Optional[float]]] = Field(..., min_length=1)
    eta: List[List[Optional[float]]] = Field(default_factory=list)
    npsh: List[List[Optional[float]]] = Field(default_factory=list)
    q_min: float = 0.0
    density: float = Field(1000.0, gt=0)
    eta_pump: Optional[float] = Field(None, gt=0, le=1)
    motor_eff: float = Field(1.0, gt=0, le=1)

    def to_input(self) -> PumpChartInput:
        return PumpChartInput(
            q0=self.q0,
            h0=self.h0,
            qh=clean_points(self.qh),
            eta=clean_points(self.eta),
            npsh=clean_points(self.npsh),
            q_min=self.q_min,
            density=self.density,
            eta_pump=self.eta_pump,
            motor_eff=self.motor_eff,
        )


class OperatingPointRequest(BaseModel):
    q0: float = Field(..., gt=0)
    h0: float
    qh: List[List[Optional[float]]] = Field(..., min_length=2)


def _normalize(request: NormalizeRequest, settings: Settings, props: FluidProperties):
    fluid = request.fluid or settings.default_fluid
    t0 = settings.reference_temp_c if request.T0 is None else request.T0
    tss = request.TSS or 0.0
    altitude = request.altitude or 0.0
    head = request.quantity == Quantity.HEAD

    if request.strategy == NormalizationStrategy.SCALED:
        func = norm.normalize_head_scaled if head else norm.normalize_flow_scaled
        return func(request.value, request.T1, tss, request.D0, altitude,
                    fluid=fluid, T0=t0, mu_init=request.mu, properties=props)

    if request.strategy == NormalizationStrategy.HANDBOOK:
        func = norm.normalize_head_handbook if head else norm.normalize_flow_handbook
        return func(request.value, request.T1, tss, request.D0, altitude,
                    fluid=fluid, T0=t0, properties=props)

    func = norm.normalize_head_refined if head else norm.normalize_flow_refined
    return func(request.value, request.T1, altitude=request.altitude, TSS=request.TSS,
                D0=request.D0, mu=request.mu, T0=t0, properties=props)


@router.post("/normalize", response_model=CalcResponse)
async def normalize(
    request: NormalizeRequest,
    settings: Settings = Depends(get_settings),
    props: FluidProperties = Depends(get_fluid_properties),
):
    """
    Normalize a measured duty value to the vendor's water curve at T0.

    The 'handbook' strategy (flow and head) and the 'scaled' head strategy need D0.
    """
    value = _normalize(request, settings, props)
    return calc_response(f"normalize_{request.quantity.value}_{request.strategy.value}", value)


@router.post("/operating-point", response_model=CalcResponse)
async def pump_operating_point(request: OperatingPointRequest, settings: Settings = Depends(get_settings)):
    """Intersection of the pump Q-H curve and the duty parabola, as [q, h]."""
    point = operating_point(clean_points(request.qh), request.q0, request.h0,
                            samples=settings.intersection_samples)
    if is_error(point):
        return calc_response("operating_point", point)
    return calc_response("operating_point", list(point))


@router.post("/chart-data")
async def chart_data(request: ChartRequest, settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    """Thin/thick series, duty parabola, duty points, power and axis range."""
    chart = request.to_input()
    data = build_chart_data(chart)
    point = operating_point(chart.qh, chart.q0, chart.h0, samples=settings.intersection_samples)
    data["operating_point"] = None if is_error(point) else list(point)
    return data


@router.post("/chart.png")
async def chart_png(request: ChartRequest):
    """Rendered pump chart (PNG)."""
    png = render_pump_chart(request.to_input())
    return Response(content=png, media_type="image/png")
