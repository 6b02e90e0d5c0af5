"""
DIAC-V Interpolation API
========================
Curve lookups on sampled pump curves.

Endpoints:
- POST /api/interpolation/forward     - cubic spline, extrapolates
- POST /api/interpolation/monotonic   - PCHIP, extrapolates
- POST /api/interpolation/inside      - PCHIP, "DATA OUT OF RANGE" outside
- POST /api/interpolation/clamped     - PCHIP, clamps to the boundary
- POST /api/interpolation/inverse     - all X for a Y (peak split)
- POST /api/interpolation/lagrange    - inverse Lagrange polynomial
- POST /api/interpolation/x-for-y     - cubic spline of X over Y
- POST /api/interpolation/reverse     - single X for a Y (peak + tail aware)
- POST /api/interpolation/ymax        - smooth curve maximum
- POST /api/interpolation/x-at-ymax   - X at the smooth maximum
- POST /api/interpolation/intersection - first crossing of two curves
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..config import Settings, get_settings
from ..modules import interpolation as interp
from ..modules.intersection import find_curve_intersection
from .schemas import CalcResponse, calc_response

router = APIRouter(prefix="/api/interpolation", tags=["Interpolation"])


class CurveSamples(BaseModel):
    """Paired samples; null entries are blank cells."""
    x_values: List[Optional[float]] = Field(..., min_length=1)
    y_values: List[Optional[float]] = Field(..., min_length=1)


class CurveQuery(CurveSamples):
    query: float = Field(..., description="X for forward lookups, Y for inverse lookups")


class ReverseQuery(CurveQuery):
    tolerance: float = Field(default=1e-6, ge=0, description="Near-duplicate Y tolerance")


class IntersectionRequest(BaseModel):
    x1: List[float]
    y1: List[float]
    x2: List[float]
    y2: List[float]
    samples: Optional[int] = Field(default=None, ge=10, le=100000)


@router.post("/forward", response_model=CalcResponse)
async def forward(request: CurveQuery):
    """Cubic spline Y at X (extrapolates)."""
    value = interp.cubic_spline_interpolate(request.x_values, request.y_values, request.query)
    return calc_response("cubic_spline_interpolate", value)


@router.post("/monotonic", response_model=CalcResponse)
async def monotonic(request: CurveQuery):
    value = interp.monotonic_spline_interpolate(request.x_values, request.y_values, request.query)
    return calc_response("monotonic_spline_interpolate", value)


@router.post("/inside", response_model=CalcResponse)
async def inside(request: CurveQuery):
    value = interp.cubic_spline_interpolate_inside(request.x_values, request.y_values, request.query)
    return calc_response("cubic_spline_interpolate_inside", value)


@router.post("/clamped", response_model=CalcResponse)
async def clamped(request: CurveQuery):
    value = interp.monotonic_spline_clamped(request.x_values, request.y_values, request.query)
    return calc_response("monotonic_spline_clamped", value)


@router.post("/inverse", response_model=CalcResponse)
async def inverse(request: CurveQuery):
    """All X roots for a Y on a single-peaked curve."""
    value = interp.inverse_interpolation(request.x_values, request.y_values, request.query)
    return calc_response("inverse_interpolation", value)


@router.post("/lagrange", response_model=CalcResponse)
async def lagrange(request: CurveQuery):
    value = interp.inverse_lagrange_interpolation(request.x_values, request.y_values, request.query)
    return calc_response("inverse_lagrange_interpolation", value)


@router.post("/x-for-y", response_model=CalcResponse)
async def x_for_y(request: CurveQuery):
    value = interp.interpolate_x_for_y(request.x_values, request.y_values, request.query)
    return calc_response("interpolate_x_for_y", value)


@router.post("/reverse", response_model=CalcResponse)
async def reverse(request: ReverseQuery):
    value = interp.cubic_spline_reverse_interpolate(
        request.x_values, request.y_values, request.query, request.tolerance
    )
    return calc_response("cubic_spline_reverse_interpolate", value)


@router.post("/ymax", response_model=CalcResponse)
async def ymax(request: CurveSamples):
    value = interp.find_ymax_smooth(request.x_values, request.y_values)
    return calc_response("find_ymax_smooth", value)


@router.post("/x-at-ymax", response_model=CalcResponse)
async def x_at_ymax(request: CurveSamples):
    value = interp.find_x_at_ymax_smooth(request.x_values, request.y_values)
    return calc_response("find_x_at_ymax_smooth", value)


@router.post("/intersection", response_model=CalcResponse)
async def intersection(request: IntersectionRequest, settings: Settings = Depends(get_settings)):
    """
    First intersection (smallest X) of two curves.

    Result is [[x0, y0]].
    """
    samples = request.samples or settings.intersection_samples
    value = find_curve_intersection(request.x1, request.y1, request.x2, request.y2, samples=samples)
    return calc_response("find_curve_intersection", value)
