"""
DIAC-V Hydraulics API
=====================
Darcy-Weisbach pipe and fitting losses.

Endpoints:
- POST /api/hydraulics/pipe             - segment drop (bar)
- POST /api/hydraulics/fitting          - fitting minor loss (bar)
- POST /api/hydraulics/friction-factor  - Darcy f for Re and ε/D
- POST /api/hydraulics/material         - segment drop using a material code
- GET  /api/hydraulics/materials        - material catalog
- POST /api/hydraulics/system           - multi-segment line with fittings
- POST /api/hydraulics/convert-pressure - bar / psi / m_aq / kg_cm2
"""

from functools import lru_cache
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..config import Settings, get_settings
from ..core.logger import get_logger
from ..core.results import PIPE_ERROR_PREFIX
from ..modules.materials import MaterialCatalog, load_catalog, pipe_pressure_drop_with_material
from ..modules.pipe_flow import (
    DarcyWeisbachCalculator,
    Fitting,
    PipeInputError,
    PipeSegment,
    fitting_pressure_drop,
    flow_regime,
    friction_factor,
    pipe_pressure_drop,
)
from ..modules.units import convert_pressure
from .schemas import CalcResponse, calc_response

log = get_logger(__name__)

router = APIRouter(prefix="/api/hydraulics", tags=["Hydraulics"])


@lru_cache(maxsize=4)
def cached_catalog(materials_file: Optional[str]) -> MaterialCatalog:
    return load_catalog(materials_file)


def get_material_catalog(settings: Settings = Depends(get_settings)) -> MaterialCatalog:
    """Material catalog configured by DIACV_MATERIALS_FILE (built-in defaults otherwise)."""
    return cached_catalog(settings.materials_file)


# === Request Models ===

class PipeRequest(BaseModel):
    """Pipe segment input. Validation of physical ranges happens in the calculation."""
    length_horizontal: float = Field(..., description="Horizontal length (m)")
    length_vertical: float = Field(0.0, description="Vertical length (m), + up / - down")
    id_mm: float = Field(..., description="Inner diameter (mm)")
    flow_m3hr: float = Field(..., description="Flow (m³/h)")
    density: float = Field(..., description="Density (kg/m³)")
    viscosity: float = Field(..., description="Dynamic viscosity (Pa·s)")
    roughness: float = Field(..., description="Absolute roughness (m)")


class FittingRequest(BaseModel):
    fitting_type: str = Field(..., description="ELBOW 45, ELBOW 90 or REDUCER")
    size: Union[str, float] = Field(..., description="'80' or '80-50' (mm)")
    flow_m3hr: float
    density: float


class FrictionFactorRequest(BaseModel):
    reynolds: float = Field(..., ge=0)
    relative_roughness: float = Field(0.0, ge=0)


class MaterialPipeRequest(BaseModel):
    length_horizontal: float
    length_vertical: float = 0.0
    id_mm: float
    flow_m3hr: float
    material_code: str


class FittingInput(BaseModel):
    fitting_type: str
    size: Union[str, float]
    count: int = Field(1, ge=1)


class SegmentInput(PipeRequest):
    id: Optional[str] = Field(None, description="Segment name (segment-<n> by position when omitted)")
    fittings: List[FittingInput] = Field(default_factory=list)


class SystemRequest(BaseModel):
    segments: List[SegmentInput] = Field(..., min_length=1)


class PressureConversionRequest(BaseModel):
    value: float
    target_unit: str
    source_unit: str = "bar"


class FrictionFactorResponse(CalcResponse):
    regime: Optional[str] = None


class SystemResponse(BaseModel):
    ok: bool
    error: Optional[str] = None
    total_pressure_drop_bar: Optional[float] = None
    pipe_pressure_drop_bar: Optional[float] = None
    fitting_pressure_drop_bar: Optional[float] = None
    total_length_m: Optional[float] = None
    max_velocity_m_s: Optional[float] = None
    segments: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    fittings: Dict[str, float] = Field(default_factory=dict)
    notes: List[str] = Field(default_factory=list)


# === Endpoints ===

@router.post("/pipe", response_model=CalcResponse)
async def pipe(request: PipeRequest):
    """Pipe segment pressure drop (bar): Darcy-Weisbach friction + static head."""
    value = pipe_pressure_drop(
        request.length_horizontal,
        request.length_vertical,
        request.id_mm,
        request.flow_m3hr,
        request.density,
        request.viscosity,
        request.roughness,
    )
    return calc_response("pipe_pressure_drop", value)


@router.post("/fitting", response_model=CalcResponse)
async def fitting(request: FittingRequest):
    """Fitting minor loss (bar)."""
    value = fitting_pressure_drop(request.fitting_type, request.size, request.flow_m3hr, request.density)
    return calc_response("fitting_pressure_drop", value)


@router.post("/friction-factor", response_model=FrictionFactorResponse)
async def darcy_friction_factor(request: FrictionFactorRequest):
    value = friction_factor(request.reynolds, request.relative_roughness)
    return FrictionFactorResponse(
        function="friction_factor",
        ok=True,
        result=value,
        regime=flow_regime(request.reynolds).value,
    )


@router.post("/material", response_model=CalcResponse)
async def pipe_with_material(
    request: MaterialPipeRequest,
    catalog: MaterialCatalog = Depends(get_material_catalog),
):
    """Pipe pressure drop with density, viscosity and roughness from the catalog."""
    value = pipe_pressure_drop_with_material(
        catalog,
        request.length_horizontal,
        request.length_vertical,
        request.id_mm,
        request.flow_m3hr,
        request.material_code,
    )
    return calc_response("pipe_pressure_drop_with_material", value)


@router.get("/materials")
async def list_materials(catalog: MaterialCatalog = Depends(get_material_catalog)):
    materials = catalog.to_list()
    return {"materials": materials, "total": len(materials)}


@router.post("/system", response_model=SystemResponse)
async def system(request: SystemRequest):
    """
    Pressure drop for a line of segments with their fittings.

    Example:
    ```json
    {"segments": [{"id": "suction", "length_horizontal": 5, "length_vertical": -2,
                   "id_mm": 100, "flow_m3hr": 36, "density": 998, "viscosity": 0.001,
                   "roughness": 4.5e-5, "fittings": [{"fitting_type": "ELBOW 90", "size": "100"}]}]}
    ```
    """
    segments = [
        PipeSegment(
            length_horizontal_m=s.length_horizontal,
            length_vertical_m=s.length_vertical,
            id_mm=s.id_mm,
            flow_m3hr=s.flow_m3hr,
            density=s.density,
            viscosity=s.viscosity,
            roughness_m=s.roughness,
            id=s.id or f"segment-{index}",
            fittings=[Fitting(f.fitting_type, str(f.size), f.count) for f in s.fittings],
        )
        for index, s in enumerate(request.segments, start=1)
    ]

    try:
        result = DarcyWeisbachCalculator().calculate_system(segments)
    except PipeInputError as e:
        log.warning(f"System calculation rejected: {e}")
        return SystemResponse(ok=False, error=f"{PIPE_ERROR_PREFIX}{e}")

    return SystemResponse(
        ok=True,
        total_pressure_drop_bar=result.total_pressure_drop_bar,
        pipe_pressure_drop_bar=result.pipe_pressure_drop_bar,
        fitting_pressure_drop_bar=result.fitting_pressure_drop_bar,
        total_length_m=result.total_length_m,
        max_velocity_m_s=result.max_velocity_m_s,
        segments={
            seg_id: {
                "pressure_drop_bar": r.pressure_drop_bar,
                "velocity_m_s": r.velocity_m_s,
                "reynolds_number": r.reynolds_number,
                "friction_factor": r.friction_factor,
                "regime": r.regime.value,
            }
            for seg_id, r in result.segments.items()
        },
        fittings=result.fittings,
        notes=result.notes,
    )


@router.post("/convert-pressure", response_model=CalcResponse)
async def pressure_conversion(request: PressureConversionRequest):
    value = convert_pressure(request.value, request.target_unit, request.source_unit)
    return calc_response("convert_pressure", value)
