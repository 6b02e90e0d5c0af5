#!/usr/bin/env python3
"""
DIAC-V Backend API
FastAPI server for the DIAC-V pump engineering calculations

Features:
- Curve interpolation and intersection on sampled pump curves
- Pump duty normalization (temperature, altitude, solids, viscosity)
- Darcy-Weisbach pipe and fitting pressure drop
- Pump report chart data and PNG rendering
"""

from datetime import datetime
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .api import hydraulics_router, interpolation_router, pumps_router
from .api.hydraulics import cached_catalog
from .config import get_settings
from .core.logger import get_logger, setup_logger
from .modules.fluid_properties import default_properties

settings = get_settings()
setup_logger(
    level=settings.log_level,
    file=settings.log_to_file,
    log_dir=settings.log_dir,
)
log = get_logger("diacv.main")

app = FastAPI(
    title="DIAC-V API",
    description="Pump engineering calculations: curve lookups, duty normalization and pipe losses",
    version=settings.app_version,
)

app.include_router(interpolation_router)
app.include_router(hydraulics_router)
app.include_router(pumps_router)

# CORS middleware for frontend connection
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    log.info(f"{settings.app_name} v{settings.app_version} starting")
    log.info(f"Default fluid: {settings.default_fluid}, reference temperature: {settings.reference_temp_c} °C")
    if settings.materials_file:
        log.info(f"Material catalog: {settings.materials_file}")


# === Response Models ===
class SystemStatus(BaseModel):
    system: str
    status: str
    version: str
    timestamp: str
    uptime_seconds: Optional[int] = None


# === Startup time tracking ===
startup_time = datetime.now()


@app.get("/api/status", response_model=SystemStatus)
async def get_status():
    """Get system status."""
    uptime = (datetime.now() - startup_time).seconds
    return SystemStatus(
        system="DIAC-V",
        status="LIVE",
        version=settings.app_version,
        timestamp=datetime.now().isoformat(),
        uptime_seconds=uptime,
    )


@app.get("/api/health")
async def health_check():
    """
    Health check endpoint.
    Checks the property backend and the material catalog.
    """
    try:
        density = default_properties().density(20.0)
        properties_ok = density > 0
        properties_message = "OK"
    except Exception as e:
        log.warning(f"Property backend check failed: {e}")
        properties_ok = False
        properties_message = str(e)

    try:
        materials = len(cached_catalog(settings.materials_file))
        materials_ok = materials > 0
        materials_message = "OK" if materials_ok else "Empty material list"
    except Exception as e:
        log.warning(f"Material catalog check failed: {e}")
        materials, materials_ok, materials_message = 0, False, str(e)

    all_ok = properties_ok and materials_ok

    return {
        "status": "healthy" if all_ok else "degraded",
        "checks": {
            "properties": {
                "ok": properties_ok,
                "backend": "CoolProp",
                "message": properties_message,
            },
            "materials": {
                "ok": materials_ok,
                "count": materials,
                "message": materials_message,
            },
        },
        "uptime_seconds": (datetime.now() - startup_time).seconds,
    }


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "message": "Welcome to DIAC-V API",
        "docs": "/docs",
        "status_endpoint": "/api/status",
    }


if __name__ == "__main__":
    log.info(f"API Docs: http://{settings.host}:{settings.port}/docs")
    uvicorn.run(app, host=settings.host, port=settings.port)
