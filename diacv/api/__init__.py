"""
DIAC-V API Routers
"""

from .hydraulics import router as hydraulics_router
from .interpolation import router as interpolation_router
from .pumps import router as pumps_router

__all__ = ["hydraulics_router", "interpolation_router", "pumps_router"]
