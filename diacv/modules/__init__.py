"""
DIAC-V Engineering Modules
Curve interpolation, pump normalization and pipe hydraulics.
"""

from .interpolation import cubic_spline_interpolate, inverse_interpolation
from .intersection import find_curve_intersection
from .normalization import HANDBOOK, REFINED
from .pipe_flow import DarcyWeisbachCalculator, fitting_pressure_drop, pipe_pressure_drop

__all__ = [
    "cubic_spline_interpolate",
    "inverse_interpolation",
    "find_curve_intersection",
    "HANDBOOK",
    "REFINED",
    "DarcyWeisbachCalculator",
    "pipe_pressure_drop",
    "fitting_pressure_drop",
]
