"""
DIAC-V Curve Interpolation
==========================
Forward and inverse lookups on sampled pump curves (Q-H, Q-eta, Q-NPSH).

Implements:
- Cubic spline evaluation (extrapolating)
- PCHIP shape-preserving evaluation (extrapolating, rejecting, clamping)
- Inverse lookups Y -> X on single-peaked curves
- Smooth maximum of a sampled curve

Out-of-domain behavior differs between functions and is part of each
function's contract: some extrapolate, one rejects with "DATA OUT OF RANGE",
one clamps to the boundary sample.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Tuple, Union

import numpy as np
from scipy.interpolate import CubicSpline, InterpolatedUnivariateSpline, PchipInterpolator
from scipy.optimize import minimize_scalar

from ..core.logger import get_logger
from ..core.results import (
    DATA_OUT_OF_RANGE,
    ERROR_PREFIX,
    NO_SOLUTION,
    returns_error_string,
)

log = get_logger(__name__)

Samples = Union[Iterable[Any], np.ndarray]


def flatten_samples(values: Samples) -> List[Any]:
    """Flatten a column/row range (nested lists) into a flat list."""
    if values is None:
        return []
    if np.isscalar(values):
        return [values]
    flat: List[Any] = []
    for item in values:
        if isinstance(item, (list, tuple, np.ndarray)):
            flat.extend(flatten_samples(item))
        else:
            flat.append(item)
    return flat


def clean_samples(values: Samples) -> np.ndarray:
    """Float array of the non-blank cells of a range."""
    return np.array([float(v) for v in flatten_samples(values) if v is not None], dtype=float)


def sorted_samples(x_values: Samples, y_values: Samples) -> Tuple[np.ndarray, np.ndarray]:
    """Clean both ranges and sort the pairs by ascending X."""
    x_arr = clean_samples(x_values)
    y_arr = clean_samples(y_values)
    if len(x_arr) != len(y_arr):
        raise ValueError("X and Y arrays must have the same length")
    if len(x_arr) == 0:
        raise ValueError("No numeric samples")

    order = np.argsort(x_arr, kind="stable")
    return x_arr[order], y_arr[order]


# ==============================================================================
# FORWARD LOOKUPS (X -> Y)
# ==============================================================================

@returns_error_string()
def cubic_spline_interpolate(x_values: Samples, y_values: Samples, query_x: float) -> float:
    """
    Cubic spline interpolation of Y at ``query_x``.

    Queries outside the sampled X range are extrapolated by the spline.
    """
    x_arr, y_arr = sorted_samples(x_values, y_values)
    spline = CubicSpline(x_arr, y_arr)
    return float(spline(float(query_x)))


@returns_error_string()
def monotonic_spline_interpolate(x_values: Samples, y_values: Samples, query_x: float) -> float:
    """
    Shape-preserving (PCHIP) interpolation of Y at ``query_x``.

    If the data is descending in Y the interpolant never turns up between
    samples. Queries outside the domain are extrapolated.
    """
    x_arr, y_arr = sorted_samples(x_values, y_values)
    pchip = PchipInterpolator(x_arr, y_arr)
    return float(pchip(float(query_x)))


@returns_error_string()
def cubic_spline_interpolate_inside(
    x_values: Samples, y_values: Samples, query_x: float
) -> Union[float, str]:
    """
    PCHIP interpolation restricted to the sampled X range.

    Returns:
        Interpolated Y, or "DATA OUT OF RANGE" if query_x lies outside the samples.
    """
    x_arr, y_arr = sorted_samples(x_values, y_values)
    qx = float(query_x)

    if qx < x_arr[0] or qx > x_arr[-1]:
        return DATA_OUT_OF_RANGE

    spline = PchipInterpolator(x_arr, y_arr)
    return float(spline(qx))


@returns_error_string()
def monotonic_spline_clamped(x_values: Samples, y_values: Samples, query_x: float) -> float:
    """
    PCHIP interpolation with the query clamped into the sampled domain, so
    an out-of-range query returns the boundary sample's Y.
    """
    x_arr, y_arr = sorted_samples(x_values, y_values)

    if np.any(np.diff(y_arr) > 0):
        log.debug("monotonic_spline_clamped: Y is not strictly decreasing")

    pchip = PchipInterpolator(x_arr, y_arr)
    qx = min(max(float(query_x), x_arr[0]), x_arr[-1])
    return float(pchip(qx))


# ==============================================================================
# INVERSE LOOKUPS (Y -> X)
# ==============================================================================

def _linear_roots(x_branch: np.ndarray, shifted: np.ndarray) -> np.ndarray:
    roots = []
    for i in range(len(shifted) - 1):
        y0, y1 = shifted[i], shifted[i + 1]
        if y0 == 0:
            roots.append(x_branch[i])
        elif y0 * y1 < 0:
            roots.append(x_branch[i] - y0 * (x_branch[i + 1] - x_branch[i]) / (y1 - y0))
    if shifted[-1] == 0:
        roots.append(x_branch[-1])
    return np.array(roots, dtype=float)


def _branch_roots(x_branch: np.ndarray, y_branch: np.ndarray, target_y: float) -> np.ndarray:
    if y_branch.min() <= target_y <= y_branch.max():
        # The cubic spline needs at least 4 samples
        if len(x_branch) < 4:
            return _linear_roots(x_branch, y_branch - target_y)
        spline = InterpolatedUnivariateSpline(x_branch, y_branch - target_y)
        return spline.roots()
    return np.array([])


def inverse_interpolation(
    x_values: Samples, y_values: Samples, target_y: float
) -> Union[List[float], str]:
    """
    All X values at which the curve reaches ``target_y``.

    The samples are split at the peak into an increasing and a decreasing
    branch; a cubic spline of ``y - target_y`` is solved on every branch
    whose Y range contains the target. Branches shorter than four samples
    are solved on straight segments instead.

    Returns:
        List of X roots, "No solution found", or an "Error: ..." string.
    """
    try:
        x_arr = clean_samples(x_values)
        y_arr = clean_samples(y_values)

        if len(x_arr) != len(y_arr):
            return f"{ERROR_PREFIX}X and Y arrays must have the same length"

        target_y = float(target_y)
        if target_y < y_arr.min() or target_y > y_arr.max():
            return f"{ERROR_PREFIX}Query value out of range"

        peak_index = int(np.argmax(y_arr))
        roots_inc = _branch_roots(x_arr[:peak_index + 1], y_arr[:peak_index + 1], target_y)
        roots_dec = _branch_roots(x_arr[peak_index:], y_arr[peak_index:], target_y)

        # The peak sample belongs to both branches
        roots = np.unique(np.concatenate((roots_inc, roots_dec)))
        if len(roots) == 0:
            return NO_SOLUTION
        return [float(r) for r in roots]

    except ValueError as ve:
        log.warning(f"inverse_interpolation: invalid input data: {ve}")
        return f"{ERROR_PREFIX}Invalid input data - {ve}"
    except Exception as e:
        log.warning(f"inverse_interpolation failed: {e}")
        return f"{ERROR_PREFIX}{e}"


@returns_error_string()
def inverse_lagrange_interpolation(x_values: Samples, y_values: Samples, query_y: float) -> float:
    """Lagrange polynomial through the (y, x) pairs evaluated at ``query_y``."""
    x_arr = np.asarray(flatten_samples(x_values), dtype=float)
    y_arr = np.asarray(flatten_samples(y_values), dtype=float)
    query_y = float(query_y)

    result_x = 0.0
    for i in range(len(x_arr)):
        basis = 1.0
        for j in range(len(x_arr)):
            if i != j:
                basis *= (query_y - y_arr[j]) / (y_arr[i] - y_arr[j])
        result_x += x_arr[i] * basis

    return float(result_x)


@returns_error_string()
def interpolate_x_for_y(x_values: Samples, y_values: Samples, query_y: float) -> Union[float, str]:
    """
    X for a given Y using a cubic spline of X over Y.

    Y must be strictly increasing for the spline to be built.
    """
    x_arr = clean_samples(x_values)
    y_arr = clean_samples(y_values)

    if len(x_arr) != len(y_arr):
        return f"{ERROR_PREFIX}X and Y arrays must have the same length."

    query_y = float(query_y)
    if query_y < y_arr.min() or query_y > y_arr.max():
        return f"{ERROR_PREFIX}Query Y value is out of range."

    spline = CubicSpline(y_arr, x_arr)
    return float(spline(query_y))


def _drop_near_duplicates(
    x_arr: np.ndarray, y_arr: np.ndarray, tolerance: float
) -> Tuple[np.ndarray, np.ndarray]:
    # Consecutive Y values closer than the tolerance break CubicSpline(y, x)
    kept = [0]
    for i in range(1, len(y_arr)):
        if abs(y_arr[i] - y_arr[kept[-1]]) > tolerance:
            kept.append(i)
    return x_arr[kept], y_arr[kept]


@returns_error_string()
def cubic_spline_reverse_interpolate(
    x_values: Samples,
    y_values: Samples,
    query_y: float,
    tolerance: float = 1e-6,
) -> Union[float, str]:
    """
    Reverse lookup (Y -> X) on a curve with one main peak.

    Steps:
      1. Drop consecutive samples whose Y differs by less than ``tolerance``.
      2. Locate the peak.
      3. If a decreasing tail follows the peak and holds the query, solve there.
      4. Otherwise solve on the increasing branch, then on the decreasing one.

    Returns:
        Single X value or "Error: Query value out of range".
    """
    x_arr = clean_samples(x_values)
    y_arr = clean_samples(y_values)
    if len(x_arr) != len(y_arr):
        raise ValueError("X and Y arrays must have the same length")

    query_y = float(query_y)
    x_arr, y_arr = _drop_near_duplicates(x_arr, y_arr, float(tolerance))
    peak_index = int(np.argmax(y_arr))

    if peak_index < len(y_arr) - 1:
        tail_start = None
        for i in range(peak_index + 1, len(y_arr) - 1):
            if y_arr[i] > y_arr[i + 1]:
                tail_start = i
                break

        if tail_start is not None:
            x_tail = x_arr[tail_start:]
            y_tail = y_arr[tail_start:]
            if y_tail[-1] <= query_y <= y_tail[0]:
                spline = CubicSpline(y_tail[::-1], x_tail[::-1])
                return float(spline(query_y))

    x_increasing = x_arr[:peak_index + 1]
    y_increasing = y_arr[:peak_index + 1]
    x_decreasing = x_arr[peak_index:]
    y_decreasing = y_arr[peak_index:]

    if y_increasing[0] <= query_y <= y_increasing[-1]:
        spline = CubicSpline(y_increasing, x_increasing)
        return float(spline(query_y))
    if y_decreasing[-1] <= query_y <= y_decreasing[0]:
        spline = CubicSpline(y_decreasing[::-1], x_decreasing[::-1])
        return float(spline(query_y))

    return f"{ERROR_PREFIX}Query value out of range"


# ==============================================================================
# CURVE MAXIMUM
# ==============================================================================

def _smooth_maximum(x_values: Samples, y_values: Samples):
    x_arr, y_arr = sorted_samples(x_values, y_values)
    spline = CubicSpline(x_arr, y_arr)
    return minimize_scalar(
        lambda value: -spline(value),
        bounds=(x_arr[0], x_arr[-1]),
        method="bounded",
    )


@returns_error_string()
def find_ymax_smooth(x_values: Samples, y_values: Samples) -> Union[float, str]:
    """Maximum Y of the cubic spline through the samples (within the X range)."""
    result = _smooth_maximum(x_values, y_values)
    if not result.success:
        return f"{ERROR_PREFIX}Could not find maximum Y"
    return float(-result.fun)


@returns_error_string()
def find_x_at_ymax_smooth(x_values: Samples, y_values: Samples) -> Union[float, str]:
    """X at which the cubic spline through the samples peaks."""
    result = _smooth_maximum(x_values, y_values)
    if not result.success:
        return f"{ERROR_PREFIX}Could not find X for Ymax"
    return float(result.x)
