"""
DIAC-V Curve Intersection
=========================
First crossing of two sampled curves, e.g. a pump Q-H curve against a
system curve.
"""

from __future__ import annotations

from typing import List, Union

import numpy as np
from scipy.interpolate import interp1d
from scipy.optimize import brentq

from ..core.logger import get_logger
from ..core.results import NOT_AVAILABLE_PREFIX, returns_error_string
from .interpolation import Samples, flatten_samples

log = get_logger(__name__)

DEFAULT_SAMPLES = 500

NOT_ENOUGH_POINTS = f"{NOT_AVAILABLE_PREFIX}Not enough data points for interpolation."
NO_OVERLAP = f"{NOT_AVAILABLE_PREFIX}No overlapping domain."
NO_INTERSECTION = f"{NOT_AVAILABLE_PREFIX}No intersection within data boundary."


def _interpolant(x: np.ndarray, y: np.ndarray):
    # Cubic needs four samples; shorter curves fall back to straight segments
    kind = "cubic" if len(x) >= 4 else "linear"
    return interp1d(x, y, kind=kind, bounds_error=False)


@returns_error_string(NOT_AVAILABLE_PREFIX)
def find_curve_intersection(
    x1_vals: Samples,
    y1_vals: Samples,
    x2_vals: Samples,
    y2_vals: Samples,
    samples: int = DEFAULT_SAMPLES,
) -> Union[List[List[float]], str]:
    """
    Return the intersection with the smallest X of two XY curves.

    Both curves are interpolated, the difference is sampled densely over the
    overlapping X range and every sign change is refined with Brent's method.

    Args:
        x1_vals, y1_vals: first curve samples
        x2_vals, y2_vals: second curve samples
        samples: grid size used to detect sign changes

    Returns:
        [[x0, y0]] or a "#N/A - ..." string.
    """
    x1 = np.asarray(flatten_samples(x1_vals), dtype=float)
    y1 = np.asarray(flatten_samples(y1_vals), dtype=float)
    x2 = np.asarray(flatten_samples(x2_vals), dtype=float)
    y2 = np.asarray(flatten_samples(y2_vals), dtype=float)

    if len(x1) < 2 or len(x2) < 2:
        return NOT_ENOUGH_POINTS

    idx1 = np.argsort(x1)
    x1, y1 = x1[idx1], y1[idx1]
    idx2 = np.argsort(x2)
    x2, y2 = x2[idx2], y2[idx2]

    f1 = _interpolant(x1, y1)
    f2 = _interpolant(x2, y2)

    x_min = max(x1.min(), x2.min())
    x_max = min(x1.max(), x2.max())
    if x_max <= x_min:
        return NO_OVERLAP

    def diff(x):
        return f1(x) - f2(x)

    x_dense = np.linspace(x_min, x_max, int(samples))
    diff_vals = diff(x_dense)

    intersection_points = []
    for i in range(len(x_dense) - 1):
        d1 = diff_vals[i]
        d2 = diff_vals[i + 1]

        if d1 == 0.0:
            intersection_points.append(float(x_dense[i]))
        elif d1 * d2 < 0.0:
            intersection_points.append(float(brentq(diff, x_dense[i], x_dense[i + 1])))

    # Exact touch on the last grid point
    if len(diff_vals) and diff_vals[-1] == 0.0:
        intersection_points.append(float(x_dense[-1]))

    if not intersection_points:
        return NO_INTERSECTION

    x_first = min(intersection_points)
    y_first = float(f1(x_first))
    log.debug(f"Curve intersection at x={x_first:.6g}, y={y_first:.6g}")

    return [[x_first, y_first]]
