"""
DIAC-V Pump Chart
=================
Data and rendering for the pump report chart.

Implements:
- Duty parabola (system curve through the origin and the duty point)
- Split of each curve at the minimum continuous flow (thin/thick series)
- Nearest-sample duty values for head, efficiency and NPSH
- Shaft and motor input power at the duty point
- Operating point = pump Q-H curve ∩ duty parabola
- PNG rendering of head / efficiency / NPSH with matplotlib

Power:
    P2 = ρ × Q × H × 9.8 / (3.6e6 × η_pump)     [kW, Q in m³/h]
    P1 = P2 / η_motor
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import matplotlib
matplotlib.use("Agg")  # Headless rendering for the API
import matplotlib.pyplot as plt
import numpy as np

from ..core.logger import get_logger
from ..core.results import is_error
from .intersection import NOT_ENOUGH_POINTS, find_curve_intersection

log = get_logger(__name__)

Point = Tuple[float, float]

POWER_GRAVITY = 9.8
POWER_DIVISOR = 3.6e6          # 3600 s/h × 1000 W/kW
X_AXIS_MARGIN = 1.1


def clean_points(data: Optional[Sequence[Sequence[Any]]]) -> List[Point]:
    """Two-column rows → list of (q, y), skipping rows with a blank cell."""
    if not data:
        return []
    return [
        (float(row[0]), float(row[1]))
        for row in data
        if row is not None and len(row) >= 2 and row[0] is not None and row[1] is not None
    ]


def duty_parabola(q0: float, h0: float, points: int = 30,
                  q_end: Optional[float] = None) -> List[Point]:
    """
    System curve H = H0 × (Q/Q0)², sampled from 0 to ``q_end`` (Q0 by default).
    A zero duty flow gives a single point at the origin.
    """
    if not q0:
        return [(0.0, 0.0)]
    q_parab = np.linspace(0.0, q0 if q_end is None else q_end, points)
    h_parab = h0 * (q_parab / q0) ** 2
    return [(float(q), float(h)) for q, h in zip(q_parab, h_parab)]


def split_at_min_flow(data: Sequence[Point], q_min: float) -> Tuple[List[Point], List[Point]]:
    """(points with q <= q_min, points with q > q_min)"""
    thin = [(q, y) for q, y in data if q <= q_min]
    thick = [(q, y) for q, y in data if q > q_min]
    return thin, thick


def nearest_duty(data: Sequence[Point], q0: float) -> Point:
    """(q0, y of the sample nearest to q0); (q0, 0) if there are no samples."""
    if not data:
        return (q0, 0.0)
    best = min(data, key=lambda point: abs(point[0] - q0))
    return (q0, best[1])


def shaft_power_kw(density: float, q0: float, h0: float, eta_pump: float) -> float:
    """Pump shaft power P2 in kW (Q in m³/h, H in m, η as a fraction)."""
    return density * q0 * h0 * POWER_GRAVITY / (POWER_DIVISOR * eta_pump)


def input_power_kw(shaft_kw: float, motor_eff: float) -> float:
    """Motor input power P1 in kW."""
    return shaft_kw / motor_eff


def operating_point(qh: Sequence[Point], q0: float, h0: float,
                    samples: int = 500) -> Union[Point, str]:
    """
    Where the pump Q-H curve meets the duty parabola.

    Returns:
        (Q, H) or a "#N/A - ..." string.
    """
    if not qh:
        return NOT_ENOUGH_POINTS
    q_end = max(max(q for q, _ in qh), q0)
    parabola = duty_parabola(q0, h0, points=60, q_end=q_end)

    result = find_curve_intersection(
        [q for q, _ in qh], [h for _, h in qh],
        [q for q, _ in parabola], [h for _, h in parabola],
        samples=samples,
    )
    if is_error(result):
        return result
    return (result[0][0], result[0][1])


@dataclass
class PumpChartInput:
    """Curves and duty data of one pump."""
    q0: float
    h0: float
    qh: List[Point]
    eta: List[Point] = field(default_factory=list)
    npsh: List[Point] = field(default_factory=list)
    q_min: float = 0.0
    density: float = 1000.0
    eta_pump: Optional[float] = None
    motor_eff: float = 1.0


def build_chart_data(chart: PumpChartInput) -> Dict[str, Any]:
    """
    Series for the report chart.

    Efficiency is reported twice: the pump curve (eta) and the overall curve
    (eta × motor efficiency, "eta_overall").
    """
    eta_overall = [(q, e * chart.motor_eff) for q, e in chart.eta]

    qh_thin, qh_thick = split_at_min_flow(chart.qh, chart.q_min)
    eta_thin, eta_thick = split_at_min_flow(chart.eta, chart.q_min)
    eta_overall_thin, eta_overall_thick = split_at_min_flow(eta_overall, chart.q_min)

    data: Dict[str, Any] = {
        "qh_thin": qh_thin,
        "qh_thick": qh_thick,
        "eta_thin": eta_thin,
        "eta_thick": eta_thick,
        "eta_overall_thin": eta_overall_thin,
        "eta_overall_thick": eta_overall_thick,
        "npsh": list(chart.npsh),
        "parabola": duty_parabola(chart.q0, chart.h0),
        "duty": {
            "qh": nearest_duty(chart.qh, chart.q0),
            "eta": nearest_duty(chart.eta, chart.q0),
            "eta_overall": nearest_duty(eta_overall, chart.q0),
            "npsh": nearest_duty(chart.npsh, chart.q0),
        },
        "shaft_power_kw": None,
        "input_power_kw": None,
    }

    if chart.eta_pump:
        p2 = shaft_power_kw(chart.density, chart.q0, chart.h0, chart.eta_pump)
        data["shaft_power_kw"] = p2
        data["input_power_kw"] = input_power_kw(p2, chart.motor_eff)

    all_q = [q for q, _ in chart.qh + chart.eta + eta_overall + chart.npsh]
    q_max = max(all_q) if all_q else 0.0
    data["x_max"] = X_AXIS_MARGIN * max(q_max, chart.q0)

    return data


def render_pump_chart(chart: PumpChartInput) -> bytes:
    """
    PNG of the head curve with duty parabola and duty point, efficiency on a
    twin axis and NPSH in a lower panel when available.
    """
    has_eta = bool(chart.eta)
    has_npsh = bool(chart.npsh)

    if not has_npsh:
        fig, ax1 = plt.subplots(figsize=(7, 6))
        ax3 = None
    else:
        fig = plt.figure(figsize=(7, 8))
        gs = fig.add_gridspec(2, 1, height_ratios=[2.5, 1.5])
        ax1 = fig.add_subplot(gs[0, 0])
        ax3 = fig.add_subplot(gs[1, 0])
    ax2 = ax1.twinx() if has_eta else None

    try:
        q_vals = [q for q, _ in chart.qh]
        h_vals = [h for _, h in chart.qh]
        ax1.plot(q_vals, h_vals, "b-o", label="Head (H)")

        parabola = duty_parabola(chart.q0, chart.h0, points=50)
        ax1.plot([q for q, _ in parabola], [h for _, h in parabola], "r--", label="Duty parabola")
        ax1.plot(chart.q0, chart.h0, "ro", markersize=8, label="Duty point")

        if chart.q_min:
            ax1.axvline(chart.q_min, color="grey", linestyle=":", label="Min. flow")

        ax1.set_xlabel("Flow (Q)")
        ax1.set_ylabel("Head (H)")
        ax1.grid(True)
        ax1.legend(loc="best")

        if ax2 is not None:
            ax2.plot([q for q, _ in chart.eta], [e for _, e in chart.eta], "k-s", label="Efficiency (η)")
            ax2.set_ylabel("Efficiency")

            lines_ax1, labels_ax1 = ax1.get_legend_handles_labels()
            lines_ax2, labels_ax2 = ax2.get_legend_handles_labels()
            ax2.legend(lines_ax1 + lines_ax2, labels_ax1 + labels_ax2, loc="lower right")

        if ax3 is not None:
            ax3.plot([q for q, _ in chart.npsh], [n for _, n in chart.npsh], "g-d", label="NPSH")
            ax3.set_xlabel("Flow (Q)")
            ax3.set_ylabel("NPSH (m)")
            ax3.grid(True)
            ax3.legend(loc="best")

        fig.tight_layout()
        buffer = io.BytesIO()
        fig.savefig(buffer, format="png", dpi=100)
    finally:
        plt.close(fig)

    log.debug(f"Rendered pump chart ({len(chart.qh)} Q-H points)")
    return buffer.getvalue()
