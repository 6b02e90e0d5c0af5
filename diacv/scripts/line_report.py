#!/usr/bin/env python3
"""
DIAC-V Line Pressure Drop Report
================================
Reads a line description (JSON) and prints the per-segment and per-fitting
pressure drop as rich tables.

Input format (same shape as POST /api/hydraulics/system):

    {"segments": [{"id": "suction", "length_horizontal": 5, "length_vertical": -2,
                   "id_mm": 100, "flow_m3hr": 36, "density": 998, "viscosity": 0.001,
                   "roughness": 4.5e-5,
                   "fittings": [{"fitting_type": "ELBOW 90", "size": "100", "count": 2}]}]}

A segment may give "material" instead of density/viscosity/roughness; the
values then come from the material catalog.

Usage:
    diacv-line-report line.json [--materials materials.json]
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.logger import get_logger, setup_logger
from ..modules.materials import InvalidMaterialRowError, MaterialCatalog, MaterialNotFoundError, load_catalog
from ..modules.pipe_flow import DarcyWeisbachCalculator, Fitting, PipeInputError, PipeSegment, SystemResult

log = get_logger(__name__)


def segments_from_json(data: Dict[str, Any], catalog: Optional[MaterialCatalog] = None) -> List[PipeSegment]:
    """
    Build PipeSegment objects from the JSON line description.

    Raises:
        PipeInputError: missing fields, unknown material or a material row
            whose numbers do not parse
    """
    segments = []
    for index, raw in enumerate(data.get("segments", []), start=1):
        seg_id = str(raw.get("id", f"segment-{index}"))

        if raw.get("material") is not None:
            if not catalog:
                raise PipeInputError("No material list found")
            try:
                material = catalog.lookup(raw["material"])
            except MaterialNotFoundError:
                raise PipeInputError(f"Material '{raw['material']}' not found")
            except InvalidMaterialRowError:
                raise PipeInputError("Invalid numeric values in material row")
            density, viscosity, roughness = material.density, material.viscosity, material.roughness
        else:
            density = raw.get("density")
            viscosity = raw.get("viscosity")
            roughness = raw.get("roughness", 0.0)

        try:
            segment = PipeSegment(
                length_horizontal_m=float(raw.get("length_horizontal", 0.0)),
                length_vertical_m=float(raw.get("length_vertical", 0.0)),
                id_mm=float(raw["id_mm"]),
                flow_m3hr=float(raw["flow_m3hr"]),
                density=float(density),
                viscosity=float(viscosity),
                roughness_m=float(roughness),
                id=seg_id,
                fittings=[
                    Fitting(f["fitting_type"], str(f["size"]), int(f.get("count", 1)))
                    for f in raw.get("fittings", [])
                ],
            )
        except (KeyError, TypeError, ValueError) as e:
            raise PipeInputError(f"Segment '{seg_id}': invalid or missing value ({e})")

        segments.append(segment)

    return segments


def render_report(result: SystemResult, console: Console, title: str = "Line") -> None:
    """Print the segment table, the fitting table and the totals panel."""
    seg_table = Table(
        title="[bold yellow]PIPE SEGMENTS[/bold yellow]",
        box=box.ROUNDED,
        header_style="bold white on blue",
    )
    seg_table.add_column("Segment", style="cyan")
    seg_table.add_column("L eff (m)", justify="right")
    seg_table.add_column("v (m/s)", justify="right")
    seg_table.add_column("Re", justify="right")
    seg_table.add_column("f", justify="right")
    seg_table.add_column("Regime")
    seg_table.add_column("ΔP (bar)", justify="right", style="bold green")

    for seg_id, r in result.segments.items():
        seg_table.add_row(
            seg_id,
            f"{r.effective_length_m:.2f}",
            f"{r.velocity_m_s:.3f}",
            f"{r.reynolds_number:,.0f}",
            f"{r.friction_factor:.5f}",
            r.regime.value,
            f"{r.pressure_drop_bar:.4f}",
        )
    console.print(seg_table)

    if result.fittings:
        fit_table = Table(
            title="[bold yellow]FITTINGS[/bold yellow]",
            box=box.ROUNDED,
            header_style="bold white on blue",
        )
        fit_table.add_column("Fitting", style="cyan")
        fit_table.add_column("ΔP (bar)", justify="right", style="bold green")
        for name, loss in result.fittings.items():
            fit_table.add_row(name, f"{loss:.4f}")
        console.print(fit_table)

    for note in result.notes:
        console.print(f"[yellow]⚠ {note}[/yellow]")

    console.print(Panel(
        f"[bold]{title}[/bold]\n"
        f"Pipe:     {result.pipe_pressure_drop_bar:.4f} bar\n"
        f"Fittings: {result.fitting_pressure_drop_bar:.4f} bar\n"
        f"[bold green]Total:    {result.total_pressure_drop_bar:.4f} bar[/bold green]\n"
        f"[dim]Length {result.total_length_m:.1f} m | max velocity {result.max_velocity_m_s:.2f} m/s[/dim]",
        box=box.DOUBLE,
        border_style="cyan",
    ))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Darcy-Weisbach pressure drop report for a pipe line")
    parser.add_argument("line", type=Path, help="JSON line description")
    parser.add_argument("--materials", default=None, help="Material catalog JSON (built-in table otherwise)")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    setup_logger(level=args.log_level)
    console = Console()

    try:
        with open(args.line, "r", encoding="utf-8") as f:
            data = json.load(f)
        catalog = load_catalog(args.materials)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]✗ Cannot read input: {e}[/red]")
        return 1

    try:
        segments = segments_from_json(data, catalog)
        result = DarcyWeisbachCalculator().calculate_system(segments)
    except PipeInputError as e:
        log.warning(f"Line report rejected: {e}")
        console.print(f"[red]✗ #ERROR: {e}[/red]")
        return 1

    render_report(result, console, title=args.line.stem)
    return 0


if __name__ == "__main__":
    sys.exit(main())
