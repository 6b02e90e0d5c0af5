"""
DIAC-V Pipe Material Catalog
============================
Material rows (code, density, viscosity, roughness) used to price a pipe
run by material code instead of typing the fluid/pipe data every time.

The catalog is an explicit object: callers build it from rows or from a JSON
file and pass it in.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from ..core.logger import get_logger
from ..core.results import PIPE_ERROR_PREFIX
from .pipe_flow import pipe_pressure_drop

log = get_logger(__name__)


class MaterialNotFoundError(KeyError):
    """No row matches the requested material code."""


class InvalidMaterialRowError(ValueError):
    """A matching row exists but its numbers do not parse."""


@dataclass(frozen=True)
class PipeMaterial:
    """One catalog row."""
    code: str
    density: float          # kg/m³ of the conveyed fluid
    viscosity: float        # Pa·s
    roughness: float        # m, absolute pipe roughness


def _normalize_code(code: Any) -> str:
    return str(code).strip().lower()


# Water at 20 °C in common pipe materials; roughness per standard Moody tables
DEFAULT_MATERIALS: List[PipeMaterial] = [
    PipeMaterial("PVC", 998.2, 0.001002, 1.5e-6),
    PipeMaterial("CPVC", 998.2, 0.001002, 1.5e-6),
    PipeMaterial("HDPE", 998.2, 0.001002, 7.0e-6),
    PipeMaterial("COPPER", 998.2, 0.001002, 1.5e-6),
    PipeMaterial("STAINLESS", 998.2, 0.001002, 1.5e-5),
    PipeMaterial("STEEL", 998.2, 0.001002, 4.5e-5),
    PipeMaterial("GALVANIZED", 998.2, 0.001002, 1.5e-4),
    PipeMaterial("CAST IRON", 998.2, 0.001002, 2.6e-4),
]


class MaterialCatalog:
    """
    Case- and whitespace-insensitive lookup of material rows.

    Rows are kept as given; numeric parsing happens on lookup so one bad row
    does not invalidate the whole table.
    """

    def __init__(self, rows: Optional[Iterable[Sequence[Any]]] = None):
        self._rows: List[Sequence[Any]] = [
            row for row in (rows or []) if row and len(row) >= 4 and row[0] is not None
        ]

    @classmethod
    def from_materials(cls, materials: Iterable[PipeMaterial]) -> "MaterialCatalog":
        return cls([(m.code, m.density, m.viscosity, m.roughness) for m in materials])

    @classmethod
    def default(cls) -> "MaterialCatalog":
        return cls.from_materials(DEFAULT_MATERIALS)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "MaterialCatalog":
        """
        Load a catalog from JSON.

        Accepted shapes:
            [["PVC", 1000, 0.001, 1e-5], ...]
            [{"code": "PVC", "density": 1000, "viscosity": 0.001, "roughness": 1e-5}, ...]
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        rows = []
        for entry in data:
            if isinstance(entry, dict):
                rows.append((
                    entry.get("code"),
                    entry.get("density"),
                    entry.get("viscosity"),
                    entry.get("roughness"),
                ))
            else:
                rows.append(tuple(entry))

        log.info(f"Loaded {len(rows)} material rows from {path}")
        return cls(rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __bool__(self) -> bool:
        return bool(self._rows)

    def codes(self) -> List[str]:
        return [str(row[0]).strip() for row in self._rows]

    def lookup(self, code: Any) -> PipeMaterial:
        """
        Raises:
            MaterialNotFoundError: no row with this code
            InvalidMaterialRowError: the row's numbers do not parse
        """
        wanted = _normalize_code(code)
        for row in self._rows:
            if _normalize_code(row[0]) == wanted:
                try:
                    return PipeMaterial(
                        code=str(row[0]).strip(),
                        density=float(row[1]),
                        viscosity=float(row[2]),
                        roughness=float(row[3]),
                    )
                except (TypeError, ValueError):
                    raise InvalidMaterialRowError(str(row[0]))
        raise MaterialNotFoundError(str(code))

    def to_list(self) -> List[Dict[str, Any]]:
        materials = []
        for code in self.codes():
            try:
                materials.append(asdict(self.lookup(code)))
            except InvalidMaterialRowError:
                continue
        return materials


def load_catalog(materials_file: Optional[str] = None) -> MaterialCatalog:
    """Catalog from a JSON file when configured, else the built-in defaults."""
    if materials_file:
        return MaterialCatalog.from_json(materials_file)
    return MaterialCatalog.default()


def pipe_pressure_drop_with_material(
    catalog: Optional[MaterialCatalog],
    length_horizontal,
    length_vertical,
    id_mm,
    flow_m3hr,
    material_code,
) -> Union[float, str]:
    """
    Pipe pressure drop (bar) with density, viscosity and roughness taken
    from the material catalog. Minor losses are not included.
    """
    if not catalog:
        return f"{PIPE_ERROR_PREFIX}No material list found"

    try:
        material = catalog.lookup(material_code)
    except MaterialNotFoundError:
        return f"{PIPE_ERROR_PREFIX}Material '{material_code}' not found"
    except InvalidMaterialRowError:
        return f"{PIPE_ERROR_PREFIX}Invalid numeric values in material row"

    return pipe_pressure_drop(
        length_horizontal,
        length_vertical,
        id_mm,
        flow_m3hr,
        material.density,
        material.viscosity,
        material.roughness,
    )
