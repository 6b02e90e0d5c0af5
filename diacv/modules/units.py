"""
Unit conversion for values shown next to a unit dropdown.
"""

from typing import Dict, Union

INVALID_UNIT = "Invalid unit!"

# Factors relative to the first (base) unit of each group
CONVERSION_FACTORS: Dict[str, Dict[str, float]] = {
    "pressure": {
        "bar": 1,
        "psi": 14.5038,
        "m_aq": 10.197,
        "kg_cm2": 1.01972,
    },
}


def find_unit_group(unit: str) -> Union[str, None]:
    unit = (unit or "").strip().lower()
    for group, units in CONVERSION_FACTORS.items():
        if unit in units:
            return group
    return None


def convert(value: float, target_unit: str, source_unit: str = None) -> Union[float, str]:
    """
    Convert ``value`` from ``source_unit`` (the group's base unit when
    omitted) to ``target_unit``.

    Returns:
        Converted value, or "Invalid unit!" for an unknown or mismatched unit.
    """
    group = find_unit_group(target_unit)
    if group is None:
        return INVALID_UNIT

    factors = CONVERSION_FACTORS[group]
    base_unit = next(iter(factors))
    source = (source_unit or base_unit).strip().lower()
    if source not in factors:
        return INVALID_UNIT

    return float(value) * (factors[target_unit.strip().lower()] / factors[source])


def convert_pressure(value: float, target_unit: str, source_unit: str = "bar") -> Union[float, str]:
    """Pressure conversion between bar, psi, m_aq and kg_cm2."""
    if find_unit_group(target_unit) != "pressure":
        return INVALID_UNIT
    return convert(value, target_unit, source_unit)
