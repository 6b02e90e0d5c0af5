"""
Shared API response models.

A calculation that fails is still a 200: the tagged string goes into
``error`` and ``result`` stays null, the same way a spreadsheet cell shows
the error text.
"""

import math
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from ..core.results import ERROR_PREFIX, is_error

ResultValue = Union[float, List[float], List[List[float]]]


class CalcResponse(BaseModel):
    """Result of one calculation."""
    function: str
    ok: bool
    result: Optional[ResultValue] = None
    error: Optional[str] = None
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


def _finite(value) -> bool:
    if isinstance(value, (list, tuple)):
        return all(_finite(item) for item in value)
    return math.isfinite(value)


def calc_response(function: str, value) -> CalcResponse:
    """Wrap a calculation's return value."""
    if is_error(value):
        return CalcResponse(function=function, ok=False, error=value)
    if not _finite(value):
        return CalcResponse(function=function, ok=False, error=f"{ERROR_PREFIX}Result is not a finite number")
    return CalcResponse(function=function, ok=True, result=value)
