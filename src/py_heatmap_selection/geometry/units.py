"""
Length units and pointer positions on the rendering surface.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from ..exceptions import InvalidGeometryInput

DEFAULT_UNIT = "mm"

# millimetres per unit; "pt" is the printer's point (72.27 per inch)
_MM_PER_UNIT = {
    "mm": 1.0,
    "cm": 10.0,
    "inch": 25.4,
    "pt": 25.4 / 72.27,
    "bigpts": 25.4 / 72.0,
}
LENGTH_UNITS = tuple(_MM_PER_UNIT) + ("px",)


def _mm_per(unit: str, dpi: Optional[float]) -> float:
    if unit == "px":
        if not dpi:
            raise InvalidGeometryInput("Converting pixels needs the surface resolution (dpi)")
        return 25.4 / float(dpi)
    try:
        return _MM_PER_UNIT[unit]
    except KeyError:
        raise InvalidGeometryInput(
            f"Unknown unit '{unit}', expected one of {', '.join(LENGTH_UNITS)}"
        ) from None


def convert_length(value: float, from_unit: str, to_unit: str, dpi: Optional[float] = None) -> float:
    """Convert a length between units; ``px`` needs ``dpi``."""
    if from_unit == to_unit:
        return float(value)
    return float(value) * _mm_per(from_unit, dpi) / _mm_per(to_unit, dpi)


@dataclass(frozen=True)
class Point:
    """A position on the rendering surface, measured from the bottom-left corner."""

    x: float
    y: float
    unit: str = DEFAULT_UNIT

    def __post_init__(self):
        if self.unit not in LENGTH_UNITS:
            raise InvalidGeometryInput(
                f"Unknown unit '{self.unit}', expected one of {', '.join(LENGTH_UNITS)}"
            )
        try:
            x, y = float(self.x), float(self.y)
        except (TypeError, ValueError):
            raise InvalidGeometryInput(f"Point coordinates must be numbers, got ({self.x!r}, {self.y!r})") from None
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InvalidGeometryInput(f"Point coordinates must be finite, got ({x}, {y})")
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)


def as_point(value, unit: str = DEFAULT_UNIT) -> Point:
    """Coerce a Point, an (x, y) pair or an {"x", "y", "unit"} dict."""
    if isinstance(value, Point):
        return value
    if isinstance(value, dict):
        if "x" not in value or "y" not in value:
            raise InvalidGeometryInput(f"Point needs 'x' and 'y', got keys {sorted(value)}")
        return Point(value["x"], value["y"], value.get("unit") or unit)
    try:
        x, y = value
    except (TypeError, ValueError):
        raise InvalidGeometryInput(f"Length of a point should be 2 (x and y), got {value!r}") from None
    return Point(x, y, unit)


def normalize_corners(pos1: Point, pos2: Point) -> Tuple[Point, Point]:
    """Return (bottom-left, top-right) corners of the rectangle spanned by two points."""
    if pos1.unit != pos2.unit:
        raise InvalidGeometryInput(
            f"Both corners should use the same unit, got '{pos1.unit}' and '{pos2.unit}'"
        )
    return (
        Point(min(pos1.x, pos2.x), min(pos1.y, pos2.y), pos1.unit),
        Point(max(pos1.x, pos2.x), max(pos1.y, pos2.y), pos1.unit),
    )
