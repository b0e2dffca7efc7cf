"""
Python callback functions for handling pointer and search events from a UI.

Each callback takes the JSON request payload sent by the front-end plus the
active SelectionSession, and returns a JSON-serializable dict whose
``type`` tells the front-end what happened: ``selection``,
``no_selection``, ``positions`` or ``error``.
"""

from typing import Dict

from ..exceptions import SelectionError
from ..geometry.units import DEFAULT_UNIT
from .utils import _serialize_result


def _missing(data: Dict, *keys) -> bool:
    return any(data.get(k) is None for k in keys)


# =============================================================================
# Pointer Functions
# =============================================================================

def select_position(data: Dict, session=None, **kwargs) -> Dict:
    """Resolve a click to one heatmap cell."""
    if session is None:
        return {"type": "error", "message": "No selection session"}
    if _missing(data, "x", "y"):
        return {"type": "error", "message": "Invalid position"}

    unit = data.get("unit") or DEFAULT_UNIT
    try:
        row = session.select_position((data["x"], data["y"]), unit=unit)
    except SelectionError as e:
        return {"type": "error", "message": str(e)}

    if row is None:
        return {"type": "no_selection", "mode": "position",
                "message": "The selected position does not sit in any heatmap."}
    return {"type": "selection", "mode": "position", "records": _serialize_result([row])}


def select_area(data: Dict, session=None, **kwargs) -> Dict:
    """Resolve a dragged rectangle to the covered rows and columns."""
    if session is None:
        return {"type": "error", "message": "No selection session"}
    if _missing(data, "x1", "y1", "x2", "y2"):
        return {"type": "error", "message": "Invalid rectangle"}

    unit = data.get("unit") or DEFAULT_UNIT
    pos1 = {"x": data["x1"], "y": data["y1"], "unit": data.get("unit1") or unit}
    pos2 = {"x": data["x2"], "y": data["y2"], "unit": data.get("unit2") or unit}
    trim = None
    if data.get("trimEdge"):
        trim = (data["trimEdge"], int(data.get("trimCount", 1)))

    try:
        record = session.select_area(
            pos1, pos2,
            include_annotations=bool(data.get("includeAnnotations", False)),
            remove_empty=bool(data.get("removeEmpty", False)),
            trim=trim,
        )
    except (SelectionError, ValueError) as e:
        return {"type": "error", "message": str(e)}

    if record.empty:
        return {"type": "no_selection", "mode": "area",
                "message": "The selected area does not overlap to any heatmap."}
    return {
        "type": "selection",
        "mode": "area",
        "records": _serialize_result(record),
        "heatmaps": record.panels(),
    }


# =============================================================================
# Search Functions
# =============================================================================

def select_labels(data: Dict, session=None, **kwargs) -> Dict:
    """Select rows/columns whose labels match the searched keywords."""
    if session is None:
        return {"type": "error", "message": "No selection session"}

    row_keywords = data.get("rowKeywords") or None
    column_keywords = data.get("columnKeywords") or None
    if row_keywords is None and column_keywords is None:
        return {"type": "error", "message": "Please enter row or column keywords"}

    try:
        record = session.select_by_labels(
            row_keywords=row_keywords,
            column_keywords=column_keywords,
            pattern_mode=bool(data.get("isPattern", False)),
            panel=data.get("heatmap") or None,
            include_annotation=bool(data.get("includeAnnotation", False)),
            propagate_all=bool(data.get("all", True)),
            column_filter=data.get("columnFilter") or None,
            remove_empty=bool(data.get("removeEmpty", False)),
        )
    except SelectionError as e:
        return {"type": "error", "message": str(e)}

    if record.empty:
        return {"type": "no_selection", "mode": "labels",
                "message": "No row or column label matches the keywords."}
    return {
        "type": "selection",
        "mode": "labels",
        "records": _serialize_result(record),
        "heatmaps": record.panels(),
    }


# =============================================================================
# Geometry Functions
# =============================================================================

def get_positions(data: Dict, session=None, **kwargs) -> Dict:
    """Return the position of every slice on the surface."""
    if session is None:
        return {"type": "error", "message": "No selection session"}
    try:
        df = session.positions(
            include_annotations=bool(data.get("includeAnnotations", False)),
            unit=data.get("unit") or None,
        )
    except SelectionError as e:
        return {"type": "error", "message": str(e)}
    return {"type": "positions", "unit": data.get("unit") or session.renderer.unit,
            "slices": _serialize_result(df)}
