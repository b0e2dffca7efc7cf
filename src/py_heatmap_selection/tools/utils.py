"""
Utility functions for serializing selection results.
"""

import math
from dataclasses import asdict, is_dataclass
from typing import Any, Dict

import numpy as np
import pandas as pd

from ..model.selection import SelectionRecord, SelectionRow


def _serialize_result(result: Any) -> Dict:
    """Safely serialize callback results to JSON-compatible format.

    Handles selection records, numpy arrays, pandas objects and missing
    values (NaN / pd.NA become None).

    Args:
        result: Any Python object to serialize

    Returns:
        JSON-compatible dictionary/list/primitive
    """
    if isinstance(result, SelectionRecord):
        return [_serialize_result(r) for r in result.to_records()]
    elif isinstance(result, SelectionRow):
        return _serialize_result(result.to_dict())
    elif is_dataclass(result) and not isinstance(result, type):
        return _serialize_result(asdict(result))
    elif isinstance(result, dict):
        return {k: _serialize_result(v) for k, v in result.items()}
    elif isinstance(result, (list, tuple)):
        return [_serialize_result(item) for item in result]
    elif isinstance(result, (set, frozenset)):
        return [_serialize_result(item) for item in sorted(result, key=str)]
    elif isinstance(result, np.ndarray):
        return [_serialize_result(item) for item in result.tolist()]
    elif isinstance(result, (np.integer, np.floating, np.bool_)):
        return _serialize_result(result.item())
    elif isinstance(result, pd.Series):
        return [_serialize_result(item) for item in result.tolist()]
    elif isinstance(result, pd.DataFrame):
        return [_serialize_result(rec) for rec in result.to_dict("records")]
    elif result is pd.NA:
        return None
    elif isinstance(result, float):
        return None if math.isnan(result) else result
    elif isinstance(result, (str, int, bool, type(None))):
        return result
    else:
        return str(result)
