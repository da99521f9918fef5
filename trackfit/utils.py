"""
Utility Functions for Track Shape Inference

This module provides helper functions for value conversion and rounding used
when ingesting records and serializing results.
"""

import numpy as np
from typing import Optional


def safe_float(value) -> float:
    """
    Safely convert a value to float, returning NaN on failure.
    
    Args:
        value: Value to convert (string, number, None, etc.).
        
    Returns:
        Float value, or np.nan if conversion fails.
    """
    if value is None:
        return np.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return np.nan


def round_float(value, digits: int = 3) -> Optional[float]:
    """
    Round a value for JSON output.

    Accepts anything safe_float accepts, including numpy scalars and numeric
    strings; missing or non-finite values become None so they serialize as
    null.
    """
    number = safe_float(value)
    if not np.isfinite(number):
        return None
    return round(number, digits)


def coord_to_list(coord) -> list:
    """Convert a (lon, lat) pair to a JSON-ready [lon, lat] list at full precision."""
    return [float(coord[0]), float(coord[1])]
