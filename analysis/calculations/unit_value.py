"""
Unit value calculation utilities.
Pure functions for the price-per-area metric and its presence rules.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a form/text value to a finite float.
    
    Args:
        value: Number, numeric string, or anything else
        
    Returns:
        Float value, or None if the value is missing or non-numeric
    """
    if value is None or isinstance(value, bool):
        return None
    
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    
    if not math.isfinite(number):
        return None
    
    return number


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round half away from zero on the exact binary value.
    
    Unlike round(), exact ties (0.125) go up rather than to even.
    
    Args:
        value: Number to round
        places: Decimal places
        
    Returns:
        Rounded float
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_unit_value(area: Any, price: Any) -> Optional[float]:
    """
    Calculate unit value (price per square meter).
    
    Formula: unit_value = price / area, rounded to 2 decimals
    
    Args:
        area: Area in square meters (number or numeric text)
        price: Price in currency units (number or numeric text)
        
    Returns:
        Unit value rounded to 2 decimals, or None when either input is
        zero, negative, missing or non-numeric
    """
    area_num = to_number(area)
    price_num = to_number(price)
    
    if area_num is None or price_num is None:
        return None
    
    if area_num <= 0 or price_num <= 0:
        return None
    
    return round_half_up(price_num / area_num, 2)


def unit_value_of(record: Dict[str, Any]) -> Optional[float]:
    """
    Read the stored unit value of a record.
    
    Stored values may come from legacy backups as text, so they are coerced.
    Zero and negative values count as absent.
    
    Args:
        record: Listing record dictionary
        
    Returns:
        Unit value as float, or None if absent
    """
    value = to_number(record.get('unit_value'))
    if value is None or value <= 0:
        return None
    return value


def has_unit_value(record: Dict[str, Any]) -> bool:
    """Check whether a record carries a usable unit value."""
    return unit_value_of(record) is not None
