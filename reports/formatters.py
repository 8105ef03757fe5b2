"""
Display formatters for report content.
Deterministic string formatting: currency to 2 decimals, percentages to 1.
"""

import os
from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime, date
from typing import Any, Optional, Union

from analysis.calculations.unit_value import to_number

NOT_AVAILABLE = "Not available"


class FormatterError(Exception):
    """Raised when formatter input validation fails."""
    pass


def currency_symbol() -> str:
    """Currency prefix, configurable through M2_CURRENCY_SYMBOL."""
    return os.getenv('M2_CURRENCY_SYMBOL', 'R$')


def fixed(value: float, decimal_places: int) -> str:
    """
    Format a number with a fixed count of decimals, ties away from zero.
    
    Args:
        value: Number to format
        decimal_places: Number of decimal places
        
    Returns:
        Formatted number string (e.g., "1234.57")
    """
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise FormatterError(f"Value must be numeric, got {type(value)}")
    
    quantum = Decimal(1).scaleb(-decimal_places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_currency(value: Optional[float]) -> str:
    """
    Format currency with 2 decimals.
    
    Args:
        value: Amount in currency units
        
    Returns:
        Formatted currency string (e.g., "R$ 450000.00")
    """
    if value is None:
        return NOT_AVAILABLE
    
    return f"{currency_symbol()} {fixed(value, 2)}"


def format_unit_value(value: Optional[float]) -> str:
    """
    Format a price per square meter.
    
    Returns:
        Formatted string (e.g., "R$ 5625.00/m²")
    """
    if value is None:
        return NOT_AVAILABLE
    
    return f"{format_currency(value)}/m²"


def format_percentage(value: Optional[float], decimal_places: int = 1) -> str:
    """
    Format a value already expressed in percent.
    
    Args:
        value: Percentage (12.34 = 12.34%)
        decimal_places: Number of decimal places (default: 1)
        
    Returns:
        Formatted percentage string (e.g., "12.3%")
    """
    if value is None:
        return NOT_AVAILABLE
    
    return f"{fixed(value, decimal_places)}%"


def format_area(area: Any) -> str:
    """
    Format an area as entered, with its unit.
    
    Returns:
        Formatted area (e.g., "80 m²")
    """
    number = to_number(area)
    if number is None:
        return NOT_AVAILABLE
    
    if number.is_integer():
        return f"{int(number)} m²"
    return f"{number:g} m²"


def format_date_display(date_input: Union[str, date, datetime, None]) -> str:
    """
    Format date as "Month D, YYYY".
    
    Args:
        date_input: Date as ISO string, date object, or datetime object
        
    Returns:
        Formatted date string (e.g., "July 15, 2025")
    """
    if date_input is None:
        return NOT_AVAILABLE
    
    if isinstance(date_input, str):
        try:
            date_obj = date.fromisoformat(date_input[:10])
        except ValueError:
            raise FormatterError(f"Invalid date string: {date_input}")
    elif isinstance(date_input, datetime):
        date_obj = date_input.date()
    elif isinstance(date_input, date):
        date_obj = date_input
    else:
        raise FormatterError(f"Date must be string, date, or datetime, got {type(date_input)}")
    
    return f"{date_obj:%B} {date_obj.day}, {date_obj:%Y}"
