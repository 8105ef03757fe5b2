"""
Trend calculation utilities.
Pure functions comparing the older and newer halves of a peer group.
"""

import numpy as np
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from analysis.calculations.unit_value import unit_value_of

MIN_TREND_RECORDS = 4


def parse_record_date(record: Dict[str, Any]) -> Optional[date]:
    """
    Parse the ISO date of a record.

    Args:
        record: Listing record dictionary

    Returns:
        Date object, or None if the date is missing or not ISO formatted
    """
    value = record.get('date')
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def dated_series(records: List[Dict[str, Any]], group_key: str) -> List[Tuple[date, float]]:
    """
    Build the chronological unit value series of a peer group.

    Only records with both a unit value and a date qualify. Sorting is
    stable, so records sharing a date keep collection order.

    Args:
        records: Listing records
        group_key: Condominium name

    Returns:
        List of (date, unit_value) tuples in ascending date order
    """
    series = []
    for record in records:
        if record.get('condominium') != group_key:
            continue
        value = unit_value_of(record)
        record_date = parse_record_date(record)
        if value is None or record_date is None:
            continue
        series.append((record_date, value))

    return sorted(series, key=lambda item: item[0])


def trend(records: List[Dict[str, Any]], group_key: str) -> Optional[float]:
    """
    Calculate the price trend of a peer group as a signed percentage.

    The chronological series is split at floor(n / 2): the older half gets
    the first floor(n / 2) values, the newer half the rest (one more when n
    is odd).

    Formula: ((mean_newer - mean_older) / mean_older) * 100

    Args:
        records: Listing records
        group_key: Condominium name

    Returns:
        Trend percentage (positive = appreciation), or None with fewer than
        4 qualifying records
    """
    series = dated_series(records, group_key)
    if len(series) < MIN_TREND_RECORDS:
        return None

    values = [value for _, value in series]
    half = len(values) // 2

    mean_older = float(np.mean(values[:half]))
    mean_newer = float(np.mean(values[half:]))

    return ((mean_newer - mean_older) / mean_older) * 100
