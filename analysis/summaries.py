"""
Aggregate summaries over a listing collection.
Pure functions driven by caller-supplied query text - no state between calls.
"""

import numpy as np
from datetime import date
from typing import Any, Dict, List, Optional

from analysis.calculations.trend import parse_record_date, trend
from analysis.calculations.unit_value import unit_value_of


def _matches(text: Any, query: str) -> bool:
    """Case-insensitive substring match."""
    return query.lower() in str(text or '').lower()


def search_summary(records: List[Dict[str, Any]], query: str) -> Optional[Dict[str, Any]]:
    """
    Summarize the condominiums matching a free-text query.

    Args:
        records: Listing records
        query: Text matched case-insensitively against condominium names

    Returns:
        Dictionary with name, average, count and trend, or None when the
        query is empty or matches nothing. The name is the condominium of
        the first match in collection order; average and count cover the
        matches that have a unit value.
    """
    if not query:
        return None

    matches = [r for r in records if _matches(r.get('condominium'), query)]
    if not matches:
        return None

    values = [v for v in (unit_value_of(r) for r in matches) if v is not None]
    name = matches[0].get('condominium')

    return {
        'name': name,
        'average': float(np.mean(values)) if values else None,
        'count': len(values),
        'trend': trend(records, name)
    }


def overall_summary(records: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Summarize the whole collection.

    Args:
        records: Listing records

    Returns:
        Dictionary with average (over present unit values), count (all
        records) and most_recent_date, or None for an empty collection
    """
    if not records:
        return None

    values = [v for v in (unit_value_of(r) for r in records) if v is not None]

    most_recent = None
    most_recent_date = None
    for record in records:
        record_date = parse_record_date(record)
        if record_date is None:
            continue
        if most_recent is None or record_date >= most_recent:
            most_recent = record_date
            most_recent_date = record.get('date')

    return {
        'average': float(np.mean(values)) if values else None,
        'count': len(records),
        'most_recent_date': most_recent_date
    }


def filter_listings(records: List[Dict[str, Any]], query: str) -> List[Dict[str, Any]]:
    """
    Filter records whose condominium or neighborhood contains the query.

    An empty query keeps every record.
    """
    if not query:
        return list(records)
    return [
        r for r in records
        if _matches(r.get('condominium'), query) or _matches(r.get('neighborhood'), query)
    ]


def chart_series(records: List[Dict[str, Any]], query: str) -> List[Dict[str, Any]]:
    """
    Build the unit value time series for the condominiums matching a query.

    Args:
        records: Listing records
        query: Text matched case-insensitively against condominium names

    Returns:
        List of {'date', 'unit_value'} points in ascending date order.
        Empty when the query is empty. Records without a unit value are
        skipped; undated records sort first.
    """
    if not query:
        return []

    points = []
    for record in records:
        if not _matches(record.get('condominium'), query):
            continue
        value = unit_value_of(record)
        if value is None:
            continue
        points.append((parse_record_date(record), record.get('date'), value))

    points.sort(key=lambda p: p[0] or date.min)

    return [{'date': raw_date, 'unit_value': value} for _, raw_date, value in points]
