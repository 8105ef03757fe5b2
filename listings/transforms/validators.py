"""
Core validators for canonical listing records.
Pure functions - no IO, network, or side effects.
"""

import math
from datetime import date
from typing import Dict, Any, List


class ValidationError(ValueError):
    """Raised when data validation fails."""
    pass


def validate_listing_row(row: Dict[str, Any]) -> None:
    """
    Validate a canonical listing record.

    area and price are only type-checked: a non-numeric or zero value is a
    valid record whose unit_value is simply absent.

    Args:
        row: Dictionary containing listing data

    Raises:
        ValidationError: If validation fails
    """
    required_keys = {
        'condominium', 'neighborhood', 'area', 'price', 'date',
        'source', 'responsible', 'unit_value', 'favorite'
    }

    missing = required_keys - set(row.keys())
    if missing:
        raise ValidationError(f"Missing required keys: {sorted(missing)}")

    # Identity key for grouping
    if not isinstance(row['condominium'], str):
        raise ValidationError(f"condominium must be string, got {type(row['condominium'])}")

    if not row['condominium'].strip():
        raise ValidationError("condominium must not be empty")

    for field in ['neighborhood', 'source', 'responsible']:
        if not isinstance(row[field], str):
            raise ValidationError(f"{field} must be string, got {type(row[field])}")

    for field in ['area', 'price']:
        value = row[field]
        if value is not None and (isinstance(value, bool) or not isinstance(value, (str, int, float))):
            raise ValidationError(f"{field} must be text or number, got {type(value)}")

    if row['date'] is not None:
        if not isinstance(row['date'], str):
            raise ValidationError(f"date must be ISO string, got {type(row['date'])}")
        try:
            date.fromisoformat(row['date'])
        except ValueError:
            raise ValidationError(f"date must be YYYY-MM-DD, got {row['date']!r}")

    unit_value = row['unit_value']
    if unit_value is not None:
        if isinstance(unit_value, bool) or not isinstance(unit_value, (int, float)):
            raise ValidationError(f"unit_value must be numeric, got {type(unit_value)}")

        if not math.isfinite(unit_value):
            raise ValidationError(f"unit_value must be finite, got {unit_value}")

        if unit_value <= 0:
            raise ValidationError(f"unit_value must be positive, got {unit_value}")

    if not isinstance(row['favorite'], bool):
        raise ValidationError(f"favorite must be bool, got {type(row['favorite'])}")


def check_unique_ids(rows: List[Dict[str, Any]]) -> None:
    """
    Check that assigned ids are unique within a collection.

    Records without an id (not yet persisted) are ignored.

    Raises:
        ValidationError: If an id appears more than once
    """
    seen = set()
    for row in rows:
        listing_id = row.get('id')
        if listing_id is None:
            continue
        if listing_id in seen:
            raise ValidationError(f"Duplicate listing id: {listing_id}")
        seen.add(listing_id)
