"""
Listing record lifecycle - creation precondition and collection operations.
Pure functions: the caller owns the collection and the record store.
"""

from datetime import date
from typing import Dict, Any, List, Optional

from analysis.calculations.unit_value import compute_unit_value
from listings.transforms.normalizers import DEFAULT_SOURCE
from listings.transforms.validators import ValidationError, validate_listing_row

MISSING_IDENTITY = "MissingIdentity"
INVALID_LISTING = "ValidationError"


def prepare_listing(
    form: Dict[str, Any],
    responsible: Optional[str],
    created_on: Optional[date] = None
) -> Dict[str, Any]:
    """
    Build a new listing record from form input, ready to be persisted.

    The responsible-party check runs first, so a rejected listing never
    reaches the store. The unit value is computed once here and stored.

    Args:
        form: Form fields (condominium, neighborhood, area, price)
        responsible: Name of the person entering the record
        created_on: Creation date (defaults to today)

    Returns:
        Dictionary with status ('completed' or 'rejected'), the record
        (without id) on success, error_type and error on rejection
    """
    if not responsible or not responsible.strip():
        return {
            'status': 'rejected',
            'error_type': MISSING_IDENTITY,
            'error': 'Responsible name is required before adding a listing',
            'record': None
        }

    if created_on is None:
        created_on = date.today()

    record = {
        'condominium': (form.get('condominium') or '').strip(),
        'neighborhood': (form.get('neighborhood') or '').strip(),
        'area': form.get('area'),
        'price': form.get('price'),
        'date': created_on.isoformat(),
        'source': DEFAULT_SOURCE,
        'responsible': responsible.strip(),
        'unit_value': compute_unit_value(form.get('area'), form.get('price')),
        'favorite': False
    }

    try:
        validate_listing_row(record)
    except ValidationError as e:
        return {
            'status': 'rejected',
            'error_type': INVALID_LISTING,
            'error': str(e),
            'record': None
        }

    return {
        'status': 'completed',
        'error_type': None,
        'error': None,
        'record': record
    }


def append_listing(
    records: List[Dict[str, Any]],
    record: Dict[str, Any],
    listing_id: str
) -> List[Dict[str, Any]]:
    """
    Append a persisted record to the collection.

    Args:
        records: Current collection
        record: Record returned by prepare_listing()
        listing_id: Id assigned by the record store

    Returns:
        New collection with the record appended
    """
    return list(records) + [{'id': listing_id, **record}]


def remove_listing(records: List[Dict[str, Any]], listing_id: str) -> List[Dict[str, Any]]:
    """Return a new collection without the record carrying listing_id."""
    return [r for r in records if r.get('id') != listing_id]


def toggle_favorite(records: List[Dict[str, Any]], listing_id: str) -> List[Dict[str, Any]]:
    """Return a new collection with the favorite flag of one record flipped."""
    return [
        {**r, 'favorite': not r.get('favorite', False)} if r.get('id') == listing_id else r
        for r in records
    ]


def find_listing(records: List[Dict[str, Any]], listing_id: str) -> Optional[Dict[str, Any]]:
    """Look up a record by id."""
    for record in records:
        if record.get('id') == listing_id:
            return record
    return None
