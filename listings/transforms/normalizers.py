"""
Normalizers for transforming raw listing dictionaries to canonical shape.
Pure functions - no IO, network, or side effects.
Minimal normalization - only when necessary.
"""

import logging
from datetime import date, datetime
from typing import Dict, Any, List

from analysis.calculations.unit_value import to_number

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "Professional"

CANONICAL_FIELDS = (
    'id', 'condominium', 'neighborhood', 'area', 'price', 'date',
    'source', 'responsible', 'unit_value', 'favorite'
)

# Backups written by the first version of the app use Portuguese keys,
# the JSON boundary uses camelCase
LEGACY_FIELD_MAP = {
    'condominio': 'condominium',
    'bairro': 'neighborhood',
    'preco': 'price',
    'data': 'date',
    'fonte': 'source',
    'responsavel': 'responsible',
    'm2': 'unit_value',
    'favorito': 'favorite',
    'unitValue': 'unit_value',
}

LEGACY_SOURCES = {
    'Profissional': DEFAULT_SOURCE,
}

TRUE_TEXT = {'true', '1', 'yes', 'sim'}
FALSE_TEXT = {'false', '0', 'no', 'nao', 'não', ''}


def _normalize_favorite(value: Any) -> Any:
    """
    Map a stored favorite flag to bool.

    Text and 0/1 flags from older backups are mapped explicitly; anything
    else is returned as-is so validation rejects it.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_TEXT:
            return True
        if text in FALSE_TEXT:
            return False
    return value


def normalize_listing(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Transform a raw listing dictionary to canonical shape.

    Minimal normalization:
    - Field name mapping (legacy backups use different names)
    - unit_value text to number, blank or zero to None
    - date objects to ISO strings (records must survive JSON)
    - favorite flags to bool (known text and 0/1 values only)

    area and price are kept as given: they are text inputs and only
    treated as numbers when computing.

    Args:
        raw: Listing dictionary from a form, backup or store

    Returns:
        Canonical listing dictionary
    """
    mapped = {}
    for key, value in raw.items():
        canonical_key = LEGACY_FIELD_MAP.get(key, key)
        if canonical_key not in CANONICAL_FIELDS:
            logger.debug(f"Dropping unknown listing field '{key}'")
            continue
        # Canonical keys win over legacy aliases
        if canonical_key in mapped and key != canonical_key:
            continue
        mapped[canonical_key] = value

    record_date = mapped.get('date')
    if isinstance(record_date, datetime):
        record_date = record_date.date().isoformat()
    elif isinstance(record_date, date):
        record_date = record_date.isoformat()

    unit_value = to_number(mapped.get('unit_value'))
    if unit_value is not None and unit_value <= 0:
        unit_value = None

    source = mapped.get('source') or DEFAULT_SOURCE

    return {
        'id': mapped.get('id'),
        'condominium': mapped.get('condominium', ''),
        'neighborhood': mapped.get('neighborhood', ''),
        'area': mapped.get('area'),
        'price': mapped.get('price'),
        'date': record_date,
        'source': LEGACY_SOURCES.get(source, source),
        'responsible': mapped.get('responsible', ''),
        'unit_value': unit_value,
        'favorite': _normalize_favorite(mapped.get('favorite')),
    }


def normalize_listings(raw_rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Normalize a sequence of raw listings, keeping order.

    Args:
        raw_rows: List of raw listing dictionaries

    Returns:
        List of canonical listing dictionaries
    """
    if not raw_rows:
        return []

    return [normalize_listing(raw) for raw in raw_rows]
