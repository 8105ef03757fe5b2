"""
JSON backup export/import for the listing collection.
Import replaces the collection wholesale or not at all.
"""

import json
import logging
from typing import Dict, Any, List, Union

from listings.transforms.normalizers import normalize_listings
from listings.transforms.validators import (
    ValidationError,
    check_unique_ids,
    validate_listing_row
)

logger = logging.getLogger(__name__)

MALFORMED_IMPORT = "MalformedImport"


class MalformedImportError(ValueError):
    """Raised when a backup payload is not a JSON array of listings."""
    pass


def export_collection(records: List[Dict[str, Any]]) -> str:
    """
    Serialize the collection as a pretty-printed JSON array.

    Args:
        records: Listing records

    Returns:
        JSON text
    """
    return json.dumps(list(records), indent=2, ensure_ascii=False, default=str)


def parse_backup(text: Union[str, bytes]) -> List[Dict[str, Any]]:
    """
    Parse backup text into canonical listing records.

    Args:
        text: JSON text, expected to be an array of listing objects. Raw
            file bytes must be UTF-8.

    Returns:
        List of canonical listing dictionaries

    Raises:
        MalformedImportError: If the text is not JSON, not an array, or
            holds entries that are not valid listings
    """
    if isinstance(text, bytes):
        try:
            text = text.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedImportError(f"Backup is not UTF-8 text: {e}") from e

    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as e:
        raise MalformedImportError(f"Backup is not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise MalformedImportError(
            f"Backup must be a JSON array, got {type(payload).__name__}"
        )

    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise MalformedImportError(
                f"Backup entry {index} must be an object, got {type(item).__name__}"
            )

    records = normalize_listings(payload)

    try:
        for index, record in enumerate(records):
            try:
                validate_listing_row(record)
            except ValidationError as e:
                raise ValidationError(f"entry {index}: {e}") from e
        check_unique_ids(records)
    except ValidationError as e:
        raise MalformedImportError(f"Backup holds an invalid listing: {e}") from e

    return records


def restore_collection(
    current: List[Dict[str, Any]],
    text: Union[str, bytes]
) -> Dict[str, Any]:
    """
    Replace the collection with the contents of a backup.

    On failure the current collection is returned untouched.

    Args:
        current: Collection before the import
        text: Backup JSON text or raw file bytes

    Returns:
        Dictionary with status, records (new or unchanged), count and,
        on failure, error_type and error
    """
    try:
        records = parse_backup(text)
    except MalformedImportError as e:
        logger.warning(f"Backup import rejected: {e}")
        return {
            'status': 'failed',
            'error_type': MALFORMED_IMPORT,
            'error': str(e),
            'records': current,
            'count': len(current)
        }

    logger.info(f"Backup import restored {len(records)} listings")
    return {
        'status': 'completed',
        'error_type': None,
        'error': None,
        'records': records,
        'count': len(records)
    }
