"""
Listing store - SQLite persistence for listing records.
Thin IO layer: list, create, delete, toggle and bulk replace.
"""

import logging
import os
import sqlite3
import uuid
from pathlib import Path
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = './data/m2.db'


class ListingNotFoundError(Exception):
    """Raised when a listing id is not in the store."""
    pass


def init_database(conn: sqlite3.Connection) -> None:
    """
    Initialize database with required tables.
    Idempotent - safe to call multiple times.

    Args:
        conn: SQLite connection
    """
    # seq keeps insertion order, id is the opaque store-assigned key.
    # area and price have no declared type so form text stays text and
    # numbers from a backup stay numbers.
    conn.execute("""
        CREATE TABLE IF NOT EXISTS listings (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id TEXT NOT NULL UNIQUE,
            condominium TEXT NOT NULL,
            neighborhood TEXT NOT NULL DEFAULT '',
            area,
            price,
            date TEXT,
            source TEXT NOT NULL,
            responsible TEXT NOT NULL DEFAULT '',
            unit_value REAL,
            favorite INTEGER NOT NULL DEFAULT 0 CHECK(favorite IN (0, 1))
        )
    """)

    conn.execute("CREATE INDEX IF NOT EXISTS idx_listings_condominium ON listings(condominium)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_listings_date ON listings(date)")

    conn.commit()


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """
    Get SQLite connection with proper configuration.

    Args:
        db_path: Path to SQLite database file (defaults to M2_DB_PATH)

    Returns:
        Configured SQLite connection
    """
    if db_path is None:
        db_path = os.getenv('M2_DB_PATH', DEFAULT_DB_PATH)

    if db_path != ':memory:':
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    init_database(conn)
    return conn


def _row_params(listing_id: str, record: Dict[str, Any]) -> tuple:
    return (
        listing_id,
        record['condominium'],
        record.get('neighborhood') or '',
        record.get('area'),
        record.get('price'),
        record.get('date'),
        record['source'],
        record.get('responsible') or '',
        record.get('unit_value'),
        1 if record.get('favorite') else 0
    )


_INSERT_SQL = """
    INSERT INTO listings (
        id, condominium, neighborhood, area, price, date,
        source, responsible, unit_value, favorite
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def insert_listing(conn: sqlite3.Connection, record: Dict[str, Any]) -> str:
    """
    Persist a new listing and assign its id.

    Args:
        conn: SQLite connection
        record: Canonical listing without id

    Returns:
        Assigned listing id
    """
    listing_id = uuid.uuid4().hex
    conn.execute(_INSERT_SQL, _row_params(listing_id, record))
    conn.commit()
    logger.debug(f"Inserted listing {listing_id} ({record['condominium']})")
    return listing_id


def list_listings(conn: sqlite3.Connection) -> List[Dict[str, Any]]:
    """
    Snapshot of every listing in insertion order.

    Args:
        conn: SQLite connection

    Returns:
        List of canonical listing dictionaries
    """
    cursor = conn.execute("""
        SELECT id, condominium, neighborhood, area, price, date,
               source, responsible, unit_value, favorite
        FROM listings
        ORDER BY seq
    """)

    listings = []
    for row in cursor.fetchall():
        listing = dict(zip(
            ['id', 'condominium', 'neighborhood', 'area', 'price', 'date',
             'source', 'responsible', 'unit_value', 'favorite'],
            tuple(row)
        ))
        listing['favorite'] = bool(listing['favorite'])
        listings.append(listing)

    return listings


def delete_listing(conn: sqlite3.Connection, listing_id: str) -> None:
    """
    Delete a listing by id.

    Raises:
        ListingNotFoundError: If the id is not in the store
    """
    cursor = conn.execute("DELETE FROM listings WHERE id = ?", (listing_id,))
    conn.commit()

    if cursor.rowcount == 0:
        raise ListingNotFoundError(f"Listing {listing_id} not found")


def set_favorite(conn: sqlite3.Connection, listing_id: str, favorite: bool) -> None:
    """
    Set the favorite flag of a listing.

    Raises:
        ListingNotFoundError: If the id is not in the store
    """
    cursor = conn.execute(
        "UPDATE listings SET favorite = ? WHERE id = ?",
        (1 if favorite else 0, listing_id)
    )
    conn.commit()

    if cursor.rowcount == 0:
        raise ListingNotFoundError(f"Listing {listing_id} not found")


def replace_listings(conn: sqlite3.Connection, records: List[Dict[str, Any]]) -> int:
    """
    Replace the whole store with the given records.
    All-or-nothing: on error the previous contents are kept.

    Records keep their id when they have one, otherwise one is assigned.

    Args:
        conn: SQLite connection
        records: Canonical listings in the desired order

    Returns:
        Number of listings stored
    """
    with conn:
        conn.execute("DELETE FROM listings")
        for record in records:
            listing_id = record.get('id') or uuid.uuid4().hex
            conn.execute(_INSERT_SQL, _row_params(str(listing_id), record))

    logger.info(f"Replaced listing store with {len(records)} listings")
    return len(records)
