"""
Listing Records Module

Canonical shape and lifecycle of listing records:
- Normalization and validation of record dictionaries
- Creation precondition (responsible party) and collection operations
- JSON backup export/import
"""

__version__ = "0.1.0"
