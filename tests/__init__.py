"""
Test Suite for the m² Local Real-Estate Index

Includes:
- Unit tests for calculations (analysis/tests)
- Record lifecycle and backup tests (listings/tests)
- Report content and rendering tests (reports/tests)
- Store tests on SQLite (storage/tests)
- CLI tests against a temp database (tests/)
"""
