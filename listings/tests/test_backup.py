"""
Tests for JSON backup export and import.
"""

import json

import pytest

from listings.backup import (
    MALFORMED_IMPORT,
    MalformedImportError,
    export_collection,
    parse_backup,
    restore_collection
)


@pytest.fixture
def collection():
    return [
        {
            'id': 'a1',
            'condominium': 'Edifício Aurora',
            'neighborhood': 'Centro',
            'area': '80',
            'price': '450000',
            'date': '2024-01-15',
            'source': 'Professional',
            'responsible': 'Ana',
            'unit_value': 5625.0,
            'favorite': True,
        },
        {
            'id': 'b2',
            'condominium': 'Ocean View',
            'neighborhood': 'Praia',
            'area': '0',
            'price': '300000',
            'date': '2024-02-01',
            'source': 'Professional',
            'responsible': 'Bruno',
            'unit_value': None,
            'favorite': False,
        },
    ]


class TestExport:
    """Tests for export_collection function."""

    def test_pretty_printed_array(self, collection):
        text = export_collection(collection)
        assert text.startswith('[\n  {')
        assert json.loads(text) == collection

    def test_keeps_non_ascii(self, collection):
        assert 'Edifício Aurora' in export_collection(collection)

    def test_empty(self):
        assert json.loads(export_collection([])) == []


class TestParseBackup:
    """Tests for parse_backup function."""

    def test_round_trip(self, collection):
        """Export then import gives back an equal collection."""
        assert parse_backup(export_collection(collection)) == collection

    def test_legacy_keys(self):
        legacy = json.dumps([{
            'id': 'x1', 'condominio': 'Ocean View', 'bairro': 'Centro',
            'area': '80', 'preco': '450000', 'data': '2024-01-15',
            'fonte': 'Profissional', 'responsavel': 'Ana', 'm2': '5625.00',
        }])
        records = parse_backup(legacy)
        assert records[0]['condominium'] == 'Ocean View'
        assert records[0]['unit_value'] == 5625.0
        assert records[0]['source'] == 'Professional'
        assert records[0]['favorite'] is False

    def test_not_json(self):
        with pytest.raises(MalformedImportError, match="not valid JSON"):
            parse_backup('{not json')

    def test_object_instead_of_array(self):
        with pytest.raises(MalformedImportError, match="must be a JSON array"):
            parse_backup('{"id": "a1"}')

    def test_non_object_entry(self):
        with pytest.raises(MalformedImportError, match="entry 1 must be an object"):
            parse_backup('[{"condominium": "A"}, 42]')

    def test_invalid_listing(self):
        with pytest.raises(MalformedImportError, match="invalid listing"):
            parse_backup('[{"condominium": ""}]')

    def test_duplicate_ids(self, collection):
        collection[1]['id'] = 'a1'
        with pytest.raises(MalformedImportError, match="Duplicate listing id"):
            parse_backup(export_collection(collection))


class TestRestoreCollection:
    """Tests for restore_collection function."""

    def test_replaces_wholesale(self, collection):
        current = [{'id': 'old', 'condominium': 'Old'}]
        result = restore_collection(current, export_collection(collection))

        assert result['status'] == 'completed'
        assert result['records'] == collection
        assert result['count'] == 2
        assert result['error_type'] is None

    @pytest.mark.parametrize("text", ['{"id": "a1"}', 'garbage', '[1, 2]', ''])
    def test_malformed_leaves_collection_unchanged(self, collection, text):
        result = restore_collection(collection, text)

        assert result['status'] == 'failed'
        assert result['error_type'] == MALFORMED_IMPORT
        assert result['records'] is collection
        assert result['count'] == 2

    def test_empty_array_clears(self, collection):
        result = restore_collection(collection, '[]')
        assert result['status'] == 'completed'
        assert result['records'] == []


class TestBackupBytes:
    """Raw file bytes are decoded as UTF-8."""

    def test_utf8_bytes(self, collection):
        raw = export_collection(collection).encode('utf-8')
        assert parse_backup(raw) == collection

    def test_not_utf8(self):
        with pytest.raises(MalformedImportError, match="not UTF-8"):
            parse_backup(b'\xff\xfe[not utf8')

    def test_restore_rejects_not_utf8(self, collection):
        result = restore_collection(collection, b'\xff\xfe[not utf8')

        assert result['status'] == 'failed'
        assert result['error_type'] == MALFORMED_IMPORT
        assert result['records'] is collection


class TestFavoriteText:
    """Text favorite flags in a backup."""

    def test_false_text_stays_false(self, collection):
        collection[0]['favorite'] = 'false'
        assert parse_backup(json.dumps(collection))[0]['favorite'] is False

    def test_unknown_text_rejected(self, collection):
        collection[0]['favorite'] = 'maybe'
        with pytest.raises(MalformedImportError, match="favorite"):
            parse_backup(json.dumps(collection))
