"""
Tests for listing validators - pure functions for data validation.
"""

import pytest

from listings.transforms.validators import (
    ValidationError,
    check_unique_ids,
    validate_listing_row
)


@pytest.fixture
def valid_row():
    return {
        'id': 'abc',
        'condominium': 'Ocean View',
        'neighborhood': 'Centro',
        'area': '80',
        'price': '450000',
        'date': '2024-01-15',
        'source': 'Professional',
        'responsible': 'Ana',
        'unit_value': 5625.0,
        'favorite': False,
    }


class TestListingValidator:
    """Tests for validate_listing_row function."""

    def test_valid_row(self, valid_row):
        validate_listing_row(valid_row)

    def test_absent_unit_value_is_valid(self, valid_row):
        """Invalid numeric input yields an absent value, not an invalid row."""
        valid_row['area'] = '0'
        valid_row['unit_value'] = None
        validate_listing_row(valid_row)

    def test_missing_required_key(self, valid_row):
        del valid_row['condominium']
        with pytest.raises(ValidationError, match="Missing required keys"):
            validate_listing_row(valid_row)

    def test_empty_condominium(self, valid_row):
        valid_row['condominium'] = '   '
        with pytest.raises(ValidationError, match="condominium must not be empty"):
            validate_listing_row(valid_row)

    def test_condominium_type(self, valid_row):
        valid_row['condominium'] = 42
        with pytest.raises(ValidationError, match="condominium must be string"):
            validate_listing_row(valid_row)

    def test_bad_date(self, valid_row):
        valid_row['date'] = '15/01/2024'
        with pytest.raises(ValidationError, match="YYYY-MM-DD"):
            validate_listing_row(valid_row)

    def test_missing_date_allowed(self, valid_row):
        valid_row['date'] = None
        validate_listing_row(valid_row)

    @pytest.mark.parametrize("bad_value", ["5625", -1.0, 0, float('nan'), True])
    def test_bad_unit_value(self, valid_row, bad_value):
        valid_row['unit_value'] = bad_value
        with pytest.raises(ValidationError, match="unit_value"):
            validate_listing_row(valid_row)

    def test_favorite_type(self, valid_row):
        valid_row['favorite'] = 'yes'
        with pytest.raises(ValidationError, match="favorite must be bool"):
            validate_listing_row(valid_row)


class TestUniqueIds:
    """Tests for check_unique_ids function."""

    def test_unique(self):
        check_unique_ids([{'id': 'a'}, {'id': 'b'}, {'id': None}, {}])

    def test_duplicate(self):
        with pytest.raises(ValidationError, match="Duplicate listing id: a"):
            check_unique_ids([{'id': 'a'}, {'id': 'a'}])


class TestAreaAndPriceTypes:
    """area and price accept text, numbers or nothing."""

    @pytest.mark.parametrize("value", ['80', 80, 80.5, None, 'abc'])
    def test_accepted(self, valid_row, value):
        valid_row['area'] = value
        valid_row['price'] = value
        validate_listing_row(valid_row)

    @pytest.mark.parametrize("value", [[80], {'m2': 80}, True])
    def test_rejected(self, valid_row, value):
        valid_row['price'] = value
        with pytest.raises(ValidationError, match="price must be text or number"):
            validate_listing_row(valid_row)
