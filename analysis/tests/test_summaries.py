"""
Tests for aggregate summaries.
Search, overall summary, listing filter and chart series.
"""

import pytest

from analysis.summaries import (
    chart_series,
    filter_listings,
    overall_summary,
    search_summary
)


def listing(condominium, unit_value, record_date='2024-01-01', neighborhood='Centro'):
    """Build a minimal listing record."""
    return {
        'condominium': condominium,
        'neighborhood': neighborhood,
        'unit_value': unit_value,
        'date': record_date
    }


@pytest.fixture
def sample_records():
    """Two condominiums, one with enough history for a trend."""
    return [
        listing('Ocean View', 100.0, '2024-01-01'),
        listing('Hillside Park', 300.0, '2024-01-15', neighborhood='Alto'),
        listing('Ocean View', 100.0, '2024-02-01'),
        listing('Ocean View', 200.0, '2024-03-01'),
        listing('Ocean View', 200.0, '2024-04-01'),
        listing('Ocean View Tower', None, '2024-05-01'),
    ]


class TestSearchSummary:
    """Tests for search_summary function."""

    def test_empty_query(self, sample_records):
        assert search_summary(sample_records, '') is None

    def test_no_match(self, sample_records):
        assert search_summary(sample_records, 'Lakeside') is None

    def test_case_insensitive_substring(self, sample_records):
        """Name is the first match; stats cover every match with a value."""
        summary = search_summary(sample_records, 'ocean')

        assert summary['name'] == 'Ocean View'
        assert summary['average'] == pytest.approx(150.0)
        assert summary['count'] == 4
        assert summary['trend'] == pytest.approx(100.0)

    def test_trend_none_for_short_history(self, sample_records):
        summary = search_summary(sample_records, 'HILL')
        assert summary['name'] == 'Hillside Park'
        assert summary['average'] == pytest.approx(300.0)
        assert summary['count'] == 1
        assert summary['trend'] is None

    def test_matches_without_values(self):
        """Matches lacking unit values give no average."""
        records = [listing('Ocean View', None)]
        summary = search_summary(records, 'ocean')
        assert summary['average'] is None
        assert summary['count'] == 0


class TestOverallSummary:
    """Tests for overall_summary function."""

    def test_empty_collection(self):
        assert overall_summary([]) is None

    def test_single_record(self):
        summary = overall_summary([listing('Ocean View', 50.0, '2024-01-01')])
        assert summary == {'average': 50, 'count': 1, 'most_recent_date': '2024-01-01'}

    def test_counts_all_records(self, sample_records):
        """count includes records without a unit value; average does not."""
        summary = overall_summary(sample_records)
        assert summary['count'] == 6
        assert summary['average'] == pytest.approx(180.0)
        assert summary['most_recent_date'] == '2024-05-01'

    def test_most_recent_ignores_collection_order(self):
        records = [
            listing('A', 10.0, '2024-06-01'),
            listing('B', 10.0, '2023-12-31'),
            listing('C', 10.0, '2024-02-01'),
        ]
        assert overall_summary(records)['most_recent_date'] == '2024-06-01'

    def test_no_values_no_dates(self):
        records = [listing('A', None, None)]
        summary = overall_summary(records)
        assert summary == {'average': None, 'count': 1, 'most_recent_date': None}


class TestFilterListings:
    """Tests for filter_listings function."""

    def test_empty_query_keeps_all(self, sample_records):
        assert filter_listings(sample_records, '') == sample_records

    def test_matches_condominium_or_neighborhood(self, sample_records):
        by_neighborhood = filter_listings(sample_records, 'alto')
        assert [r['condominium'] for r in by_neighborhood] == ['Hillside Park']

        by_condominium = filter_listings(sample_records, 'TOWER')
        assert [r['condominium'] for r in by_condominium] == ['Ocean View Tower']


class TestChartSeries:
    """Tests for chart_series function."""

    def test_empty_query(self, sample_records):
        assert chart_series(sample_records, '') == []

    def test_sorted_by_date_and_skips_missing_values(self):
        records = [
            listing('Ocean View', 200.0, '2024-03-01'),
            listing('Ocean View', 100.0, '2024-01-01'),
            listing('Ocean View', None, '2024-02-01'),
        ]
        assert chart_series(records, 'ocean') == [
            {'date': '2024-01-01', 'unit_value': 100.0},
            {'date': '2024-03-01', 'unit_value': 200.0},
        ]

    def test_undated_points_first(self):
        records = [
            listing('Ocean View', 200.0, '2024-03-01'),
            listing('Ocean View', 150.0, None),
        ]
        assert [p['unit_value'] for p in chart_series(records, 'ocean')] == [150.0, 200.0]
