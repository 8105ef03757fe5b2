"""
Tests for peer-group aggregation.
Small synthetic collections with hand-computed averages.
"""

import pytest

from analysis.calculations.peer_groups import (
    group_average,
    peer_unit_values,
    rank_groups
)


def listing(condominium, unit_value, **extra):
    """Build a minimal listing record."""
    record = {'condominium': condominium, 'unit_value': unit_value}
    record.update(extra)
    return record


class TestGroupAverage:
    """Tests for group_average function."""

    def test_mean_of_group(self):
        """Average covers only the requested condominium."""
        records = [
            listing('Ocean View', 5000.0),
            listing('Ocean View', 6000.0),
            listing('Hillside', 9000.0),
        ]
        assert group_average(records, 'Ocean View') == pytest.approx(5500.0)
        assert group_average(records, 'Hillside') == pytest.approx(9000.0)

    def test_empty_group_is_none(self):
        """Unknown group gives None, not zero."""
        records = [listing('Ocean View', 5000.0)]
        assert group_average(records, 'Hillside') is None
        assert group_average([], 'Ocean View') is None

    def test_missing_values_excluded(self):
        """Records without unit value are excluded, not counted as zero."""
        records = [
            listing('Ocean View', 5000.0),
            listing('Ocean View', None),
            listing('Ocean View', ""),
            listing('Ocean View', 7000.0),
        ]
        assert group_average(records, 'Ocean View') == pytest.approx(6000.0)

    def test_group_with_only_missing_values(self):
        """A group whose records all lack values has no average."""
        records = [listing('Ocean View', None), listing('Ocean View', "")]
        assert group_average(records, 'Ocean View') is None

    def test_grouping_is_case_sensitive(self):
        """Group identity is the exact condominium string."""
        records = [listing('Ocean View', 5000.0), listing('ocean view', 9000.0)]
        assert group_average(records, 'Ocean View') == pytest.approx(5000.0)

    def test_peer_unit_values_order(self):
        """Peer values come back in collection order."""
        records = [
            listing('A', 3.0), listing('B', 1.0), listing('A', 2.0), listing('A', None)
        ]
        assert peer_unit_values(records, 'A') == [3.0, 2.0]


class TestRankGroups:
    """Tests for rank_groups function."""

    def test_sorted_descending(self):
        """Groups are ordered by average, highest first."""
        records = [
            listing('Low', 3000.0),
            listing('High', 9000.0),
            listing('Mid', 5000.0),
            listing('High', 7000.0),
        ]
        ranking = rank_groups(records)

        assert [g['name'] for g in ranking] == ['High', 'Mid', 'Low']
        assert ranking[0]['average'] == pytest.approx(8000.0)
        assert ranking[0]['count'] == 2
        assert ranking[1]['count'] == 1

    def test_non_increasing_averages(self):
        """Output averages never increase."""
        records = [listing(f'C{i % 5}', 1000.0 + (i * 37) % 400) for i in range(40)]
        averages = [g['average'] for g in rank_groups(records)]
        assert averages == sorted(averages, reverse=True)

    def test_ties_keep_encounter_order(self):
        """Equal averages keep the order groups were first seen."""
        records = [
            listing('Beta', 5000.0),
            listing('Alpha', 5000.0),
            listing('Top', 9000.0),
            listing('Gamma', 5000.0),
        ]
        ranking = rank_groups(records)
        assert [g['name'] for g in ranking] == ['Top', 'Beta', 'Alpha', 'Gamma']

    def test_skips_empty_names_and_missing_values(self):
        """Records without name or unit value are not ranked or counted."""
        records = [
            listing('', 9000.0),
            listing(None, 9000.0),
            listing('Ocean View', None),
            listing('Ocean View', 5000.0),
            listing('Hillside', ""),
        ]
        ranking = rank_groups(records)
        assert ranking == [{'name': 'Ocean View', 'average': 5000.0, 'count': 1}]

    def test_empty_collection(self):
        """No records, no ranking."""
        assert rank_groups([]) == []

    def test_plain_types(self):
        """Entries carry plain Python numbers."""
        entry = rank_groups([listing('Ocean View', 5000.0)])[0]
        assert type(entry['average']) is float
        assert type(entry['count']) is int
