"""
Peer-group aggregation utilities.
Pure functions for per-condominium averages and ranking.
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, List, Optional

from analysis.calculations.unit_value import unit_value_of


def peer_unit_values(records: List[Dict[str, Any]], group_key: str) -> List[float]:
    """
    Collect unit values of a peer group in collection order.

    Grouping is by exact (case-sensitive) condominium name. Records without
    a unit value are excluded, never counted as zero.

    Args:
        records: Listing records
        group_key: Condominium name

    Returns:
        List of unit values for the group
    """
    values = []
    for record in records:
        if record.get('condominium') != group_key:
            continue
        value = unit_value_of(record)
        if value is not None:
            values.append(value)
    return values


def group_average(records: List[Dict[str, Any]], group_key: str) -> Optional[float]:
    """
    Calculate the mean unit value of a peer group.

    Args:
        records: Listing records
        group_key: Condominium name

    Returns:
        Arithmetic mean of the group's unit values, or None if the group
        has no record with a unit value
    """
    values = peer_unit_values(records, group_key)
    if not values:
        return None
    return float(np.mean(values))


def rank_groups(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Rank condominiums by average unit value.

    One entry per distinct non-empty condominium among records that have a
    unit value. Sorted descending by average; equal averages keep the order
    in which the groups were first encountered.

    Args:
        records: Listing records

    Returns:
        List of {'name', 'average', 'count'} dictionaries
    """
    rows = []
    for record in records:
        name = record.get('condominium')
        value = unit_value_of(record)
        if not name or value is None:
            continue
        rows.append({'name': name, 'unit_value': value})

    if not rows:
        return []

    df = pd.DataFrame(rows)
    grouped = (
        df.groupby('name', sort=False)['unit_value']
        .agg(average='mean', count='count')
        .reset_index()
    )
    grouped = grouped.sort_values('average', ascending=False, kind='stable')

    return [
        {
            'name': row['name'],
            'average': float(row['average']),
            'count': int(row['count'])
        }
        for row in grouped.to_dict('records')
    ]
