"""
Market position classification.
Deterministic ±10% band around the peer-group average, shared by every
consumer (diagnostic, report, opportunity filter, market tag).
"""

from typing import Any, Dict, List, Optional

from analysis.calculations.peer_groups import group_average, peer_unit_values
from analysis.calculations.unit_value import unit_value_of

MARKET_BAND = 0.10
MIN_PEERS = 2

ABOVE = "above"
BELOW = "below"
WITHIN = "within"
INSUFFICIENT = "insufficient"

POSITION_LABELS = {
    ABOVE: "above market",
    BELOW: "buying opportunity",
    WITHIN: "within market",
    INSUFFICIENT: "insufficient data",
}

POSITION_TONES = {
    ABOVE: "warn",
    BELOW: "info",
    WITHIN: "positive",
    INSUFFICIENT: "neutral",
}

TONE_COLORS = {
    "warn": "#D64545",
    "info": "#2D7FF9",
    "positive": "#1FA971",
    "neutral": "#6B778C",
}

POSITION_TAGS = {
    ABOVE: "high",
    BELOW: "low",
    WITHIN: "ok",
    INSUFFICIENT: "",
}


def relative_difference(unit_value: float, average: float) -> Optional[float]:
    """
    Relative difference of a unit value against an average.

    Formula: (unit_value - average) / average

    Returns:
        Difference as decimal (0.12 = 12% above), or None if the average
        is missing or zero
    """
    if not average:
        return None
    return (unit_value - average) / average


def position_for_difference(diff: float) -> str:
    """
    Apply the ±10% band to a relative difference.

    Thresholds (strict on both sides):
    - Above: diff > 0.10
    - Below: diff < -0.10
    - Within: otherwise

    Args:
        diff: Relative difference as decimal

    Returns:
        Position bucket: "above", "below" or "within"
    """
    if diff > MARKET_BAND:
        return ABOVE
    if diff < -MARKET_BAND:
        return BELOW
    return WITHIN


def _position_result(position: str, diff: Optional[float] = None,
                     average: Optional[float] = None, peers: int = 0) -> Dict[str, Any]:
    tone = POSITION_TONES[position]
    return {
        'position': position,
        'label': POSITION_LABELS[position],
        'tone': tone,
        'color': TONE_COLORS[tone],
        'difference': diff,
        'group_average': average,
        'peers': peers
    }


def classify(records: List[Dict[str, Any]], record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Classify a record against its peer group.

    The peer group is every record sharing the condominium and having a unit
    value, the classified record included. The average comes from
    group_average(), the same value reports print.

    Args:
        records: Listing records (current snapshot)
        record: Record to classify

    Returns:
        Dictionary with position, label, tone, color, difference,
        group_average and peers
    """
    values = peer_unit_values(records, record.get('condominium'))
    unit_value = unit_value_of(record)

    if len(values) < MIN_PEERS or unit_value is None:
        return _position_result(INSUFFICIENT, peers=len(values))

    average = group_average(records, record.get('condominium'))
    diff = relative_difference(unit_value, average)
    if diff is None:
        return _position_result(INSUFFICIENT, average=average, peers=len(values))

    return _position_result(
        position_for_difference(diff),
        diff=diff,
        average=average,
        peers=len(values)
    )


def is_opportunity(records: List[Dict[str, Any]], record: Dict[str, Any]) -> bool:
    """
    Check whether a record is priced more than 10% below its peer group.

    Same boundary as the "buying opportunity" bucket of classify().
    """
    return classify(records, record)['position'] == BELOW


def opportunities(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    List every opportunity in the collection.

    Args:
        records: Listing records

    Returns:
        Records for which is_opportunity() holds, in collection order
    """
    return [record for record in records if is_opportunity(records, record)]


def market_tag(records: List[Dict[str, Any]], record: Dict[str, Any]) -> str:
    """
    Short market tag for styling a record: "high", "low", "ok" or "".
    """
    return POSITION_TAGS[classify(records, record)['position']]
