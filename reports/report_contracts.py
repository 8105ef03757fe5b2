"""
Report content synthesis.
Builds the structured one-page report for a listing; rendering it to a
document is left to the caller.
"""

from datetime import date
from typing import Dict, Any, List, Optional

from analysis.calculations.market_position import (
    INSUFFICIENT,
    classify,
    position_for_difference,
    relative_difference
)
from analysis.calculations.peer_groups import group_average
from analysis.calculations.trend import parse_record_date
from analysis.calculations.unit_value import round_half_up, to_number, unit_value_of
from reports.formatters import (
    format_area,
    format_currency,
    format_percentage,
    format_unit_value
)
from reports.labelers import label_position


class ReportContractError(Exception):
    """Raised when report content cannot be built."""
    pass


REPORT_TITLE = "m²"
REPORT_SUBTITLE = "local real-estate index"
CHART_TITLE = "Appreciation history"
TAGLINE = "m² - the market does not opine, it reveals"
GENERATED_BY = "Document generated by the m² system - local real-estate index"

# Required report sections in order
REQUIRED_REPORT_SECTIONS = [
    'header',
    'listing',
    'market',
    'diagnostic',
    'chart',
    'footer'
]


def peer_series(records: List[Dict[str, Any]], record: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Chronological unit values of the record's peer group.

    Peers share the condominium and have a unit value. Undated peers sort
    first; equal dates keep collection order.

    Args:
        records: Listing records
        record: Target record

    Returns:
        List of {'date', 'unit_value'} points
    """
    points = []
    for peer in records:
        if peer.get('condominium') != record.get('condominium'):
            continue
        value = unit_value_of(peer)
        if value is None:
            continue
        points.append((parse_record_date(peer), peer.get('date'), value))

    points.sort(key=lambda p: p[0] or date.min)
    return [{'date': raw_date, 'unit_value': value} for _, raw_date, value in points]


def build_report_content(
    record: Dict[str, Any],
    records: List[Dict[str, Any]],
    issued_on: Optional[date] = None,
    responsible: Optional[str] = None
) -> Dict[str, Any]:
    """
    Build every derived value needed to render a listing report.

    Currency values are rounded to 2 decimals and percentages to 1; the
    display strings carry the same rounding.

    Args:
        record: Listing to report on
        records: Full collection (current snapshot)
        issued_on: Issue date printed in the footer (defaults to today)
        responsible: Name printed in the footer (defaults to the record's
            responsible)

    Returns:
        Report content dictionary with the REQUIRED_REPORT_SECTIONS keys

    Raises:
        ReportContractError: If the record has no condominium
    """
    if not record or not record.get('condominium'):
        raise ReportContractError("Report requires a listing with a condominium")

    if issued_on is None:
        issued_on = date.today()
    if responsible is None:
        responsible = record.get('responsible', '')

    series = peer_series(records, record)
    values = [point['unit_value'] for point in series]
    average = group_average(records, record['condominium'])
    unit_value = unit_value_of(record)

    # Same average and bucket as the listing's classification
    classification = classify(records, record)
    ratio = classification['difference']
    position = classification['position']
    if position == INSUFFICIENT:
        ratio = None
        # A lone record is compared against itself
        if average and unit_value is not None:
            ratio = relative_difference(unit_value, average)
            position = position_for_difference(ratio)

    difference = None
    diagnostic = None
    if ratio is not None:
        difference = ratio * 100
        diagnostic = label_position(position)

    chart = None
    if len(series) > 1:
        chart = {
            'title': CHART_TITLE,
            'points': series,
            'min': min(values),
            'max': max(values)
        }

    return {
        'header': {
            'title': REPORT_TITLE,
            'subtitle': REPORT_SUBTITLE
        },
        'listing': {
            'id': record.get('id'),
            'condominium': record.get('condominium'),
            'neighborhood': record.get('neighborhood', ''),
            'area': record.get('area'),
            'area_display': format_area(record.get('area')),
            'price': record.get('price'),
            'price_display': _price_display(record.get('price')),
            'unit_value': unit_value,
            'unit_value_display': format_unit_value(unit_value),
            'date': record.get('date')
        },
        'market': {
            'group_average': round_half_up(average, 2) if average is not None else None,
            'group_average_display': format_unit_value(average),
            'percent_difference': round_half_up(difference, 1) if difference is not None else None,
            'percent_difference_display': format_percentage(difference),
            'peers': len(series)
        },
        'diagnostic': diagnostic,
        'chart': chart,
        'footer': {
            'tagline': TAGLINE,
            'issued_on': issued_on.isoformat(),
            'responsible': responsible,
            'generated_by': GENERATED_BY
        }
    }


def _price_display(price: Any) -> str:
    """Format the listing price, which may still be form text."""
    return format_currency(to_number(price))


def validate_report_content(content: Dict[str, Any]) -> None:
    """
    Check that report content has every section a renderer expects.

    Args:
        content: Report content dictionary

    Raises:
        ReportContractError: If a section is missing or inconsistent
    """
    for section in REQUIRED_REPORT_SECTIONS:
        if section not in content:
            raise ReportContractError(f"Missing required section: {section}")

    chart = content['chart']
    if chart is not None and len(chart.get('points', [])) < 2:
        raise ReportContractError("Chart requires more than one point")

    market = content['market']
    if market['percent_difference'] is None and content['diagnostic'] is not None:
        raise ReportContractError("Diagnostic present without a percent difference")
