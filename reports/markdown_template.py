"""
Markdown template for rendering report content to a readable document.
Pure function - no I/O, just template rendering.
"""

from typing import Dict, Any, Optional

from reports.formatters import format_date_display, format_unit_value
from reports.report_contracts import ReportContractError, validate_report_content


class TemplateError(Exception):
    """Raised when template rendering fails."""
    pass


def render_report_markdown(content: Dict[str, Any]) -> str:
    """
    Render report content to Markdown.

    Args:
        content: Dictionary from build_report_content()

    Returns:
        Formatted Markdown string

    Raises:
        TemplateError: If the content is incomplete
    """
    if not content:
        raise TemplateError("Empty or invalid report content provided")

    try:
        validate_report_content(content)
    except ReportContractError as e:
        raise TemplateError(str(e)) from e

    sections = [
        _render_header(content['header']),
        _render_listing(content['listing'], content['market']),
        _render_diagnostic(content['diagnostic']),
        _render_chart(content['chart']),
        _render_footer(content['footer'])
    ]

    return '\n\n'.join(section for section in sections if section)


def _render_header(header: Dict[str, Any]) -> str:
    """Render report title block."""
    return f"# {header['title']}\n\n*{header['subtitle']}*\n\n---"


def _render_listing(listing: Dict[str, Any], market: Dict[str, Any]) -> str:
    """Render listing facts and market comparison."""
    lines = [
        f"**Condominium:** {listing['condominium']}",
        f"**Neighborhood:** {listing['neighborhood']}",
        f"**Area:** {listing['area_display']}",
        f"**Price:** {listing['price_display']}",
        f"**Value per m²:** {listing['unit_value_display']}",
    ]

    if market['percent_difference'] is not None:
        lines.append(f"**Difference to market:** {market['percent_difference_display']}")

    if market['group_average']:
        lines.append(f"**Condominium average:** {market['group_average_display']}")

    return '  \n'.join(lines)


def _render_diagnostic(diagnostic: Optional[Dict[str, Any]]) -> str:
    """Render diagnostic headline and conclusion."""
    if diagnostic is None:
        return ""

    return (
        f"## {diagnostic['headline']}\n\n"
        f"**Conclusion:** The property is {diagnostic['conclusion']}."
    )


def _render_chart(chart: Optional[Dict[str, Any]]) -> str:
    """Render the appreciation history as a table."""
    if chart is None:
        return ""

    rows = [
        f"### {chart['title']}",
        "",
        "| Date | Value per m² |",
        "|------|--------------|",
    ]
    for point in chart['points']:
        date_display = format_date_display(point['date']) if point['date'] else "Undated"
        rows.append(f"| {date_display} | {format_unit_value(point['unit_value'])} |")

    return '\n'.join(rows)


def _render_footer(footer: Dict[str, Any]) -> str:
    """Render report footer."""
    return (
        f"---\n\n"
        f"*{footer['tagline']}*\n\n"
        f"Issued on: {format_date_display(footer['issued_on'])}  \n"
        f"Responsible: {footer['responsible']}  \n"
        f"{footer['generated_by']}"
    )
