"""
Fixed report text per market position.
Headline and conclusion sentences are content contracts for the renderer.
"""

from typing import Dict

from analysis.calculations.market_position import (
    ABOVE,
    BELOW,
    WITHIN,
    POSITION_TONES,
    TONE_COLORS
)


class LabelerError(Exception):
    """Raised when labeler input validation fails."""
    pass


HEADLINES = {
    ABOVE: "Above market",
    BELOW: "Buying opportunity",
    WITHIN: "Within market",
}

CONCLUSIONS = {
    ABOVE: "priced above market, expect reduced demand until price adjustment",
    BELOW: "represents a buying opportunity relative to current market",
    WITHIN: "positioned within market value, with good expected liquidity",
}


def label_position(position: str) -> Dict[str, str]:
    """
    Headline, conclusion and tone for a market position.

    Args:
        position: Bucket from position_for_difference() ("above", "below"
            or "within")

    Returns:
        Dictionary with position, headline, conclusion, tone and color

    Raises:
        LabelerError: If the position has no report text
    """
    if position not in CONCLUSIONS:
        raise LabelerError(f"No report text for market position: {position!r}")

    tone = POSITION_TONES[position]
    return {
        'position': position,
        'headline': HEADLINES[position],
        'conclusion': CONCLUSIONS[position],
        'tone': tone,
        'color': TONE_COLORS[tone]
    }
