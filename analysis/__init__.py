"""
Market Analytics Module

Derives price-per-area metrics from listing records:
- Unit value (price / area)
- Peer-group averages and ranking by condominium
- Temporal trend (older half vs newer half)
- Market position (above / within / below a ±10% band)
"""

__version__ = "0.1.0"
