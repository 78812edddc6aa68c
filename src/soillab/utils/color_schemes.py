"""
Display color coding for strength rating and frost susceptibility bands.

Colors are plain hex strings; the rendering layer decides how to use them:
- Greens for favourable bands (excellent strength, negligible frost action)
- Yellows/oranges for intermediate bands
- Red for unfavourable bands
"""

from typing import Dict

RATING_COLORS: Dict[str, str] = {
    'excellent': '#4CAF50',   # Green
    'very_good': '#8BC34A',   # Light green
    'good': '#CDDC39',        # Lime
    'fair': '#FFEB3B',        # Yellow
    'poor': '#FF9800',        # Orange
    'very_poor': '#F44336',   # Red
}

FROST_COLORS: Dict[str, str] = {
    'negligible': '#4CAF50',
    'low': '#8BC34A',
    'medium': '#FFEB3B',
    'high': '#FF9800',
    'very_high': '#F44336',
}

UNKNOWN_COLOR = '#808080'


def get_rating_color(rating: str) -> str:
    """
    Get hex color string for a CBR strength rating.

    Args:
        rating: Rating code (e.g. "very_good")

    Returns:
        Hex color string, grey for unknown ratings
    """
    return RATING_COLORS.get(rating, UNKNOWN_COLOR)


def get_frost_color(band: str) -> str:
    """Get hex color string for a frost susceptibility band."""
    return FROST_COLORS.get(band, UNKNOWN_COLOR)
