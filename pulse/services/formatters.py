"""
Display formatting helpers for numbers and forecast labels.
"""

from datetime import date
from typing import Optional

from pulse.services.statistics import round_half_up


def format_number(num: float) -> str:
    """
    Compact a number with K/M suffixes.

    Example:
        >>> format_number(1500), format_number(2_300_000), format_number(950)
        ('1.5K', '2.3M', '950')
    """
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    if float(num).is_integer():
        return f"{int(num):,}"
    return f"{num:,}"


def format_predicted_date(value: Optional[date]) -> str:
    """Format a forecast date as 'Jun 15, 2024', or 'Unknown' when absent."""
    if value is None:
        return 'Unknown'
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def format_days_until(days: Optional[int]) -> str:
    """
    Human-readable countdown to a forecast date.

    Example:
        >>> [format_days_until(d) for d in (None, 0, 1, 3, 14, 60, 365)]
        ['', 'Any day now', 'Tomorrow', '3 days', '~2 weeks', '~2 months', '~1.0 years']
    """
    if days is None:
        return ''
    if days <= 0:
        return 'Any day now'
    if days == 1:
        return 'Tomorrow'
    if days < 7:
        return f"{days} days"
    if days < 30:
        return f"~{round_half_up(days / 7)} weeks"
    if days < 365:
        return f"~{round_half_up(days / 30)} months"
    return f"~{days / 365:.1f} years"
