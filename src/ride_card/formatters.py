"""Formatting utilities for display.

All output is built with f-strings so it never depends on the process locale.
"""

from datetime import timedelta

KM_TO_MI = 0.621371
M_TO_FT = 3.28084
MPS_TO_KMH = 3.6

ELLIPSIS = "…"


def format_hhmmss(duration: timedelta) -> str:
    """Format a duration as HH:MM:SS (hours are not wrapped at 24)."""
    total_seconds = int(duration.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_distance(meters: float, unit: str = "km", decimals: int = 1) -> str:
    km = meters / 1000
    value = km * KM_TO_MI if unit == "mi" else km
    return f"{value:.{decimals}f} {unit}"


def format_speed(mps: float, unit: str = "km/h", decimals: int = 1) -> str:
    if unit == "m/s":
        value = mps
    elif unit == "mph":
        value = mps * MPS_TO_KMH * KM_TO_MI
    else:
        value = mps * MPS_TO_KMH
    return f"{value:.{decimals}f} {unit}"


def format_elevation(meters: float, unit: str = "m") -> str:
    value = meters * M_TO_FT if unit == "ft" else meters
    return f"{value:.0f} {unit}"


def truncate_ellipsis(text: str, max_chars: int) -> str:
    """Shorten text to at most max_chars characters, ending in an ellipsis if cut."""
    if max_chars <= 0:
        return ""
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 1] + ELLIPSIS
