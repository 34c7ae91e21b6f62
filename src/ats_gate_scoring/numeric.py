"""Rounding and clamping helpers shared by the scorers."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float, low: int = 0, high: int = 100) -> int:
    """Round half-up and clamp into [low, high]."""
    return max(low, min(high, round_half_up(value)))


def format_years(years: float) -> str:
    """Render a year count without a trailing '.0'."""
    return str(int(years)) if float(years).is_integer() else f"{years:.1f}"
