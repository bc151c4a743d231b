"""Common helpers shared across models."""

import math
from datetime import UTC, date, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_today() -> date:
    return utc_now().date()


def round_half_up(value: float) -> int:
    """Round halves toward +inf, matching how the widget page rounds temperatures."""
    return math.floor(value + 0.5)
