"""Totals and day rounding for an estimation."""
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from estimator.config import get_settings
from estimator.errors import ValidationError

HALF_DAY = Decimal("0.5")


@dataclass(frozen=True)
class EstimationSummary:
    total_hours: int
    estimated_days: Decimal
    estimated_days_label: str


def total_hours(hours: Iterable[int]) -> int:
    """Sum of line item hours. Empty input is 0."""
    return sum(int(h) for h in hours)


def estimated_days(
    hours: int,
    hours_per_day: int | None = None,
    half_day_threshold_hours: int | None = None,
) -> Decimal:
    """Half a day up to and including the threshold, otherwise whole days rounded up."""
    settings = get_settings()
    if hours_per_day is None:
        hours_per_day = settings.hours_per_day
    if half_day_threshold_hours is None:
        half_day_threshold_hours = settings.half_day_threshold_hours
    if hours < 0:
        raise ValidationError("Total hours cannot be negative")
    if hours_per_day <= 0:
        raise ValidationError("Hours per day must be positive")
    if hours <= half_day_threshold_hours:
        return HALF_DAY
    return Decimal(-(-hours // hours_per_day))


def format_days(days: Decimal) -> str:
    if days == HALF_DAY:
        return "0.5 Day"
    return str(int(days))


def summarize(hours: Iterable[int]) -> EstimationSummary:
    total = total_hours(hours)
    days = estimated_days(total)
    return EstimationSummary(total_hours=total, estimated_days=days, estimated_days_label=format_days(days))
