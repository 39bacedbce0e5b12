"""
Percentage and rounding helpers shared by the tracker and the statistics.
Pure functions, no app (api) dependencies.
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3)."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def percentage(part: int, whole: int) -> int:
    """
    Integer percentage of part/whole, rounded half up.
    Returns 0 when whole is 0 instead of dividing by zero.
    """
    if whole <= 0:
        return 0
    # exact integer form of floor(100 * part / whole + 0.5)
    return (200 * part + whole) // (2 * whole)


def mean_rounded(values: list[int]) -> int:
    """Rounded mean of integer values; 0 for an empty list."""
    if not values:
        return 0
    return (2 * sum(values) + len(values)) // (2 * len(values))


def seconds_to_minutes(seconds: float) -> int:
    """Whole minutes for a duration in seconds, rounded half up."""
    if seconds <= 0:
        return 0
    return round_half_up(seconds / 60)
