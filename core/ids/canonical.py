"""Canonical labels and period keys for judicial analytics.

Label canonicalization rules:
- Collapse runs of whitespace to a single space
- Strip leading/trailing whitespace
- Lowercase all characters

Period schemes:
- year:  key (2024, 1),  label "2024"
- month: key (2024, 3),  label "2024-03"
"""

from datetime import date
from typing import Iterator

GRANULARITY_YEAR = "year"
GRANULARITY_MONTH = "month"

VALID_GRANULARITIES = frozenset({GRANULARITY_YEAR, GRANULARITY_MONTH})


def canonicalize_label(value: str) -> str:
    """Canonicalize a free-text category or outcome label.

    Args:
        value: Raw label (e.g., "  Motion   GRANTED ")

    Returns:
        Canonical label (e.g., "motion granted")

    Examples:
        >>> canonicalize_label("  Civil  Rights ")
        'civil rights'
        >>> canonicalize_label("DENIED")
        'denied'
    """
    return " ".join(value.split()).lower()


def validate_granularity(granularity: str) -> None:
    """Raise ValueError unless granularity is "year" or "month"."""
    if granularity not in VALID_GRANULARITIES:
        raise ValueError(
            f"Invalid granularity '{granularity}'. Must be one of: {sorted(VALID_GRANULARITIES)}"
        )


def period_key(day: date, granularity: str = GRANULARITY_YEAR) -> tuple[int, int]:
    """Map a date to its sortable period key.

    Args:
        day: A decision date
        granularity: "year" or "month"

    Returns:
        (year, month) tuple; month is 1 for yearly periods

    Examples:
        >>> period_key(date(2024, 3, 9), "month")
        (2024, 3)
        >>> period_key(date(2024, 3, 9))
        (2024, 1)
    """
    validate_granularity(granularity)
    if granularity == GRANULARITY_YEAR:
        return (day.year, 1)
    return (day.year, day.month)


def period_label(key: tuple[int, int], granularity: str = GRANULARITY_YEAR) -> str:
    """Render a period key as a display label.

    Examples:
        >>> period_label((2024, 1))
        '2024'
        >>> period_label((2024, 3), "month")
        '2024-03'
    """
    validate_granularity(granularity)
    year, month = key
    if granularity == GRANULARITY_YEAR:
        return f"{year}"
    return f"{year}-{month:02d}"


def iter_period_keys(
    first: tuple[int, int],
    last: tuple[int, int],
    granularity: str = GRANULARITY_YEAR,
) -> Iterator[tuple[int, int]]:
    """Yield every period key from first to last inclusive, in order.

    Examples:
        >>> list(iter_period_keys((2023, 11), (2024, 2), "month"))
        [(2023, 11), (2023, 12), (2024, 1), (2024, 2)]
    """
    validate_granularity(granularity)
    year, month = first
    while (year, month) <= last:
        yield (year, month)
        if granularity == GRANULARITY_YEAR:
            year += 1
        elif month == 12:
            year, month = year + 1, 1
        else:
            month += 1


def indicator_name(*parts: str) -> str:
    """Build an indicator name from its parts.

    Examples:
        >>> indicator_name("outcome_rate", "civil", "granted")
        'outcome_rate::civil::granted'
    """
    return "::".join(parts)
