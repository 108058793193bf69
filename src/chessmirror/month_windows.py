"""Calendar month windows for archive fetches."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime


def iter_month_windows(start: datetime, end: datetime) -> Iterator[tuple[int, int]]:
    """Yield ``(year, month)`` pairs from ``start``'s month through ``end``'s month.

    Args:
        start: First instant of the window.
        end: Last instant of the window.

    Yields:
        Year and month pairs in chronological order. Nothing is yielded when
        ``start`` falls in a later month than ``end``.

    Example:
        >>> list(iter_month_windows(datetime(2023, 11, 5), datetime(2024, 1, 2)))
        [(2023, 11), (2023, 12), (2024, 1)]
    """

    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield year, month
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
