"""Port interface for game source clients."""

# pylint: disable=too-few-public-methods

from __future__ import annotations

from typing import Protocol

from chessmirror.chess_clients.month_fetch_request import MonthFetchRequest
from chessmirror.chess_clients.month_fetch_result import MonthFetchResult


class GameSourceClient(Protocol):
    """Stable interface for month-window game sources.

    Implementations never raise: a failed month is reported through
    ``MonthFetchResult.ok``.
    """

    def fetch_month(self, request: MonthFetchRequest) -> MonthFetchResult:
        """Fetch one calendar month of games for the requested player."""
