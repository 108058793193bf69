from __future__ import annotations

import logging
from dataclasses import dataclass

from chessmirror.chess_clients.month_fetch_request import MonthFetchRequest
from chessmirror.chess_clients.month_fetch_result import MonthFetchResult
from chessmirror.config import Settings
from chessmirror.models import ChessGame


@dataclass(slots=True)
class BaseChessClientContext:
    """Shared context for chess API clients.

    Attributes:
        settings: Application settings used for API calls.
        logger: Logger for client-specific messages.
    """

    settings: Settings
    logger: logging.Logger


class BaseChessClient:
    """Base class for chess API clients.

    Subclasses are expected to implement `fetch_month`.
    """

    def __init__(self, context: BaseChessClientContext) -> None:
        """Initialize the client with shared context.

        Args:
            context: Base context containing settings and logger.
        """

        self._context = context

    @property
    def settings(self) -> Settings:
        """Expose the settings from the context.

        Returns:
            The active `Settings` instance.
        """

        return self._context.settings

    @property
    def logger(self) -> logging.Logger:
        """Expose the logger from the context.

        Returns:
            Logger used by the client.
        """

        return self._context.logger

    def fetch_month(self, request: MonthFetchRequest) -> MonthFetchResult:
        """Fetch one calendar month of games.

        Args:
            request: Player and month to fetch.

        Returns:
            A `MonthFetchResult` with the month's games.

        Raises:
            NotImplementedError: When the subclass does not implement this method.

        Example:
            >>> client.fetch_month(MonthFetchRequest(nick="hikaru", year=2024, month=1))
        """

        raise NotImplementedError("Subclasses must implement fetch_month")

    @staticmethod
    def _build_fetch_result(
        request: MonthFetchRequest,
        games: list[ChessGame],
        dropped: int = 0,
    ) -> MonthFetchResult:
        """Build a successful fetch result.

        Args:
            request: The originating request.
            games: Well-formed game records.
            dropped: Count of discarded records.

        Returns:
            A `MonthFetchResult` instance.
        """

        return MonthFetchResult(label=request.label, games=games, dropped=dropped)

    @staticmethod
    def _build_failed_result(
        request: MonthFetchRequest,
        error: str,
        dropped: int = 0,
    ) -> MonthFetchResult:
        """Build an empty result for a month that could not be fetched.

        Args:
            request: The originating request.
            error: Failure description.
            dropped: Count of discarded records.

        Returns:
            A `MonthFetchResult` with ``ok`` set to False.
        """

        return MonthFetchResult(label=request.label, dropped=dropped, ok=False, error=error)
