from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import requests
from pydantic import ValidationError
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from chessmirror.chess_clients.base_chess_client import BaseChessClient, BaseChessClientContext
from chessmirror.chess_clients.month_fetch_request import MonthFetchRequest
from chessmirror.chess_clients.month_fetch_result import MonthFetchResult
from chessmirror.config import Settings
from chessmirror.errors import RateLimitError
from chessmirror.models import ChessGame
from chessmirror.utils import Logger

logger = Logger(__name__)

MONTH_URL = "{base_url}/player/{nick}/games/{year:04d}/{month:02d}"
HTTP_STATUS_TOO_MANY_REQUESTS = 429
_RETRYABLE_ERRORS = (requests.ConnectionError, requests.Timeout)

__all__ = [
    "MONTH_URL",
    "ChesscomClient",
    "ChesscomClientContext",
    "_parse_retry_after",
    "_request_headers",
    "build_chesscom_client",
]


@dataclass(slots=True)
class ChesscomClientContext(BaseChessClientContext):
    """Context for Chess.com API interactions."""


class ChesscomClient(BaseChessClient):
    """Client for the Chess.com monthly archive endpoint."""

    def __init__(self, context: ChesscomClientContext) -> None:
        """Initialize the client with Chess.com-specific context.

        Args:
            context: Client context containing settings and logger.
        """

        super().__init__(context)

    def fetch_month(self, request: MonthFetchRequest) -> MonthFetchResult:
        """Fetch one month of Chess.com games.

        Transport and payload failures are logged and reported as an empty,
        unsuccessful result; this method never raises.

        Args:
            request: Player and month to fetch.

        Returns:
            Chess.com fetch result with the month's well-formed games.

        Example:
            >>> client.fetch_month(MonthFetchRequest(nick="hikaru", year=2024, month=3))
        """

        url = self._month_url(request)
        try:
            payload = self._fetch_payload(url)
        except Exception as exc:
            self.logger.warning(
                "Failed to fetch Chess.com games for %s %s: %s", request.nick, request.label, exc
            )
            return self._build_failed_result(request, str(exc) or type(exc).__name__)
        raw_games = self._extract_raw_games(payload, request)
        if raw_games is None:
            return self._build_failed_result(request, "payload has no games array")
        games, dropped = self._coerce_games(raw_games)
        self._log_fetch_summary(request, len(games), dropped)
        return self._build_fetch_result(request, games, dropped)

    def _month_url(self, request: MonthFetchRequest) -> str:
        return MONTH_URL.format(
            base_url=self.settings.chesscom_base_url,
            nick=request.nick,
            year=request.year,
            month=request.month,
        )

    def _fetch_payload(self, url: str) -> object:
        """Fetch and decode a JSON payload, retrying transient failures.

        Args:
            url: Month endpoint URL.

        Returns:
            Decoded JSON payload.
        """

        retrying = Retrying(
            retry=retry_if_exception_type(_RETRYABLE_ERRORS),
            stop=stop_after_attempt(self.settings.chesscom_max_retries + 1),
            wait=wait_exponential(
                multiplier=max(self.settings.chesscom_retry_backoff_ms, 0) / 1000.0,
                max=30,
            ),
            reraise=True,
            before_sleep=before_sleep_log(self.logger, logging.WARNING),
        )
        for attempt in retrying:
            with attempt:
                response = self._get_with_backoff(url, timeout=self.settings.chesscom_timeout_s)
        return response.json()

    def _get_with_backoff(self, url: str, timeout: int) -> requests.Response:
        """Fetch a URL with exponential backoff on 429 responses.

        Args:
            url: URL to request.
            timeout: Timeout in seconds.

        Returns:
            Response object.

        Raises:
            RateLimitError: When retries are exhausted.
        """

        max_retries = self.settings.chesscom_max_retries
        base_backoff = max(self.settings.chesscom_retry_backoff_ms, 0) / 1000.0
        attempt = 0
        while True:
            response = requests.get(
                url,
                headers=_request_headers(self.settings.chesscom_user_agent),
                timeout=timeout,
            )
            if response.status_code != HTTP_STATUS_TOO_MANY_REQUESTS:
                response.raise_for_status()
                return response
            attempt = self._handle_rate_limit(response, attempt, max_retries, base_backoff)

    def _handle_rate_limit(
        self,
        response: requests.Response,
        attempt: int,
        max_retries: int,
        base_backoff: float,
    ) -> int:
        """Handle a rate-limited response.

        Args:
            response: HTTP response.
            attempt: Current attempt count.
            max_retries: Maximum retry count.
            base_backoff: Base backoff in seconds.

        Returns:
            Next attempt count.
        """

        retry_after = _parse_retry_after(response.headers.get("Retry-After"))
        if attempt >= max_retries:
            message = "Chess.com rate limit exceeded"
            raise RateLimitError(message, response=response)
        wait_seconds = max(base_backoff * (2**attempt), retry_after or 0.0)
        self.logger.warning(
            "Chess.com rate limited (429). Retrying in %.2fs (attempt %s/%s).",
            wait_seconds,
            attempt + 1,
            max_retries,
        )
        if wait_seconds:
            time.sleep(wait_seconds)
        return attempt + 1

    def _extract_raw_games(self, payload: object, request: MonthFetchRequest) -> list | None:
        """Pull the ``games`` array out of a month payload.

        Args:
            payload: Decoded JSON payload.
            request: The originating request, for log context.

        Returns:
            The raw games list, or None when the payload is malformed.
        """

        raw_games = payload.get("games") if isinstance(payload, Mapping) else None
        if not isinstance(raw_games, list):
            self.logger.warning(
                "Chess.com payload for %s %s has no games array", request.nick, request.label
            )
            return None
        return raw_games

    def _coerce_games(self, raw_games: list) -> tuple[list[ChessGame], int]:
        """Validate raw records, dropping malformed ones.

        Args:
            raw_games: Raw records from the payload.

        Returns:
            Tuple of valid games and the number of dropped records.
        """

        games: list[ChessGame] = []
        dropped = 0
        for raw in raw_games:
            game = self._coerce_game(raw)
            if game is None:
                dropped += 1
                continue
            games.append(game)
        return games, dropped

    def _coerce_game(self, raw: object) -> ChessGame | None:
        if not isinstance(raw, Mapping):
            return None
        url = raw.get("url")
        if not isinstance(url, str) or not url.strip():
            return None
        try:
            return ChessGame.model_validate(dict(raw))
        except ValidationError as exc:
            self.logger.warning("Dropping malformed Chess.com game %s: %s", url, exc)
            return None

    def _log_fetch_summary(self, request: MonthFetchRequest, count: int, dropped: int) -> None:
        self.logger.info(
            "Fetched %s Chess.com games for %s %s (dropped=%s)",
            count,
            request.nick,
            request.label,
            dropped,
        )


def build_chesscom_client(settings: Settings) -> ChesscomClient:
    """Build a Chess.com client for the given settings.

    Args:
        settings: Settings for the client.

    Returns:
        Configured `ChesscomClient`.
    """

    return ChesscomClient(ChesscomClientContext(settings=settings, logger=logger))


def _request_headers(user_agent: str | None) -> dict[str, str]:
    """Build request headers.

    Args:
        user_agent: User-Agent to identify the client, if any.

    Returns:
        Headers dict for the request.
    """

    headers = {"Accept": "application/json"}
    if user_agent:
        headers["User-Agent"] = user_agent
    return headers


def _parse_retry_after(value: str | None) -> float | None:
    """Parse Retry-After header values.

    Args:
        value: Retry-After header value.

    Returns:
        Number of seconds to wait, or None.
    """

    if not value:
        return None
    seconds = _parse_retry_after_seconds(value)
    if seconds is not None:
        return seconds
    return _parse_retry_after_date(value)


def _parse_retry_after_seconds(value: str) -> float | None:
    try:
        seconds = float(value)
    except ValueError:
        return None
    return max(seconds, 0.0)


def _parse_retry_after_date(value: str) -> float | None:
    try:
        dt = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    delta = (dt - datetime.now(UTC)).total_seconds()
    return max(delta, 0.0)
