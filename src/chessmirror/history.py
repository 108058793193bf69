"""Engine facade exposing sync and analysis for one player session."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime

from chessmirror.analysis_engine import AnalysisEngine
from chessmirror.chess_clients import build_chesscom_client
from chessmirror.config import Settings
from chessmirror.constants import AUTO
from chessmirror.models import ChessGame, GameStats
from chessmirror.pgn_duration import extract_duration_seconds
from chessmirror.ports import GameSourceClient
from chessmirror.sync_engine import StartDate, SyncEngine, SyncReport
from chessmirror.utils import Logger, Now

logger = Logger(__name__)


class GameHistory:
    """In-memory mirror of a player's games with memoized statistics.

    Example:
        >>> history = GameHistory(build_chesscom_client(get_settings()))
        >>> history.load_history("hikaru", date(2024, 1, 1))
        >>> history.analyze("hikaru").to_dict()
    """

    def __init__(
        self,
        client: GameSourceClient,
        *,
        clock: Callable[[], datetime] = Now.as_datetime,
        max_concurrency: int = 1,
        duration_extractor: Callable[[str], int] = extract_duration_seconds,
    ) -> None:
        self._sync = SyncEngine(client, clock=clock, max_concurrency=max_concurrency)
        self._analysis = AnalysisEngine(
            lambda: self._sync.games,
            duration_extractor=duration_extractor,
        )
        self.last_sync_report: SyncReport | None = None

    @property
    def games(self) -> Mapping[str, ChessGame]:
        return self._sync.games

    @property
    def sync_engine(self) -> SyncEngine:
        return self._sync

    @property
    def analysis_engine(self) -> AnalysisEngine:
        return self._analysis

    def load_history(
        self,
        nick: str,
        start_date: StartDate,
        include_unrated: bool = False,
    ) -> SyncReport:
        """Resync the whole history from ``start_date`` and drop memoized facts."""
        report = self._sync.load_history(nick, start_date, include_unrated)
        if not report.rejected:
            self._analysis.clear()
        self.last_sync_report = report
        return report

    def refresh(
        self,
        nick: str,
        start_date: StartDate,
        include_unrated: bool = False,
    ) -> bool:
        """Merge the current month; return True iff the collection changed.

        Facts memoized for replaced games are discarded.
        """
        report = self._sync.refresh(nick, start_date, include_unrated)
        if report.replaced_urls:
            self._analysis.discard_urls(report.replaced_urls)
        self.last_sync_report = report
        return report.changed

    def analyze(self, nick: str, time_class: str = AUTO, rules: str = AUTO) -> GameStats:
        return self._analysis.analyze(nick, time_class, rules)

    def invalidate(self, nick: str, time_class: str | None = None, rules: str | None = None) -> None:
        self._analysis.invalidate(nick, time_class, rules)

    def reset(self) -> None:
        """Clear the memoized facts and the change snapshots together."""
        self._analysis.clear()
        self._sync.clear_snapshots()
        logger.debug("Cleared analysis facts and change snapshots")


def build_game_history(settings: Settings) -> GameHistory:
    """Wire a `GameHistory` backed by the Chess.com client.

    Args:
        settings: Settings for the client and sync concurrency.

    Returns:
        Ready-to-use `GameHistory`.
    """

    return GameHistory(
        build_chesscom_client(settings),
        max_concurrency=settings.sync_max_concurrency,
    )
