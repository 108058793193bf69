"""Month-window synchronisation of a player's game collection."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime
from threading import Lock
from types import MappingProxyType

from chessmirror.chess_clients import MonthFetchRequest, MonthFetchResult
from chessmirror.models import ChessGame
from chessmirror.month_windows import iter_month_windows
from chessmirror.ports import GameSourceClient
from chessmirror.snapshot_cache import ChangeSnapshotCache, canonical_snapshot
from chessmirror.utils import Logger, Now

logger = Logger(__name__)

StartDate = datetime | date | int | float


@dataclass(slots=True)
class SyncReport:
    """Outcome of a full load or an incremental refresh.

    Attributes:
        months: ``YYYY/MM`` labels of every month requested.
        failed_months: Labels of months that could not be fetched.
        fetched: Well-formed records received across all months.
        dropped: Malformed records discarded by the source client.
        stored: Size of the collection after the operation.
        inserted_urls: Urls added to the collection.
        replaced_urls: Urls whose stored game was replaced with new content.
        rejected: True when the call overlapped another sync and did nothing.
    """

    months: list[str] = field(default_factory=list)
    failed_months: list[str] = field(default_factory=list)
    fetched: int = 0
    dropped: int = 0
    stored: int = 0
    inserted_urls: list[str] = field(default_factory=list)
    replaced_urls: list[str] = field(default_factory=list)
    rejected: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.inserted_urls or self.replaced_urls)

    @property
    def degraded(self) -> bool:
        return bool(self.failed_months or self.dropped)

    def record(self, result: MonthFetchResult) -> None:
        self.months.append(result.label)
        if not result.ok:
            self.failed_months.append(result.label)
        self.fetched += len(result.games)
        self.dropped += result.dropped


class SyncEngine:
    """Owns the authoritative game collection and its change snapshots.

    Only one `load_history` or `refresh` runs at a time per engine; an
    overlapping call is rejected without touching any state.
    """

    def __init__(
        self,
        client: GameSourceClient,
        *,
        clock: Callable[[], datetime] = Now.as_datetime,
        max_concurrency: int = 1,
        log: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._clock = clock
        self._max_concurrency = max(int(max_concurrency), 1)
        self._games: dict[str, ChessGame] = {}
        self._snapshots = ChangeSnapshotCache()
        self._in_flight = Lock()
        self.logger = log or logger

    @property
    def games(self) -> Mapping[str, ChessGame]:
        """Read-only view of the collection, keyed by url."""
        return MappingProxyType(self._games)

    def has_snapshot(self, url: str) -> bool:
        """Return True when a change snapshot is recorded for ``url``."""
        return url in self._snapshots

    def load_history(
        self,
        nick: str,
        start_date: StartDate,
        include_unrated: bool = False,
    ) -> SyncReport:
        """Rebuild the collection from every month since ``start_date``.

        Snapshots are recorded for every fetched record, including ones the
        retention policy drops. The new collection is installed only after
        all months have been fetched.

        Args:
            nick: Player handle.
            start_date: Earliest game end time to keep.
            include_unrated: Keep unrated games as well.

        Returns:
            Report describing the fetched months and the resulting collection.
        """

        if not self._in_flight.acquire(blocking=False):
            return self._reject("load_history", nick)
        try:
            return self._load_history(nick, Now.coerce(start_date), include_unrated)
        finally:
            self._in_flight.release()

    def refresh(
        self,
        nick: str,
        start_date: StartDate,
        include_unrated: bool = False,
    ) -> SyncReport:
        """Merge the current month into the collection.

        Past months are assumed final and are not refetched.

        Args:
            nick: Player handle.
            start_date: Earliest game end time to keep.
            include_unrated: Keep unrated games as well.

        Returns:
            Report whose ``changed`` flag is True iff a game was inserted or
            replaced.
        """

        if not self._in_flight.acquire(blocking=False):
            return self._reject("refresh", nick)
        try:
            return self._refresh(nick, Now.coerce(start_date), include_unrated)
        finally:
            self._in_flight.release()

    def clear_snapshots(self) -> None:
        self._snapshots.clear()

    def _load_history(self, nick: str, start: datetime, include_unrated: bool) -> SyncReport:
        self._snapshots.clear()
        report = SyncReport()
        month_requests = [
            MonthFetchRequest(nick=nick, year=year, month=month)
            for year, month in iter_month_windows(start, self._clock())
        ]
        fetched: list[ChessGame] = []
        for result in self._fetch_months(month_requests):
            report.record(result)
            fetched.extend(result.games)
        for game in fetched:
            self._snapshots.put(game)
        collection: dict[str, ChessGame] = {}
        for game in self._retain(fetched, start, include_unrated):
            collection[game.url] = game
        self._games = collection
        report.stored = len(collection)
        report.inserted_urls = list(collection)
        self.logger.info(
            "Loaded %s games for %s across %s months (failed=%s dropped=%s)",
            report.stored,
            nick,
            len(report.months),
            len(report.failed_months),
            report.dropped,
        )
        return report

    def _refresh(self, nick: str, start: datetime, include_unrated: bool) -> SyncReport:
        now = self._clock()
        report = SyncReport()
        result = self._fetch_month(MonthFetchRequest(nick=nick, year=now.year, month=now.month))
        report.record(result)
        if result.games:
            for game in self._retain(result.games, start, include_unrated):
                self._merge(game, report)
        report.stored = len(self._games)
        self.logger.info(
            "Refreshed %s for %s: inserted=%s replaced=%s",
            result.label,
            nick,
            len(report.inserted_urls),
            len(report.replaced_urls),
        )
        return report

    def _merge(self, game: ChessGame, report: SyncReport) -> None:
        stored = self._games.get(game.url)
        if stored is None:
            self._games[game.url] = game
            self._snapshots.put(game)
            report.inserted_urls.append(game.url)
            return
        recorded = self._snapshots.get(game.url) or canonical_snapshot(stored)
        if recorded == canonical_snapshot(game):
            return
        self._games[game.url] = game
        self._snapshots.put(game)
        report.replaced_urls.append(game.url)

    def _fetch_months(self, requests: list[MonthFetchRequest]) -> list[MonthFetchResult]:
        """Fetch months sequentially, or with a bounded pool when configured.

        Results are always returned in month order.
        """
        if self._max_concurrency == 1 or len(requests) <= 1:
            return [self._fetch_month(request) for request in requests]
        workers = min(self._max_concurrency, len(requests))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="chessmirror") as pool:
            return list(pool.map(self._fetch_month, requests))

    def _fetch_month(self, request: MonthFetchRequest) -> MonthFetchResult:
        try:
            return self._client.fetch_month(request)
        except Exception as exc:
            self.logger.warning("Month fetch %s failed for %s: %s", request.label, request.nick, exc)
            return MonthFetchResult(label=request.label, ok=False, error=str(exc))

    @staticmethod
    def _retain(
        games: Iterable[ChessGame],
        start: datetime,
        include_unrated: bool,
    ) -> list[ChessGame]:
        start_epoch = start.timestamp()
        return [
            game
            for game in games
            if (include_unrated or game.rated) and game.end_time >= start_epoch
        ]

    def _reject(self, operation: str, nick: str) -> SyncReport:
        self.logger.warning("Rejected %s for %s: another sync is in progress", operation, nick)
        return SyncReport(stored=len(self._games), rejected=True)
