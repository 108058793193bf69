"""Memoized aggregate statistics over a player's game collection."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from operator import attrgetter

from chessmirror.analysis_cache import GameFactCache
from chessmirror.constants import AUTO, BUGHOUSE_RULES, GAME_RESULT_WIN
from chessmirror.models import ChessGame, ChessPlayer, GameFact, GameStats
from chessmirror.pgn_duration import extract_duration_seconds
from chessmirror.utils import Logger, normalize_string, to_int

logger = Logger(__name__)


class AnalysisEngine:
    """Filters, orders and folds the collection into `GameStats`.

    The engine reads the collection through ``collection`` and never mutates
    it. Per-game facts are memoized by ``(url, nick)``.
    """

    def __init__(
        self,
        collection: Callable[[], Mapping[str, ChessGame]],
        *,
        facts: GameFactCache | None = None,
        duration_extractor: Callable[[str], int] = extract_duration_seconds,
        log: logging.Logger | None = None,
    ) -> None:
        self._collection = collection
        self._facts = facts if facts is not None else GameFactCache()
        self._extract_duration = duration_extractor
        self.logger = log or logger

    @property
    def cached_facts(self) -> int:
        return len(self._facts)

    def analyze(self, nick: str, time_class: str = AUTO, rules: str = AUTO) -> GameStats:
        """Aggregate the games of one ``(time_class, rules)`` slice.

        ``"auto"`` resolves to the value of the chronologically last game
        that survives the non-auto filters.

        Args:
            nick: Player whose perspective the facts are computed from.
            time_class: Time class to select, or ``"auto"``.
            rules: Rule set to select, or ``"auto"``.

        Returns:
            Aggregate carrying the resolved time class and rules. When no
            game matches, a zeroed aggregate carrying the requested labels.
        """

        games = list(self._collection().values())
        if not games:
            return GameStats(effective_time_class=time_class, effective_rules=rules)
        candidates = [
            game
            for game in games
            if (rules == AUTO or game.rules == rules)
            and (time_class == AUTO or game.time_class == time_class)
        ]
        if not candidates:
            return GameStats(effective_time_class=time_class, effective_rules=rules)
        ordered = sorted(candidates, key=attrgetter("end_time"))
        latest = ordered[-1]
        effective_time_class = latest.time_class if time_class == AUTO else time_class
        effective_rules = latest.rules if rules == AUTO else rules
        stats = GameStats(effective_time_class=effective_time_class, effective_rules=effective_rules)
        for game in ordered:
            if game.time_class != effective_time_class or game.rules != effective_rules:
                continue
            fact = self._fact_for(game, nick)
            if fact is not None:
                stats.add(fact)
        return stats

    def invalidate(
        self,
        nick: str,
        time_class: str | None = None,
        rules: str | None = None,
    ) -> int:
        """Drop memoized facts for ``nick``, optionally narrowed by slice."""
        removed = self._facts.invalidate(nick, time_class, rules)
        self.logger.debug("Invalidated %s facts for %s (%s/%s)", removed, nick, time_class, rules)
        return removed

    def discard_urls(self, urls: Iterable[str]) -> int:
        return self._facts.discard_urls(urls)

    def clear(self) -> None:
        self._facts.clear()

    def _fact_for(self, game: ChessGame, nick: str) -> GameFact | None:
        cached = self._facts.get(game.url, nick)
        if cached is not None:
            return cached
        fact = self._compute_fact(game, nick)
        if fact is not None:
            self._facts.put(game.url, nick, fact)
        return fact

    def _compute_fact(self, game: ChessGame, nick: str) -> GameFact | None:
        side = _player_side(game, nick)
        if side is None:
            self.logger.debug("Skipping %s: %s played neither side", game.url, nick)
            return None
        return GameFact(
            rating=side.rating,
            win=int(side.result == GAME_RESULT_WIN),
            draw=int(game.white.result == game.black.result),
            duration=self._duration(game),
            time_class=game.time_class,
            rules=game.rules,
        )

    def _duration(self, game: ChessGame) -> int:
        # Bughouse PGNs do not carry usable start/end timestamps.
        if game.rules != BUGHOUSE_RULES:
            return self._extract_duration(game.pgn)
        seconds = to_int(game.time_control)
        if seconds is None or seconds < 0:
            self.logger.warning(
                "Non-numeric bughouse time control %r for %s", game.time_control, game.url
            )
            return 0
        return seconds


def _player_side(game: ChessGame, nick: str) -> ChessPlayer | None:
    player = normalize_string(nick)
    if not player:
        return None
    if normalize_string(game.white.username) == player:
        return game.white
    if normalize_string(game.black.username) == player:
        return game.black
    return None
