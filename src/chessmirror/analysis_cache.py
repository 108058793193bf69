"""Memo cache of per-game facts keyed by game url and player."""

from __future__ import annotations

from collections.abc import Iterable
from threading import Lock

from chessmirror.constants import AUTO
from chessmirror.models import GameFact
from chessmirror.utils import normalize_string


def fact_cache_key(url: str, nick: str) -> tuple[str, str]:
    """Build the memo key for a game seen from one player's perspective.

    The key does not include any filter value: a game's facts are the same
    whichever ``(time_class, rules)`` slice selected it.
    """

    return url, normalize_string(nick)


class GameFactCache:
    """In-memory store of `GameFact` values."""

    def __init__(self) -> None:
        self._facts: dict[tuple[str, str], GameFact] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._facts)

    def get(self, url: str, nick: str) -> GameFact | None:
        with self._lock:
            return self._facts.get(fact_cache_key(url, nick))

    def put(self, url: str, nick: str, fact: GameFact) -> None:
        with self._lock:
            self._facts[fact_cache_key(url, nick)] = fact

    def invalidate(
        self,
        nick: str,
        time_class: str | None = None,
        rules: str | None = None,
    ) -> int:
        """Remove facts for ``nick``, optionally narrowed by time class and rules.

        ``None`` and ``"auto"`` match every value.

        Returns:
            Number of removed entries.
        """
        player = normalize_string(nick)
        with self._lock:
            doomed = [
                key
                for key, fact in self._facts.items()
                if key[1] == player
                and _matches(fact.time_class, time_class)
                and _matches(fact.rules, rules)
            ]
            for key in doomed:
                del self._facts[key]
        return len(doomed)

    def discard_urls(self, urls: Iterable[str]) -> int:
        """Remove facts for the given game urls, for every player."""
        targets = set(urls)
        if not targets:
            return 0
        with self._lock:
            doomed = [key for key in self._facts if key[0] in targets]
            for key in doomed:
                del self._facts[key]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._facts.clear()


def _matches(value: str, wanted: str | None) -> bool:
    return wanted is None or wanted == AUTO or value == wanted
