"""Change-detection snapshots for stored games."""

from __future__ import annotations

from threading import Lock

from chessmirror.models import ChessGame
from chessmirror.utils import Hasher


def canonical_snapshot(game: ChessGame) -> str:
    """Return a stable digest of a game's full content.

    Two records produce the same snapshot iff their canonical JSON
    serializations are identical.
    """

    return Hasher.hash_string(game.canonical_json())


class ChangeSnapshotCache:
    """Last-seen content digest per game url."""

    def __init__(self) -> None:
        self._snapshots: dict[str, str] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._snapshots)

    def __contains__(self, url: object) -> bool:
        return url in self._snapshots

    def get(self, url: str) -> str | None:
        with self._lock:
            return self._snapshots.get(url)

    def put(self, game: ChessGame) -> str:
        """Record the snapshot for ``game`` and return it."""
        snapshot = canonical_snapshot(game)
        with self._lock:
            self._snapshots[game.url] = snapshot
        return snapshot

    def clear(self) -> None:
        with self._lock:
            self._snapshots.clear()
