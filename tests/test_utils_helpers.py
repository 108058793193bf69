from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from chessmirror.analysis_cache import GameFactCache, fact_cache_key
from chessmirror.models import ChessGame, GameFact
from chessmirror.month_windows import iter_month_windows
from chessmirror.snapshot_cache import ChangeSnapshotCache, canonical_snapshot
from chessmirror.utils import Hasher, Now, normalize_string, to_int


def _fact(time_class: str = "blitz", rules: str = "chess") -> GameFact:
    return GameFact(rating=1500, win=1, draw=0, duration=60, time_class=time_class, rules=rules)


def test_now_coerce_accepts_supported_values() -> None:
    expected = datetime(2024, 1, 1, tzinfo=UTC)

    assert Now.coerce(expected) == expected
    assert Now.coerce(datetime(2024, 1, 1)) == expected
    assert Now.coerce(date(2024, 1, 1)) == expected
    assert Now.coerce(int(expected.timestamp())) == expected
    assert Now.coerce(expected.timestamp()) == expected
    assert Now.coerce(datetime(2024, 1, 1, 2, tzinfo=timezone(timedelta(hours=2)))) == expected


@pytest.mark.parametrize("value", [True, "2024-01-01", None])
def test_now_coerce_rejects_other_values(value: object) -> None:
    with pytest.raises(TypeError):
        Now.coerce(value)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("value", "expected"),
    [(5, 5), (" 42 ", 42), ("-3", -3), ("1/0", None), (True, None), (1.5, None), (None, None)],
)
def test_to_int(value: object, expected: int | None) -> None:
    assert to_int(value) == expected


def test_normalize_string() -> None:
    assert normalize_string("  Alice ") == "alice"
    assert normalize_string(None) == ""


def test_hasher_is_stable() -> None:
    assert Hasher.hash_string("abc") == Hasher.hash_string("abc")
    assert Hasher.hash_string("abc") != Hasher.hash_string("abd")


def test_month_windows_span_year_boundary() -> None:
    windows = list(iter_month_windows(datetime(2023, 11, 30), datetime(2024, 2, 1)))

    assert windows == [(2023, 11), (2023, 12), (2024, 1), (2024, 2)]


def test_month_windows_single_and_empty() -> None:
    assert list(iter_month_windows(datetime(2024, 3, 1), datetime(2024, 3, 31))) == [(2024, 3)]
    assert list(iter_month_windows(datetime(2024, 4, 1), datetime(2024, 3, 31))) == []


def test_canonical_snapshot_ignores_key_order() -> None:
    first = ChessGame.model_validate({"url": "u", "end_time": 1, "fen": "x", "uuid": "y"})
    second = ChessGame.model_validate({"uuid": "y", "fen": "x", "end_time": 1, "url": "u"})
    changed = ChessGame.model_validate({"url": "u", "end_time": 1, "fen": "z", "uuid": "y"})

    assert canonical_snapshot(first) == canonical_snapshot(second)
    assert canonical_snapshot(first) != canonical_snapshot(changed)


def test_change_snapshot_cache() -> None:
    cache = ChangeSnapshotCache()
    game = ChessGame(url="https://www.chess.com/game/live/1", end_time=1)

    snapshot = cache.put(game)

    assert game.url in cache
    assert len(cache) == 1
    assert cache.get(game.url) == snapshot
    assert "missing" not in cache
    cache.clear()
    assert game.url not in cache
    assert cache.get(game.url) is None


def test_fact_cache_key_normalizes_nick() -> None:
    assert fact_cache_key("u", " Alice ") == ("u", "alice")


def test_game_fact_cache_invalidation() -> None:
    cache = GameFactCache()
    cache.put("u1", "alice", _fact())
    cache.put("u2", "Alice", _fact(time_class="rapid"))
    cache.put("u3", "alice", _fact(rules="bughouse"))
    cache.put("u1", "bob", _fact())

    assert cache.get("u1", "ALICE") == _fact()
    assert cache.invalidate("alice", rules="bughouse") == 1
    assert cache.invalidate("alice", time_class="auto", rules="chess") == 2
    assert len(cache) == 1
    assert cache.discard_urls(["u1"]) == 1
    assert len(cache) == 0


def test_chess_game_requires_url() -> None:
    with pytest.raises(ValueError):
        ChessGame.model_validate({"url": "   "})
    with pytest.raises(ValueError):
        ChessGame.model_validate({"pgn": ""})
