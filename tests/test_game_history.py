import unittest
from datetime import date
from unittest.mock import patch

from chessmirror.config import Settings
from chessmirror.history import GameHistory, build_game_history
from chessmirror.utils import Now
from tests.game_fakes import FakeSourceClient, epoch, fixed_clock, make_game
from tests.http_fakes import FakeResponse

MAR = (2024, 3)
URL = "https://www.chess.com/game/live/42"


class GameHistoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = FakeSourceClient({MAR: [make_game(URL, end_time=epoch(2024, 3, 2))]})
        self.history = GameHistory(self.client, clock=fixed_clock())

    def test_load_then_analyze(self) -> None:
        report = self.history.load_history("alice", date(2024, 3, 1))
        stats = self.history.analyze("alice")

        self.assertIs(self.history.last_sync_report, report)
        self.assertEqual(list(self.history.games), [URL])
        self.assertEqual((stats.count, stats.win), (1, 1))

    def test_refresh_replacement_drops_stale_facts(self) -> None:
        self.history.load_history("alice", date(2024, 3, 1))
        self.assertEqual(self.history.analyze("alice").win, 1)
        self.client.months[MAR] = [
            make_game(
                URL,
                end_time=epoch(2024, 3, 2),
                white=("alice", 1500, "resigned"),
                black=("bob", 1480, "win"),
            )
        ]

        changed = self.history.refresh("alice", date(2024, 3, 1))

        self.assertTrue(changed)
        self.assertEqual(self.history.last_sync_report.replaced_urls, [URL])
        self.assertEqual(self.history.analyze("alice").win, 0)

    def test_unchanged_refresh_keeps_facts(self) -> None:
        self.history.load_history("alice", date(2024, 3, 1))
        self.history.analyze("alice")

        self.assertFalse(self.history.refresh("alice", date(2024, 3, 1)))
        self.assertEqual(self.history.analysis_engine.cached_facts, 1)

    def test_load_clears_memoized_facts(self) -> None:
        self.history.load_history("alice", date(2024, 3, 1))
        self.history.analyze("alice")
        self.assertEqual(self.history.analysis_engine.cached_facts, 1)

        self.history.load_history("alice", date(2024, 3, 1))

        self.assertEqual(self.history.analysis_engine.cached_facts, 0)

    def test_invalidate_delegates_to_analysis(self) -> None:
        self.history.load_history("alice", date(2024, 3, 1))
        self.history.analyze("alice")

        self.history.invalidate("alice", "blitz", "chess")

        self.assertEqual(self.history.analysis_engine.cached_facts, 0)

    def test_reset_clears_facts_and_snapshots_but_not_games(self) -> None:
        self.history.load_history("alice", date(2024, 3, 1))
        self.history.analyze("alice")

        self.history.reset()

        self.assertEqual(self.history.analysis_engine.cached_facts, 0)
        self.assertFalse(self.history.sync_engine.has_snapshot(URL))
        self.assertEqual(list(self.history.games), [URL])


class BuildGameHistoryTests(unittest.TestCase):
    def test_build_game_history_fetches_from_chesscom(self) -> None:
        settings = Settings(
            chesscom_base_url="https://api.chess.com/pub",
            chesscom_retry_backoff_ms=0,
            sync_max_concurrency=2,
        )
        now = Now.as_datetime()
        game = make_game(URL, end_time=int(now.timestamp()))
        captured_urls: list[str] = []

        def fake_get(url: str, *_args, **_kwargs) -> FakeResponse:
            captured_urls.append(url)
            return FakeResponse(200, json_data={"games": [game]})

        history = build_game_history(settings)
        with patch(
            "chessmirror.chess_clients.chesscom_client.requests.get", side_effect=fake_get
        ):
            report = history.load_history("alice", now.replace(day=1, hour=0, minute=0))

        self.assertEqual(
            captured_urls,
            [f"https://api.chess.com/pub/player/alice/games/{now.year:04d}/{now.month:02d}"],
        )
        self.assertFalse(report.degraded)
        self.assertEqual(list(history.games), [URL])


if __name__ == "__main__":
    unittest.main()
