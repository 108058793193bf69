import unittest

from pydantic import ValidationError

from chessmirror.chess_clients import (
    BaseChessClient,
    BaseChessClientContext,
    MonthFetchRequest,
)
from chessmirror.config import Settings
from chessmirror.models import ChessGame
from chessmirror.utils import get_logger


class DummyClient(BaseChessClient):
    def fetch_month(self, request: MonthFetchRequest):
        return self._build_fetch_result(request, [], 0)


class BaseChessClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = Settings(user="tester", chesscom_timeout_s=3)
        self.context = BaseChessClientContext(settings=self.settings, logger=get_logger("test"))
        self.request = MonthFetchRequest(nick="tester", year=2024, month=2)

    def test_context_is_exposed(self) -> None:
        client = DummyClient(self.context)
        self.assertIs(client.settings, self.settings)
        self.assertEqual(client.logger.name, "test")

    def test_build_fetch_result_payload(self) -> None:
        game = ChessGame(url="https://www.chess.com/game/live/1")
        result = DummyClient._build_fetch_result(self.request, [game], 2)
        self.assertEqual(result.label, "2024/02")
        self.assertEqual(result.games, [game])
        self.assertEqual(result.dropped, 2)
        self.assertTrue(result.ok)
        self.assertIsNone(result.error)

    def test_build_failed_result_payload(self) -> None:
        result = DummyClient._build_failed_result(self.request, "boom")
        self.assertEqual(result.games, [])
        self.assertFalse(result.ok)
        self.assertEqual(result.error, "boom")

    def test_base_client_requires_override(self) -> None:
        client = BaseChessClient(self.context)
        with self.assertRaises(NotImplementedError):
            client.fetch_month(self.request)

    def test_month_request_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            MonthFetchRequest(nick="tester", year=2024, month=13)
        with self.assertRaises(ValidationError):
            MonthFetchRequest(nick="tester", year=0, month=1)

    def test_month_request_accepts_pre_epoch_years(self) -> None:
        self.assertEqual(MonthFetchRequest(nick="tester", year=1969, month=12).label, "1969/12")


if __name__ == "__main__":
    unittest.main()
