import os
import unittest
from datetime import date
from unittest.mock import patch

from chessmirror import config
from chessmirror.errors import ChessmirrorError


class ConfigEnvTests(unittest.TestCase):
    def _settings(self, env: dict[str, str], **overrides: object) -> config.Settings:
        with patch.dict(os.environ, env, clear=True):
            with patch("chessmirror.config.load_dotenv") as load_dotenv:
                settings = config.get_settings(**overrides)
        load_dotenv.assert_called_once()
        return settings

    def test_defaults_without_environment(self) -> None:
        settings = self._settings({})

        self.assertEqual(settings.user, "")
        self.assertIsNone(settings.start_date)
        self.assertFalse(settings.include_unrated)
        self.assertEqual(settings.chesscom_base_url, config.DEFAULT_CHESSCOM_BASE_URL)
        self.assertEqual(settings.chesscom_user_agent, config.DEFAULT_USER_AGENT)
        self.assertEqual(settings.chesscom_timeout_s, 15)
        self.assertEqual(settings.chesscom_max_retries, 3)
        self.assertEqual(settings.chesscom_retry_backoff_ms, 500)
        self.assertEqual(settings.sync_max_concurrency, 1)
        self.assertEqual(settings.log_level, "INFO")

    def test_reads_values_from_environment(self) -> None:
        settings = self._settings(
            {
                "CHESSMIRROR_USER": " alice ",
                "CHESSMIRROR_START_DATE": "2024-01-15",
                "CHESSMIRROR_INCLUDE_UNRATED": "yes",
                "CHESSCOM_BASE_URL": "https://example.test/pub/",
                "CHESSCOM_MAX_RETRIES": "5",
                "CHESSMIRROR_SYNC_MAX_CONCURRENCY": "4",
                "CHESSMIRROR_LOG_LEVEL": "debug",
            }
        )

        self.assertEqual(settings.user, "alice")
        self.assertEqual(settings.start_date, date(2024, 1, 15))
        self.assertTrue(settings.include_unrated)
        self.assertEqual(settings.chesscom_base_url, "https://example.test/pub")
        self.assertEqual(settings.chesscom_max_retries, 5)
        self.assertEqual(settings.sync_max_concurrency, 4)
        self.assertEqual(settings.log_level, "DEBUG")

    def test_get_settings_falls_back_to_chesscom_username(self) -> None:
        settings = self._settings({"CHESSCOM_USERNAME": "envuser"})

        self.assertEqual(settings.user, "envuser")

    def test_numeric_values_are_clamped(self) -> None:
        settings = self._settings(
            {"CHESSMIRROR_SYNC_MAX_CONCURRENCY": "0", "CHESSCOM_MAX_RETRIES": "-2"}
        )

        self.assertEqual(settings.sync_max_concurrency, 1)
        self.assertEqual(settings.chesscom_max_retries, 0)

    def test_overrides_take_precedence(self) -> None:
        settings = self._settings({"CHESSMIRROR_USER": "alice"}, user="bob")

        self.assertEqual(settings.user, "bob")

    def test_unknown_override_is_rejected(self) -> None:
        with self.assertRaises(TypeError):
            self._settings({}, source="lichess")

    def test_bad_integer_raises(self) -> None:
        with self.assertRaises(ChessmirrorError):
            self._settings({"CHESSCOM_TIMEOUT_S": "fast"})

    def test_bad_start_date_raises(self) -> None:
        with self.assertRaises(ChessmirrorError):
            self._settings({"CHESSMIRROR_START_DATE": "01/15/2024"})


if __name__ == "__main__":
    unittest.main()
