"""Shared constants for chess.com game records."""

AUTO = "auto"
DEFAULT_RULES = "chess"
BUGHOUSE_RULES = "bughouse"
GAME_RESULT_WIN = "win"
