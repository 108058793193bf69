"""chessmirror package entrypoints."""

from chessmirror.analysis_engine import AnalysisEngine
from chessmirror.cli import main
from chessmirror.constants import AUTO, BUGHOUSE_RULES, GAME_RESULT_WIN
from chessmirror.history import GameHistory, build_game_history
from chessmirror.models import ChessGame, ChessPlayer, GameStats, GraphPoint
from chessmirror.pgn_duration import extract_duration_seconds
from chessmirror.sync_engine import SyncEngine, SyncReport

__all__ = [
    "AUTO",
    "BUGHOUSE_RULES",
    "GAME_RESULT_WIN",
    "AnalysisEngine",
    "ChessGame",
    "ChessPlayer",
    "GameHistory",
    "GameStats",
    "GraphPoint",
    "SyncEngine",
    "SyncReport",
    "build_game_history",
    "extract_duration_seconds",
    "main",
]
