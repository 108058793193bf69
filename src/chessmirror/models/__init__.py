"""Data models for chessmirror."""

from chessmirror.models.chess_game import ChessGame, ChessPlayer
from chessmirror.models.game_stats import GameFact, GameStats, GraphPoint

__all__ = [
    "ChessGame",
    "ChessPlayer",
    "GameFact",
    "GameStats",
    "GraphPoint",
]
