"""Public exports for chess client abstractions."""

from __future__ import annotations

from chessmirror.chess_clients.base_chess_client import BaseChessClient, BaseChessClientContext
from chessmirror.chess_clients.chesscom_client import (
    ChesscomClient,
    ChesscomClientContext,
    build_chesscom_client,
)
from chessmirror.chess_clients.month_fetch_request import MonthFetchRequest
from chessmirror.chess_clients.month_fetch_result import MonthFetchResult

__all__ = [
    "BaseChessClient",
    "BaseChessClientContext",
    "ChesscomClient",
    "ChesscomClientContext",
    "MonthFetchRequest",
    "MonthFetchResult",
    "build_chesscom_client",
]
