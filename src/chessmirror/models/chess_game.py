"""Wire models for chess.com monthly archive records."""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, field_validator

from chessmirror.constants import DEFAULT_RULES


class ChessPlayer(BaseModel):
    """One side of a chess.com game.

    Attributes:
        username: Player handle as reported by chess.com.
        rating: Rating after the game.
        result: Outcome code from this side's perspective (``win``,
            ``checkmated``, ``agreed``, ...).
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    username: str = ""
    rating: int = 0
    result: str = ""


class ChessGame(BaseModel):
    """A single game record from a monthly archive.

    Unknown fields (``fen``, ``tcn``, ``uuid``, ...) are retained so that the
    canonical snapshot reflects every change the remote makes to a record.

    Example:
        >>> ChessGame(url="https://www.chess.com/game/live/1", end_time=1700000000)
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    url: str
    pgn: str = ""
    time_control: str = ""
    end_time: int = 0
    rated: bool = False
    time_class: str = ""
    rules: str = DEFAULT_RULES
    white: ChessPlayer = ChessPlayer()
    black: ChessPlayer = ChessPlayer()

    @field_validator("url")
    @classmethod
    def _require_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("url must not be empty")
        return value

    @field_validator("time_control", mode="before")
    @classmethod
    def _coerce_time_control(cls, value: object) -> object:
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return value

    def canonical_json(self) -> str:
        """Serialize the record with sorted keys and no whitespace."""

        return json.dumps(self.model_dump(mode="json"), sort_keys=True, separators=(",", ":"))
