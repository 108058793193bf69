from pydantic import BaseModel, Field

from chessmirror.models import ChessGame


class MonthFetchResult(BaseModel):
    """Response model for month-window fetches.

    A failed fetch still produces a result: ``ok`` is False, ``games`` is
    empty and ``error`` carries the cause.

    Attributes:
        label: ``YYYY/MM`` label of the fetched month.
        games: Well-formed game records.
        dropped: Number of malformed records discarded.
        ok: Whether the month was fetched successfully.
        error: Failure description when ``ok`` is False.

    Example:
        >>> MonthFetchResult(label="2024/03", games=[], dropped=0)
    """

    label: str
    games: list[ChessGame] = Field(default_factory=list)
    dropped: int = 0
    ok: bool = True
    error: str | None = None
