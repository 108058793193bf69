"""Request model for month-window fetches."""

from pydantic import BaseModel, Field


class MonthFetchRequest(BaseModel):
    """Request model for one calendar month of a player's archive.

    Attributes:
        nick: Player handle.
        year: Four-digit year.
        month: Month number, 1-12.

    Example:
        >>> MonthFetchRequest(nick="hikaru", year=2024, month=3).label
        '2024/03'
    """

    nick: str
    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=1, le=12)

    @property
    def label(self) -> str:
        return f"{self.year:04d}/{self.month:02d}"
