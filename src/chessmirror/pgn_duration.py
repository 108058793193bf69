"""Elapsed wall-clock duration from chess.com PGN header tags."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from io import StringIO

import chess.pgn

from chessmirror.utils import Logger

logger = Logger(__name__)

_TIMESTAMP_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M:%S.%f", "%Y-%m-%d %H:%M")


@dataclass(frozen=True, slots=True)
class DurationTags:
    """Header tags needed to compute a game's duration."""

    start_date: str
    start_time: str
    end_date: str
    end_time: str


def extract_duration_seconds(pgn_text: str | None) -> int:
    """Return the elapsed seconds between a game's start and end tags.

    Only header tag lines are parsed, so trailing move text never breaks the
    header read. Failures are logged and reported as a zero duration.

    Args:
        pgn_text: PGN text with ``UTCDate``, ``StartTime``, ``EndDate`` and
            ``EndTime`` tags.

    Returns:
        Non-negative duration in seconds, or 0 when it cannot be determined.

    Example:
        >>> extract_duration_seconds('[UTCDate "2024.01.01"]\\n[StartTime "10:00:00"]\\n'
        ...     '[EndDate "2024.01.01"]\\n[EndTime "10:05:30"]')
        330
    """

    try:
        tags = read_duration_tags(pgn_text or "")
    except Exception as exc:
        logger.error("Failed to parse PGN header tags: %s", exc)
        return 0
    start = _parse_timestamp(tags.start_date, tags.start_time)
    end = _parse_timestamp(tags.end_date, tags.end_time)
    if start is None or end is None:
        logger.error(
            "Unparseable PGN timestamps: start=%s %s end=%s %s",
            tags.start_date,
            tags.start_time,
            tags.end_date,
            tags.end_time,
        )
        return 0
    duration = round(end) - round(start)
    if duration < 0:
        logger.error("Negative PGN duration %s for start=%s end=%s", duration, start, end)
        return 0
    return duration


def read_duration_tags(pgn_text: str) -> DurationTags:
    """Read the four duration tags from the header section of a PGN.

    Raises:
        ValueError: When the headers are absent or a required tag is missing.
    """

    headers = chess.pgn.read_headers(StringIO(_header_lines(pgn_text)))
    if headers is None:
        raise ValueError("no PGN header tags found")
    values = {
        name: headers.get(name) for name in ("UTCDate", "StartTime", "EndDate", "EndTime")
    }
    missing = sorted(name for name, value in values.items() if not value)
    if missing:
        raise ValueError(f"missing PGN header tags: {', '.join(missing)}")
    return DurationTags(
        start_date=values["UTCDate"],
        start_time=values["StartTime"],
        end_date=values["EndDate"],
        end_time=values["EndTime"],
    )


def _header_lines(pgn_text: str) -> str:
    lines = [line.strip() for line in pgn_text.splitlines() if line.lstrip().startswith("[")]
    return "\n".join(lines) + "\n\n"


def _parse_timestamp(date_value: str, time_value: str) -> float | None:
    text = f"{date_value.strip().replace('.', '-')} {time_value.strip()}"
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=UTC).timestamp()
        except ValueError:
            continue
    return None
