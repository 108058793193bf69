from datetime import UTC, date, datetime


class Now:
    @staticmethod
    def as_datetime() -> datetime:
        """Return the current UTC time as a datetime object."""

        return datetime.now(UTC)

    @staticmethod
    def to_utc(dt: datetime | None) -> datetime | None:
        """Convert a datetime object to UTC timezone."""

        if dt is None:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=UTC)
        return dt.astimezone(UTC)

    @staticmethod
    def coerce(value: datetime | date | int | float) -> datetime:
        """Coerce a datetime, date, or epoch-seconds value into an aware UTC datetime.

        Naive datetimes are read as UTC. Dates map to midnight UTC.
        """

        if isinstance(value, datetime):
            return Now.to_utc(value)  # type: ignore[return-value]
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day, tzinfo=UTC)
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise TypeError(f"Unsupported start date value: {value!r}")
        return datetime.fromtimestamp(value, UTC)
