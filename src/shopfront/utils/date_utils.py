from datetime import date, datetime, timezone
from typing import Optional, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


class DateUtils:
    """
    Centralized date/time helpers.

    All stored timestamps are timezone-aware UTC and serialized as ISO-8601.
    """

    UTC = timezone.utc

    @classmethod
    def now_utc(cls) -> datetime:
        """Get current UTC datetime - always use this for store timestamps"""
        return datetime.now(cls.UTC)

    @classmethod
    def today_utc(cls) -> date:
        return cls.now_utc().date()

    @classmethod
    def to_utc(cls, dt: datetime) -> datetime:
        """Convert datetime to UTC, assuming UTC for naive values"""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=cls.UTC)
        return dt.astimezone(cls.UTC)

    @classmethod
    def isoformat(cls, dt: datetime) -> str:
        """Serialize as ISO-8601 UTC with a Z suffix and millisecond precision"""
        return cls.to_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @classmethod
    def parse_date(cls, value: Union[str, date, datetime]) -> date:
        """
        Parse a calendar date from ISO-8601 style input.

        Raises:
            ValueError: when the value is not a recognizable date
        """
        if isinstance(value, datetime):
            return cls.to_utc(value).date()
        if isinstance(value, date):
            return value
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Invalid date: {value!r}")
        try:
            parsed = date_parser.isoparse(value.strip())
        except (ValueError, OverflowError):
            raise ValueError(f"Invalid date: {value}")
        if parsed.tzinfo is not None:
            parsed = cls.to_utc(parsed)
        return parsed.date()

    @classmethod
    def age_in_years(cls, birth_date: date, on: Optional[date] = None) -> int:
        """Full years elapsed between birth_date and `on` (default: today, UTC)"""
        on = on or cls.today_utc()
        return relativedelta(on, birth_date).years
