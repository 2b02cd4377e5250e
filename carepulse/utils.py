from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to an aware UTC datetime; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class FormattedDateTime:
    date_time: str  # Oct 17, 2023, 8:30 AM
    date_day: str   # Tue, 10/17/2023
    date_only: str  # Oct 17, 2023
    time_only: str  # 8:30 AM


def format_date_time(value: datetime) -> FormattedDateTime:
    hour = value.hour % 12 or 12
    time_only = f"{hour}:{value:%M} {value:%p}"
    date_only = f"{value:%b} {value.day}, {value.year}"
    return FormattedDateTime(
        date_time=f"{date_only}, {time_only}",
        date_day=f"{value:%a}, {value:%m}/{value:%d}/{value.year}",
        date_only=date_only,
        time_only=time_only,
    )
