from datetime import datetime, timedelta, timezone

from ..core.errors import ValidationError


def to_naive_utc(value: datetime) -> datetime:
    """타임존이 있는 값은 UTC로 바꾼 뒤 tzinfo를 떼어낸다 (DB에는 naive UTC로 저장)."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def coerce_datetime(value) -> datetime:
    """ISO 8601 문자열(날짜만 있어도 됨)이나 datetime을 naive UTC datetime으로. 실패하면 ValueError."""
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise ValueError("invalid date")
    return to_naive_utc(datetime.fromisoformat(value.strip()))


def parse_datetime(value, field_name: str = "date") -> datetime:
    try:
        return coerce_datetime(value)
    except ValueError:
        raise ValidationError(f"Invalid {field_name}")


def parse_optional_datetime(value: str | None, field_name: str):
    if value is None or value == "":
        return None
    return parse_datetime(value, field_name)


def day_bounds(value: datetime) -> tuple[datetime, datetime]:
    start = value.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1) - timedelta(microseconds=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
