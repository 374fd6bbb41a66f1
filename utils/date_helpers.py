from datetime import date, datetime
from utils.constants import DATE_FORMAT, MONTH_FORMAT


def now() -> datetime:
    return datetime.now()


def today() -> date:
    return date.today()


def today_str() -> str:
    return date.today().strftime(DATE_FORMAT)


def current_month_str() -> str:
    return date.today().strftime(MONTH_FORMAT)


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp (or a bare YYYY-MM-DD date), None on failure.

    A trailing 'Z' is read as UTC; fromisoformat only accepts it from 3.11.
    """
    if not value:
        return None
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        d = parse_date(value)
        return datetime(d.year, d.month, d.day) if d else None


def calendar_date(value: str | None) -> date | None:
    """Calendar day of a stored timestamp string. Zoned stamps use local time."""
    ts = parse_timestamp(value)
    if ts is None:
        return None
    if ts.tzinfo is not None:
        ts = ts.astimezone()
    return ts.date()


def to_datetime(value: date | datetime | None) -> datetime:
    """Normalize a run date: None means now, a bare date means midnight of that day."""
    if value is None:
        return now()
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_timestamp(dt: datetime) -> str:
    return dt.isoformat(timespec="seconds")


def friendly_date(date_str: str) -> str:
    """Convert YYYY-MM-DD to e.g. '15 Mar 2024'."""
    d = parse_date(date_str)
    if d is None:
        return date_str
    return d.strftime("%d %b %Y")


def parse_month(month_str: str) -> date | None:
    """Parse 'YYYY-MM' to the first day of that month, None on failure."""
    try:
        return datetime.strptime(month_str, MONTH_FORMAT).date()
    except (TypeError, ValueError):
        return None


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def prev_month(month_str: str) -> str:
    d = parse_month(month_str)
    if d is None:
        raise ValueError(f"Invalid month: {month_str}")
    if d.month == 1:
        return format_month(d.replace(year=d.year - 1, month=12))
    return format_month(d.replace(month=d.month - 1))


def next_month(month_str: str) -> str:
    d = parse_month(month_str)
    if d is None:
        raise ValueError(f"Invalid month: {month_str}")
    if d.month == 12:
        return format_month(d.replace(year=d.year + 1, month=1))
    return format_month(d.replace(month=d.month + 1))


def friendly_month(month_str: str) -> str:
    """Convert YYYY-MM to e.g. 'March 2024'."""
    d = parse_month(month_str)
    return d.strftime("%B %Y") if d else month_str
