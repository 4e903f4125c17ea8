# TASKS/dates.py
from datetime import date, datetime, time

from todoterm.CONFIG.settings import DateFormats
from todoterm.exceptions import ValidationError

# A task that is only due on a day is stored at the last second of that day.
DATE_ONLY_TIME = time(23, 59, 59)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, DATE_ONLY_TIME)


def get_today() -> datetime:
    return end_of_day(date.today())


def date_has_time(dt: datetime) -> bool:
    """False for date-only tasks, which sit at 23:59."""
    return not (dt.hour == 23 and dt.minute == 59)


def parse_date(text: str, formats: DateFormats) -> datetime:
    """
    Parse a due date typed by the user.

    The datetime input format is tried first, then the date-only format
    (which lands on 23:59:59). Blank input means today.
    """
    text = text.strip()
    if not text:
        return get_today()
    try:
        return datetime.strptime(text, formats.input_datetime_format)
    except ValueError:
        pass
    try:
        return end_of_day(datetime.strptime(text, formats.input_date_format).date())
    except ValueError:
        raise ValidationError(
            f"Unable to parse date '{text}', expected {formats.input_date_hint} "
            f"or {formats.input_datetime_hint}"
        ) from None


def date_to_display_str(dt: datetime, formats: DateFormats) -> str:
    if date_has_time(dt):
        return dt.strftime(formats.display_datetime_format)
    return dt.strftime(formats.display_date_format)


def date_to_input_str(dt: datetime, formats: DateFormats) -> str:
    if date_has_time(dt):
        return dt.strftime(formats.input_datetime_format)
    return dt.strftime(formats.input_date_format)


def to_iso(dt: datetime) -> str:
    return dt.isoformat(timespec="seconds")


def from_iso(s: str) -> datetime:
    """Parse a stored timestamp. Timestamps with a UTC offset become naive local time."""
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt
