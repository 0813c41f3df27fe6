import datetime
from typing import Tuple


def get_week_range(date_obj: datetime.date) -> Tuple[datetime.date, datetime.date]:
    """
    Returns Monday and Sunday of the ISO week containing the date.
    """

    weekday = date_obj.weekday()
    monday = date_obj - datetime.timedelta(days=weekday)
    sunday = monday + datetime.timedelta(days=6)

    return monday, sunday


def get_previous_week_range(
    date_obj: datetime.date,
) -> Tuple[datetime.date, datetime.date]:
    """Monday and Sunday of the week before the one containing the date"""
    return get_week_range(date_obj - datetime.timedelta(days=7))


def iso_week_key(moment: datetime.date) -> Tuple[int, int]:
    """(ISO year, ISO week number); late December can belong to week 1 of the next year"""
    iso = moment.isocalendar()
    return iso[0], iso[1]


def period_bounds(
    start_date: datetime.date, end_date: datetime.date
) -> Tuple[datetime.datetime, datetime.datetime]:
    """
    Converts an inclusive date range into [start, end) datetimes.

    Raises:
        ValueError: If end_date is before start_date
    """
    if end_date < start_date:
        raise ValueError(f"Period end {end_date} is before period start {start_date}")

    start = datetime.datetime.combine(start_date, datetime.time.min)
    end = datetime.datetime.combine(
        end_date + datetime.timedelta(days=1), datetime.time.min
    )
    return start, end


def validate_date_format(date_str: str) -> datetime.date:
    """
    Parses a date string.
    Supported formats: DD.MM.YYYY, DD/MM/YYYY, YYYY-MM-DD

    Raises:
        ValueError: If no format matches
    """
    formats = ["%d.%m.%Y", "%d/%m/%Y", "%Y-%m-%d"]

    for fmt in formats:
        try:
            return datetime.datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    raise ValueError(
        f"Invalid date: {date_str}. Supported formats: DD.MM.YYYY, DD/MM/YYYY, YYYY-MM-DD"
    )


def to_date(value) -> datetime.date:
    """Accepts a date, a datetime or a string in one of the supported formats"""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return validate_date_format(value)


def to_datetime(value) -> datetime.datetime:
    """
    Accepts a datetime or an ISO 8601 string.

    Aware datetimes are converted to naive UTC, the form they are stored in.
    """
    if isinstance(value, str):
        value = datetime.datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if not isinstance(value, datetime.datetime):
        raise ValueError(f"Invalid date and time: {value!r}")
    if value.tzinfo is not None:
        value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return value
