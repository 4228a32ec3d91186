"""
Request parsing for the scheduling endpoints.

Converts query strings and JSON bodies into engine values. Anything the
engine cannot work with raises DataFormatError.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from dateutil.parser import isoparse

from services.errors import DataFormatError
from services.schedule_types import (
    FREQ_TOKENS, WEEKDAY_TOKENS, join_weekdays, to_naive_utc, to_utc
)

TITLE_MAX_LENGTH = 45


def parse_datetime(value: Any, name: str) -> datetime:
    """ISO-8601 string -> aware UTC datetime; naive input is taken as UTC."""
    if not isinstance(value, str) or not value:
        raise DataFormatError(f"{name} is required")
    try:
        return to_utc(isoparse(value))
    except (ValueError, OverflowError):
        raise DataFormatError(f"{name} is not a valid ISO-8601 datetime")


def parse_window(args: Mapping[str, Any],
                 start_key: str = 'startDateTime',
                 end_key: str = 'endDateTime') -> Tuple[datetime, datetime]:
    """Required [start, end) window with start < end."""
    if not isinstance(args, Mapping):
        raise DataFormatError("Request body must be a JSON object")
    start = parse_datetime(args.get(start_key), start_key)
    end = parse_datetime(args.get(end_key), end_key)
    if start >= end:
        raise DataFormatError(f"{start_key} must be before {end_key}")
    return start, end


def parse_duration(args: Mapping[str, Any]) -> int:
    """Optional minimum slot length in minutes (default 0)."""
    value = args.get('duration')
    if value in (None, ''):
        return 0
    try:
        duration = int(value)
    except (TypeError, ValueError):
        raise DataFormatError("duration must be an integer number of minutes")
    if duration < 0:
        raise DataFormatError("duration must not be negative")
    return duration


def parse_request_window(body: Mapping[str, Any]) -> Optional[Tuple[datetime, datetime]]:
    """
    The day the client is showing, sent along with create/update/confirm.

    Returns None when neither bound is present.
    """
    if body.get('requestStartDateTime') is None and body.get('requestEndDateTime') is None:
        return None
    return parse_window(body, 'requestStartDateTime', 'requestEndDateTime')


def _parse_recurrence(body: Mapping[str, Any], start: datetime) -> Dict[str, Any]:
    try:
        recurrence = int(body.get('recurrence', 0) or 0)
    except (TypeError, ValueError):
        raise DataFormatError("recurrence must be 0 or 1")
    if recurrence not in (0, 1):
        raise DataFormatError("recurrence must be 0 or 1")

    if recurrence == 0:
        return {'recurrence': 0, 'freq': None, 'interval': None, 'byweekday': None, 'until': None}

    freq = body.get('freq')
    if freq not in FREQ_TOKENS:
        raise DataFormatError(f"freq must be one of {', '.join(FREQ_TOKENS)}")

    interval = body.get('interval')
    if isinstance(interval, bool):
        raise DataFormatError("interval must be a positive integer")
    try:
        interval = int(interval)
    except (TypeError, ValueError):
        raise DataFormatError("interval must be a positive integer")
    if interval < 1:
        raise DataFormatError("interval must be a positive integer")

    byweekday = body.get('byweekday')
    if isinstance(byweekday, str):
        byweekday = [token.strip() for token in byweekday.split(',') if token.strip()]
    byweekday = list(byweekday or [])
    for token in byweekday:
        if token not in WEEKDAY_TOKENS:
            raise DataFormatError(f"Unknown weekday token: {token}")
    if freq == 'WEEKLY' and not byweekday:
        raise DataFormatError("byweekday is required for WEEKLY schedules")

    until = parse_datetime(body.get('until'), 'until')
    if until < start:
        raise DataFormatError("until must not be before startDateTime")

    return {
        'recurrence': 1,
        'freq': freq,
        'interval': interval,
        'byweekday': join_weekdays(byweekday) or None,
        'until': to_naive_utc(until),
    }


def parse_schedule_payload(body: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Validate a create/update body and return storage-form fields.

    Updates send the complete schedule, so the same rules apply to both.

    Returns:
        Dict keyed by column name with naive UTC datetimes
    """
    if not isinstance(body, Mapping):
        raise DataFormatError("Request body must be a JSON object")

    title = body.get('title')
    if not isinstance(title, str) or not title.strip():
        raise DataFormatError("title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise DataFormatError(f"title must be at most {TITLE_MAX_LENGTH} characters")

    content = body.get('content')
    if content is not None and not isinstance(content, str):
        raise DataFormatError("content must be a string")

    start, end = parse_window(body)

    fields = {
        'title': title,
        'content': content,
        'start_date_time': to_naive_utc(start),
        'end_date_time': to_naive_utc(end),
    }
    fields.update(_parse_recurrence(body, start))
    return fields


def parse_attendance(body: Optional[Mapping[str, Any]]) -> Tuple[int, bool]:
    """{userId, attendance} of a vote."""
    if not isinstance(body, Mapping):
        raise DataFormatError("Request body must be a JSON object")
    user_id = body.get('userId')
    attendance = body.get('attendance')
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise DataFormatError("userId must be an integer")
    if not isinstance(attendance, bool):
        raise DataFormatError("attendance must be true or false")
    return user_id, attendance
