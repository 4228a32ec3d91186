"""
Single-schedule response payload.

After a schedule is created, modified or confirmed, the client gets the
schedule itself plus how it shows up in the day and week it is looking at,
saving a second round trip.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from services.occurrence_merger import merge_records
from services.recurrence import RecurrenceEvaluator
from services.schedule_types import ScheduleRecord

SUNDAY = 6


def week_window(request_start: datetime, request_end: datetime,
                week_starts_on: int = SUNDAY) -> Tuple[datetime, datetime]:
    """
    Week containing the requested day.

    The request window is one local day expressed in UTC, so its midpoint
    always falls on the local calendar date; that date's weekday decides how
    many days to step back.
    """
    midpoint = request_start + (request_end - request_start) / 2
    days_back = (midpoint.weekday() - week_starts_on) % 7
    week_start = request_start - timedelta(days=days_back)
    week_end = request_end + timedelta(days=6 - days_back)
    return week_start, week_end


def build_schedule_response(record: ScheduleRecord, request_start: datetime, request_end: datetime,
                            evaluator: Optional[RecurrenceEvaluator] = None,
                            week_start: Optional[datetime] = None,
                            week_end: Optional[datetime] = None,
                            week_starts_on: int = SUNDAY) -> Dict[str, Any]:
    """
    Args:
        record: The schedule just persisted
        request_start: Start of the day the client is showing (aware UTC)
        request_end: End of that day (aware UTC)
        evaluator: RecurrenceEvaluator used for expansion
        week_start, week_end: Explicit week bounds; derived from the request
            window when omitted

    Returns:
        {scheduleSummary, todaySchedules, schedulesForTheWeek}
    """
    evaluator = evaluator or RecurrenceEvaluator()
    if week_start is None or week_end is None:
        week_start, week_end = week_window(request_start, request_end, week_starts_on)

    today = merge_records([record], request_start, request_end, evaluator)
    week = merge_records([record], week_start, week_end, evaluator)

    return {
        'scheduleSummary': record.to_dict(),
        'todaySchedules': [o.to_dict() for o in today.schedules],
        'schedulesForTheWeek': [o.to_dict() for o in week.schedules],
    }
