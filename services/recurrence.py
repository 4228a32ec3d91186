"""
Recurrence rule evaluation.

Expands a repeating schedule into the concrete occurrences that touch a query
window, using the dateutil rrule implementation restricted to
freq / interval / byweekday / until.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from dateutil import rrule

from services.schedule_types import Occurrence, ScheduleRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_OCCURRENCES = 1000

# Occurrences starting exactly at the window end are still included
WINDOW_EPSILON = timedelta(milliseconds=1)

RRULE_FREQ = {
    'DAILY': rrule.DAILY,
    'WEEKLY': rrule.WEEKLY,
    'MONTHLY': rrule.MONTHLY,
    'YEARLY': rrule.YEARLY,
}

RRULE_WEEKDAY = {
    'MO': rrule.MO,
    'TU': rrule.TU,
    'WE': rrule.WE,
    'TH': rrule.TH,
    'FR': rrule.FR,
    'SA': rrule.SA,
    'SU': rrule.SU,
}


def get_rrule_freq(freq: str) -> int:
    """Map a DAILY/WEEKLY/MONTHLY/YEARLY token to the rrule constant."""
    try:
        return RRULE_FREQ[freq]
    except KeyError:
        raise ValueError(f"Unsupported recurrence frequency: {freq!r}")


def get_rrule_byweekday(byweekday: Optional[Sequence[str]]) -> list:
    """Map MO..SU tokens to rrule weekdays; empty means no weekday constraint."""
    if not byweekday:
        return []
    try:
        return [RRULE_WEEKDAY[token] for token in byweekday]
    except KeyError as e:
        raise ValueError(f"Unsupported weekday token: {e.args[0]!r}")


def build_rule(record: ScheduleRecord) -> rrule.rrule:
    """Build the rule anchored at the record's first occurrence and bounded by until."""
    kwargs = {
        'dtstart': record.start,
        'interval': record.interval or 1,
        'until': record.until,
    }
    weekdays = get_rrule_byweekday(record.byweekday)
    if weekdays:
        kwargs['byweekday'] = weekdays
    return rrule.rrule(get_rrule_freq(record.freq), **kwargs)


class RecurrenceEvaluator:
    """Expands repeating schedules into occurrences within a window."""

    def __init__(self, max_occurrences: int = DEFAULT_MAX_OCCURRENCES):
        self.max_occurrences = max_occurrences

    def expand(self, record: ScheduleRecord, start: datetime, end: datetime,
               summary: bool = False) -> List[Occurrence]:
        """
        Occurrences of a repeating record that intersect [start, end).

        The rule is queried over (start - L, end + epsilon) where L is the
        occurrence length, so occurrences that begin before the window but are
        still running when it opens are found. Candidates whose computed end
        falls before the window start are dropped.

        Args:
            record: Record with recurrence=1
            start: Window start (aware UTC)
            end: Window end (aware UTC)
            summary: If True, stop at the first qualifying occurrence

        Returns:
            List of Occurrence, chronological
        """
        if record.until is not None and record.until < record.start:
            return []

        length = record.length
        rule = build_rule(record)
        occurrences = []
        for candidate in rule.xafter(start - length, inc=False):
            if candidate >= end + WINDOW_EPSILON:
                break
            occurrence_end = candidate + length
            if occurrence_end < start:
                continue
            if len(occurrences) >= self.max_occurrences:
                logger.warning(
                    "Recurrence expansion truncated at %d occurrences for schedule %s (group=%s)",
                    self.max_occurrences, record.id, record.is_group
                )
                break
            occurrences.append(Occurrence(record=record, start=candidate, end=occurrence_end))
            if summary:
                break
        return occurrences
