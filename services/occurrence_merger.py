"""
Occurrence merging.

Turns stored schedules of a set of users or groups into the list of
occurrences that fall into a query window.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from services.errors import InternalError
from services.recurrence import RecurrenceEvaluator
from services.schedule_types import ScheduleRecord, ScheduleView, Occurrence

logger = logging.getLogger(__name__)


def overlaps_window(record: ScheduleRecord, start: datetime, end: datetime) -> bool:
    """Inclusive three-way overlap test used for single-occurrence schedules."""
    return (
        start <= record.start <= end
        or start <= record.end <= end
        or (record.start < start and record.end > end)
    )


def merge_records(records: Iterable[ScheduleRecord], start: datetime, end: datetime,
                  evaluator: RecurrenceEvaluator, summary: bool = False) -> ScheduleView:
    """
    Merge already-fetched records into one view of the window.

    Single-occurrence records come first in input order, followed by the
    expansions of repeating records. Nothing is re-sorted.
    """
    view = ScheduleView(summary=summary)
    recurring = []
    for record in records:
        if record.is_recurring:
            if record.start <= end:
                recurring.append(record)
        elif overlaps_window(record, start, end):
            view.non_recurring.append(Occurrence(record=record, start=record.start, end=record.end))

    for record in recurring:
        view.recurring.extend(evaluator.expand(record, start, end, summary=summary))

    if summary:
        view.earliest_date = min((o.start for o in view.schedules), default=None)
    return view


def combine_views(*views: ScheduleView) -> ScheduleView:
    """
    Concatenate views in the given order.

    earliest_date is the smallest non-null earliest date of the inputs.
    """
    combined = ScheduleView(summary=any(v.summary for v in views))
    for view in views:
        combined.non_recurring.extend(view.non_recurring)
        combined.recurring.extend(view.recurring)
    earliest = [v.earliest_date for v in views if v.earliest_date is not None]
    combined.earliest_date = min(earliest) if earliest else None
    return combined


class OccurrenceMerger:
    """Fetches schedules of a subject type and merges them for a window."""

    def __init__(self, repository, evaluator: Optional[RecurrenceEvaluator] = None):
        """
        Args:
            repository: PersonalScheduleRepository or GroupScheduleRepository
            evaluator: RecurrenceEvaluator (a default one if omitted)
        """
        self.repository = repository
        self.evaluator = evaluator or RecurrenceEvaluator()

    def get_schedule(self, subject_ids: Sequence[int], start: datetime, end: datetime,
                     summary: bool = False) -> ScheduleView:
        """
        Occurrences of every schedule owned by subject_ids inside [start, end].

        Raises:
            InternalError: storage or rule expansion failed
        """
        if not subject_ids:
            return ScheduleView(summary=summary)

        try:
            records = self.repository.get_non_recurring_in_window(subject_ids, start, end)
            records += self.repository.get_recurring_started_by(subject_ids, end)
            view = merge_records(records, start, end, self.evaluator, summary=summary)
        except Exception as e:
            logger.error(
                "Failed to build schedule for %s %s: %s",
                self.repository.owner_attr, list(subject_ids), e, exc_info=True
            )
            raise InternalError() from e

        logger.debug(
            "Merged %d single and %d repeating occurrences for %s %s",
            len(view.non_recurring), len(view.recurring),
            self.repository.owner_attr, list(subject_ids)
        )
        return view
