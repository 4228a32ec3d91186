"""Plain value types passed between the repositories and the scheduling engine."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

WEEKDAY_TOKENS = ('MO', 'TU', 'WE', 'TH', 'FR', 'SA', 'SU')
FREQ_TOKENS = ('DAILY', 'WEEKLY', 'MONTHLY', 'YEARLY')


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return an aware UTC datetime; naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Storage form: naive UTC."""
    if value is None:
        return None
    return to_utc(value).replace(tzinfo=None)


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    if value is None:
        return None
    return to_utc(value).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def split_weekdays(byweekday: Optional[str]) -> Tuple[str, ...]:
    """'MO,TU' -> ('MO', 'TU'); None or '' -> ()."""
    if not byweekday:
        return ()
    return tuple(token.strip() for token in byweekday.split(',') if token.strip())


def join_weekdays(byweekday) -> Optional[str]:
    if byweekday is None:
        return None
    return ','.join(byweekday)


@dataclass(frozen=True)
class ScheduleRecord:
    """A stored personal or group schedule, detached from the ORM."""
    id: Optional[int]
    owner_id: int
    is_group: bool
    title: str
    content: Optional[str]
    start: datetime
    end: datetime
    recurrence: int = 0
    freq: Optional[str] = None
    interval: Optional[int] = None
    byweekday: Tuple[str, ...] = ()
    until: Optional[datetime] = None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence == 1

    @property
    def length(self):
        return self.end - self.start

    @property
    def owner_key(self) -> str:
        return 'groupId' if self.is_group else 'userId'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            self.owner_key: self.owner_id,
            'title': self.title,
            'content': self.content,
            'startDateTime': format_datetime(self.start),
            'endDateTime': format_datetime(self.end),
            'recurrence': self.recurrence,
            'freq': self.freq,
            'interval': self.interval,
            'byweekday': join_weekdays(self.byweekday) or None,
            'until': format_datetime(self.until),
            'isGroup': self.is_group,
        }


@dataclass(frozen=True)
class Occurrence:
    """One concrete time instance of a schedule inside a query window."""
    record: ScheduleRecord
    start: datetime
    end: datetime

    def to_dict(self, summary: bool = False) -> Dict[str, Any]:
        record = self.record
        data: Dict[str, Any] = {
            'id': record.id,
            record.owner_key: record.owner_id,
        }
        if not summary:
            data['title'] = record.title
            data['content'] = record.content
        data.update({
            'startDateTime': format_datetime(self.start),
            'endDateTime': format_datetime(self.end),
            'recurrence': record.recurrence,
            'freq': record.freq,
            'interval': record.interval,
            'byweekday': join_weekdays(record.byweekday) or None,
            'isGroup': record.is_group,
        })
        if summary and record.is_recurring:
            data['startRecur'] = format_datetime(record.start)
            data['endRecur'] = format_datetime(record.until)
        return data


@dataclass(frozen=True)
class FreeSlot:
    """A gap with no busy interval inside the proposal window."""
    start: datetime
    end: datetime
    duration: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'startDateTime': format_datetime(self.start),
            'endDateTime': format_datetime(self.end),
            'duration': self.duration,
        }


@dataclass
class ScheduleView:
    """Result of one merge: occurrences plus the earliest start when summarised."""
    non_recurring: List[Occurrence] = field(default_factory=list)
    recurring: List[Occurrence] = field(default_factory=list)
    earliest_date: Optional[datetime] = None
    summary: bool = False

    @property
    def schedules(self) -> List[Occurrence]:
        return self.non_recurring + self.recurring

    def to_dict(self) -> Dict[str, Any]:
        """Flat layout: {earliestDate?, schedules}."""
        data: Dict[str, Any] = {}
        if self.summary:
            data['earliestDate'] = format_datetime(self.earliest_date)
        data['schedules'] = [o.to_dict(summary=self.summary) for o in self.schedules]
        return data

    def to_grouped_dict(self) -> Dict[str, Any]:
        """Grouped layout: recurring records carry their recurrenceDateList."""
        data: Dict[str, Any] = {}
        if self.summary:
            data['earliestDate'] = format_datetime(self.earliest_date)
        data['nonRecurrenceSchedule'] = [o.to_dict(summary=self.summary) for o in self.non_recurring]

        grouped: Dict[Tuple[bool, Optional[int]], Dict[str, Any]] = {}
        for occurrence in self.recurring:
            record = occurrence.record
            key = (record.is_group, record.id)
            if key not in grouped:
                entry = record.to_dict()
                entry.pop('startDateTime')
                entry.pop('endDateTime')
                if self.summary:
                    entry.pop('title')
                    entry.pop('content')
                entry['recurrenceDateList'] = []
                grouped[key] = entry
            grouped[key]['recurrenceDateList'].append({
                'startDateTime': format_datetime(occurrence.start),
                'endDateTime': format_datetime(occurrence.end),
            })
        data['recurrenceSchedule'] = list(grouped.values())
        return data
