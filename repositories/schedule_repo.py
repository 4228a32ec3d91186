#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Schedule repositories for personal and group schedules.

Both tables share the same columns and the same window predicates; they only
differ in the owner column.
"""

from datetime import datetime
from typing import List, Sequence

from sqlalchemy import select, delete, and_, or_

from .base import BaseRepository
from models import PersonalSchedule, GroupSchedule
from services.schedule_types import ScheduleRecord, to_naive_utc


class ScheduleRepository(BaseRepository):
    """Window queries shared by the schedule tables."""

    owner_attr: str = None

    @property
    def owner_column(self):
        return getattr(self.model_class, self.owner_attr)

    def get_for_owner(self, owner_id: int, schedule_id: int):
        """Get a schedule only if it belongs to the given owner."""
        stmt = select(self.model_class).where(and_(
            self.model_class.id == schedule_id,
            self.owner_column == owner_id,
        ))
        return self.session.execute(stmt).scalar_one_or_none()

    def get_non_recurring_in_window(self, owner_ids: Sequence[int],
                                    start: datetime, end: datetime) -> List[ScheduleRecord]:
        """
        Single-occurrence schedules overlapping [start, end].

        A schedule qualifies when it starts inside the window, ends inside the
        window, or spans the whole window (bounds inclusive).
        """
        model = self.model_class
        start = to_naive_utc(start)
        end = to_naive_utc(end)
        stmt = select(model).where(and_(
            self.owner_column.in_(list(owner_ids)),
            model.recurrence == 0,
            or_(
                model.start_date_time.between(start, end),
                model.end_date_time.between(start, end),
                and_(model.start_date_time < start, model.end_date_time > end),
            ),
        )).order_by(model.id)
        return [row.to_record() for row in self.session.execute(stmt).scalars()]

    def get_recurring_started_by(self, owner_ids: Sequence[int], end: datetime) -> List[ScheduleRecord]:
        """Repeating schedules whose first occurrence starts no later than end."""
        model = self.model_class
        stmt = select(model).where(and_(
            self.owner_column.in_(list(owner_ids)),
            model.recurrence == 1,
            model.start_date_time <= to_naive_utc(end),
        )).order_by(model.id)
        return [row.to_record() for row in self.session.execute(stmt).scalars()]

    def create(self, owner_id: int, fields: dict):
        """Insert a schedule from parsed fields (storage names, naive UTC)."""
        schedule = self.model_class(**{self.owner_attr: owner_id})
        schedule.apply_fields(fields)
        return self.add(schedule)

    def update_schedule(self, schedule, fields: dict):
        """Replace the given fields; recurrence fields are replaced as a unit."""
        schedule.apply_fields(fields)
        self.session.flush()
        return schedule

    def delete_stale(self, cutoff: datetime) -> int:
        """
        Delete schedules that ended before the cutoff.

        Single schedules are judged by their start, repeating ones by until.

        Returns:
            Number of deleted rows
        """
        model = self.model_class
        cutoff = to_naive_utc(cutoff)
        stmt = delete(model).where(or_(
            and_(model.recurrence == 0, model.start_date_time < cutoff),
            and_(model.recurrence == 1, model.until < cutoff),
        ))
        result = self.session.execute(stmt)
        return result.rowcount


class PersonalScheduleRepository(ScheduleRepository):
    """Repository for PersonalSchedule operations."""

    model_class = PersonalSchedule
    owner_attr = 'user_id'


class GroupScheduleRepository(ScheduleRepository):
    """Repository for GroupSchedule operations."""

    model_class = GroupSchedule
    owner_attr = 'group_id'
