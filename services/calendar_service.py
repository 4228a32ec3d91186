#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Calendar Service
Read-side views of personal and group calendars and free-time proposals
"""

import logging
from datetime import datetime
from typing import Any, Dict

from repositories import GroupRepository, GroupScheduleRepository, PersonalScheduleRepository
from services.errors import GroupNotFoundError
from services.free_slots import propose_slots, rank_by_daytime
from services.occurrence_merger import OccurrenceMerger, combine_views
from services.recurrence import RecurrenceEvaluator
from services.schedule_types import format_datetime

logger = logging.getLogger(__name__)


class CalendarService:
    """Merged calendar views for users and groups"""

    def __init__(self, db_session, evaluator: RecurrenceEvaluator = None,
                 daytime_start_offset_hours: int = 9, daytime_end_offset_hours: int = 2):
        """
        Initialize Calendar Service

        Args:
            db_session: DatabaseSession instance
            evaluator: RecurrenceEvaluator shared by all merges
            daytime_start_offset_hours: Proposal ranking threshold after the window start
            daytime_end_offset_hours: Proposal ranking threshold before the window end
        """
        self.db = db_session
        self.evaluator = evaluator or RecurrenceEvaluator()
        self.daytime_start_offset_hours = daytime_start_offset_hours
        self.daytime_end_offset_hours = daytime_end_offset_hours

    def _require_group(self, groups: GroupRepository, group_id: int):
        if groups.get_by_id(group_id) is None:
            logger.warning(f"Group {group_id} not found")
            raise GroupNotFoundError()

    def get_user_calendar(self, user_id: int, start: datetime, end: datetime) -> Dict[str, Any]:
        """
        Personal schedules of a user followed by the schedules of their groups.

        Returns:
            Grouped layout: {earliestDate, nonRecurrenceSchedule, recurrenceSchedule}
        """
        with self.db.session_scope() as session:
            group_ids = GroupRepository(session).get_group_ids_for_user(user_id)
            personal = OccurrenceMerger(PersonalScheduleRepository(session), self.evaluator)
            group = OccurrenceMerger(GroupScheduleRepository(session), self.evaluator)

            view = combine_views(
                personal.get_schedule([user_id], start, end),
                group.get_schedule(group_ids, start, end),
            )

        earliest = min((o.start for o in view.schedules), default=None)
        return {'earliestDate': format_datetime(earliest), **view.to_grouped_dict()}

    def get_group_calendar(self, group_id: int, start: datetime, end: datetime,
                           summary: bool = False) -> Dict[str, Any]:
        """
        Schedules of the group's sharing members followed by the group's own.

        Args:
            group_id: Group ID
            start: Window start (aware UTC)
            end: Window end (aware UTC)
            summary: Omit title/content, keep only the first occurrence per rule
                and report earliestDate

        Returns:
            {schedules} or {earliestDate, schedules}
        """
        with self.db.session_scope() as session:
            groups = GroupRepository(session)
            self._require_group(groups, group_id)
            member_ids = groups.get_sharing_member_ids(group_id)

            personal = OccurrenceMerger(PersonalScheduleRepository(session), self.evaluator)
            group = OccurrenceMerger(GroupScheduleRepository(session), self.evaluator)
            view = combine_views(
                personal.get_schedule(member_ids, start, end, summary=summary),
                group.get_schedule([group_id], start, end, summary=summary),
            )

        return view.to_dict()

    def propose_meeting_times(self, group_id: int, start: datetime, end: datetime,
                              minimum_duration: int = 0) -> Dict[str, Any]:
        """
        Free slots in [start, end) for every member sharing their schedule
        (pending members included) and the group itself.

        Returns:
            {proposals: [FreeSlot, ...]} with daytime slots first
        """
        with self.db.session_scope() as session:
            groups = GroupRepository(session)
            self._require_group(groups, group_id)
            member_ids = groups.get_sharing_member_ids(group_id, include_pending=True)

            personal = OccurrenceMerger(PersonalScheduleRepository(session), self.evaluator)
            group = OccurrenceMerger(GroupScheduleRepository(session), self.evaluator)
            view = combine_views(
                personal.get_schedule(member_ids, start, end),
                group.get_schedule([group_id], start, end),
            )

        busy = sorted(((o.start, o.end) for o in view.schedules), key=lambda interval: interval[0])
        slots = propose_slots(busy, start, end, minimum_duration)
        ranked = rank_by_daytime(
            slots, start, end,
            start_offset_hours=self.daytime_start_offset_hours,
            end_offset_hours=self.daytime_end_offset_hours,
        )

        logger.debug(
            f"Group {group_id}: {len(busy)} busy intervals, {len(ranked)} free slots "
            f"(minimum {minimum_duration} min)"
        )
        return {'proposals': [slot.to_dict() for slot in ranked]}
