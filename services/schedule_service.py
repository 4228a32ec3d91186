#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Schedule Service
Create, read, update and delete personal and group schedules
"""

import logging
from typing import Any, Dict, Optional, Tuple
from datetime import datetime

from repositories import GroupRepository, GroupScheduleRepository, PersonalScheduleRepository
from services.errors import GroupNotFoundError, ScheduleNotFoundError
from services.recurrence import RecurrenceEvaluator
from services.schedule_response import SUNDAY, build_schedule_response

logger = logging.getLogger(__name__)

RequestWindow = Optional[Tuple[datetime, datetime]]


class ScheduleService:
    """CRUD for schedules owned by a user or by a group"""

    def __init__(self, db_session, evaluator: RecurrenceEvaluator = None,
                 week_starts_on: int = SUNDAY):
        """
        Initialize Schedule Service

        Args:
            db_session: DatabaseSession instance
            evaluator: RecurrenceEvaluator used to build schedule responses
            week_starts_on: First day of the week (Monday=0 ... Sunday=6)
        """
        self.db = db_session
        self.evaluator = evaluator or RecurrenceEvaluator()
        self.week_starts_on = week_starts_on

    def _respond(self, schedule, request_window: RequestWindow, message: str) -> Dict[str, Any]:
        """Schedule response when the client sent the day it shows, else a plain ack."""
        if request_window is None:
            return {'success': True, 'message': message, 'id': schedule.id}
        request_start, request_end = request_window
        return build_schedule_response(
            schedule.to_record(), request_start, request_end,
            evaluator=self.evaluator, week_starts_on=self.week_starts_on
        )

    # ---------------------------------------------------------------- personal

    def get_personal_schedule(self, user_id: int, schedule_id: int) -> Dict[str, Any]:
        with self.db.session_scope() as session:
            schedule = PersonalScheduleRepository(session).get_for_owner(user_id, schedule_id)
            if schedule is None:
                raise ScheduleNotFoundError()
            return schedule.to_dict()

    def create_personal_schedule(self, user_id: int, fields: Dict[str, Any],
                                 request_window: RequestWindow = None) -> Dict[str, Any]:
        """
        Args:
            user_id: Owner
            fields: Output of parse_schedule_payload
            request_window: (start, end) of the day the client shows, or None
        """
        with self.db.session_scope() as session:
            schedule = PersonalScheduleRepository(session).create(user_id, fields)
            logger.info(f"Created personal schedule {schedule.id} for user {user_id}")
            return self._respond(schedule, request_window, 'Schedule created')

    def update_personal_schedule(self, user_id: int, schedule_id: int, fields: Dict[str, Any],
                                 request_window: RequestWindow = None) -> Dict[str, Any]:
        with self.db.session_scope() as session:
            repo = PersonalScheduleRepository(session)
            schedule = repo.get_for_owner(user_id, schedule_id)
            if schedule is None:
                raise ScheduleNotFoundError()
            repo.update_schedule(schedule, fields)
            logger.info(f"Updated personal schedule {schedule_id} of user {user_id}")
            return self._respond(schedule, request_window, 'Schedule updated')

    def delete_personal_schedule(self, user_id: int, schedule_id: int) -> Dict[str, Any]:
        with self.db.session_scope() as session:
            repo = PersonalScheduleRepository(session)
            schedule = repo.get_for_owner(user_id, schedule_id)
            if schedule is None:
                raise ScheduleNotFoundError()
            repo.delete(schedule)
            logger.info(f"Deleted personal schedule {schedule_id} of user {user_id}")
        return {'success': True, 'message': 'Schedule deleted', 'id': schedule_id}

    # ------------------------------------------------------------------- group

    def _require_group(self, session, group_id: int):
        if GroupRepository(session).get_by_id(group_id) is None:
            logger.warning(f"Group {group_id} not found")
            raise GroupNotFoundError()

    def _get_group_schedule(self, session, group_id: int, schedule_id: int):
        self._require_group(session, group_id)
        schedule = GroupScheduleRepository(session).get_for_owner(group_id, schedule_id)
        if schedule is None:
            raise ScheduleNotFoundError()
        return schedule

    def get_group_schedule(self, group_id: int, schedule_id: int) -> Dict[str, Any]:
        with self.db.session_scope() as session:
            return self._get_group_schedule(session, group_id, schedule_id).to_dict()

    def create_group_schedule(self, group_id: int, fields: Dict[str, Any],
                              request_window: RequestWindow = None) -> Dict[str, Any]:
        with self.db.session_scope() as session:
            self._require_group(session, group_id)
            schedule = GroupScheduleRepository(session).create(group_id, fields)
            logger.info(f"Created group schedule {schedule.id} for group {group_id}")
            return self._respond(schedule, request_window, 'Schedule created')

    def update_group_schedule(self, group_id: int, schedule_id: int, fields: Dict[str, Any],
                              request_window: RequestWindow = None) -> Dict[str, Any]:
        with self.db.session_scope() as session:
            schedule = self._get_group_schedule(session, group_id, schedule_id)
            GroupScheduleRepository(session).update_schedule(schedule, fields)
            logger.info(f"Updated group schedule {schedule_id} of group {group_id}")
            return self._respond(schedule, request_window, 'Schedule updated')

    def delete_group_schedule(self, group_id: int, schedule_id: int) -> Dict[str, Any]:
        with self.db.session_scope() as session:
            schedule = self._get_group_schedule(session, group_id, schedule_id)
            GroupScheduleRepository(session).delete(schedule)
            logger.info(f"Deleted group schedule {schedule_id} of group {group_id}")
        return {'success': True, 'message': 'Schedule deleted', 'id': schedule_id}
