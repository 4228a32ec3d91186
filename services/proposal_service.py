#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Proposal Service
Candidate group schedules, member votes and confirmation into a group schedule
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from repositories import GroupRepository, GroupScheduleRepository, VoteRepository
from services.errors import GroupNotFoundError, ProposalNotFoundError
from services.recurrence import RecurrenceEvaluator
from services.schedule_response import SUNDAY, build_schedule_response
from services.schedule_types import to_naive_utc

logger = logging.getLogger(__name__)

CONFIRMED_FIELDS = (
    'title', 'content', 'start_date_time', 'end_date_time',
    'recurrence', 'freq', 'interval', 'byweekday', 'until',
)


class ProposalService:
    """Voting workflow for candidate group schedules"""

    def __init__(self, db_session, evaluator: RecurrenceEvaluator = None,
                 voting_days: int = 7, week_starts_on: int = SUNDAY):
        """
        Initialize Proposal Service

        Args:
            db_session: DatabaseSession instance
            evaluator: RecurrenceEvaluator used for the confirm response
            voting_days: How long a new proposal stays open for voting
            week_starts_on: First day of the week (Monday=0 ... Sunday=6)
        """
        self.db = db_session
        self.evaluator = evaluator or RecurrenceEvaluator()
        self.voting_days = voting_days
        self.week_starts_on = week_starts_on

    def _require_group(self, session, group_id: int):
        if GroupRepository(session).get_by_id(group_id) is None:
            logger.warning(f"Group {group_id} not found")
            raise GroupNotFoundError()

    def _get_proposal(self, session, group_id: int, vote_id: int):
        self._require_group(session, group_id)
        vote = VoteRepository(session).get_for_group(group_id, vote_id)
        if vote is None:
            raise ProposalNotFoundError()
        return vote

    def create_proposal(self, group_id: int, fields: Dict[str, Any],
                        now: datetime = None) -> Dict[str, Any]:
        """
        Create a candidate schedule open for voting.

        Args:
            group_id: Group ID
            fields: Output of parse_schedule_payload
            now: Creation time (defaults to the current UTC time)
        """
        now = now or datetime.now(timezone.utc)
        voting_end_date = to_naive_utc(now + timedelta(days=self.voting_days))

        with self.db.session_scope() as session:
            self._require_group(session, group_id)
            vote = VoteRepository(session).create(group_id, fields, voting_end_date)
            logger.info(f"Created proposal {vote.vote_id} for group {group_id}")
            return vote.to_dict()

    def get_proposal(self, group_id: int, vote_id: int) -> Dict[str, Any]:
        with self.db.session_scope() as session:
            return self._get_proposal(session, group_id, vote_id).to_dict()

    def list_proposals(self, group_id: int) -> List[Dict[str, Any]]:
        """All open proposals with their results and the number of attending votes."""
        with self.db.session_scope() as session:
            self._require_group(session, group_id)
            repo = VoteRepository(session)
            votes = repo.list_for_group(group_id)
            counts = repo.count_positive_votes([vote.vote_id for vote in votes])
            return [
                {
                    **vote.to_dict(),
                    'votesCount': counts.get(vote.vote_id, 0),
                    'voteResults': [result.to_dict() for result in vote.results],
                }
                for vote in votes
            ]

    def delete_proposal(self, group_id: int, vote_id: int) -> Dict[str, Any]:
        with self.db.session_scope() as session:
            vote = self._get_proposal(session, group_id, vote_id)
            VoteRepository(session).delete(vote)
            logger.info(f"Deleted proposal {vote_id} of group {group_id}")
        return {'success': True, 'message': 'Proposal deleted', 'id': vote_id}

    def cast_vote(self, group_id: int, vote_id: int, user_id: int, attendance: bool) -> Dict[str, Any]:
        """Record or replace a member's answer."""
        with self.db.session_scope() as session:
            self._get_proposal(session, group_id, vote_id)
            VoteRepository(session).upsert_result(vote_id, user_id, attendance)
            logger.info(f"User {user_id} voted {attendance} on proposal {vote_id}")
        return {'success': True, 'message': 'Vote recorded', 'id': vote_id}

    def confirm_proposal(self, group_id: int, vote_id: int,
                         request_start: datetime, request_end: datetime) -> Dict[str, Any]:
        """
        Turn a proposal into a group schedule.

        Every proposal of the group is deleted in the same transaction, so a
        second confirm of the same id raises ProposalNotFoundError.

        Returns:
            Schedule response for the new group schedule
        """
        with self.db.session_scope() as session:
            vote = self._get_proposal(session, group_id, vote_id)
            fields = {name: getattr(vote, name) for name in CONFIRMED_FIELDS}

            schedule = GroupScheduleRepository(session).create(group_id, fields)
            deleted = VoteRepository(session).delete_for_group(group_id)

            logger.info(
                f"Confirmed proposal {vote_id} as group schedule {schedule.id}; "
                f"removed {deleted} proposal(s) of group {group_id}"
            )
            return build_schedule_response(
                schedule.to_record(), request_start, request_end,
                evaluator=self.evaluator, week_starts_on=self.week_starts_on
            )
