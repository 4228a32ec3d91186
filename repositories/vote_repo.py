#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Vote (schedule proposal) repository for database operations.
"""

from datetime import datetime
from typing import List, Optional, Dict

from sqlalchemy import select, delete, and_, func
from sqlalchemy.orm import selectinload

from .base import BaseRepository
from models import Vote, VoteResult


class VoteRepository(BaseRepository[Vote]):
    """Repository for Vote and VoteResult operations."""

    model_class = Vote

    def create(self, group_id: int, fields: dict, voting_end_date: datetime) -> Vote:
        """
        Create a new proposal for a group.

        Args:
            group_id: Owning group
            fields: Parsed schedule fields (storage names, naive UTC)
            voting_end_date: When voting closes (naive UTC)

        Returns:
            Created Vote instance
        """
        vote = Vote(group_id=group_id, voting_end_date=voting_end_date)
        vote.apply_fields(fields)
        return self.add(vote)

    def get_for_group(self, group_id: int, vote_id: int) -> Optional[Vote]:
        """Get a proposal only if it belongs to the given group."""
        stmt = select(Vote).where(and_(Vote.group_id == group_id, Vote.vote_id == vote_id))
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_group(self, group_id: int) -> List[Vote]:
        """All proposals of a group with their results loaded."""
        stmt = select(Vote).options(
            selectinload(Vote.results)
        ).where(Vote.group_id == group_id).order_by(Vote.vote_id)
        return list(self.session.execute(stmt).scalars().all())

    def count_positive_votes(self, vote_ids: List[int]) -> Dict[int, int]:
        """Number of 'attend' answers per proposal."""
        if not vote_ids:
            return {}
        stmt = select(VoteResult.vote_id, func.count()).where(and_(
            VoteResult.vote_id.in_(vote_ids),
            VoteResult.choice.is_(True),
        )).group_by(VoteResult.vote_id)
        counts = {vote_id: 0 for vote_id in vote_ids}
        for vote_id, count in self.session.execute(stmt):
            counts[vote_id] = count
        return counts

    def upsert_result(self, vote_id: int, user_id: int, choice: bool) -> VoteResult:
        """Record a member's answer, replacing any earlier answer."""
        stmt = select(VoteResult).where(and_(
            VoteResult.vote_id == vote_id,
            VoteResult.user_id == user_id,
        ))
        result = self.session.execute(stmt).scalar_one_or_none()
        if result is None:
            return self.add(VoteResult(vote_id=vote_id, user_id=user_id, choice=choice))
        result.choice = choice
        self.session.flush()
        return result

    def delete_for_group(self, group_id: int) -> int:
        """
        Delete every proposal of a group together with its results.

        Returns:
            Number of deleted proposals
        """
        vote_ids = select(Vote.vote_id).where(Vote.group_id == group_id)
        self.session.execute(delete(VoteResult).where(VoteResult.vote_id.in_(vote_ids)))
        result = self.session.execute(delete(Vote).where(Vote.group_id == group_id))
        return result.rowcount
