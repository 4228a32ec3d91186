#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Group and membership lookups.
"""

from typing import List

from sqlalchemy import select, and_

from .base import BaseRepository
from models import Group, UserGroup


class GroupRepository(BaseRepository[Group]):
    """Read access to groups and their members."""

    model_class = Group

    def get_sharing_member_ids(self, group_id: int, include_pending: bool = False) -> List[int]:
        """
        Members of a group who share their personal schedules with it.

        Args:
            group_id: Group ID
            include_pending: If True, include members still awaiting approval

        Returns:
            List of user IDs
        """
        conditions = [
            UserGroup.group_id == group_id,
            UserGroup.share_schedule_option == 1,
        ]
        if not include_pending:
            conditions.append(UserGroup.is_pending_member == 0)
        stmt = select(UserGroup.user_id).where(and_(*conditions)).order_by(UserGroup.user_id)
        return list(self.session.execute(stmt).scalars().all())

    def get_group_ids_for_user(self, user_id: int) -> List[int]:
        """Groups the user is an approved member of."""
        stmt = select(UserGroup.group_id).where(and_(
            UserGroup.user_id == user_id,
            UserGroup.is_pending_member == 0,
        )).order_by(UserGroup.group_id)
        return list(self.session.execute(stmt).scalars().all())
