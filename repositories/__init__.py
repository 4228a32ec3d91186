#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Repository layer for database access.
Provides type-safe data access using SQLAlchemy ORM.
"""

from .base import BaseRepository
from .schedule_repo import ScheduleRepository, PersonalScheduleRepository, GroupScheduleRepository
from .vote_repo import VoteRepository
from .group_repo import GroupRepository

__all__ = [
    'BaseRepository',
    'ScheduleRepository',
    'PersonalScheduleRepository',
    'GroupScheduleRepository',
    'VoteRepository',
    'GroupRepository',
]
