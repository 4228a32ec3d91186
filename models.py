#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SQLAlchemy 2.0 ORM Models for the Group Scheduling System

This module defines all database models using SQLAlchemy 2.0 declarative syntax
with full type annotations support. Datetimes are stored as naive UTC values.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Integer, String, Text, DateTime, Boolean,
    ForeignKey, CheckConstraint, UniqueConstraint, Index, func
)
from sqlalchemy.orm import (
    DeclarativeBase, Mapped, mapped_column, relationship
)

from services.schedule_types import ScheduleRecord, format_datetime, split_weekdays, to_utc


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class Group(Base):
    """Group that owns shared schedules and proposals."""
    __tablename__ = 'groups'

    group_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(45), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    # Relationships
    members: Mapped[List["UserGroup"]] = relationship(
        "UserGroup", back_populates="group", cascade="all, delete-orphan"
    )
    schedules: Mapped[List["GroupSchedule"]] = relationship(
        "GroupSchedule", back_populates="group", cascade="all, delete-orphan"
    )
    votes: Mapped[List["Vote"]] = relationship(
        "Vote", back_populates="group", cascade="all, delete-orphan"
    )


class UserGroup(Base):
    """Group membership row, read to find members sharing their schedules."""
    __tablename__ = 'user_groups'

    user_group_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    group_id: Mapped[int] = mapped_column(Integer, ForeignKey('groups.group_id', ondelete='CASCADE'), nullable=False)
    share_schedule_option: Mapped[int] = mapped_column(Integer, default=1)
    is_pending_member: Mapped[int] = mapped_column(Integer, default=0)

    group: Mapped["Group"] = relationship("Group", back_populates="members")

    __table_args__ = (
        UniqueConstraint('user_id', 'group_id', name='uq_user_group'),
        Index('idx_user_groups_user', 'user_id'),
    )


class ScheduleColumnsMixin:
    """Columns shared by every schedule-shaped table."""

    title: Mapped[str] = mapped_column(String(45), nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    recurrence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    freq: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    interval: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    byweekday: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    until: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def schedule_fields(self) -> dict:
        """Recurrence-bearing fields in API (camelCase) form."""
        return {
            'title': self.title,
            'content': self.content,
            'startDateTime': format_datetime(self.start_date_time),
            'endDateTime': format_datetime(self.end_date_time),
            'recurrence': self.recurrence,
            'freq': self.freq,
            'interval': self.interval,
            'byweekday': self.byweekday,
            'until': format_datetime(self.until),
        }

    def apply_fields(self, fields: dict) -> None:
        """Replace schedule fields; recurrence fields are always set together."""
        for name in ('title', 'content', 'start_date_time', 'end_date_time'):
            if name in fields:
                setattr(self, name, fields[name])
        if 'recurrence' in fields:
            self.recurrence = fields['recurrence']
            self.freq = fields.get('freq')
            self.interval = fields.get('interval')
            self.byweekday = fields.get('byweekday')
            self.until = fields.get('until')


class PersonalSchedule(ScheduleColumnsMixin, Base):
    """Schedule owned by a single user."""
    __tablename__ = 'personal_schedules'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint('recurrence IN (0, 1)', name='ck_personal_recurrence'),
        Index('idx_personal_schedules_user', 'user_id'),
    )

    def to_record(self) -> ScheduleRecord:
        """Detach the row into an immutable engine record."""
        return ScheduleRecord(
            id=self.id,
            owner_id=self.user_id,
            is_group=False,
            title=self.title,
            content=self.content,
            start=to_utc(self.start_date_time),
            end=to_utc(self.end_date_time),
            recurrence=self.recurrence,
            freq=self.freq,
            interval=self.interval,
            byweekday=split_weekdays(self.byweekday),
            until=to_utc(self.until),
        )

    def to_dict(self) -> dict:
        """Convert model to dictionary."""
        return {'id': self.id, 'userId': self.user_id, **self.schedule_fields()}


class GroupSchedule(ScheduleColumnsMixin, Base):
    """Schedule owned by a group (created directly or by confirming a proposal)."""
    __tablename__ = 'group_schedules'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    group_id: Mapped[int] = mapped_column(Integer, ForeignKey('groups.group_id', ondelete='CASCADE'), nullable=False)

    group: Mapped["Group"] = relationship("Group", back_populates="schedules")

    __table_args__ = (
        CheckConstraint('recurrence IN (0, 1)', name='ck_group_recurrence'),
        Index('idx_group_schedules_group', 'group_id'),
    )

    def to_record(self) -> ScheduleRecord:
        """Detach the row into an immutable engine record."""
        return ScheduleRecord(
            id=self.id,
            owner_id=self.group_id,
            is_group=True,
            title=self.title,
            content=self.content,
            start=to_utc(self.start_date_time),
            end=to_utc(self.end_date_time),
            recurrence=self.recurrence,
            freq=self.freq,
            interval=self.interval,
            byweekday=split_weekdays(self.byweekday),
            until=to_utc(self.until),
        )

    def to_dict(self) -> dict:
        """Convert model to dictionary."""
        return {'id': self.id, 'groupId': self.group_id, **self.schedule_fields()}


class Vote(ScheduleColumnsMixin, Base):
    """Candidate group schedule awaiting member votes."""
    __tablename__ = 'votes'

    vote_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    group_id: Mapped[int] = mapped_column(Integer, ForeignKey('groups.group_id', ondelete='CASCADE'), nullable=False)
    voting_end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    group: Mapped["Group"] = relationship("Group", back_populates="votes")
    results: Mapped[List["VoteResult"]] = relationship(
        "VoteResult", back_populates="vote", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index('idx_votes_group', 'group_id'),
    )

    def to_dict(self) -> dict:
        """Convert model to dictionary."""
        return {
            'voteId': self.vote_id,
            'groupId': self.group_id,
            **self.schedule_fields(),
            'votingEndDate': format_datetime(self.voting_end_date),
        }


class VoteResult(Base):
    """One member's answer to a candidate schedule."""
    __tablename__ = 'vote_results'

    result_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    vote_id: Mapped[int] = mapped_column(Integer, ForeignKey('votes.vote_id', ondelete='CASCADE'), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    choice: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    vote: Mapped["Vote"] = relationship("Vote", back_populates="results")

    __table_args__ = (
        UniqueConstraint('vote_id', 'user_id', name='uq_vote_user'),
    )

    def to_dict(self) -> dict:
        """Convert model to dictionary."""
        return {
            'userId': self.user_id,
            'choice': self.choice,
        }
