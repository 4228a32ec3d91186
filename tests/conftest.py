"""Pytest fixtures: a Flask app per test backed by its own in-memory SQLite database."""

from datetime import datetime, timezone

import pytest

from app import create_app
from config import TestingConfig
from models import Group, GroupSchedule, PersonalSchedule, UserGroup, Vote
from services.schedule_types import ScheduleRecord, to_naive_utc


def utc(*args) -> datetime:
    """datetime(...) in UTC."""
    return datetime(*args, tzinfo=timezone.utc)


def make_record(start, end, id=1, owner_id=1, is_group=False, title='title', content=None,
                freq=None, interval=None, byweekday=(), until=None) -> ScheduleRecord:
    return ScheduleRecord(
        id=id,
        owner_id=owner_id,
        is_group=is_group,
        title=title,
        content=content,
        start=start,
        end=end,
        recurrence=1 if freq else 0,
        freq=freq,
        interval=interval or (1 if freq else None),
        byweekday=tuple(byweekday),
        until=until,
    )


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    app.extensions['scheduling'].db.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions['scheduling']


@pytest.fixture
def db(services):
    return services.db


def _schedule_columns(start, end, title, content, freq, interval, byweekday, until):
    return dict(
        title=title,
        content=content,
        start_date_time=to_naive_utc(start),
        end_date_time=to_naive_utc(end),
        recurrence=1 if freq else 0,
        freq=freq,
        interval=(interval or 1) if freq else None,
        byweekday=byweekday,
        until=to_naive_utc(until),
    )


@pytest.fixture
def seed(db):
    """Helpers inserting rows directly; each returns the new primary key."""

    class Seed:
        @staticmethod
        def group(name='group', members=()):
            """members: iterable of (user_id, share_schedule_option, is_pending_member)."""
            with db.session_scope() as session:
                group = Group(name=name)
                session.add(group)
                session.flush()
                for user_id, share, pending in members:
                    session.add(UserGroup(
                        user_id=user_id, group_id=group.group_id,
                        share_schedule_option=share, is_pending_member=pending,
                    ))
                return group.group_id

        @staticmethod
        def personal(user_id, start, end, title='personal', content=None,
                     freq=None, interval=None, byweekday=None, until=None):
            with db.session_scope() as session:
                schedule = PersonalSchedule(
                    user_id=user_id,
                    **_schedule_columns(start, end, title, content, freq, interval, byweekday, until)
                )
                session.add(schedule)
                session.flush()
                return schedule.id

        @staticmethod
        def group_schedule(group_id, start, end, title='group', content=None,
                           freq=None, interval=None, byweekday=None, until=None):
            with db.session_scope() as session:
                schedule = GroupSchedule(
                    group_id=group_id,
                    **_schedule_columns(start, end, title, content, freq, interval, byweekday, until)
                )
                session.add(schedule)
                session.flush()
                return schedule.id

        @staticmethod
        def vote(group_id, start, end, title='candidate', voting_end_date=None):
            with db.session_scope() as session:
                vote = Vote(
                    group_id=group_id,
                    voting_end_date=to_naive_utc(voting_end_date or utc(2030, 1, 1)),
                    **_schedule_columns(start, end, title, None, None, None, None, None)
                )
                session.add(vote)
                session.flush()
                return vote.vote_id

    return Seed
