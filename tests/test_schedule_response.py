from datetime import timedelta

import pytest

from conftest import make_record, utc
from services.schedule_response import build_schedule_response, week_window

# One local day in UTC+9 (2023-10-31, a Tuesday)
REQUEST_START = utc(2023, 10, 30, 15)
REQUEST_END = utc(2023, 10, 31, 14, 59, 59, 999000)


def test_week_window_steps_back_to_sunday():
    week_start, week_end = week_window(REQUEST_START, REQUEST_END)

    assert week_start == utc(2023, 10, 28, 15)
    assert week_end == utc(2023, 11, 4, 14, 59, 59, 999000)
    assert week_end - week_start == REQUEST_END - REQUEST_START + timedelta(days=6)


@pytest.mark.parametrize('week_starts_on, days_back', [(6, 2), (0, 1), (1, 0)])
def test_week_window_honors_first_weekday(week_starts_on, days_back):
    week_start, _ = week_window(REQUEST_START, REQUEST_END, week_starts_on)

    assert week_start == REQUEST_START - timedelta(days=days_back)


def test_response_for_repeating_schedule():
    record = make_record(
        utc(2023, 10, 31, 1), utc(2023, 10, 31, 2), id=5, owner_id=3, is_group=True,
        title='standup', freq='WEEKLY', byweekday=['TU', 'WE'], until=utc(2023, 12, 31),
    )

    response = build_schedule_response(record, REQUEST_START, REQUEST_END)

    assert response['scheduleSummary'] == {
        'id': 5,
        'groupId': 3,
        'title': 'standup',
        'content': None,
        'startDateTime': '2023-10-31T01:00:00.000Z',
        'endDateTime': '2023-10-31T02:00:00.000Z',
        'recurrence': 1,
        'freq': 'WEEKLY',
        'interval': 1,
        'byweekday': 'TU,WE',
        'until': '2023-12-31T00:00:00.000Z',
        'isGroup': True,
    }
    assert [o['startDateTime'] for o in response['todaySchedules']] == ['2023-10-31T01:00:00.000Z']
    assert response['todaySchedules'][0]['title'] == 'standup'
    assert [o['startDateTime'] for o in response['schedulesForTheWeek']] == [
        '2023-10-31T01:00:00.000Z', '2023-11-01T01:00:00.000Z',
    ]


def test_response_for_schedule_outside_requested_day():
    record = make_record(utc(2023, 11, 2, 9), utc(2023, 11, 2, 10))

    response = build_schedule_response(record, REQUEST_START, REQUEST_END)

    assert response['todaySchedules'] == []
    assert len(response['schedulesForTheWeek']) == 1
    assert response['scheduleSummary']['userId'] == 1
    assert response['scheduleSummary']['byweekday'] is None


def test_explicit_week_bounds_are_used():
    record = make_record(utc(2023, 11, 2, 9), utc(2023, 11, 2, 10))

    response = build_schedule_response(
        record, REQUEST_START, REQUEST_END,
        week_start=REQUEST_START, week_end=REQUEST_END + timedelta(days=1),
    )

    assert response['schedulesForTheWeek'] == []


def test_repeating_schedule_without_weekdays_serializes_null_byweekday():
    record = make_record(
        utc(2023, 10, 31, 1), utc(2023, 10, 31, 2), freq='MONTHLY', until=utc(2024, 6, 1),
    )

    response = build_schedule_response(record, REQUEST_START, REQUEST_END)

    assert response['scheduleSummary']['byweekday'] is None
    assert response['todaySchedules'][0]['byweekday'] is None
    assert response['todaySchedules'][0]['freq'] == 'MONTHLY'
