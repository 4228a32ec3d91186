import pytest

from conftest import utc

WINDOW = {'startDateTime': '2023-04-01T00:00:00.000Z', 'endDateTime': '2023-04-02T00:00:00.000Z'}
REQUEST_WINDOW = {
    'requestStartDateTime': '2023-04-03T00:00:00.000Z',
    'requestEndDateTime': '2023-04-03T23:59:59.999Z',
}


@pytest.fixture
def group_id(seed):
    # 10 shares, 11 does not share, 12 shares but is still pending
    return seed.group('study', members=[(10, 1, 0), (11, 0, 0), (12, 1, 1)])


def schedule_body(**overrides):
    body = {
        'title': 'meeting',
        'content': 'weekly sync',
        'startDateTime': '2023-04-03T10:00:00.000Z',
        'endDateTime': '2023-04-03T11:00:00.000Z',
        'recurrence': 0,
    }
    body.update(overrides)
    return body


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    assert response.get_json()['status'] == 'ok'


class TestCalendarViews:

    def test_group_calendar_lists_sharing_members_then_group(self, client, seed, group_id):
        seed.personal(10, utc(2023, 4, 1, 8), utc(2023, 4, 1, 9), title='member')
        seed.personal(11, utc(2023, 4, 1, 8), utc(2023, 4, 1, 9), title='private')
        seed.personal(12, utc(2023, 4, 1, 8), utc(2023, 4, 1, 9), title='pending')
        seed.group_schedule(group_id, utc(2023, 4, 1, 12), utc(2023, 4, 1, 13), title='group')

        response = client.get(f'/api/groups/{group_id}/calendar', query_string=WINDOW)

        assert response.status_code == 200
        data = response.get_json()
        assert [s['title'] for s in data['schedules']] == ['member', 'group']
        assert data['schedules'][0]['userId'] == 10
        assert data['schedules'][1]['isGroup'] is True
        assert 'earliestDate' not in data

    def test_group_summary_reports_earliest_date_without_titles(self, client, seed, group_id):
        seed.personal(10, utc(2023, 4, 1, 15), utc(2023, 4, 1, 16))
        seed.group_schedule(
            group_id, utc(2023, 3, 1, 7), utc(2023, 3, 1, 8),
            freq='DAILY', until=utc(2023, 5, 1),
        )

        response = client.get(f'/api/groups/{group_id}/calendar/summary', query_string=WINDOW)

        data = response.get_json()
        assert response.status_code == 200
        assert data['earliestDate'] == '2023-04-01T07:00:00.000Z'
        assert len(data['schedules']) == 2
        assert all('title' not in s for s in data['schedules'])
        assert data['schedules'][1]['startRecur'] == '2023-03-01T07:00:00.000Z'

    def test_user_calendar_includes_group_schedules(self, client, seed, group_id):
        seed.personal(10, utc(2023, 4, 1, 15), utc(2023, 4, 1, 16), title='dentist')
        seed.group_schedule(
            group_id, utc(2023, 3, 31, 7), utc(2023, 3, 31, 8), title='standup',
            freq='DAILY', until=utc(2023, 4, 30),
        )

        response = client.get('/api/users/10/calendar', query_string=WINDOW)

        data = response.get_json()
        assert response.status_code == 200
        assert data['earliestDate'] == '2023-04-01T07:00:00.000Z'
        assert [s['title'] for s in data['nonRecurrenceSchedule']] == ['dentist']
        recurring, = data['recurrenceSchedule']
        assert recurring['title'] == 'standup'
        assert recurring['groupId'] == group_id
        assert recurring['recurrenceDateList'] == [
            {'startDateTime': '2023-04-01T07:00:00.000Z', 'endDateTime': '2023-04-01T08:00:00.000Z'},
        ]

    def test_unknown_group_is_404(self, client):
        response = client.get('/api/groups/999/calendar', query_string=WINDOW)

        assert response.status_code == 404
        assert response.get_json() == {'success': False, 'message': 'Group not found'}

    @pytest.mark.parametrize('query', [
        {},
        {'startDateTime': 'yesterday', 'endDateTime': '2023-04-02T00:00:00Z'},
        {'startDateTime': '2023-04-02T00:00:00Z', 'endDateTime': '2023-04-01T00:00:00Z'},
    ])
    def test_bad_window_is_400(self, client, group_id, query):
        response = client.get(f'/api/groups/{group_id}/calendar', query_string=query)

        assert response.status_code == 400
        assert response.get_json()['success'] is False


class TestProposals:

    def test_free_slots_of_group(self, client, seed, group_id):
        seed.personal(10, utc(2023, 4, 1, 8), utc(2023, 4, 1, 12))
        seed.personal(12, utc(2023, 4, 1, 13), utc(2023, 4, 1, 18))
        seed.personal(11, utc(2023, 4, 1, 19), utc(2023, 4, 1, 20))
        seed.group_schedule(group_id, utc(2023, 4, 1, 12), utc(2023, 4, 1, 13))

        response = client.get(f'/api/groups/{group_id}/proposals', query_string=WINDOW)

        assert response.status_code == 200
        assert response.get_json()['proposals'] == [
            {'startDateTime': '2023-04-01T18:00:00.000Z', 'endDateTime': '2023-04-02T00:00:00.000Z', 'duration': 360},
            {'startDateTime': '2023-04-01T00:00:00.000Z', 'endDateTime': '2023-04-01T08:00:00.000Z', 'duration': 480},
        ]

    def test_minimum_duration(self, client, seed, group_id):
        seed.personal(10, utc(2023, 4, 1, 8), utc(2023, 4, 1, 18))

        response = client.get(
            f'/api/groups/{group_id}/proposals', query_string={**WINDOW, 'duration': '400'}
        )

        assert [p['duration'] for p in response.get_json()['proposals']] == [480]

    def test_negative_duration_is_400(self, client, group_id):
        response = client.get(
            f'/api/groups/{group_id}/proposals', query_string={**WINDOW, 'duration': '-5'}
        )

        assert response.status_code == 400


class TestPersonalSchedules:

    def test_create_without_request_window_acknowledges(self, client):
        response = client.post('/api/users/10/calendar', json=schedule_body())

        assert response.status_code == 201
        data = response.get_json()
        assert data['success'] is True

        fetched = client.get(f"/api/users/10/calendar/{data['id']}").get_json()
        assert fetched['title'] == 'meeting'
        assert fetched['startDateTime'] == '2023-04-03T10:00:00.000Z'
        assert fetched['freq'] is None

    def test_create_with_request_window_returns_schedule_response(self, client):
        body = schedule_body(
            recurrence=1, freq='WEEKLY', interval=1, byweekday=['MO', 'WE'],
            until='2023-04-30T00:00:00.000Z', **REQUEST_WINDOW
        )

        response = client.post('/api/users/10/calendar', json=body)

        assert response.status_code == 201
        data = response.get_json()
        assert data['scheduleSummary']['byweekday'] == 'MO,WE'
        assert data['scheduleSummary']['userId'] == 10
        assert [s['startDateTime'] for s in data['todaySchedules']] == ['2023-04-03T10:00:00.000Z']
        # Week of Sunday 2023-04-02
        assert [s['startDateTime'] for s in data['schedulesForTheWeek']] == [
            '2023-04-03T10:00:00.000Z', '2023-04-05T10:00:00.000Z',
        ]

    @pytest.mark.parametrize('overrides', [
        {'title': 'x' * 46},
        {'title': ''},
        {'recurrence': 1, 'freq': 'WEEKLY', 'interval': 1, 'until': '2023-05-01T00:00:00Z'},
        {'recurrence': 1, 'freq': 'DAILY', 'interval': 1},
        {'recurrence': 1, 'freq': 'DAILY', 'interval': 0, 'until': '2023-05-01T00:00:00Z'},
        {'recurrence': 1, 'freq': 'HOURLY', 'interval': 1, 'until': '2023-05-01T00:00:00Z'},
        {'recurrence': 1, 'freq': 'WEEKLY', 'interval': 1, 'byweekday': ['XX'], 'until': '2023-05-01T00:00:00Z'},
        {'recurrence': 2},
    ])
    def test_invalid_payload_is_400(self, client, overrides):
        response = client.post('/api/users/10/calendar', json=schedule_body(**overrides))

        assert response.status_code == 400

    def test_update_to_single_occurrence_clears_recurrence(self, client):
        created = client.post('/api/users/10/calendar', json=schedule_body(
            recurrence=1, freq='DAILY', interval=2, until='2023-04-30T00:00:00Z'
        )).get_json()

        response = client.put(
            f"/api/users/10/calendar/{created['id']}",
            json=schedule_body(title='moved', startDateTime='2023-04-04T10:00:00Z', endDateTime='2023-04-04T12:00:00Z'),
        )

        assert response.status_code == 200
        fetched = client.get(f"/api/users/10/calendar/{created['id']}").get_json()
        assert fetched['title'] == 'moved'
        assert fetched['recurrence'] == 0
        assert fetched['freq'] is None
        assert fetched['interval'] is None
        assert fetched['until'] is None

    def test_repeating_schedule_without_weekdays_reads_back_the_same(self, client):
        body = schedule_body(
            recurrence=1, freq='MONTHLY', interval=1, until='2023-12-31T00:00:00Z', **REQUEST_WINDOW
        )

        created = client.post('/api/users/10/calendar', json=body).get_json()
        fetched = client.get(f"/api/users/10/calendar/{created['scheduleSummary']['id']}").get_json()

        assert created['scheduleSummary']['byweekday'] is None
        assert created['todaySchedules'][0]['byweekday'] is None
        assert fetched['byweekday'] is None

    def test_schedules_are_scoped_to_owner(self, client, seed):
        schedule_id = seed.personal(10, utc(2023, 4, 1, 8), utc(2023, 4, 1, 9))

        assert client.get(f'/api/users/11/calendar/{schedule_id}').status_code == 404
        assert client.delete(f'/api/users/11/calendar/{schedule_id}').status_code == 404

    def test_delete(self, client, seed):
        schedule_id = seed.personal(10, utc(2023, 4, 1, 8), utc(2023, 4, 1, 9))

        assert client.delete(f'/api/users/10/calendar/{schedule_id}').status_code == 200
        assert client.get(f'/api/users/10/calendar/{schedule_id}').status_code == 404


class TestGroupSchedules:

    def test_create_update_delete(self, client, group_id):
        created = client.post(f'/api/groups/{group_id}/calendar', json=schedule_body())
        assert created.status_code == 201
        schedule_id = created.get_json()['id']

        updated = client.put(
            f'/api/groups/{group_id}/calendar/{schedule_id}',
            json=schedule_body(title='renamed', **REQUEST_WINDOW),
        )
        assert updated.status_code == 200
        assert updated.get_json()['scheduleSummary']['title'] == 'renamed'
        assert updated.get_json()['scheduleSummary']['isGroup'] is True

        assert client.delete(f'/api/groups/{group_id}/calendar/{schedule_id}').status_code == 200
        assert client.get(f'/api/groups/{group_id}/calendar/{schedule_id}').status_code == 404

    def test_unknown_group(self, client):
        response = client.post('/api/groups/999/calendar', json=schedule_body())

        assert response.status_code == 404


class TestVotes:

    def test_create_and_get(self, client, group_id):
        response = client.post(f'/api/groups/{group_id}/votes', json=schedule_body())

        assert response.status_code == 201
        vote = response.get_json()
        assert vote['groupId'] == group_id
        assert vote['votingEndDate'].endswith('Z')

        fetched = client.get(f"/api/groups/{group_id}/votes/{vote['voteId']}").get_json()
        assert fetched['title'] == 'meeting'

    def test_votes_are_counted_and_replaced(self, client, seed, group_id):
        vote_id = seed.vote(group_id, utc(2023, 4, 3, 10), utc(2023, 4, 3, 11))
        url = f'/api/groups/{group_id}/votes/{vote_id}/results'

        assert client.post(url, json={'userId': 10, 'attendance': True}).status_code == 200
        assert client.post(url, json={'userId': 11, 'attendance': True}).status_code == 200
        assert client.post(url, json={'userId': 11, 'attendance': False}).status_code == 200

        proposals = client.get(f'/api/groups/{group_id}/votes').get_json()
        assert len(proposals) == 1
        assert proposals[0]['votesCount'] == 1
        assert sorted(r['userId'] for r in proposals[0]['voteResults']) == [10, 11]

    def test_invalid_vote_body(self, client, seed, group_id):
        vote_id = seed.vote(group_id, utc(2023, 4, 3, 10), utc(2023, 4, 3, 11))

        response = client.post(
            f'/api/groups/{group_id}/votes/{vote_id}/results', json={'userId': 10, 'attendance': 'yes'}
        )

        assert response.status_code == 400

    def test_confirm_creates_group_schedule_and_removes_all_proposals(self, client, seed, group_id):
        chosen = seed.vote(group_id, utc(2023, 4, 3, 10), utc(2023, 4, 3, 11), title='chosen')
        other = seed.vote(group_id, utc(2023, 4, 4, 10), utc(2023, 4, 4, 11), title='other')
        client.post(f'/api/groups/{group_id}/votes/{other}/results', json={'userId': 10, 'attendance': True})

        response = client.post(f'/api/groups/{group_id}/votes/{chosen}/confirm', json=REQUEST_WINDOW)

        assert response.status_code == 201
        data = response.get_json()
        assert data['scheduleSummary']['title'] == 'chosen'
        assert data['scheduleSummary']['groupId'] == group_id
        assert len(data['todaySchedules']) == 1

        assert client.get(f'/api/groups/{group_id}/votes').get_json() == []
        calendar = client.get(f'/api/groups/{group_id}/calendar', query_string={
            'startDateTime': '2023-04-03T00:00:00Z', 'endDateTime': '2023-04-04T00:00:00Z',
        }).get_json()
        assert [s['title'] for s in calendar['schedules']] == ['chosen']

        again = client.post(f'/api/groups/{group_id}/votes/{chosen}/confirm', json=REQUEST_WINDOW)
        assert again.status_code == 404
        assert again.get_json()['message'] == 'Proposal not found'

    def test_confirm_requires_request_window(self, client, seed, group_id):
        vote_id = seed.vote(group_id, utc(2023, 4, 3, 10), utc(2023, 4, 3, 11))

        response = client.post(f'/api/groups/{group_id}/votes/{vote_id}/confirm', json={})

        assert response.status_code == 400
        assert len(client.get(f'/api/groups/{group_id}/votes').get_json()) == 1

    def test_delete(self, client, seed, group_id):
        vote_id = seed.vote(group_id, utc(2023, 4, 3, 10), utc(2023, 4, 3, 11))

        assert client.delete(f'/api/groups/{group_id}/votes/{vote_id}').status_code == 200
        assert client.get(f'/api/groups/{group_id}/votes/{vote_id}').status_code == 404
