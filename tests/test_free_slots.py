from datetime import timedelta

import pytest

from conftest import utc
from services.free_slots import get_duration, propose_slots, rank_by_daytime
from services.schedule_types import FreeSlot


def spans(slots):
    return [(s.start, s.end) for s in slots]


def test_no_busy_intervals_gives_whole_window():
    slots = propose_slots([], utc(2023, 4, 1), utc(2023, 4, 2))

    assert slots == [FreeSlot(utc(2023, 4, 1), utc(2023, 4, 2), 1440)]


def test_gaps_cover_window_exactly_once():
    day = utc(2023, 4, 1)
    busy = [
        (day + timedelta(hours=1), day + timedelta(hours=2)),
        (day + timedelta(hours=1, minutes=30), day + timedelta(hours=3)),
        (day + timedelta(hours=1, minutes=45), day + timedelta(hours=2, minutes=15)),
        (day + timedelta(hours=5), day + timedelta(hours=6)),
    ]

    slots = propose_slots(busy, day, day + timedelta(days=1))

    assert spans(slots) == [
        (day, day + timedelta(hours=1)),
        (day + timedelta(hours=3), day + timedelta(hours=5)),
        (day + timedelta(hours=6), day + timedelta(days=1)),
    ]
    assert [s.duration for s in slots] == [60, 120, 1080]


def test_busy_interval_covering_window_leaves_nothing():
    busy = [(utc(2023, 3, 31), utc(2023, 4, 3))]

    assert propose_slots(busy, utc(2023, 4, 1), utc(2023, 4, 2)) == []


def test_duration_rounds_to_nearest_minute():
    start = utc(2023, 4, 1)

    assert get_duration(start, start + timedelta(minutes=89, seconds=29)) == 89
    assert get_duration(start, start + timedelta(minutes=88, seconds=30)) == 89
    assert get_duration(start, start + timedelta(hours=23, minutes=59, seconds=59, milliseconds=999)) == 1440


def test_minimum_duration_drops_short_gaps():
    day = utc(2023, 4, 1)
    busy = [
        (day + timedelta(minutes=20), day + timedelta(hours=2)),
        (day + timedelta(hours=2, minutes=30), day + timedelta(hours=23)),
    ]

    slots = propose_slots(busy, day, day + timedelta(days=1), minimum_duration=45)

    assert spans(slots) == [(day + timedelta(hours=23), day + timedelta(days=1))]


def test_daytime_slots_come_first():
    start, end = utc(2000, 4, 1), utc(2000, 4, 2)
    busy = [(utc(2000, 4, 1, 8), utc(2000, 4, 1, 18))]

    ranked = rank_by_daytime(propose_slots(busy, start, end), start, end)

    assert spans(ranked) == [
        (utc(2000, 4, 1, 18), utc(2000, 4, 2)),
        (utc(2000, 4, 1), utc(2000, 4, 1, 8)),
    ]


def test_ranking_keeps_every_slot_in_order_within_groups():
    start, end = utc(2023, 4, 1), utc(2023, 4, 2)
    slots = [
        FreeSlot(utc(2023, 4, 1, 0), utc(2023, 4, 1, 3), 180),
        FreeSlot(utc(2023, 4, 1, 10), utc(2023, 4, 1, 11), 60),
        FreeSlot(utc(2023, 4, 1, 14), utc(2023, 4, 1, 15), 60),
        FreeSlot(utc(2023, 4, 1, 22, 30), utc(2023, 4, 2), 90),
    ]

    ranked = rank_by_daytime(slots, start, end)

    assert ranked == [slots[1], slots[2], slots[0], slots[3]]


def test_ranking_offsets_are_configurable():
    start, end = utc(2023, 4, 1), utc(2023, 4, 2)
    early = FreeSlot(utc(2023, 4, 1, 6), utc(2023, 4, 1, 8), 120)
    late = FreeSlot(utc(2023, 4, 1, 12), utc(2023, 4, 1, 13), 60)

    assert rank_by_daytime([early, late], start, end) == [late, early]
    assert rank_by_daytime([early, late], start, end, start_offset_hours=7) == [early, late]


def merged_busy(busy, start, end):
    """Busy intervals clipped to [start, end) with overlaps and contacts joined."""
    clipped = sorted((max(s, start), min(e, end)) for s, e in busy if e > start and s < end)
    merged = []
    for s, e in clipped:
        if merged and s <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], e))
        else:
            merged.append((s, e))
    return merged


@pytest.mark.parametrize('busy_hours', [
    [],
    [(0, 2), (5, 6)],                  # touches window start
    [(20, 24)],                        # touches window end
    [(3, 5), (5, 7)],                  # adjacent
    [(1, 10), (2, 3), (9, 12)],        # nested and overlapping
    [(-2, 1), (23, 26)],               # reaching outside the window
    [(0, 24)],
    [(4, 5), (4, 6), (6, 8), (12, 13), (12, 13)],
])
def test_slots_and_busy_time_tile_the_window(busy_hours):
    start, end = utc(2023, 4, 1), utc(2023, 4, 2)
    busy = [(start + timedelta(hours=s), start + timedelta(hours=e)) for s, e in busy_hours]

    slots = propose_slots(busy, start, end)

    pieces = sorted(spans(slots) + merged_busy(busy, start, end))
    assert all(s < e for s, e in pieces)
    assert pieces[0][0] == start
    assert pieces[-1][1] == end
    for (_, previous_end), (next_start, _) in zip(pieces, pieces[1:]):
        assert previous_end == next_start
