"""
Free-time proposal.

Finds the gaps between busy intervals inside a window and orders them so
slots touching the daytime band are suggested first.
"""

import math
from datetime import datetime, timedelta
from typing import List, Sequence, Tuple

from services.schedule_types import FreeSlot

Interval = Tuple[datetime, datetime]


def get_duration(start: datetime, end: datetime) -> int:
    """Length of [start, end) in whole minutes, halves rounded up."""
    return math.floor((end - start).total_seconds() / 60 + 0.5)


def propose_slots(busy: Sequence[Interval], start: datetime, end: datetime,
                  minimum_duration: int = 0) -> List[FreeSlot]:
    """
    Gaps of [start, end) not covered by any busy interval.

    Greedy sweep over intervals sorted by start, tracking the latest end seen
    so far. Intervals nested inside that end contribute nothing.

    Args:
        busy: (start, end) pairs sorted by start
        start: Window start
        end: Window end
        minimum_duration: Slots shorter than this many minutes are dropped

    Returns:
        FreeSlot list in chronological order
    """
    slots: List[FreeSlot] = []

    def emit(slot_start: datetime, slot_end: datetime):
        duration = get_duration(slot_start, slot_end)
        if duration >= minimum_duration:
            slots.append(FreeSlot(start=slot_start, end=slot_end, duration=duration))

    if not busy:
        emit(start, end)
        return slots

    first_start, current_end = busy[0]
    if first_start > start:
        emit(start, first_start)

    for busy_start, busy_end in busy:
        if busy_end > current_end:
            if busy_start > current_end:
                emit(current_end, busy_start)
            current_end = busy_end

    if current_end < end:
        emit(current_end, end)

    return slots


def rank_by_daytime(slots: Sequence[FreeSlot], start: datetime, end: datetime,
                    start_offset_hours: int = 9, end_offset_hours: int = 2) -> List[FreeSlot]:
    """
    Preferred slots first, then the rest; each group keeps its order.

    A slot is preferred when it starts before end - end_offset_hours and ends
    after start + start_offset_hours. Both thresholds are relative to the
    proposal window, not to wall-clock time.
    """
    band_end = end - timedelta(hours=end_offset_hours)
    band_start = start + timedelta(hours=start_offset_hours)
    preferred = [s for s in slots if s.start < band_end and s.end > band_start]
    remaining = [s for s in slots if not (s.start < band_end and s.end > band_start)]
    return preferred + remaining
