"""Streak calculation over the days a habit was marked complete."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, NamedTuple, Union

ONE_DAY = timedelta(days=1)


class StreakState(NamedTuple):
    current_streak: int
    longest_streak: int


def _as_day(value: Union[date, datetime]) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def calculate_streaks(dates: Iterable[Union[date, datetime]], today: Union[date, datetime]) -> StreakState:
    """
    Compute the current and longest streak for a set of completed days.

    The current streak is the run of consecutive days ending today or
    yesterday; a most recent completion two or more days back means no
    current streak. The longest streak is the longest run anywhere in the
    history and does not depend on ``today``.

    Args:
        dates: Days on which the habit was completed, in any order. Time of
            day is ignored and duplicates collapse into one day.
        today: Reference day for the current streak.

    Returns:
        StreakState(current_streak, longest_streak)
    """
    days = sorted({_as_day(d) for d in dates}, reverse=True)
    if not days:
        return StreakState(0, 0)

    today = _as_day(today)

    current = 0
    if (today - days[0]) in (timedelta(0), ONE_DAY):
        current = 1
        for newer, older in zip(days, days[1:]):
            if newer - older != ONE_DAY:
                break
            current += 1

    longest = 1
    run = 1
    ascending = days[::-1]
    for earlier, later in zip(ascending, ascending[1:]):
        if later - earlier == ONE_DAY:
            run += 1
            longest = max(longest, run)
        else:
            run = 1

    return StreakState(current, longest)
