from typing import NamedTuple


class PlanPosition(NamedTuple):
    week: int
    day: int
    finished: bool = False


def next_position(week: int, day: int, duration_weeks: int, days_per_week: int) -> PlanPosition:
    """Pointer after one ``advance_day`` step.

    Stepping past the last day of the last week reports ``finished`` and
    keeps the pointer at the final valid position (duration_weeks,
    days_per_week) instead of an out-of-range week.
    """
    if day < days_per_week:
        return PlanPosition(week, day + 1)
    if week + 1 > duration_weeks:
        return PlanPosition(duration_weeks, days_per_week, finished=True)
    return PlanPosition(week + 1, 1)


def days_into_plan(week: int, day: int, days_per_week: int) -> int:
    return (week - 1) * days_per_week + day


def is_within_plan(week: int, day: int, duration_weeks: int, days_per_week: int) -> bool:
    return 1 <= week <= duration_weeks and 1 <= day <= days_per_week
