"""Week aggregation - folds the running weekly total across a workweek's entries"""

import logging
from collections import Counter
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from timetrack_compliance.domain.models import ComplianceResult, Policy, TimeEntry, WeekAggregate
from timetrack_compliance.domain.overtime import evaluate
from timetrack_compliance.utils.date_utils import workweek_start

logger = logging.getLogger(__name__)


def sort_entries(entries: Iterable[TimeEntry]) -> List[TimeEntry]:
    """Ascending by date; sorted() is stable so same-day entries keep their order"""
    return sorted(entries, key=lambda e: e.date)


def consecutive_day_counts(
    entries: Sequence[TimeEntry],
    prior_streak: int = 0,
    streak_end: Optional[date] = None,
) -> List[int]:
    """
    Consecutive calendar days worked, ending at each entry's date.

    A date counts as worked when any of its entries has hours, and every entry
    on that date gets the same count, whatever their order. A date with no
    hours, or a gap in dates, resets the streak.

    `prior_streak` carries a streak in from an earlier period. It continues
    only if `streak_end`, the last day of that streak, is the day before the
    first date here; `streak_end` defaults to exactly that day.
    """
    worked_on: Dict[date, bool] = {}
    for entry in entries:
        worked_on[entry.date] = worked_on.get(entry.date, False) or entry.hours_worked > 0
    if not worked_on:
        return []

    days = sorted(worked_on)
    if streak_end is None:
        streak_end = days[0] - timedelta(days=1)

    streak = max(prior_streak, 0)
    last_worked: Optional[date] = streak_end if streak else None
    streak_on: Dict[date, int] = {}

    for day in days:
        if not worked_on[day]:
            streak, last_worked = 0, None
        elif last_worked is not None and day - last_worked == timedelta(days=1):
            streak, last_worked = streak + 1, day
        else:
            streak, last_worked = 1, day
        streak_on[day] = streak

    return [streak_on[entry.date] for entry in entries]


def evaluate_week(
    entries: Iterable[TimeEntry],
    policy: Policy,
    consecutive_days: Optional[Sequence[int]] = None,
) -> List[ComplianceResult]:
    """
    Evaluate a workweek's entries in date order.

    Each entry sees the hours of every earlier entry as its weekly total, so
    the order of evaluation matters. `consecutive_days`, when given, must be
    aligned with the date-sorted entries; otherwise it is derived from them.
    """
    ordered = sort_entries(entries)
    if consecutive_days is None:
        consecutive_days = consecutive_day_counts(ordered)
    elif len(consecutive_days) != len(ordered):
        raise ValueError("consecutive_days must have one value per entry")

    results: List[ComplianceResult] = []
    weekly_hours = 0.0

    for entry, streak in zip(ordered, consecutive_days):
        results.append(evaluate(entry, policy, weekly_hours_before=weekly_hours, consecutive_days=streak))
        weekly_hours += entry.hours_worked

    logger.debug("Evaluated %d entries, %.2f weekly hours", len(results), weekly_hours)
    return results


def summarize(results: Iterable[ComplianceResult]) -> WeekAggregate:
    """Sum each bucket and count violation/overtime/doubletime days"""
    results = tuple(results)
    by_type: Counter = Counter(
        violation.violation_type.value for result in results for violation in result.violation_details
    )

    return WeekAggregate(
        results=results,
        total_hours=sum(r.hours_worked for r in results),
        total_regular=sum(r.hours_regular for r in results),
        total_overtime=sum(r.hours_overtime for r in results),
        total_doubletime=sum(r.hours_doubletime for r in results),
        violation_count=sum(len(r.violation_details) for r in results),
        overtime_days=sum(1 for r in results if r.is_overtime),
        doubletime_days=sum(1 for r in results if r.is_doubletime),
        days_with_violations=sum(1 for r in results if r.violation_details),
        violations_by_type=dict(by_type),
    )


def split_workweeks(entries: Iterable[TimeEntry], workweek_start_day: str = "Monday") -> Dict[date, List[TimeEntry]]:
    """Group entries by the start date of their workweek, in ascending week order"""
    weeks: Dict[date, List[TimeEntry]] = {}
    for entry in sort_entries(entries):
        weeks.setdefault(workweek_start(entry.date, workweek_start_day), []).append(entry)
    return weeks


def evaluate_period(entries: Iterable[TimeEntry], policy: Policy) -> List[WeekAggregate]:
    """
    Evaluate a pay period spanning several workweeks.

    The weekly total resets at each workweek boundary; the consecutive-day
    streak runs across boundaries.
    """
    ordered = sort_entries(entries)
    streaks = consecutive_day_counts(ordered)

    # Weeks come back in ascending order, so they partition `ordered` contiguously
    summaries: List[WeekAggregate] = []
    position = 0
    for week_entries in split_workweeks(ordered, policy.workweek_start_day).values():
        week_streaks = streaks[position:position + len(week_entries)]
        position += len(week_entries)
        summaries.append(summarize(evaluate_week(week_entries, policy, consecutive_days=week_streaks)))

    return summaries
