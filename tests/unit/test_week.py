"""Unit tests for week aggregation"""

import pytest
from datetime import date, timedelta
from timetrack_compliance.domain.models import Policy, TimeEntry
from timetrack_compliance.domain.overtime import evaluate
from timetrack_compliance.domain.policies import federal_policy
from timetrack_compliance.domain.week import (
    consecutive_day_counts,
    evaluate_period,
    evaluate_week,
    split_workweeks,
    summarize,
)


def test_five_regular_days_stay_under_weekly_threshold(standard_policy, make_entries):
    """5 x 8h: the fifth day sees 32 prior hours and projects exactly 40"""
    entries = make_entries([8, 8, 8, 8, 8])
    results = evaluate_week(entries, standard_policy)

    assert len(results) == 5
    assert all(r.hours_regular == 8 and r.hours_overtime == 0 for r in results)
    assert all(r.is_compliant for r in results)
    assert results[4] == evaluate(entries[4], standard_policy, weekly_hours_before=32, consecutive_days=5)


def test_sixth_day_crosses_weekly_threshold(standard_policy, make_entries):
    """6 x 8h: all 8 hours of day six become weekly overtime"""
    results = evaluate_week(make_entries([8, 8, 8, 8, 8, 8]), standard_policy)

    assert all(r.hours_overtime == 0 for r in results[:5])
    assert results[5].hours_regular == 0
    assert results[5].hours_overtime == 8
    assert results[5].violations == ("Exceeded 40-hour weekly overtime threshold",)


def test_entries_are_sorted_before_folding(standard_policy, make_entries):
    entries = make_entries([4, 10, 10, 10, 10])
    shuffled = [entries[3], entries[0], entries[4], entries[2], entries[1]]

    assert evaluate_week(shuffled, standard_policy) == evaluate_week(entries, standard_policy)


def test_fold_order_changes_weekly_overtime(make_entries):
    """Folding the same week in reverse date order gives a different split"""
    policy = Policy(jurisdiction="WA", daily_overtime_threshold=8, weekly_overtime_threshold=40)
    entries = make_entries([4, 10, 10, 10, 10])

    def fold(ordered):
        results, weekly = [], 0.0
        for entry in ordered:
            results.append(evaluate(entry, policy, weekly_hours_before=weekly))
            weekly += entry.hours_worked
        return summarize(results)

    forward = fold(entries)
    backward = fold(list(reversed(entries)))

    assert summarize(evaluate_week(entries, policy)).total_overtime == forward.total_overtime
    assert forward.total_regular == 34
    assert forward.total_overtime == 10
    assert backward.total_regular == 32
    assert backward.total_overtime == 12


def test_summarize_california_week(ca_policy, make_entries):
    results = evaluate_week(make_entries([13, 10, 8, 8, 8]), ca_policy)
    summary = summarize(results)

    assert (results[0].hours_regular, results[0].hours_overtime, results[0].hours_doubletime) == (8, 4, 1)
    assert (results[4].hours_regular, results[4].hours_overtime) == (1, 7)
    assert summary.total_hours == 47
    assert summary.total_regular == 33
    assert summary.total_overtime == 13
    assert summary.total_doubletime == 1
    assert summary.violation_count == 4
    assert summary.overtime_days == 3
    assert summary.doubletime_days == 1
    assert summary.days_with_violations == 3
    assert summary.violations_by_type == {
        "daily_doubletime": 1,
        "daily_overtime": 2,
        "weekly_overtime": 1,
    }
    assert summary.is_compliant is False


def test_summarize_empty():
    summary = summarize([])

    assert summary.results == ()
    assert summary.total_hours == 0
    assert summary.violation_count == 0
    assert summary.is_compliant


def test_seventh_consecutive_day_is_flagged(ca_policy, make_entries):
    results = evaluate_week(make_entries([8] * 7), ca_policy)

    assert not any("Seven-day" in v for v in results[5].violations)
    assert "Seven-day work rule violation: 7 consecutive days" in results[6].violations


def test_explicit_consecutive_days(ca_policy, make_entries):
    results = evaluate_week(make_entries([8, 8]), ca_policy, consecutive_days=[6, 7])

    assert results[0].violations == ()
    assert "Seven-day work rule violation: 7 consecutive days" in results[1].violations


def test_consecutive_days_length_mismatch(ca_policy, make_entries):
    with pytest.raises(ValueError):
        evaluate_week(make_entries([8, 8]), ca_policy, consecutive_days=[1])


def test_consecutive_day_counts(week_start):
    day = lambda n: week_start + timedelta(days=n)
    entries = [
        TimeEntry(day(0), 8),
        TimeEntry(day(1), 8),
        TimeEntry(day(1), 2),  # second entry same day
        TimeEntry(day(2), 0),  # day off
        TimeEntry(day(3), 8),
        TimeEntry(day(5), 8),  # gap
        TimeEntry(day(6), 8),
    ]

    assert consecutive_day_counts(entries) == [1, 2, 2, 0, 1, 1, 2]


def test_same_day_entry_order_does_not_change_streak(week_start):
    monday, tuesday = week_start, week_start + timedelta(days=1)

    worked_first = [TimeEntry(monday, 8), TimeEntry(tuesday, 8), TimeEntry(tuesday, 0)]
    zero_first = [TimeEntry(monday, 8), TimeEntry(tuesday, 0), TimeEntry(tuesday, 8)]

    assert consecutive_day_counts(worked_first) == [1, 2, 2]
    assert consecutive_day_counts(zero_first) == [1, 2, 2]


def test_zero_hour_entry_before_worked_entry_keeps_seven_day_flag(ca_policy, make_entries):
    entries = make_entries([8] * 6)
    seventh = entries[-1].date + timedelta(days=1)
    entries += [TimeEntry(seventh, 0), TimeEntry(seventh, 8)]

    results = evaluate_week(entries, ca_policy)

    assert results[-1].date == seventh
    assert results[-1].hours_worked == 8
    assert "Seven-day work rule violation: 7 consecutive days" in results[-1].violations


def test_consecutive_day_counts_with_prior_streak(make_entries, week_start):
    entries = make_entries([8, 8, 8])

    assert consecutive_day_counts(entries, prior_streak=5) == [6, 7, 8]
    assert consecutive_day_counts(entries, prior_streak=5, streak_end=week_start - timedelta(days=1)) == [6, 7, 8]
    assert consecutive_day_counts([]) == []


def test_prior_streak_ending_before_a_gap_does_not_carry(make_entries, week_start):
    entries = make_entries([8, 8, 8])

    assert consecutive_day_counts(entries, prior_streak=5, streak_end=week_start - timedelta(days=2)) == [1, 2, 3]


def test_split_workweeks_respects_start_day():
    saturday, sunday, monday = date(2024, 6, 8), date(2024, 6, 9), date(2024, 6, 10)
    entries = [TimeEntry(monday, 8), TimeEntry(saturday, 8), TimeEntry(sunday, 8)]

    monday_weeks = split_workweeks(entries, "Monday")
    sunday_weeks = split_workweeks(entries, "Sunday")

    assert list(monday_weeks) == [date(2024, 6, 3), date(2024, 6, 10)]
    assert [e.date for e in monday_weeks[date(2024, 6, 3)]] == [saturday, sunday]
    assert list(sunday_weeks) == [date(2024, 6, 2), date(2024, 6, 9)]
    assert [e.date for e in sunday_weeks[date(2024, 6, 9)]] == [sunday, monday]


def test_evaluate_period_resets_weekly_total(week_start):
    """Two workweeks of 5 x 9h: each week carries its own 5 weekly overtime hours"""
    entries = [
        TimeEntry(week_start + timedelta(days=week * 7 + day), 9.0)
        for week in range(2)
        for day in range(5)
    ]

    weeks = evaluate_period(entries, federal_policy())

    assert len(weeks) == 2
    assert [w.total_overtime for w in weeks] == [5, 5]
    assert [w.total_hours for w in weeks] == [45, 45]
    assert weeks[1].results[0].date == week_start + timedelta(days=7)


def test_evaluate_period_streak_crosses_week_boundary(ca_policy, week_start):
    """Thursday to Wednesday: the seventh day falls in the second workweek"""
    start = week_start + timedelta(days=3)
    entries = [TimeEntry(start + timedelta(days=i), 6.0) for i in range(7)]

    weeks = evaluate_period(entries, ca_policy)

    assert len(weeks) == 2
    assert weeks[0].violation_count == 0
    assert weeks[1].violations_by_type == {"seven_day_violation": 1}
    assert "Seven-day work rule violation: 7 consecutive days" in weeks[1].results[-1].violations
