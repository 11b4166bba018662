"""Overtime rule evaluator - splits a day into regular/overtime/doubletime hours"""

import logging
from typing import Callable, Dict, List, Tuple

from timetrack_compliance.domain.custom_rules import apply_custom_rules
from timetrack_compliance.domain.models import (
    ComplianceResult,
    HourSplit,
    Policy,
    Severity,
    TimeEntry,
    Violation,
    ViolationType,
    non_negative,
)

logger = logging.getLogger(__name__)

SEVEN_DAY_THRESHOLD = 7

JurisdictionCalculator = Callable[[float, Policy, float], Tuple[HourSplit, List[Violation]]]


def _daily_overtime_violation(hours: float, threshold: float) -> Violation:
    return Violation(
        violation_type=ViolationType.DAILY_OVERTIME,
        message=f"Exceeded {threshold:g}-hour daily overtime threshold",
        hours=hours,
        threshold=threshold,
        severity=Severity.MEDIUM,
    )


def _daily_doubletime_violation(hours: float, threshold: float) -> Violation:
    return Violation(
        violation_type=ViolationType.DAILY_DOUBLETIME,
        message=f"Exceeded {threshold:g}-hour daily doubletime threshold",
        hours=hours,
        threshold=threshold,
        severity=Severity.HIGH,
    )


def apply_weekly_overtime(
    split: HourSplit,
    hours_worked: float,
    weekly_hours_before: float,
    weekly_threshold: float,
) -> Tuple[HourSplit, List[Violation]]:
    """
    Reconcile the daily split against the weekly overtime threshold.

    When the projected weekly total crosses the threshold and the weekly excess
    is larger than the overtime already assigned today, regular hours are moved
    to overtime to cover the difference.
    """
    projected_weekly_total = weekly_hours_before + hours_worked
    if projected_weekly_total <= weekly_threshold:
        return split, []

    weekly_overtime_hours = projected_weekly_total - weekly_threshold
    if weekly_overtime_hours <= split.overtime or split.regular <= 0:
        return split, []

    moved = min(split.regular, non_negative(weekly_overtime_hours - split.overtime))
    new_split = HourSplit(
        regular=non_negative(split.regular - moved),
        overtime=split.overtime + moved,
        doubletime=split.doubletime,
    )
    violation = Violation(
        violation_type=ViolationType.WEEKLY_OVERTIME,
        message=f"Exceeded {weekly_threshold:g}-hour weekly overtime threshold",
        hours=moved,
        threshold=weekly_threshold,
        severity=Severity.MEDIUM,
    )
    return new_split, [violation]


def california_split(
    hours_worked: float, policy: Policy, weekly_hours_before: float
) -> Tuple[HourSplit, List[Violation]]:
    """
    California cascading overtime.

    Doubletime is taken off the top first, overtime is computed on what is
    left, and the weekly threshold is reconciled last.
    """
    ot_threshold = policy.daily_overtime_limit
    dt_threshold = policy.daily_doubletime_limit
    violations: List[Violation] = []

    doubletime = non_negative(hours_worked - dt_threshold)
    if doubletime > 0:
        violations.append(_daily_doubletime_violation(doubletime, dt_threshold))

    remaining_after_dt = non_negative(hours_worked - doubletime)
    overtime = non_negative(remaining_after_dt - ot_threshold)
    if overtime > 0:
        violations.append(_daily_overtime_violation(overtime, ot_threshold))

    regular = non_negative(hours_worked - overtime - doubletime)

    split, weekly_violations = apply_weekly_overtime(
        HourSplit(regular, overtime, doubletime),
        hours_worked,
        weekly_hours_before,
        policy.weekly_overtime_limit,
    )
    return split, violations + weekly_violations


def standard_split(
    hours_worked: float, policy: Policy, weekly_hours_before: float
) -> Tuple[HourSplit, List[Violation]]:
    """Federal-style math: daily thresholds only apply when the policy sets them"""
    ot_threshold = policy.daily_overtime_limit
    dt_threshold = policy.daily_doubletime_limit
    violations: List[Violation] = []

    regular = non_negative(hours_worked)

    doubletime = non_negative(hours_worked - dt_threshold)
    regular = non_negative(regular - doubletime)
    if doubletime > 0:
        violations.append(_daily_doubletime_violation(doubletime, dt_threshold))

    overtime = non_negative(regular - ot_threshold)
    regular = non_negative(regular - overtime)
    if overtime > 0:
        violations.append(_daily_overtime_violation(overtime, ot_threshold))

    split, weekly_violations = apply_weekly_overtime(
        HourSplit(regular, overtime, doubletime),
        hours_worked,
        weekly_hours_before,
        policy.weekly_overtime_limit,
    )
    return split, violations + weekly_violations


JURISDICTION_CALCULATORS: Dict[str, JurisdictionCalculator] = {
    "CA": california_split,
}


def calculator_for(jurisdiction: str) -> JurisdictionCalculator:
    """Jurisdictions without dedicated cascading math use the standard calculation"""
    return JURISDICTION_CALCULATORS.get((jurisdiction or "").strip().upper(), standard_split)


def seven_day_violation(policy: Policy, consecutive_days: int) -> List[Violation]:
    if not policy.seven_day_rule or consecutive_days < SEVEN_DAY_THRESHOLD:
        return []
    return [
        Violation(
            violation_type=ViolationType.SEVEN_DAY_VIOLATION,
            message=f"Seven-day work rule violation: {consecutive_days} consecutive days",
            threshold=float(SEVEN_DAY_THRESHOLD),
            severity=Severity.HIGH,
        )
    ]


def evaluate(
    entry: TimeEntry,
    policy: Policy,
    weekly_hours_before: float = 0.0,
    consecutive_days: int = 0,
) -> ComplianceResult:
    """
    Evaluate one day's entry against a policy.

    Args:
        entry: The day being evaluated
        policy: Jurisdiction thresholds and custom rules
        weekly_hours_before: Hours already worked earlier in the same workweek
        consecutive_days: Consecutive days worked up to and including this one

    Returns:
        ComplianceResult whose buckets always add up to entry.hours_worked
    """
    hours_worked = entry.hours_worked
    weekly_hours_before = non_negative(weekly_hours_before)

    split, violations = calculator_for(policy.jurisdiction)(hours_worked, policy, weekly_hours_before)

    # Flags only, buckets are untouched
    violations.extend(seven_day_violation(policy, consecutive_days))

    outcome = apply_custom_rules(split, entry, policy)
    violations.extend(outcome.violations)

    logger.debug(
        "Evaluated %s: regular=%s overtime=%s doubletime=%s violations=%d",
        entry.date,
        outcome.split.regular,
        outcome.split.overtime,
        outcome.split.doubletime,
        len(violations),
    )

    return ComplianceResult(
        date=entry.date,
        hours_worked=hours_worked,
        hours_regular=outcome.split.regular,
        hours_overtime=outcome.split.overtime,
        hours_doubletime=outcome.split.doubletime,
        violation_details=tuple(violations),
    )
