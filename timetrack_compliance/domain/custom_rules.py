"""Custom rule applier - walks a policy's custom rules and redistributes hours"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from timetrack_compliance.domain.models import (
    CustomRule,
    HourSplit,
    Policy,
    RuleType,
    Severity,
    TimeEntry,
    Violation,
    ViolationType,
    non_negative,
)
from timetrack_compliance.utils.date_utils import month_day

logger = logging.getLogger(__name__)

# New Year's Day, Independence Day, Christmas Day
HOLIDAYS: Dict[str, str] = {
    "01-01": "New Year's Day",
    "07-04": "Independence Day",
    "12-25": "Christmas Day",
}

RuleHandler = Callable[[CustomRule, HourSplit, TimeEntry], Tuple[HourSplit, Optional[Violation]]]


@dataclass(frozen=True)
class RuleOutcome:
    """Hour split after all custom rules, with the violations they raised"""

    split: HourSplit
    violations: Tuple[Violation, ...] = ()


def rule_message(rule: CustomRule, fallback: str) -> str:
    """Description wins, then the free-text condition, then a generated message"""
    if rule.description:
        return rule.description
    if rule.condition:
        return f"Custom rule triggered: {rule.condition}"
    return fallback


def _custom_violation(rule: CustomRule, hours: float, severity: Severity, fallback: str) -> Violation:
    return Violation(
        violation_type=ViolationType.CUSTOM_RULE,
        message=rule_message(rule, fallback),
        hours=hours,
        threshold=rule.threshold,
        severity=severity,
        rule_type=rule.rule_type,
    )


def _within_threshold(rule: CustomRule, entry: TimeEntry) -> bool:
    """Rules without a threshold never trigger"""
    return rule.threshold is None or entry.hours_worked <= rule.threshold


def _apply_overtime(rule: CustomRule, split: HourSplit, entry: TimeEntry):
    worked = entry.hours_worked
    if _within_threshold(rule, entry):
        return split, None

    moved = min(split.regular, non_negative(worked - rule.threshold))
    new_split = HourSplit(
        regular=non_negative(split.regular - moved),
        overtime=split.overtime + moved,
        doubletime=split.doubletime,
    )
    violation = _custom_violation(
        rule, moved, Severity.MEDIUM, f"Exceeded {rule.threshold:g}-hour custom overtime threshold"
    )
    return new_split, violation


def _apply_doubletime(rule: CustomRule, split: HourSplit, entry: TimeEntry):
    worked = entry.hours_worked
    if _within_threshold(rule, entry):
        return split, None

    excess = non_negative(worked - rule.threshold)

    # Regular hours are converted before overtime hours
    from_regular = min(split.regular, excess)
    from_overtime = min(split.overtime, non_negative(excess - from_regular))

    new_split = HourSplit(
        regular=non_negative(split.regular - from_regular),
        overtime=non_negative(split.overtime - from_overtime),
        doubletime=split.doubletime + from_regular + from_overtime,
    )
    violation = _custom_violation(
        rule,
        from_regular + from_overtime,
        Severity.HIGH,
        f"Exceeded {rule.threshold:g}-hour custom doubletime threshold",
    )
    return new_split, violation


def _apply_premium(rule: CustomRule, split: HourSplit, entry: TimeEntry):
    # Premium pay is settled by payroll; only flag it here
    if _within_threshold(rule, entry):
        return split, None
    return split, _custom_violation(
        rule, entry.hours_worked, Severity.LOW, f"Premium pay applies above {rule.threshold:g} hours"
    )


def _apply_break(rule: CustomRule, split: HourSplit, entry: TimeEntry):
    if _within_threshold(rule, entry) or entry.break_minutes:
        return split, None
    return split, _custom_violation(
        rule, entry.hours_worked, Severity.HIGH, f"No break recorded for {entry.hours_worked:g}-hour shift"
    )


def _apply_holiday(rule: CustomRule, split: HourSplit, entry: TimeEntry):
    holiday = HOLIDAYS.get(month_day(entry.date))
    if holiday is None or entry.hours_worked <= 0:
        return split, None
    return split, _custom_violation(
        rule, entry.hours_worked, Severity.LOW, f"Hours worked on holiday: {holiday}"
    )


RULE_HANDLERS: Dict[RuleType, RuleHandler] = {
    RuleType.OVERTIME: _apply_overtime,
    RuleType.DOUBLETIME: _apply_doubletime,
    RuleType.PREMIUM: _apply_premium,
    RuleType.BREAK: _apply_break,
    RuleType.HOLIDAY: _apply_holiday,
}

_missing_handlers = set(RuleType) - set(RULE_HANDLERS)
if _missing_handlers:
    raise RuntimeError(f"No custom rule handler for: {sorted(r.value for r in _missing_handlers)}")


def apply_custom_rules(current: HourSplit, entry: TimeEntry, policy: Policy) -> RuleOutcome:
    """
    Apply the policy's custom rules, in list order, to an already split day.

    Inactive rules are skipped. Each active rule operates on the running split
    left by the rules before it, so list order changes the outcome.
    """
    split = current
    violations = []

    for rule in policy.custom_rules:
        if not rule.is_active:
            continue

        split, violation = RULE_HANDLERS[rule.rule_type](rule, split, entry)
        if violation is not None:
            logger.debug("Custom %s rule triggered on %s", rule.rule_type.value, entry.date)
            violations.append(violation)

    return RuleOutcome(split=split, violations=tuple(violations))
