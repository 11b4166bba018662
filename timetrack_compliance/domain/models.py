"""Domain models - pure Python dataclasses for policies, time entries and compliance results"""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Optional, Tuple

# Thresholds used when a policy leaves a value unset: no overtime ever triggers
PERMISSIVE_DAILY_THRESHOLD = 24.0
PERMISSIVE_WEEKLY_THRESHOLD = math.inf

# Remainders smaller than this are float drift, not hours
HOURS_TOLERANCE = 1e-9


def non_negative(hours: float) -> float:
    """Clamp to zero, snapping float drift below HOURS_TOLERANCE to exactly 0.0"""
    return hours if hours > HOURS_TOLERANCE else 0.0


class RuleType(str, Enum):
    """Kinds of client-defined custom rules"""

    OVERTIME = "overtime"
    DOUBLETIME = "doubletime"
    PREMIUM = "premium"
    BREAK = "break"
    HOLIDAY = "holiday"


class ViolationType(str, Enum):
    """Violation categories as stored by the time compliance tables"""

    DAILY_OVERTIME = "daily_overtime"
    DAILY_DOUBLETIME = "daily_doubletime"
    WEEKLY_OVERTIME = "weekly_overtime"
    SEVEN_DAY_VIOLATION = "seven_day_violation"
    CUSTOM_RULE = "custom_rule"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class CustomRule:
    """Company-specific rule layered on top of the jurisdiction calculation"""

    rule_type: RuleType
    threshold: Optional[float] = None  # None disables threshold-based rules
    is_active: bool = True
    description: str = ""
    condition: str = ""
    multiplier: float = 1.0  # resolved by payroll, not used for hour buckets
    id: Optional[str] = None


@dataclass(frozen=True)
class Policy:
    """
    Overtime policy for a jurisdiction or company.

    Unset thresholds (None) are treated as disabled. Daily doubletime threshold
    is expected to be >= daily overtime threshold.
    """

    jurisdiction: str = ""
    daily_overtime_threshold: Optional[float] = None
    daily_doubletime_threshold: Optional[float] = None
    weekly_overtime_threshold: Optional[float] = None
    seven_day_rule: bool = False
    custom_rules: Tuple[CustomRule, ...] = ()
    workweek_start_day: str = "Monday"
    policy_name: str = ""
    company_id: Optional[str] = None
    id: Optional[str] = None

    @property
    def daily_overtime_limit(self) -> float:
        return _threshold_or_default(self.daily_overtime_threshold, PERMISSIVE_DAILY_THRESHOLD)

    @property
    def daily_doubletime_limit(self) -> float:
        return _threshold_or_default(self.daily_doubletime_threshold, PERMISSIVE_DAILY_THRESHOLD)

    @property
    def weekly_overtime_limit(self) -> float:
        return _threshold_or_default(self.weekly_overtime_threshold, PERMISSIVE_WEEKLY_THRESHOLD)


def _threshold_or_default(value: Optional[float], default: float) -> float:
    if value is None or value < 0:
        return default
    return float(value)


@dataclass(frozen=True)
class TimeEntry:
    """One day of worked hours, as handed over by the timesheet layer"""

    date: date
    hours_worked: float
    break_minutes: Optional[int] = None
    employee_id: Optional[str] = None


@dataclass(frozen=True)
class HourSplit:
    """Regular / overtime / doubletime buckets for one day"""

    regular: float
    overtime: float = 0.0
    doubletime: float = 0.0

    @property
    def total(self) -> float:
        return self.regular + self.overtime + self.doubletime


@dataclass(frozen=True)
class Violation:
    """Single triggered threshold, with a human-readable message"""

    violation_type: ViolationType
    message: str
    hours: float = 0.0
    threshold: Optional[float] = None
    severity: Severity = Severity.MEDIUM
    rule_type: Optional[RuleType] = None


@dataclass(frozen=True)
class ComplianceResult:
    """Output of evaluating one time entry against a policy"""

    date: date
    hours_worked: float
    hours_regular: float
    hours_overtime: float
    hours_doubletime: float
    violation_details: Tuple[Violation, ...] = ()

    @property
    def violations(self) -> Tuple[str, ...]:
        return tuple(v.message for v in self.violation_details)

    @property
    def is_overtime(self) -> bool:
        return self.hours_overtime > 0

    @property
    def is_doubletime(self) -> bool:
        return self.hours_doubletime > 0

    @property
    def is_compliant(self) -> bool:
        return not self.violation_details


@dataclass(frozen=True)
class WeekAggregate:
    """Per-day results for a workweek plus their totals"""

    results: Tuple[ComplianceResult, ...]
    total_hours: float
    total_regular: float
    total_overtime: float
    total_doubletime: float
    violation_count: int
    overtime_days: int
    doubletime_days: int
    days_with_violations: int
    violations_by_type: Dict[str, int] = field(default_factory=dict)

    @property
    def is_compliant(self) -> bool:
        return self.violation_count == 0
