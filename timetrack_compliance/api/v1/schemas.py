"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from timetrack_compliance.domain.models import ComplianceResult, Violation, WeekAggregate


class CustomRuleSchema(BaseModel):
    """Client-defined custom rule as stored on a time policy"""

    id: Optional[str] = None
    rule_type: Literal["overtime", "doubletime", "premium", "break", "holiday"]
    condition: str = ""
    threshold: Optional[float] = Field(None, ge=0)
    multiplier: float = Field(1.0, ge=0)
    description: str = ""
    is_active: bool = True


class PolicySchema(BaseModel):
    """Time policy; unset thresholds disable the matching rule"""

    id: Optional[str] = None
    company_id: Optional[str] = None
    policy_name: str = ""
    state: str = Field("", max_length=8, description="Jurisdiction code, e.g. CA")
    daily_overtime_threshold: Optional[float] = Field(None, ge=0)
    daily_doubletime_threshold: Optional[float] = Field(None, ge=0)
    weekly_overtime_threshold: Optional[float] = Field(None, ge=0)
    seven_day_rule: bool = False
    workweek_start_day: Literal[
        "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"
    ] = "Monday"
    custom_rules: List[CustomRuleSchema] = Field(default_factory=list)


class TimeEntrySchema(BaseModel):
    """One day of worked hours"""

    date: date
    hours_worked: Optional[float] = Field(None, ge=0, le=24)
    hours: Optional[float] = Field(None, ge=0, le=24, description="Used only when hours_worked is missing")
    break_minutes: Optional[int] = Field(None, ge=0)
    employee_id: Optional[str] = None


class EvaluateRequest(BaseModel):
    """Request body for POST /v1/compliance/evaluate"""

    entry: TimeEntrySchema
    policy: PolicySchema
    weekly_hours_before: float = Field(0.0, ge=0, description="Hours already worked earlier this workweek")
    consecutive_days: int = Field(0, ge=0)


class WeekRequest(BaseModel):
    """Request body for POST /v1/compliance/week and /v1/compliance/period"""

    entries: List[TimeEntrySchema] = Field(..., min_length=1)
    policy: PolicySchema


class ViolationSchema(BaseModel):
    violation_type: str
    message: str
    hours: float
    threshold: Optional[float] = None
    severity: str
    rule_type: Optional[str] = None

    @classmethod
    def from_domain(cls, violation: Violation) -> "ViolationSchema":
        return cls(
            violation_type=violation.violation_type.value,
            message=violation.message,
            hours=violation.hours,
            threshold=violation.threshold,
            severity=violation.severity.value,
            rule_type=violation.rule_type.value if violation.rule_type else None,
        )


class ComplianceResultSchema(BaseModel):
    """Regular/overtime/doubletime split for one day"""

    date: date
    hours_worked: float
    hours_regular: float
    hours_overtime: float
    hours_doubletime: float
    is_overtime: bool
    is_doubletime: bool
    violations: List[str]
    violation_details: List[ViolationSchema]

    @classmethod
    def from_domain(cls, result: ComplianceResult) -> "ComplianceResultSchema":
        return cls(
            date=result.date,
            hours_worked=result.hours_worked,
            hours_regular=result.hours_regular,
            hours_overtime=result.hours_overtime,
            hours_doubletime=result.hours_doubletime,
            is_overtime=result.is_overtime,
            is_doubletime=result.is_doubletime,
            violations=list(result.violations),
            violation_details=[ViolationSchema.from_domain(v) for v in result.violation_details],
        )


class WeekSummarySchema(BaseModel):
    """Totals for a workweek"""

    total_hours: float
    total_regular: float
    total_overtime: float
    total_doubletime: float
    violation_count: int
    overtime_days: int
    doubletime_days: int
    days_with_violations: int
    violations_by_type: Dict[str, int]
    is_compliant: bool

    @classmethod
    def from_domain(cls, aggregate: WeekAggregate) -> "WeekSummarySchema":
        return cls(
            total_hours=aggregate.total_hours,
            total_regular=aggregate.total_regular,
            total_overtime=aggregate.total_overtime,
            total_doubletime=aggregate.total_doubletime,
            violation_count=aggregate.violation_count,
            overtime_days=aggregate.overtime_days,
            doubletime_days=aggregate.doubletime_days,
            days_with_violations=aggregate.days_with_violations,
            violations_by_type=dict(aggregate.violations_by_type),
            is_compliant=aggregate.is_compliant,
        )


class WeekResponse(BaseModel):
    """Response for POST /v1/compliance/week"""

    results: List[ComplianceResultSchema]
    summary: WeekSummarySchema


class PeriodWeekSchema(BaseModel):
    week_start: date
    results: List[ComplianceResultSchema]
    summary: WeekSummarySchema


class PeriodResponse(BaseModel):
    """Response for POST /v1/compliance/period"""

    weeks: List[PeriodWeekSchema]
