"""POST /v1/compliance/* - overtime split and compliance evaluation endpoints"""

import time
import logging
from typing import List

from fastapi import APIRouter, HTTPException, Request

from timetrack_compliance.api.dependencies import get_request_id
from timetrack_compliance.api.v1.schemas import (
    ComplianceResultSchema,
    EvaluateRequest,
    PeriodResponse,
    PeriodWeekSchema,
    PolicySchema,
    TimeEntrySchema,
    WeekRequest,
    WeekResponse,
    WeekSummarySchema,
)
from timetrack_compliance.config import settings
from timetrack_compliance.domain.exceptions import DomainException
from timetrack_compliance.domain.models import Policy, TimeEntry
from timetrack_compliance.domain.overtime import evaluate
from timetrack_compliance.domain.policies import policy_from_record, time_entries_from_records
from timetrack_compliance.domain.week import evaluate_period, evaluate_week, summarize
from timetrack_compliance.infrastructure.observability.logging import log_evaluation
from timetrack_compliance.infrastructure.observability.metrics import invalid_input_counter, record_results
from timetrack_compliance.utils.date_utils import workweek_start

router = APIRouter()


def _check_size(entries: List[TimeEntrySchema]) -> None:
    if len(entries) > settings.max_entries_per_request:
        raise HTTPException(
            status_code=422,
            detail=f"At most {settings.max_entries_per_request} entries per request",
        )


def _load(policy: PolicySchema, entries: List[TimeEntrySchema]) -> tuple[Policy, List[TimeEntry]]:
    return (
        policy_from_record(policy.model_dump()),
        time_entries_from_records(entry.model_dump() for entry in entries),
    )


def _employee_id(entries: List[TimeEntry]) -> str | None:
    return entries[0].employee_id if entries else None


@router.post("/compliance/evaluate", response_model=ComplianceResultSchema)
def evaluate_entry(request_body: EvaluateRequest, request: Request):
    """
    Split a single day into regular/overtime/doubletime hours.

    The caller supplies the hours already worked earlier in the workweek and the
    current consecutive-day streak.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        policy, entries = _load(request_body.policy, [request_body.entry])
        result = evaluate(
            entries[0],
            policy,
            weekly_hours_before=request_body.weekly_hours_before,
            consecutive_days=request_body.consecutive_days,
        )
    except DomainException as e:
        invalid_input_counter.inc()
        logging.warning(f"Invalid compliance input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_results(policy.jurisdiction, [result])
    log_evaluation(
        request_id,
        _employee_id(entries),
        policy.jurisdiction,
        1,
        result.hours_overtime,
        result.hours_doubletime,
        len(result.violation_details),
        duration_ms,
    )

    return ComplianceResultSchema.from_domain(result)


@router.post("/compliance/week", response_model=WeekResponse)
def evaluate_workweek(request_body: WeekRequest, request: Request):
    """
    Evaluate a workweek in date order, folding the weekly total forward.

    Consecutive-day streaks are derived from the entry dates.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    _check_size(request_body.entries)

    try:
        policy, entries = _load(request_body.policy, request_body.entries)
        results = evaluate_week(entries, policy)
    except DomainException as e:
        invalid_input_counter.inc()
        logging.warning(f"Invalid compliance input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    aggregate = summarize(results)

    duration_ms = (time.time() - start_time) * 1000
    record_results(policy.jurisdiction, results)
    log_evaluation(
        request_id,
        _employee_id(entries),
        policy.jurisdiction,
        len(results),
        aggregate.total_overtime,
        aggregate.total_doubletime,
        aggregate.violation_count,
        duration_ms,
    )

    return WeekResponse(
        results=[ComplianceResultSchema.from_domain(r) for r in results],
        summary=WeekSummarySchema.from_domain(aggregate),
    )


@router.post("/compliance/period", response_model=PeriodResponse)
def evaluate_pay_period(request_body: WeekRequest, request: Request):
    """Evaluate entries spanning several workweeks, resetting the weekly total per workweek"""
    start_time = time.time()
    request_id = get_request_id(request)
    _check_size(request_body.entries)

    try:
        policy, entries = _load(request_body.policy, request_body.entries)
        weeks = evaluate_period(entries, policy)
    except DomainException as e:
        invalid_input_counter.inc()
        logging.warning(f"Invalid compliance input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    for week in weeks:
        record_results(policy.jurisdiction, week.results)
    log_evaluation(
        request_id,
        _employee_id(entries),
        policy.jurisdiction,
        sum(len(week.results) for week in weeks),
        sum(week.total_overtime for week in weeks),
        sum(week.total_doubletime for week in weeks),
        sum(week.violation_count for week in weeks),
        duration_ms,
    )

    return PeriodResponse(
        weeks=[
            PeriodWeekSchema(
                week_start=workweek_start(week.results[0].date, policy.workweek_start_day),
                results=[ComplianceResultSchema.from_domain(r) for r in week.results],
                summary=WeekSummarySchema.from_domain(week),
            )
            for week in weeks
        ]
    )
