"""Policy loading - maps stored time policy and time entry records to domain models"""

import json
from typing import Any, Iterable, List, Mapping, Optional

from timetrack_compliance.domain.exceptions import InvalidPolicyError, InvalidTimeEntryError
from timetrack_compliance.domain.models import CustomRule, Policy, RuleType, TimeEntry
from timetrack_compliance.utils.date_utils import WEEKDAYS, parse_iso_date


def _optional_hours(record: Mapping[str, Any], key: str) -> Optional[float]:
    value = record.get(key)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidPolicyError(f"Invalid {key}: {value!r}") from e


_TRUE_STRINGS = {"true", "t", "yes", "y", "on", "1"}
_FALSE_STRINGS = {"false", "f", "no", "n", "off", "0", ""}


def _flag(record: Mapping[str, Any], key: str, default: bool) -> bool:
    """Read a boolean column that may be stored as a bool, a number or a string"""
    value = record.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise InvalidPolicyError(f"Invalid {key}: {value!r}")
    return bool(value)


def custom_rule_from_record(record: Mapping[str, Any]) -> CustomRule:
    """Build a CustomRule from a stored rule object"""
    try:
        rule_type = RuleType(str(record["rule_type"]).strip().lower())
    except KeyError as e:
        raise InvalidPolicyError("Custom rule is missing rule_type") from e
    except ValueError as e:
        raise InvalidPolicyError(f"Unknown custom rule type: {record['rule_type']!r}") from e

    try:
        multiplier = float(record.get("multiplier") or 1.0)
    except (TypeError, ValueError) as e:
        raise InvalidPolicyError(f"Invalid numeric value in custom rule: {e}") from e

    # A rule stored without a threshold stays disabled
    threshold = _optional_hours(record, "threshold")

    rule_id = record.get("id")
    return CustomRule(
        rule_type=rule_type,
        threshold=threshold,
        is_active=_flag(record, "is_active", True),
        description=record.get("description") or "",
        condition=record.get("condition") or "",
        multiplier=multiplier,
        id=str(rule_id) if rule_id is not None else None,
    )


def parse_custom_rules(raw: Any) -> List[CustomRule]:
    """
    Custom rules are stored either as a JSON array or as an already decoded list.

    Anything empty yields no rules.
    """
    if not raw:
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidPolicyError(f"custom_rules is not valid JSON: {e}") from e
    if not isinstance(raw, list):
        raise InvalidPolicyError("custom_rules must be a list")
    if not all(isinstance(item, Mapping) for item in raw):
        raise InvalidPolicyError("Each custom rule must be an object")
    return [custom_rule_from_record(item) for item in raw]


def policy_from_record(record: Mapping[str, Any]) -> Policy:
    """
    Build a Policy from a stored time policy row.

    Missing or null thresholds stay unset, which disables the matching rule.
    """
    workweek_start_day = record.get("workweek_start_day") or "Monday"
    if workweek_start_day not in WEEKDAYS:
        raise InvalidPolicyError(f"Invalid workweek_start_day: {workweek_start_day!r}")

    jurisdiction = record.get("state") or record.get("jurisdiction") or ""

    return Policy(
        jurisdiction=str(jurisdiction).strip().upper(),
        daily_overtime_threshold=_optional_hours(record, "daily_overtime_threshold"),
        daily_doubletime_threshold=_optional_hours(record, "daily_doubletime_threshold"),
        weekly_overtime_threshold=_optional_hours(record, "weekly_overtime_threshold"),
        seven_day_rule=_flag(record, "seven_day_rule", False),
        custom_rules=tuple(parse_custom_rules(record.get("custom_rules"))),
        workweek_start_day=workweek_start_day,
        policy_name=record.get("policy_name") or "",
        company_id=record.get("company_id"),
        id=record.get("id"),
    )


def time_entry_from_record(record: Mapping[str, Any]) -> TimeEntry:
    """
    Build a TimeEntry from a stored time entry row.

    `hours` is only read when `hours_worked` is absent or null; a recorded
    zero stays zero.
    """
    hours = record.get("hours_worked")
    if hours is None:
        hours = record.get("hours")

    try:
        entry_date = parse_iso_date(record["date"])
    except KeyError as e:
        raise InvalidTimeEntryError("Time entry is missing date") from e
    except (TypeError, ValueError) as e:
        raise InvalidTimeEntryError(f"Invalid time entry date: {record['date']!r}") from e

    try:
        hours_worked = float(hours or 0)
        break_minutes = record.get("break_minutes")
        break_minutes = int(break_minutes) if break_minutes is not None else None
    except (TypeError, ValueError) as e:
        raise InvalidTimeEntryError(f"Invalid numeric value in time entry: {e}") from e

    employee_id = record.get("employee_id")
    return TimeEntry(
        date=entry_date,
        hours_worked=hours_worked,
        break_minutes=break_minutes,
        employee_id=str(employee_id) if employee_id is not None else None,
    )


def time_entries_from_records(records: Iterable[Mapping[str, Any]]) -> List[TimeEntry]:
    return [time_entry_from_record(record) for record in records]


def california_policy(custom_rules: Iterable[CustomRule] = ()) -> Policy:
    """California defaults: 8h daily OT, 12h daily DT, 40h weekly OT, seventh-day rule"""
    return Policy(
        jurisdiction="CA",
        daily_overtime_threshold=8.0,
        daily_doubletime_threshold=12.0,
        weekly_overtime_threshold=40.0,
        seven_day_rule=True,
        custom_rules=tuple(custom_rules),
        policy_name="California",
    )


def federal_policy(custom_rules: Iterable[CustomRule] = ()) -> Policy:
    """FLSA defaults: weekly overtime only"""
    return Policy(
        jurisdiction="US",
        weekly_overtime_threshold=40.0,
        custom_rules=tuple(custom_rules),
        policy_name="Federal (FLSA)",
    )
