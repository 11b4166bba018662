"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient
from timetrack_compliance.api.main import create_app
from timetrack_compliance.domain.models import Policy, TimeEntry
from timetrack_compliance.domain.policies import california_policy


# Monday
WEEK_START = date(2024, 6, 3)


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def ca_policy() -> Policy:
    """California thresholds: 8h OT, 12h DT, 40h weekly, seven-day rule"""
    return california_policy()


@pytest.fixture
def standard_policy() -> Policy:
    """Non-CA policy with only a weekly threshold configured"""
    return Policy(jurisdiction="TX", weekly_overtime_threshold=40.0)


@pytest.fixture
def week_start() -> date:
    return WEEK_START


@pytest.fixture
def make_entries():
    """Factory: one entry per consecutive day starting at `start`"""

    def _make(hours: list[float], start: date = WEEK_START) -> list[TimeEntry]:
        return [
            TimeEntry(date=start + timedelta(days=i), hours_worked=h)
            for i, h in enumerate(hours)
        ]

    return _make
