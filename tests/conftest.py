"""Shared test fixtures for all test modules."""

from datetime import datetime

import pytest

from cwmetrics.core.models import AccountContext
from tests.fakes import NOW


@pytest.fixture
def account() -> AccountContext:
    """Account used by collector tests."""
    return AccountContext(account_id="111", account_name="test-account")


@pytest.fixture
def now() -> datetime:
    """Fixed invocation time."""
    return NOW
