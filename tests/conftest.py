"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

import itertools
from collections.abc import Callable, Iterator
from datetime import UTC, date, datetime

import pytest
from loguru import logger

from load_engine.metrics.activity import Activity

REFERENCE_DATE = date(2024, 6, 30)


@pytest.fixture
def reference_date() -> date:
    """Fixed "today" for every test; no wall clock."""
    return REFERENCE_DATE


@pytest.fixture
def make_activity() -> Callable[..., Activity]:
    """Factory building activities on a given local calendar day.

    Usage:
        make_activity(day, sport_type="Ride", moving_time=3600, average_watts=200)
    """
    ids = itertools.count(1)

    def _make(day: date, *, sport_type: str = "Run", hour: int = 8, **fields: object) -> Activity:
        activity_id = next(ids)
        return Activity(
            id=activity_id,
            name=f"{sport_type} {activity_id}",
            sport_type=sport_type,
            start_date=datetime(day.year, day.month, day.day, hour, tzinfo=UTC),
            start_date_local=datetime(day.year, day.month, day.day, hour),
            **fields,
        )

    return _make


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Capture loguru messages emitted during a test (DEBUG and up)."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
