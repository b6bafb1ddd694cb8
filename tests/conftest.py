"""Shared test fixtures."""

from datetime import UTC, datetime

import pytest

from keyed_state import Environment, KeyedStateStore, Logger, LogVerbosity
from keyed_state.slots import InMemorySlot

RESET_AT = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)


class FrozenClock:
    def __init__(self, at: datetime = RESET_AT):
        self._at = at

    def now(self) -> datetime:
        return self._at


@pytest.fixture
def slot():
    return InMemorySlot()


@pytest.fixture
def logger():
    return Logger(LogVerbosity.NONE)


@pytest.fixture
def store(slot, logger):
    return KeyedStateStore("state", slot, logger)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def env(slot, logger, clock):
    return Environment(slot, logger, clock=clock)


@pytest.fixture
def staging():
    return {"baseUrl": "https://x", "environment": "staging"}
