"""Pytest configuration and shared fixtures."""

import pytest

from tests.fakes import FakeClock, InMemoryStore, make_policy


@pytest.fixture
def store():
    s = InMemoryStore()
    s.policies["default"] = make_policy()
    return s


@pytest.fixture
def clock():
    return FakeClock()
