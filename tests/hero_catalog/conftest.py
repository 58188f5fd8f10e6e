"""
Shared pytest fixtures.
"""
import pytest

from fakes import ManualTimers, entry


@pytest.fixture
def timers():
    return ManualTimers()


@pytest.fixture
def heroes():
    return [entry(1, "Spider-Man"), entry(2, "Spider-Woman"), entry(3, "Iron Man")]
