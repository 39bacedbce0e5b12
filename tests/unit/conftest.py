"""
Unit test fixtures. Pure core objects; no DB, no HTTP.
"""
from datetime import datetime, timedelta, timezone

import pytest

from learning.catalog import ModuleCatalog, ModuleDefinition
from learning.tracker import ModuleProgressTracker
from learning.types import ProgressState


class FakeClock:
    """Deterministic clock: each call returns a time one second after the last."""

    def __init__(self, start: datetime = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def catalog():
    return ModuleCatalog(
        [
            ModuleDefinition("math", "Mathématiques", 10, "🔢"),
            ModuleDefinition("physics", "Physique", 10, "⚛️"),
            ModuleDefinition("chemistry", "Chimie", 10, "🧪"),
            ModuleDefinition("history", "Histoire", 4, "🏛️"),
        ]
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker(catalog, clock):
    return ModuleProgressTracker(catalog, clock=clock)


@pytest.fixture
def state():
    return ProgressState()


@pytest.fixture
def answer_all(tracker):
    """Start module_id and answer every question, `correct` of them correctly."""

    def _answer_all(state, module_id, correct, time_spent=0):
        tracker.start_module(state, module_id)
        total = state.module_progress[module_id].total_questions
        outcome = None
        for index in range(total):
            outcome = tracker.record_answer(state, module_id, index, index < correct, time_spent)
        return outcome

    return _answer_all
