"""Unit tests for the legacy mirror reconciler."""
import copy
from datetime import datetime, timezone

import pytest

from learning.reconciler import reconcile
from learning.types import CompletedModuleEntry


def _completed_ids(state):
    return {mid for mid, p in state.module_progress.items() if p.is_completed}


@pytest.mark.unit
class TestReconcile:
    def test_empty_state_unchanged(self, state):
        assert reconcile(state) is False
        assert state.completed_modules == []
        assert state.completed_modules_with_score == []

    def test_adds_entry_for_completed_module(self, state, answer_all):
        answer_all(state, "math", correct=7)
        assert reconcile(state) is True
        assert state.completed_modules == ["math"]
        [entry] = state.completed_modules_with_score
        assert (entry.module_id, entry.score) == ("math", 70)
        assert entry.completed_at == state.module_progress["math"].completed_at

    def test_second_run_changes_nothing(self, state, tracker, answer_all):
        answer_all(state, "math", correct=7)
        answer_all(state, "history", correct=1)
        tracker.start_module(state, "physics")
        reconcile(state)
        snapshot = copy.deepcopy(state)

        assert reconcile(state) is False
        assert state == snapshot

    def test_in_progress_modules_not_mirrored(self, state, tracker):
        tracker.start_module(state, "math")
        tracker.record_answer(state, "math", 0, True)
        reconcile(state)
        assert state.completed_modules == []
        assert state.completed_modules_with_score == []

    def test_updates_stale_score_in_place(self, state, answer_all):
        answer_all(state, "math", correct=7)
        stale = CompletedModuleEntry("math", 40, datetime(2024, 1, 1, tzinfo=timezone.utc))
        state.completed_modules_with_score = [stale]

        assert reconcile(state) is True
        assert state.completed_modules_with_score == [stale]
        assert stale.score == 70
        assert stale.completed_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_removes_entries_for_reset_modules(self, state, tracker, answer_all):
        answer_all(state, "math", correct=7)
        answer_all(state, "history", correct=4)
        reconcile(state)

        tracker.reset_module(state, "math")
        assert reconcile(state) is True
        assert state.completed_modules == ["history"]
        assert [e.module_id for e in state.completed_modules_with_score] == ["history"]

    def test_drops_duplicate_and_unknown_entries(self, state, answer_all):
        answer_all(state, "history", correct=2)
        state.completed_modules = ["history", "history", "ghost"]
        state.completed_modules_with_score = [
            CompletedModuleEntry("history", 50),
            CompletedModuleEntry("history", 50),
            CompletedModuleEntry("ghost", 90),
        ]
        reconcile(state)
        assert state.completed_modules == ["history"]
        assert [e.module_id for e in state.completed_modules_with_score] == ["history"]

    def test_keeps_existing_mirror_order(self, state, answer_all):
        answer_all(state, "math", correct=5)
        answer_all(state, "history", correct=4)
        state.completed_modules_with_score = [CompletedModuleEntry("history", 100)]
        reconcile(state)
        assert [e.module_id for e in state.completed_modules_with_score] == ["history", "math"]

    def test_mirror_matches_completed_set(self, state, tracker, answer_all):
        answer_all(state, "math", correct=3)
        answer_all(state, "physics", correct=9)
        tracker.start_module(state, "chemistry")
        state.completed_modules = ["chemistry"]
        reconcile(state)
        assert set(state.completed_modules) == _completed_ids(state)
        assert {e.module_id for e in state.completed_modules_with_score} == _completed_ids(state)
