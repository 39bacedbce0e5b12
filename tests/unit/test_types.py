"""Unit tests for the stored progress document shape."""
from datetime import datetime, timezone

import pytest

from learning.reconciler import reconcile
from learning.types import UNKNOWN_TIME, ModuleStatus, ProgressState


LEGACY_DOCUMENT = {
    "moduleProgress": {
        "math": {
            "moduleId": "math",
            "questionsAnswered": 99,
            "totalQuestions": 10,
            "correctAnswers": 99,
            "status": "in_progress",
            "startedAt": "2024-05-01T10:00:00.000Z",
            "questionResults": [
                {"questionIndex": 0, "isCorrect": True, "timeSpent": 12, "answeredAt": "2024-05-01T10:01:00Z"},
                {"questionIndex": 1, "isCorrect": False, "answeredAt": "2024-05-01T10:02:00Z"},
            ],
        }
    },
    "completedModules": ["history"],
    "completedModulesWithScore": [{"moduleId": "history", "score": 80, "completedAt": "2024-04-01T00:00:00Z"}],
}


@pytest.mark.unit
class TestProgressDocument:
    def test_loads_legacy_document(self):
        state = ProgressState.from_document(LEGACY_DOCUMENT)
        progress = state.module_progress["math"]
        assert progress.status == ModuleStatus.IN_PROGRESS
        # counts are derived from results, not trusted from the document
        assert progress.questions_answered == 2
        assert progress.correct_answers == 1
        assert progress.question_results[1].time_spent == 0
        assert progress.started_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        assert state.completed_modules == ["history"]
        assert state.completed_modules_with_score[0].score == 80
        assert state.quiz_progress.current_question == 0

    def test_missing_document_is_empty_state(self):
        state = ProgressState.from_document(None)
        assert state == ProgressState()

    def test_to_document_uses_camel_case_and_derived_counts(self):
        doc = ProgressState.from_document(LEGACY_DOCUMENT).to_document()
        math = doc["moduleProgress"]["math"]
        assert math["questionsAnswered"] == 2
        assert math["correctAnswers"] == 1
        assert "completedAt" not in math
        assert "finalScore" not in math
        assert math["questionResults"][0]["answeredAt"] == "2024-05-01T10:01:00+00:00"
        assert doc["quizProgress"] == {"currentQuestion": 0, "score": 0}

    def test_document_survives_reload(self, tracker, answer_all):
        state = ProgressState()
        answer_all(state, "history", correct=3, time_spent=4)
        tracker.start_module(state, "math")
        assert ProgressState.from_document(state.to_document()) == state


COMPLETED_WITHOUT_SCORE = {
    "moduleProgress": {
        "history": {
            "totalQuestions": 4,
            "status": "completed",
            "startedAt": "2024-03-01T09:00:00Z",
            "questionResults": [
                {"questionIndex": 0, "isCorrect": True, "answeredAt": "2024-03-01T09:01:00Z"},
                {"questionIndex": 1, "isCorrect": True, "answeredAt": "2024-03-01T09:02:00Z"},
                {"questionIndex": 2, "isCorrect": False, "answeredAt": "2024-03-01T09:03:00Z"},
                {"questionIndex": 3, "isCorrect": True, "answeredAt": "2024-03-01T09:04:00Z"},
            ],
        }
    },
    "completedModules": ["history"],
}

MISSING_TIMESTAMPS = {
    "moduleProgress": {
        "math": {
            "totalQuestions": 10,
            "status": "in_progress",
            "questionResults": [
                {"questionIndex": 0, "isCorrect": True, "answeredAt": "2024-06-01T12:00:00Z"},
                {"questionIndex": 1, "isCorrect": False},
            ],
        },
        "physics": {"totalQuestions": 10, "status": "in_progress", "questionResults": []},
    },
    "completedModulesWithScore": [{"moduleId": "math", "score": 50}],
}


@pytest.mark.unit
class TestLegacyRecords:
    def test_completed_record_without_score_is_scored_from_answers(self):
        history = ProgressState.from_document(COMPLETED_WITHOUT_SCORE).module_progress["history"]
        assert history.final_score == 75
        assert history.completed_at == datetime(2024, 3, 1, 9, 4, tzinfo=timezone.utc)

    def test_completed_record_without_score_gets_mirror_entry(self):
        state = ProgressState.from_document(COMPLETED_WITHOUT_SCORE)
        reconcile(state)
        assert state.completed_modules == ["history"]
        assert [(e.module_id, e.score) for e in state.completed_modules_with_score] == [("history", 75)]

    def test_missing_timestamps_fall_back_to_neighbours(self):
        state = ProgressState.from_document(MISSING_TIMESTAMPS)
        math = state.module_progress["math"]
        first_answer = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        assert math.started_at == first_answer
        assert math.question_results[1].answered_at == first_answer
        assert state.module_progress["physics"].started_at == UNKNOWN_TIME
        assert state.completed_modules_with_score[0].completed_at == UNKNOWN_TIME

    def test_repeated_loads_are_identical(self):
        assert ProgressState.from_document(MISSING_TIMESTAMPS) == ProgressState.from_document(MISSING_TIMESTAMPS)
        assert ProgressState.from_document(COMPLETED_WITHOUT_SCORE) == ProgressState.from_document(
            COMPLETED_WITHOUT_SCORE
        )
