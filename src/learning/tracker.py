"""
Module progress tracker.

Operates on a ProgressState in memory; persistence and concurrency are the
caller's job (see api.services.progress_service).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from learning.catalog import ModuleCatalog
from learning.errors import DuplicateAnswer, InvalidModule, ModuleAlreadyCompleted, ModuleNotStarted
from learning.rounding import percentage
from learning.types import ModuleProgress, ModuleStatus, ProgressState, QuestionResult, utcnow


@dataclass
class StartOutcome:
    progress: ModuleProgress
    created: bool


@dataclass
class AnswerOutcome:
    progress: ModuleProgress
    completed: bool


class ModuleProgressTracker:
    def __init__(self, catalog: ModuleCatalog, clock: Callable[[], datetime] = utcnow):
        self.catalog = catalog
        self.clock = clock

    def start_module(self, state: ProgressState, module_id: str) -> StartOutcome:
        """
        Create an in-progress record for module_id, or return the existing one
        untouched. Starting twice is the same as resuming.
        """
        definition = self.catalog.get(module_id)
        if definition is None:
            raise InvalidModule(module_id)

        existing = state.module_progress.get(module_id)
        if existing is not None:
            return StartOutcome(progress=existing, created=False)

        progress = ModuleProgress(
            module_id=module_id,
            total_questions=definition.total_questions,
            status=ModuleStatus.IN_PROGRESS,
            started_at=self.clock(),
        )
        state.module_progress[module_id] = progress
        return StartOutcome(progress=progress, created=True)

    def record_answer(
        self,
        state: ProgressState,
        module_id: str,
        question_index: int,
        is_correct: bool,
        time_spent: float = 0,
    ) -> AnswerOutcome:
        """
        Append one answer. Completes the module once every question has an
        answer and fixes its final score at that point.
        """
        progress = state.module_progress.get(module_id)
        if progress is None:
            raise ModuleNotStarted(module_id)
        if progress.is_completed:
            raise ModuleAlreadyCompleted(module_id)
        if progress.has_answered(question_index):
            raise DuplicateAnswer(module_id, question_index)
        if time_spent < 0:
            raise ValueError("time_spent must not be negative")

        now = self.clock()
        progress.question_results.append(
            QuestionResult(
                question_index=question_index,
                is_correct=bool(is_correct),
                time_spent=time_spent or 0,
                answered_at=now,
            )
        )
        if progress.status == ModuleStatus.NOT_STARTED:
            progress.status = ModuleStatus.IN_PROGRESS

        if progress.questions_answered >= progress.total_questions:
            progress.status = ModuleStatus.COMPLETED
            progress.completed_at = now
            progress.final_score = percentage(progress.correct_answers, progress.total_questions)

        return AnswerOutcome(progress=progress, completed=progress.is_completed)

    def reset_module(self, state: ProgressState, module_id: str) -> bool:
        """Drop the module's record. Resetting an absent module is a no-op."""
        return state.module_progress.pop(module_id, None) is not None

    def get_progress(self, state: ProgressState, module_id: str) -> Optional[ModuleProgress]:
        return state.module_progress.get(module_id)
