"""
Progress state for one user.

These dataclasses are the in-memory form of the progress document stored
on the user record. `to_document` / `from_document` convert to and from the
camelCase JSON shape that existing clients read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from learning.rounding import percentage


class ModuleStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# stand-in for timestamps missing from old records; keeps reloads stable
UNKNOWN_TIME = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _dump_dt(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _load_dt(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class QuestionResult:
    question_index: int
    is_correct: bool
    time_spent: float = 0
    answered_at: datetime = field(default_factory=utcnow)

    def to_document(self) -> dict[str, Any]:
        return {
            "questionIndex": self.question_index,
            "isCorrect": self.is_correct,
            "timeSpent": self.time_spent,
            "answeredAt": _dump_dt(self.answered_at),
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any], fallback_time: datetime = UNKNOWN_TIME) -> "QuestionResult":
        return cls(
            question_index=int(doc["questionIndex"]),
            is_correct=bool(doc["isCorrect"]),
            time_spent=doc.get("timeSpent") or 0,
            answered_at=_load_dt(doc.get("answeredAt")) or fallback_time,
        )


@dataclass
class ModuleProgress:
    """
    One attempt at one module. Results are append-only in answer order;
    the answered/correct counts are always derived from them.
    """

    module_id: str
    total_questions: int
    status: ModuleStatus = ModuleStatus.NOT_STARTED
    started_at: datetime = field(default_factory=utcnow)
    completed_at: Optional[datetime] = None
    final_score: Optional[int] = None
    question_results: list[QuestionResult] = field(default_factory=list)

    @property
    def questions_answered(self) -> int:
        return len(self.question_results)

    @property
    def correct_answers(self) -> int:
        return sum(1 for r in self.question_results if r.is_correct)

    @property
    def time_spent(self) -> float:
        return sum(r.time_spent or 0 for r in self.question_results)

    @property
    def is_completed(self) -> bool:
        return self.status == ModuleStatus.COMPLETED

    def has_answered(self, question_index: int) -> bool:
        return any(r.question_index == question_index for r in self.question_results)

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "moduleId": self.module_id,
            "questionsAnswered": self.questions_answered,
            "totalQuestions": self.total_questions,
            "correctAnswers": self.correct_answers,
            "status": self.status.value,
            "startedAt": _dump_dt(self.started_at),
            "questionResults": [r.to_document() for r in self.question_results],
        }
        if self.completed_at is not None:
            doc["completedAt"] = _dump_dt(self.completed_at)
        if self.final_score is not None:
            doc["finalScore"] = self.final_score
        return doc

    @classmethod
    def from_document(cls, module_id: str, doc: dict[str, Any]) -> "ModuleProgress":
        """
        Load one stored record. Timestamps missing from old records are filled
        from neighbouring ones, and a completed record without a final score
        gets it recomputed from its answers.
        """
        raw_results = doc.get("questionResults") or []
        completed_at = _load_dt(doc.get("completedAt"))
        answer_times = [t for t in (_load_dt(r.get("answeredAt")) for r in raw_results) if t is not None]
        started_at = (
            _load_dt(doc.get("startedAt"))
            or min(answer_times, default=None)
            or completed_at
            or UNKNOWN_TIME
        )

        results: list[QuestionResult] = []
        for raw in raw_results:
            previous = results[-1].answered_at if results else started_at
            results.append(QuestionResult.from_document(raw, fallback_time=previous))

        progress = cls(
            module_id=doc.get("moduleId") or module_id,
            total_questions=int(doc["totalQuestions"]),
            status=ModuleStatus(doc.get("status") or ModuleStatus.NOT_STARTED.value),
            started_at=started_at,
            completed_at=completed_at,
            final_score=doc.get("finalScore"),
            question_results=results,
        )
        if progress.is_completed:
            if progress.completed_at is None:
                progress.completed_at = results[-1].answered_at if results else started_at
            if progress.final_score is None:
                progress.final_score = percentage(progress.correct_answers, progress.total_questions)
        return progress


@dataclass
class CompletedModuleEntry:
    """Legacy mirror row: one per completed module, carrying its final score."""

    module_id: str
    score: int
    completed_at: datetime = field(default_factory=utcnow)

    def to_document(self) -> dict[str, Any]:
        return {
            "moduleId": self.module_id,
            "score": self.score,
            "completedAt": _dump_dt(self.completed_at),
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any], fallback_time: datetime = UNKNOWN_TIME) -> "CompletedModuleEntry":
        return cls(
            module_id=doc["moduleId"],
            score=int(doc["score"]),
            completed_at=_load_dt(doc.get("completedAt")) or fallback_time,
        )


@dataclass
class QuizProgress:
    """Single-quiz progress pair kept for clients without per-module tracking."""

    current_question: int = 0
    score: int = 0

    def to_document(self) -> dict[str, Any]:
        return {"currentQuestion": self.current_question, "score": self.score}

    @classmethod
    def from_document(cls, doc: Optional[dict[str, Any]]) -> "QuizProgress":
        doc = doc or {}
        return cls(
            current_question=int(doc.get("currentQuestion") or 0),
            score=int(doc.get("score") or 0),
        )


@dataclass
class ProgressState:
    """All progress owned by one user: canonical per-module map plus legacy mirrors."""

    module_progress: dict[str, ModuleProgress] = field(default_factory=dict)
    completed_modules: list[str] = field(default_factory=list)
    completed_modules_with_score: list[CompletedModuleEntry] = field(default_factory=list)
    quiz_progress: QuizProgress = field(default_factory=QuizProgress)

    def completed_module_ids(self) -> list[str]:
        return [mid for mid, p in self.module_progress.items() if p.is_completed]

    def in_progress_modules(self) -> list[ModuleProgress]:
        return [p for p in self.module_progress.values() if p.status == ModuleStatus.IN_PROGRESS]

    def total_time_spent(self) -> float:
        return sum(p.time_spent for p in self.module_progress.values())

    def to_document(self) -> dict[str, Any]:
        return {
            "moduleProgress": {mid: p.to_document() for mid, p in self.module_progress.items()},
            "completedModules": list(self.completed_modules),
            "completedModulesWithScore": [e.to_document() for e in self.completed_modules_with_score],
            "quizProgress": self.quiz_progress.to_document(),
        }

    @classmethod
    def from_document(cls, doc: Optional[dict[str, Any]]) -> "ProgressState":
        doc = doc or {}
        raw_progress = doc.get("moduleProgress") or {}
        module_progress = {mid: ModuleProgress.from_document(mid, p) for mid, p in raw_progress.items()}

        def _entry(raw: dict[str, Any]) -> CompletedModuleEntry:
            progress = module_progress.get(raw.get("moduleId"))
            fallback = progress.completed_at if progress and progress.completed_at else UNKNOWN_TIME
            return CompletedModuleEntry.from_document(raw, fallback_time=fallback)

        return cls(
            module_progress=module_progress,
            completed_modules=list(doc.get("completedModules") or []),
            completed_modules_with_score=[_entry(e) for e in doc.get("completedModulesWithScore") or []],
            quiz_progress=QuizProgress.from_document(doc.get("quizProgress")),
        )
