"""
Statistics derived from a user's progress state.

Everything here is a pure function of (state, catalog): no I/O, no mutation.
Percentages are integers rounded half up; empty denominators yield 0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from learning.catalog import DEFAULT_EMOJI, ModuleCatalog
from learning.rounding import mean_rounded, percentage, seconds_to_minutes
from learning.types import CompletedModuleEntry, ProgressState


@dataclass
class ModuleInProgress:
    module_id: str
    questions_answered: int
    total_questions: int
    progress_percentage: int
    current_score: int


@dataclass
class SubjectScore:
    module_id: str
    score: int
    name: str
    emoji: str


@dataclass
class TimelinePoint:
    date: datetime
    module_id: str
    score: Optional[int]


@dataclass
class ModuleAccuracy:
    module_id: str
    accuracy: int
    questions_answered: int


@dataclass
class GlobalStats:
    global_progress: int
    total_available_modules: int
    completed_modules_count: int
    modules_in_progress_count: int
    average_score: int
    best_score: int
    global_accuracy: int
    total_questions_answered: int
    total_correct_answers: int
    total_time_spent: int  # minutes


@dataclass
class ChartData:
    score_distribution: list[CompletedModuleEntry] = field(default_factory=list)
    progress_timeline: list[TimelinePoint] = field(default_factory=list)
    accuracy_by_module: list[ModuleAccuracy] = field(default_factory=list)


@dataclass
class ProgressStatistics:
    global_stats: GlobalStats
    modules_in_progress: list[ModuleInProgress]
    subject_analysis: list[SubjectScore]
    chart_data: ChartData


@dataclass
class RecentActivity:
    last_module_completed: Optional[CompletedModuleEntry]
    total_sessions: int


@dataclass
class DashboardStatistics:
    global_progress: int
    total_modules: int
    average_score: int
    total_available_modules: int
    modules_in_progress_count: int
    recent_activity: RecentActivity


def _completed_scores(state: ProgressState) -> list[int]:
    return [
        p.final_score
        for p in state.module_progress.values()
        if p.is_completed and p.final_score is not None
    ]


def modules_in_progress(state: ProgressState) -> list[ModuleInProgress]:
    return [
        ModuleInProgress(
            module_id=p.module_id,
            questions_answered=p.questions_answered,
            total_questions=p.total_questions,
            progress_percentage=percentage(p.questions_answered, p.total_questions),
            current_score=percentage(p.correct_answers, p.questions_answered),
        )
        for p in state.in_progress_modules()
    ]


def subject_analysis(state: ProgressState, catalog: ModuleCatalog) -> list[SubjectScore]:
    """Completed modules, best score first. Ties keep mirror order."""
    rows = []
    for entry in state.completed_modules_with_score:
        definition = catalog.get(entry.module_id)
        rows.append(
            SubjectScore(
                module_id=entry.module_id,
                score=entry.score,
                name=definition.name if definition else entry.module_id,
                emoji=definition.emoji if definition else DEFAULT_EMOJI,
            )
        )
    return sorted(rows, key=lambda row: row.score, reverse=True)


def chart_data(state: ProgressState) -> ChartData:
    finished = sorted(
        (p for p in state.module_progress.values() if p.completed_at is not None),
        key=lambda p: p.completed_at,
    )
    return ChartData(
        score_distribution=list(state.completed_modules_with_score),
        progress_timeline=[
            TimelinePoint(date=p.completed_at, module_id=p.module_id, score=p.final_score)
            for p in finished
        ],
        accuracy_by_module=[
            ModuleAccuracy(
                module_id=module_id,
                accuracy=percentage(p.correct_answers, p.questions_answered),
                questions_answered=p.questions_answered,
            )
            for module_id, p in state.module_progress.items()
        ],
    )


def compute_statistics(state: ProgressState, catalog: ModuleCatalog) -> ProgressStatistics:
    scores = _completed_scores(state)
    in_progress = modules_in_progress(state)
    answered = sum(p.questions_answered for p in state.module_progress.values())
    correct = sum(p.correct_answers for p in state.module_progress.values())
    completed_count = len(state.completed_module_ids())

    global_stats = GlobalStats(
        global_progress=percentage(completed_count, len(catalog)),
        total_available_modules=len(catalog),
        completed_modules_count=completed_count,
        modules_in_progress_count=len(in_progress),
        average_score=mean_rounded(scores),
        best_score=max(scores, default=0),
        global_accuracy=percentage(correct, answered),
        total_questions_answered=answered,
        total_correct_answers=correct,
        total_time_spent=seconds_to_minutes(state.total_time_spent()),
    )
    return ProgressStatistics(
        global_stats=global_stats,
        modules_in_progress=in_progress,
        subject_analysis=subject_analysis(state, catalog),
        chart_data=chart_data(state),
    )


def compute_dashboard(state: ProgressState, catalog: ModuleCatalog) -> DashboardStatistics:
    completed_count = len(state.completed_module_ids())
    mirror = state.completed_modules_with_score
    return DashboardStatistics(
        global_progress=percentage(completed_count, len(catalog)),
        total_modules=completed_count,
        average_score=mean_rounded(_completed_scores(state)),
        total_available_modules=len(catalog),
        modules_in_progress_count=len(state.in_progress_modules()),
        recent_activity=RecentActivity(
            last_module_completed=mirror[-1] if mirror else None,
            total_sessions=len(state.module_progress),
        ),
    )
