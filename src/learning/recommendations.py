"""
Suggestions shown on the progress page, derived from the statistics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from learning.catalog import ModuleCatalog
from learning.stats import ProgressStatistics
from learning.types import ProgressState

NEAR_COMPLETION_THRESHOLD = 70
LOW_SCORE_THRESHOLD = 70
MAX_EXPLORATION_SUGGESTIONS = 2


class RecommendationType(str, Enum):
    COMPLETION = "completion"
    IMPROVEMENT = "improvement"
    EXPLORATION = "exploration"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class Recommendation:
    type: RecommendationType
    priority: Priority
    message: str
    modules: list[str] = field(default_factory=list)


def recommend(
    statistics: ProgressStatistics,
    state: ProgressState,
    catalog: ModuleCatalog,
) -> list[Recommendation]:
    """Every applicable recommendation, highest priority first."""
    recommendations: list[Recommendation] = []

    near_completion = [
        m.module_id
        for m in statistics.modules_in_progress
        if m.progress_percentage >= NEAR_COMPLETION_THRESHOLD
    ]
    if near_completion:
        recommendations.append(
            Recommendation(
                type=RecommendationType.COMPLETION,
                priority=Priority.HIGH,
                message=f"You are close to finishing {', '.join(near_completion)}. Keep going!",
                modules=near_completion,
            )
        )

    low_scores = [e for e in state.completed_modules_with_score if e.score < LOW_SCORE_THRESHOLD]
    if low_scores:
        first = low_scores[0]
        recommendations.append(
            Recommendation(
                type=RecommendationType.IMPROVEMENT,
                priority=Priority.MEDIUM,
                message=f"Review {first.module_id} to improve your score of {first.score}%",
                modules=[first.module_id],
            )
        )

    not_started = [mid for mid in catalog.module_ids() if mid not in state.module_progress]
    if not_started:
        suggested = not_started[:MAX_EXPLORATION_SUGGESTIONS]
        recommendations.append(
            Recommendation(
                type=RecommendationType.EXPLORATION,
                priority=Priority.LOW,
                message=f"Discover new subjects: {', '.join(suggested)}",
                modules=suggested,
            )
        )

    return recommendations
