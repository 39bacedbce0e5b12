from learning.catalog import DEFAULT_CATALOG, ModuleCatalog, ModuleDefinition
from learning.errors import (
    DuplicateAnswer,
    InvalidModule,
    ModuleAlreadyCompleted,
    ModuleNotStarted,
    ProgressError,
)
from learning.reconciler import reconcile
from learning.recommendations import Priority, Recommendation, RecommendationType, recommend
from learning.stats import DashboardStatistics, ProgressStatistics, compute_dashboard, compute_statistics
from learning.tracker import AnswerOutcome, ModuleProgressTracker, StartOutcome
from learning.types import (
    CompletedModuleEntry,
    ModuleProgress,
    ModuleStatus,
    ProgressState,
    QuestionResult,
    QuizProgress,
)

__all__ = [
    "DEFAULT_CATALOG",
    "ModuleCatalog",
    "ModuleDefinition",
    "ProgressError",
    "InvalidModule",
    "ModuleNotStarted",
    "DuplicateAnswer",
    "ModuleAlreadyCompleted",
    "reconcile",
    "recommend",
    "Recommendation",
    "RecommendationType",
    "Priority",
    "compute_statistics",
    "compute_dashboard",
    "ProgressStatistics",
    "DashboardStatistics",
    "ModuleProgressTracker",
    "StartOutcome",
    "AnswerOutcome",
    "ModuleStatus",
    "ModuleProgress",
    "QuestionResult",
    "CompletedModuleEntry",
    "QuizProgress",
    "ProgressState",
]
