"""
Progress service: the persistence boundary for quiz progress.

Every write is a read-modify-write of one user row. The row carries a
SQLAlchemy version counter, so a concurrent writer makes our UPDATE match no
rows; we then reload and re-apply the operation. The legacy mirrors are
reconciled right before each write.
"""

from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from sqlalchemy.orm import Session as DBSession
from sqlalchemy.orm.exc import StaleDataError

from api.models.models import User
from api.services.errors import ProgressWriteConflict, UserNotFound
from api.utils.logger import get_logger, log_operation
from learning.catalog import ModuleCatalog
from learning.errors import ProgressError
from learning.reconciler import reconcile
from learning.recommendations import Recommendation, recommend
from learning.stats import DashboardStatistics, ProgressStatistics, compute_dashboard, compute_statistics
from learning.tracker import AnswerOutcome, ModuleProgressTracker, StartOutcome
from learning.types import ModuleProgress, ProgressState

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class DetailedProgress:
    state: ProgressState
    statistics: ProgressStatistics
    recommendations: list[Recommendation]


def load_state(user: User) -> ProgressState:
    """Build the in-memory progress state from the user's stored document columns."""
    return ProgressState.from_document(
        {
            "moduleProgress": user.module_progress,
            "completedModules": user.completed_modules,
            "completedModulesWithScore": user.completed_modules_with_score,
            "quizProgress": user.quiz_progress,
        }
    )


def stored_document(user: User) -> dict:
    return {
        "moduleProgress": user.module_progress or {},
        "completedModules": user.completed_modules or [],
        "completedModulesWithScore": user.completed_modules_with_score or [],
        "quizProgress": user.quiz_progress or {},
    }


def store_state(user: User, state: ProgressState) -> bool:
    """
    Reconcile the legacy mirrors, then copy the state onto the user's columns.
    Returns False (and touches nothing) when the stored document is already current.
    """
    reconcile(state)
    doc = state.to_document()
    if doc == stored_document(user):
        return False
    user.module_progress = doc["moduleProgress"]
    user.completed_modules = doc["completedModules"]
    user.completed_modules_with_score = doc["completedModulesWithScore"]
    user.quiz_progress = doc["quizProgress"]
    user.total_time_spent = state.total_time_spent()
    return True


def commit_user(db: DBSession, user: User) -> None:
    """Commit pending changes to a user row, reconciling its progress mirrors first."""
    store_state(user, load_state(user))
    db.commit()


class ProgressService:
    """Applies tracker operations to stored users and computes their statistics."""

    def __init__(self, db: DBSession, catalog: ModuleCatalog, max_attempts: int = 3):
        self.db = db
        self.catalog = catalog
        self.tracker = ModuleProgressTracker(catalog)
        self.max_attempts = max(1, max_attempts)

    def _load_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise UserNotFound(user_id)
        return user

    def _mutate(self, user_id: int, operation: Callable[[ProgressState], T]) -> T:
        for attempt in range(1, self.max_attempts + 1):
            user = self._load_user(user_id)
            state = load_state(user)
            try:
                result = operation(state)
            except ProgressError:
                self.db.rollback()
                raise
            if not store_state(user, state):
                return result
            try:
                self.db.commit()
            except StaleDataError:
                self.db.rollback()
                logger.warning(
                    "progress write conflict user_id=%s attempt=%s/%s", user_id, attempt, self.max_attempts
                )
                continue
            return result
        raise ProgressWriteConflict(user_id, self.max_attempts)

    def start_module(self, user_id: int, module_id: str) -> StartOutcome:
        with log_operation(logger, "start_module", user_id=user_id):
            outcome = self._mutate(user_id, lambda state: self.tracker.start_module(state, module_id))
        logger.info(
            "module %s user_id=%s module_id=%s",
            "started" if outcome.created else "resumed",
            user_id,
            module_id,
        )
        return outcome

    def record_answer(
        self,
        user_id: int,
        module_id: str,
        question_index: int,
        is_correct: bool,
        time_spent: float = 0,
    ) -> AnswerOutcome:
        with log_operation(logger, "record_answer", user_id=user_id):
            outcome = self._mutate(
                user_id,
                lambda state: self.tracker.record_answer(state, module_id, question_index, is_correct, time_spent),
            )
        if outcome.completed:
            logger.info(
                "module completed user_id=%s module_id=%s score=%s",
                user_id,
                module_id,
                outcome.progress.final_score,
            )
        return outcome

    def reset_module(self, user_id: int, module_id: str) -> bool:
        with log_operation(logger, "reset_module", user_id=user_id):
            removed = self._mutate(user_id, lambda state: self.tracker.reset_module(state, module_id))
        logger.info("module reset user_id=%s module_id=%s removed=%s", user_id, module_id, removed)
        return removed

    def get_state(self, user_id: int) -> ProgressState:
        """
        Read-only view of the user's progress. Mirrors are reconciled in memory
        so records written before reconciliation existed still read consistently.
        """
        state = load_state(self._load_user(user_id))
        reconcile(state)
        return state

    def get_module_progress(self, user_id: int, module_id: str) -> Optional[ModuleProgress]:
        return self.tracker.get_progress(self.get_state(user_id), module_id)

    def detailed_progress(self, user_id: int) -> DetailedProgress:
        state = self.get_state(user_id)
        statistics = compute_statistics(state, self.catalog)
        return DetailedProgress(
            state=state,
            statistics=statistics,
            recommendations=recommend(statistics, state, self.catalog),
        )

    def dashboard(self, user_id: int) -> DashboardStatistics:
        return compute_dashboard(self.get_state(user_id), self.catalog)
