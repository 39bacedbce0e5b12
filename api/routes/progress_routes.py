"""
Quiz progress endpoints: start/resume a module, record answers, reset, and
the progress/dashboard views. Paths match the ones the web client already calls.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.config import get_catalog, get_db, get_settings
from api.schemas.progress_schemas import (
    AnswerQuestionRequest,
    AnswerQuestionResponse,
    DashboardStatsResponse,
    DetailedProgressResponse,
    ModuleCatalogResponse,
    ModuleDefinitionResponse,
    ModuleProgressResponse,
    ModuleRequest,
    ResetModuleResponse,
    SimpleProgressResponse,
    StartModuleResponse,
)
from api.services.progress_service import DetailedProgress, ProgressService
from api.utils.auth import CurrentUser, get_current_user

progress_routes = APIRouter()


def get_progress_service(db: Session = Depends(get_db)) -> ProgressService:
    return ProgressService(db, get_catalog(), max_attempts=get_settings().progress_write_retries)


def detailed_progress_response(detailed: DetailedProgress) -> DetailedProgressResponse:
    state = detailed.state
    statistics = detailed.statistics
    return DetailedProgressResponse(
        global_stats=statistics.global_stats,
        completed_modules_with_score=state.completed_modules_with_score,
        modules_in_progress=statistics.modules_in_progress,
        module_progress={
            module_id: ModuleProgressResponse.model_validate(progress)
            for module_id, progress in state.module_progress.items()
        },
        subject_analysis=statistics.subject_analysis,
        chart_data=statistics.chart_data,
        recommendations=detailed.recommendations,
    )


@progress_routes.get("/modules", response_model=ModuleCatalogResponse)
def list_modules() -> ModuleCatalogResponse:
    """Available subjects with their question counts."""
    return ModuleCatalogResponse(
        modules=[ModuleDefinitionResponse.model_validate(module) for module in get_catalog()]
    )


@progress_routes.post("/start-module", response_model=StartModuleResponse)
def start_module(
    body: ModuleRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service),
) -> StartModuleResponse:
    """Start a module, or resume it when a record already exists."""
    outcome = service.start_module(current_user.id, body.module_id)
    return StartModuleResponse(
        message="Module started." if outcome.created else "Module resumed.",
        progress=ModuleProgressResponse.model_validate(outcome.progress),
    )


@progress_routes.post("/answer-question", response_model=AnswerQuestionResponse)
def answer_question(
    body: AnswerQuestionRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service),
) -> AnswerQuestionResponse:
    outcome = service.record_answer(
        current_user.id,
        body.module_id,
        body.question_index,
        body.is_correct,
        body.time_spent,
    )
    return AnswerQuestionResponse(
        message="Answer recorded.",
        progress=ModuleProgressResponse.model_validate(outcome.progress),
        is_module_completed=outcome.completed,
    )


@progress_routes.get("/get-detailed-progress", response_model=DetailedProgressResponse)
def get_detailed_progress(
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service),
) -> DetailedProgressResponse:
    """Global statistics, per-module detail, chart series and recommendations."""
    return detailed_progress_response(service.detailed_progress(current_user.id))


@progress_routes.get("/get-progress", response_model=SimpleProgressResponse)
def get_progress(
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service),
) -> SimpleProgressResponse:
    state = service.get_state(current_user.id)
    return SimpleProgressResponse(
        current_question=state.quiz_progress.current_question,
        score=state.quiz_progress.score,
        completed_modules=state.completed_modules,
        completed_modules_with_score=state.completed_modules_with_score,
    )


@progress_routes.post("/reset-module", response_model=ResetModuleResponse)
def reset_module(
    body: ModuleRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service),
) -> ResetModuleResponse:
    service.reset_module(current_user.id, body.module_id)
    return ResetModuleResponse(message="Module reset.")


@progress_routes.get("/dashboard-stats", response_model=DashboardStatsResponse)
def dashboard_stats(
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service),
) -> DashboardStatsResponse:
    return DashboardStatsResponse.model_validate(service.dashboard(current_user.id))
