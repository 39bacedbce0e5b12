"""
Quiz progress schemas: start/answer/reset requests, per-module progress,
detailed statistics, dashboard summary and the legacy simple progress.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, StrictBool

from api.schemas.base import CamelModel
from learning.recommendations import Priority, RecommendationType
from learning.types import ModuleStatus


class ModuleRequest(CamelModel):
    module_id: str = Field(..., min_length=1)


class AnswerQuestionRequest(CamelModel):
    module_id: str = Field(..., min_length=1)
    question_index: int = Field(..., ge=0)
    is_correct: StrictBool
    time_spent: float = Field(0, ge=0, description="Seconds spent on the question")


class QuestionResultResponse(CamelModel):
    question_index: int
    is_correct: bool
    time_spent: float
    answered_at: datetime


class ModuleProgressResponse(CamelModel):
    module_id: str
    questions_answered: int
    total_questions: int
    correct_answers: int
    status: ModuleStatus
    started_at: datetime
    completed_at: Optional[datetime] = None
    final_score: Optional[int] = None
    question_results: list[QuestionResultResponse]


class StartModuleResponse(CamelModel):
    message: str
    progress: ModuleProgressResponse


class AnswerQuestionResponse(CamelModel):
    message: str
    progress: ModuleProgressResponse
    is_module_completed: bool


class ResetModuleResponse(CamelModel):
    message: str


class CompletedModuleResponse(CamelModel):
    module_id: str
    score: int
    completed_at: datetime


class QuizProgressResponse(CamelModel):
    current_question: int
    score: int


class SimpleProgressResponse(CamelModel):
    """Legacy progress shape for clients that predate per-module tracking."""
    current_question: int
    score: int
    completed_modules: list[str]
    completed_modules_with_score: list[CompletedModuleResponse]


class GlobalStatsResponse(CamelModel):
    global_progress: int
    total_available_modules: int
    completed_modules_count: int
    modules_in_progress_count: int
    average_score: int
    best_score: int
    global_accuracy: int
    total_questions_answered: int
    total_correct_answers: int
    total_time_spent: int


class ModuleInProgressResponse(CamelModel):
    module_id: str
    questions_answered: int
    total_questions: int
    progress_percentage: int
    current_score: int


class SubjectScoreResponse(CamelModel):
    module_id: str
    score: int
    name: str
    emoji: str


class TimelinePointResponse(CamelModel):
    date: datetime
    module_id: str
    score: Optional[int] = None


class ModuleAccuracyResponse(CamelModel):
    module_id: str
    accuracy: int
    questions_answered: int


class ChartDataResponse(CamelModel):
    score_distribution: list[CompletedModuleResponse]
    progress_timeline: list[TimelinePointResponse]
    accuracy_by_module: list[ModuleAccuracyResponse]


class RecommendationResponse(CamelModel):
    type: RecommendationType
    priority: Priority
    message: str
    modules: list[str]


class DetailedProgressResponse(CamelModel):
    global_stats: GlobalStatsResponse
    completed_modules_with_score: list[CompletedModuleResponse]
    modules_in_progress: list[ModuleInProgressResponse]
    module_progress: dict[str, ModuleProgressResponse]
    subject_analysis: list[SubjectScoreResponse]
    chart_data: ChartDataResponse
    recommendations: list[RecommendationResponse]


class RecentActivityResponse(CamelModel):
    last_module_completed: Optional[CompletedModuleResponse] = None
    total_sessions: int


class DashboardStatsResponse(CamelModel):
    global_progress: int
    total_modules: int
    average_score: int
    total_available_modules: int
    modules_in_progress_count: int
    recent_activity: RecentActivityResponse


class ModuleDefinitionResponse(CamelModel):
    module_id: str
    name: str
    total_questions: int
    emoji: str


class ModuleCatalogResponse(CamelModel):
    modules: list[ModuleDefinitionResponse]
