"""
API schemas package. Import from submodules or from this package.

Example:
    from api.schemas import AnswerQuestionRequest, DetailedProgressResponse
    from api.schemas.progress_schemas import DashboardStatsResponse
"""

from api.schemas.auth_schemas import (
    AuthResponse,
    AuthTokenPayload,
    GoogleLoginRequest,
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
)
from api.schemas.base import CamelModel
from api.schemas.progress_schemas import (
    AnswerQuestionRequest,
    AnswerQuestionResponse,
    DashboardStatsResponse,
    DetailedProgressResponse,
    ModuleCatalogResponse,
    ModuleProgressResponse,
    ModuleRequest,
    ResetModuleResponse,
    SimpleProgressResponse,
    StartModuleResponse,
)
from api.schemas.user_schemas import (
    PreferencesUpdate,
    UpdateEmailRequest,
    UpdatePasswordRequest,
    UpdatePreferencesRequest,
    UpdateProfileRequest,
    UserPayload,
)

__all__ = [
    "CamelModel",
    "AuthResponse",
    "AuthTokenPayload",
    "GoogleLoginRequest",
    "LoginRequest",
    "LogoutResponse",
    "RegisterRequest",
    "AnswerQuestionRequest",
    "AnswerQuestionResponse",
    "DashboardStatsResponse",
    "DetailedProgressResponse",
    "ModuleCatalogResponse",
    "ModuleProgressResponse",
    "ModuleRequest",
    "ResetModuleResponse",
    "SimpleProgressResponse",
    "StartModuleResponse",
    "PreferencesUpdate",
    "UpdateEmailRequest",
    "UpdatePasswordRequest",
    "UpdatePreferencesRequest",
    "UpdateProfileRequest",
    "UserPayload",
]
