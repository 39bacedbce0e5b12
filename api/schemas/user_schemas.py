from typing import Literal, Optional

from pydantic import ConfigDict, EmailStr, Field

from api.schemas.base import CamelModel


class UserPayload(CamelModel):
    """Public profile returned by auth and /user-info."""
    username: str
    email: str
    role: str = "User"
    role_color: str = "#808080"
    profile_image: str = ""
    selected_plan: str = ""


class PreferencesUpdate(CamelModel):
    """Known preference keys are validated; unknown keys are stored as given."""
    model_config = ConfigDict(extra="allow")

    theme: Optional[str] = None
    notifications: Optional[bool] = None
    difficulty: Optional[Literal["easy", "medium", "hard"]] = None


class UpdatePreferencesRequest(CamelModel):
    preferences: PreferencesUpdate


class UpdateProfileRequest(CamelModel):
    username: Optional[str] = Field(None, min_length=1)
    profile_image: Optional[str] = None
    selected_plan: Optional[str] = None


class UpdateEmailRequest(CamelModel):
    email: EmailStr
    password: str


class UpdatePasswordRequest(CamelModel):
    current_password: str
    new_password: str = Field(..., min_length=6)
    confirm_new_password: str
