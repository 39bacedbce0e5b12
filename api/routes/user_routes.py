"""
Account endpoints for the signed-in user (profile, preferences, credentials)
plus the staff view of another user's progress.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from api.config import get_db
from api.models.models import User as DbUser, default_preferences
from api.routes.progress_routes import detailed_progress_response, get_progress_service
from api.schemas.progress_schemas import DetailedProgressResponse
from api.schemas.user_schemas import (
    UpdateEmailRequest,
    UpdatePasswordRequest,
    UpdatePreferencesRequest,
    UpdateProfileRequest,
    UserPayload,
)
from api.services.errors import UserNotFound
from api.services.progress_service import ProgressService, commit_user
from api.utils.auth import (
    CurrentUser,
    get_current_user,
    get_user_by_email,
    get_user_by_id,
    issue_token,
    normalize_email,
    require_role,
    set_auth_cookie,
)
from api.utils.common import user_payload
from api.utils.jwt import get_password_hash, verify_password

user_routes = APIRouter()


def _account(current_user: CurrentUser, db: Session) -> DbUser:
    user = get_user_by_id(current_user.id, db)
    if user is None:
        raise UserNotFound(current_user.id)
    return user


def _save(user: DbUser, db: Session) -> DbUser:
    db.add(user)
    commit_user(db, user)
    db.refresh(user)
    return user


def _check_password(user: DbUser, password: str) -> None:
    if not verify_password(password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")


@user_routes.get("/user-info")
def get_user_info(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserPayload:
    return user_payload(_account(current_user, db))


@user_routes.patch("/user/preferences")
def update_preferences(
    body: UpdatePreferencesRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Merge the given keys into the stored preferences, e.g. {"preferences": {"theme": "dark"}}."""
    user = _account(current_user, db)
    stored = user.preferences if isinstance(user.preferences, dict) else default_preferences()
    user.preferences = {**stored, **body.preferences.model_dump(exclude_none=True)}
    return {"preferences": _save(user, db).preferences}


@user_routes.patch("/user/profile")
def update_profile(
    body: UpdateProfileRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserPayload:
    """Update display name, avatar or plan; omitted fields are left alone."""
    user = _account(current_user, db)
    if body.username is not None:
        user.username = body.username.strip()
    if body.profile_image is not None:
        user.profile_image = body.profile_image
    if body.selected_plan is not None:
        user.selected_plan = body.selected_plan
    return user_payload(_save(user, db))


@user_routes.patch("/user/email")
def update_email(
    body: UpdateEmailRequest,
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    user = _account(current_user, db)
    _check_password(user, body.password)
    new_email = normalize_email(body.email)
    if new_email != user.email:
        if get_user_by_email(new_email, db):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use")
        user.email = new_email
        _save(user, db)
        set_auth_cookie(response, issue_token(user))
    return {"message": "Email updated", "email": user.email}


@user_routes.patch("/user/password")
def update_password(
    body: UpdatePasswordRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    if body.new_password != body.confirm_new_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="New passwords do not match")
    user = _account(current_user, db)
    _check_password(user, body.current_password)
    user.hashed_password = get_password_hash(body.new_password)
    _save(user, db)
    return {"message": "Password updated"}


@user_routes.get("/admin/users/{user_id}/progress", response_model=DetailedProgressResponse)
def get_user_progress_as_admin(
    user_id: int,
    _admin: CurrentUser = Depends(require_role("Admin")),
    service: ProgressService = Depends(get_progress_service),
) -> DetailedProgressResponse:
    """Detailed progress of any user, for staff accounts."""
    return detailed_progress_response(service.detailed_progress(user_id))
