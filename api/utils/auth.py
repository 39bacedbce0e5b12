from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import Cookie, Depends, HTTPException, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.config import get_settings
from api.models.models import User
from api.services.progress_service import commit_user
from api.utils.jwt import create_access_token, get_password_hash, verify_password, verify_token
from api.utils.logger import get_logger

logger = get_logger(__name__)
bearer_scheme = HTTPBearer(auto_error=False)


class EmailAlreadyRegistered(Exception):
    pass


@dataclass(frozen=True)
class CurrentUser:
    """Identity taken from a verified access token."""
    id: int
    username: str
    role: str


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    access_token: Optional[str] = Cookie(None),
) -> CurrentUser:
    """Resolve the caller from `Authorization: Bearer <jwt>`, falling back to the access_token cookie."""
    token = credentials.credentials if credentials else access_token
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = verify_token(token)
    try:
        user_id = int(payload.sub)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return CurrentUser(id=user_id, username=payload.username, role=payload.role)


def require_role(*allowed_roles: str) -> Callable[..., CurrentUser]:
    """Dependency factory: 403 unless the token's role is one of allowed_roles."""

    def _check(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied for this role")
        return current_user

    return _check


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.username, user.role or "User")


def set_auth_cookie(response: Response, token: str) -> None:
    max_age = get_settings().access_token_expire_minutes * 60
    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=max_age,
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key="access_token",
        httponly=True,
        secure=False,
        samesite="lax"
    )


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(email: str, db: Session) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(user_id: int, db: Session) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create_user(email: str, password: str, username: str, db: Session) -> User:
    """Insert a user; the unique email index settles races between two registrations."""
    user = User(
        email=normalize_email(email),
        username=username,
        hashed_password=get_password_hash(password),
    )
    db.add(user)
    try:
        commit_user(db, user)
    except IntegrityError as e:
        db.rollback()
        raise EmailAlreadyRegistered(email) from e
    db.refresh(user)
    logger.info("user registered user_id=%s", user.id)
    return user


def authenticate_user(email: str, password: str, db: Session) -> User | None:
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def touch_last_login(user: User, db: Session) -> None:
    user.last_login_at = datetime.now(timezone.utc)
    db.add(user)
    commit_user(db, user)
    db.refresh(user)
