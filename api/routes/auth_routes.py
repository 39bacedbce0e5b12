from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from api.config import get_db
from api.schemas.auth_schemas import AuthResponse, GoogleLoginRequest, LoginRequest, LogoutResponse, RegisterRequest
from api.schemas.user_schemas import UserPayload
from api.services.errors import UserNotFound
from api.utils.auth import (
    CurrentUser,
    EmailAlreadyRegistered,
    authenticate_user,
    clear_auth_cookie,
    create_user,
    get_current_user,
    get_user_by_email,
    get_user_by_id,
    issue_token,
    set_auth_cookie,
    touch_last_login,
)
from api.utils.common import display_name, user_payload
from api.utils.google import verify_google_id_token
from api.utils.logger import get_logger

auth_routes = APIRouter()
logger = get_logger(__name__)


def _auth_response(response: Response, user, message: str) -> AuthResponse:
    token = issue_token(user)
    set_auth_cookie(response, token)
    return AuthResponse(message=message, token=token, user=user_payload(user))


@auth_routes.post("/register", status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, response: Response, db: Session = Depends(get_db)) -> AuthResponse:
    """Register a new user and return an access token."""
    if get_user_by_email(request.email, db):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    try:
        user = create_user(
            request.email,
            request.password,
            display_name(request.first_name, request.last_name),
            db,
        )
    except EmailAlreadyRegistered:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    return _auth_response(response, user, "User created successfully.")


@auth_routes.post("/login")
def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)) -> AuthResponse:
    """Authenticate with email and password."""
    user = authenticate_user(request.email, request.password, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )
    touch_last_login(user, db)
    logger.info("login user_id=%s", user.id)
    return _auth_response(response, user, "Login successful.")


@auth_routes.post("/google-login")
def google_login(request: GoogleLoginRequest, response: Response, db: Session = Depends(get_db)) -> AuthResponse:
    """
    Sign in with a Google ID token. First-time Google users get an account;
    its password is a hash of the Google subject id so password login stays closed.
    """
    identity = verify_google_id_token(request.token)
    user = get_user_by_email(identity.email, db)
    if user is None:
        try:
            user = create_user(identity.email, identity.subject, identity.name or "Google User", db)
            logger.info("google account created user_id=%s", user.id)
        except EmailAlreadyRegistered:
            user = get_user_by_email(identity.email, db)
    touch_last_login(user, db)
    return _auth_response(response, user, "Google login successful.")


@auth_routes.post("/logout")
def logout(response: Response) -> LogoutResponse:
    """Clear the authentication cookie."""
    clear_auth_cookie(response)
    return LogoutResponse(message="Logout successful")


@auth_routes.get("/me")
def get_current_user_info(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserPayload:
    """Profile of the authenticated user."""
    user = get_user_by_id(current_user.id, db)
    if user is None:
        raise UserNotFound(current_user.id)
    return user_payload(user)
