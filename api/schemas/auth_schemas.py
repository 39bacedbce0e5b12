from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from api.schemas.base import CamelModel
from api.schemas.user_schemas import UserPayload


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)


class GoogleLoginRequest(CamelModel):
    token: str = Field(..., min_length=1, description="Google ID token from the client sign-in flow")


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserPayload


class LogoutResponse(CamelModel):
    message: str


class AuthTokenPayload(CamelModel):
    sub: str
    username: str
    role: str = "User"
    exp: Optional[datetime] = None
