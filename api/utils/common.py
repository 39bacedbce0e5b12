"""
Common utility functions used across multiple routes.
"""

from api.models.models import User
from api.schemas.user_schemas import UserPayload


def user_payload(user: User) -> UserPayload:
    """Public profile fields; missing values fall back to client defaults."""
    return UserPayload(
        username=user.username,
        email=user.email,
        role=user.role or "User",
        role_color=user.role_color or "#808080",
        profile_image=user.profile_image or "",
        selected_plan=user.selected_plan or "",
    )


def display_name(first_name: str, last_name: str) -> str:
    """Username built from the registration form's first and last names."""
    return f"{first_name.strip()} {last_name.strip()}".strip()
