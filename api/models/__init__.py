"""
API data models. Single import surface for DB entities.

DB entities (api.models.models):
- User (account, profile and the stored progress document)
"""

from api.models.models import User

__all__ = ["User"]
