"""Database models"""

from .base import Base
from .user import User, Role
from .recommendation import Recommendation, Genre

__all__ = [
    "Base",
    "User",
    "Role",
    "Recommendation",
    "Genre",
]
