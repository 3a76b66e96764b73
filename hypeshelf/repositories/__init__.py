"""Data access for users and recommendations"""

from .users import UserRepository
from .recommendations import RecommendationRepository

__all__ = [
    "UserRepository",
    "RecommendationRepository",
]
