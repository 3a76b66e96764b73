"""Pydantic schemas for request/response validation"""

from .user import UserResponse
from .recommendation import RecommendationCreate, RecommendationCreated, RecommendationSubmission, RecommendationView
from .identity import IdentityEvent, ProviderUser, DeletedProviderUser, UserProfile

__all__ = [
    "UserResponse",
    "RecommendationCreate",
    "RecommendationCreated",
    "RecommendationSubmission",
    "RecommendationView",
    "IdentityEvent",
    "ProviderUser",
    "DeletedProviderUser",
    "UserProfile",
]
