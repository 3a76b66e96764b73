"""Application services"""

from .authorization import Action, AuthorizationPolicy, Decision, DenialReason, Scope
from .identity_sync import IdentitySyncService, SyncOutcome
from .recommendations import RecommendationService

__all__ = [
    "Action",
    "AuthorizationPolicy",
    "Decision",
    "DenialReason",
    "Scope",
    "IdentitySyncService",
    "SyncOutcome",
    "RecommendationService",
]
