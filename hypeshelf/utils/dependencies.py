"""Authentication dependencies for FastAPI"""

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from .auth import VerifiedIdentity, verify_identity
from .database import get_db
from ..services.identity_sync import IdentitySyncService
from ..services.recommendations import RecommendationService

# Anonymous callers are allowed through; operations decide what they need
security = HTTPBearer(auto_error=False)


async def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[VerifiedIdentity]:
    """
    Get the caller's verified identity from the bearer token

    Returns None when no token is sent. A token that is present but fails
    verification raises UnauthenticatedError rather than downgrading the
    caller to anonymous.
    """
    if credentials is None:
        return None

    return verify_identity(credentials.credentials)


def get_recommendation_service(db: Session = Depends(get_db)) -> RecommendationService:
    """Request-scoped recommendation service"""
    return RecommendationService(db)


def get_identity_sync_service(db: Session = Depends(get_db)) -> IdentitySyncService:
    """Request-scoped identity sync service"""
    return IdentitySyncService(db)


async def get_raw_body(request: Request) -> bytes:
    """Request body exactly as received, for signature checks"""
    return await request.body()
