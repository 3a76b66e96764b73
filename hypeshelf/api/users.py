"""User API endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from ..repositories.users import UserRepository
from ..schemas.user import UserResponse
from ..utils.auth import VerifiedIdentity
from ..utils.database import get_db
from ..utils.dependencies import get_identity

router = APIRouter()


@router.get("/me", response_model=Optional[UserResponse])
def get_current_user_info(
    identity: Optional[VerifiedIdentity] = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """
    Get current user information

    Returns null for anonymous callers and for identities that have not
    been synced from the provider yet.
    """
    if identity is None:
        return None

    return UserRepository(db).get_by_external_id(identity.external_id)
