"""Recommendation API endpoints"""

from fastapi import APIRouter, Depends, Query, Request, Response, status
from typing import List, Optional

from ..config import settings
from ..models import Genre
from ..schemas.recommendation import RecommendationCreated, RecommendationSubmission, RecommendationView
from ..services.recommendations import RecommendationService
from ..utils.auth import VerifiedIdentity
from ..utils.dependencies import get_identity, get_recommendation_service
from ..utils.rate_limit import get_user_rate_limit_key, limiter

router = APIRouter()


@router.get("/", response_model=List[RecommendationView])
def list_recommendations(
    genre: Optional[Genre] = Query(None, description="Only recommendations of this genre"),
    identity: Optional[VerifiedIdentity] = Depends(get_identity),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """
    Public feed

    Newest first, at most one page. Signed-in callers also get their role
    and an is_owner flag on each row.
    """
    return service.list(identity, genre=genre)


@router.get("/mine", response_model=List[RecommendationView])
def list_my_recommendations(
    genre: Optional[Genre] = Query(None, description="Only recommendations of this genre"),
    identity: Optional[VerifiedIdentity] = Depends(get_identity),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """
    The caller's recommendations

    Admins see every recommendation.
    """
    return service.list_mine(identity, genre=genre)


@router.post("/", response_model=RecommendationCreated, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_ADD_RECOMMENDATION, key_func=get_user_rate_limit_key)
def add_recommendation(
    request: Request,
    recommendation: RecommendationSubmission,
    identity: Optional[VerifiedIdentity] = Depends(get_identity),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """
    Submit a recommendation owned by the caller

    The caller is checked before the fields, so anonymous requests get 401
    whatever the body holds. Field errors come back as 422 with an
    errors list of {field, message}.
    """

    recommendation_id = service.add(
        identity,
        title=recommendation.title,
        genre=recommendation.genre,
        blurb=recommendation.blurb,
        link=recommendation.link,
    )
    return RecommendationCreated(id=recommendation_id)


@router.delete("/{recommendation_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_recommendation(
    recommendation_id: int,
    identity: Optional[VerifiedIdentity] = Depends(get_identity),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """Delete a recommendation (owner or admin)"""

    service.remove(identity, recommendation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{recommendation_id}/staff-pick", status_code=status.HTTP_204_NO_CONTENT)
def mark_as_staff_pick(
    recommendation_id: int,
    identity: Optional[VerifiedIdentity] = Depends(get_identity),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """Mark a recommendation as a staff pick (admin only)"""

    service.mark_as_staff_pick(identity, recommendation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
