"""Recommendation query and mutation service"""

from typing import List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from ..config import settings
from ..exceptions import NotFoundError, ValidationFailedError
from ..models import Genre, User
from ..repositories.recommendations import RecommendationRepository
from ..repositories.users import UserRepository
from ..schemas.recommendation import RecommendationCreate, RecommendationView
from ..utils.auth import VerifiedIdentity
from ..utils.logging import get_logger
from ..utils.metrics import (
    record_recommendation_created,
    record_recommendation_removed,
    record_staff_pick,
)
from .authorization import Action, AuthorizationPolicy
from .enrichment import enrich

logger = get_logger(__name__)


class RecommendationService:
    """
    Public operations on the recommendation feed

    Every operation resolves the caller, consults the authorization policy
    and touches the store inside a single transaction: mutations commit once
    at the end and roll back on any error.
    """

    def __init__(
        self,
        db: Session,
        policy: Optional[AuthorizationPolicy] = None,
        page_size: Optional[int] = None,
    ):
        self.db = db
        self.policy = policy or AuthorizationPolicy()
        self.page_size = page_size or settings.FEED_PAGE_SIZE
        self.users = UserRepository(db)
        self.recommendations = RecommendationRepository(db)

    def _resolve_caller(self, identity: Optional[VerifiedIdentity], action: Action) -> Optional[User]:
        """
        Map a verified identity to the local user record

        An identity with no user record is anonymous for public reads and
        NotFound for everything else.
        """
        if identity is None:
            return None

        user = self.users.get_by_external_id(identity.external_id)
        if user is None and self.policy.requires_caller(action):
            logger.warning("Caller has no user record", external_id=identity.external_id)
            raise NotFoundError("User not found")

        return user

    def _read(
        self,
        action: Action,
        identity: Optional[VerifiedIdentity],
        genre: Optional[Genre],
    ) -> List[RecommendationView]:
        caller = self._resolve_caller(identity, action)
        decision = self.policy.decide(action, caller).enforce()

        page = self.recommendations.list(
            limit=self.page_size,
            genre=genre,
            owner_id=decision.scope.owner_id,
        )
        return enrich(page, caller, self.users)

    def list(
        self,
        identity: Optional[VerifiedIdentity] = None,
        genre: Optional[Genre] = None,
    ) -> List[RecommendationView]:
        """Public feed, newest first, optionally restricted to one genre"""
        return self._read(Action.LIST, identity, genre)

    def list_mine(
        self,
        identity: Optional[VerifiedIdentity],
        genre: Optional[Genre] = None,
    ) -> List[RecommendationView]:
        """Caller's own recommendations; admins see everyone's"""
        return self._read(Action.LIST_MINE, identity, genre)

    def add(
        self,
        identity: Optional[VerifiedIdentity],
        title: str,
        genre: Union[Genre, str],
        blurb: str,
        link: Optional[str] = None,
    ) -> int:
        """
        Create a recommendation owned by the caller

        Returns:
            Id of the new recommendation

        Raises:
            UnauthenticatedError: No identity
            NotFoundError: Identity has no user record
            ValidationFailedError: Field constraints violated
        """
        caller = self._resolve_caller(identity, Action.ADD)
        self.policy.decide(Action.ADD, caller).enforce()

        try:
            data = RecommendationCreate(title=title, genre=genre, blurb=blurb, link=link)
        except PydanticValidationError as e:
            errors = [
                {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
                for error in e.errors()
            ]
            raise ValidationFailedError(errors)

        try:
            recommendation = self.recommendations.create(
                owner_id=caller.id,
                title=data.title,
                genre=data.genre,
                blurb=data.blurb,
                link=data.link,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        record_recommendation_created(data.genre.value)
        logger.info(
            "Recommendation added",
            recommendation_id=recommendation.id,
            owner_id=caller.id,
            genre=data.genre.value,
        )

        return recommendation.id

    def remove(self, identity: Optional[VerifiedIdentity], recommendation_id: int) -> None:
        """Delete a recommendation; owner or admin only"""

        try:
            caller = self._resolve_caller(identity, Action.REMOVE)
            if caller is None:
                self.policy.decide(Action.REMOVE, caller).enforce()

            recommendation = self.recommendations.get(recommendation_id, for_update=True)
            if recommendation is None:
                raise NotFoundError("Recommendation not found")

            self.policy.decide(Action.REMOVE, caller, recommendation).enforce()

            self.recommendations.delete(recommendation)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        record_recommendation_removed(caller.role.value)
        logger.info(
            "Recommendation removed",
            recommendation_id=recommendation_id,
            removed_by=caller.id,
        )

    def mark_as_staff_pick(self, identity: Optional[VerifiedIdentity], recommendation_id: int) -> None:
        """Flag a recommendation as a staff pick; admin only, idempotent"""

        try:
            caller = self._resolve_caller(identity, Action.MARK_STAFF_PICK)
            # Role is checked before the lookup so non-admins cannot probe ids
            self.policy.decide(Action.MARK_STAFF_PICK, caller).enforce()

            recommendation = self.recommendations.get(recommendation_id, for_update=True)
            if recommendation is None:
                raise NotFoundError("Recommendation not found")

            self.recommendations.mark_staff_pick(recommendation)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        record_staff_pick()
        logger.info(
            "Recommendation marked as staff pick",
            recommendation_id=recommendation_id,
            marked_by=caller.id,
        )
