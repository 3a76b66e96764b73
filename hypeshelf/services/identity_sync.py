"""Reconciles identity provider lifecycle events into local user records"""

from enum import Enum

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import MalformedEventError
from ..repositories.users import UserRepository
from ..schemas.identity import (
    USER_CREATED,
    USER_DELETED,
    USER_UPDATED,
    DeletedProviderUser,
    IdentityEvent,
    ProviderUser,
    UserProfile,
)
from ..utils.logging import get_logger
from ..utils.metrics import record_identity_event

logger = get_logger(__name__)


class SyncOutcome(str, Enum):
    """What an event did to the identity store"""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    STALE = "stale"
    NOOP = "noop"
    IGNORED = "ignored"


class IdentitySyncService:
    """
    Applies user.created / user.updated / user.deleted events

    This is the only code path that creates users or changes their profile
    fields. It never changes a user's role. Replayed and out-of-order
    events are harmless: upserts are keyed on external_id and older profile
    snapshots are skipped.
    """

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)

    def handle_event(self, event: IdentityEvent) -> SyncOutcome:
        """
        Dispatch a verified event

        The payload is fully parsed before anything is written, so a bad
        payload never leaves a partial change behind.

        Raises:
            MalformedEventError: If the event data does not match its type
        """
        try:
            if event.type in (USER_CREATED, USER_UPDATED):
                profile = ProviderUser.model_validate(event.data).to_profile()
                outcome = self.upsert(profile)
            elif event.type == USER_DELETED:
                deleted = DeletedProviderUser.model_validate(event.data)
                outcome = self.delete(deleted.id)
            else:
                logger.info("Unhandled identity event type", event_type=event.type)
                outcome = SyncOutcome.IGNORED
        except PydanticValidationError as e:
            record_identity_event(event.type, "malformed")
            logger.warning("Malformed identity event", event_type=event.type, errors=e.errors())
            raise MalformedEventError(f"Malformed {event.type} payload")

        record_identity_event(event.type, outcome.value)
        return outcome

    def upsert(self, profile: UserProfile) -> SyncOutcome:
        """Create the user or refresh its profile fields"""

        try:
            outcome = self._upsert(profile)
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same external_id
            self.db.rollback()
            logger.info("Concurrent user insert, retrying as update", external_id=profile.external_id)
            try:
                outcome = self._upsert(profile)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
        except Exception:
            self.db.rollback()
            raise

        logger.info("Identity synced", external_id=profile.external_id, outcome=outcome.value)
        return outcome

    def _upsert(self, profile: UserProfile) -> SyncOutcome:
        user = self.users.get_by_external_id(profile.external_id, for_update=True)

        if user is None:
            self.users.create(
                external_id=profile.external_id,
                email=profile.email,
                display_name=profile.display_name,
                avatar_url=profile.avatar_url,
                external_updated_at=profile.updated_at,
            )
            return SyncOutcome.CREATED

        if (
            profile.updated_at is not None
            and user.external_updated_at is not None
            and profile.updated_at < user.external_updated_at
        ):
            return SyncOutcome.STALE

        self.users.update_profile(
            user,
            email=profile.email,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            external_updated_at=profile.updated_at,
        )
        return SyncOutcome.UPDATED

    def delete(self, external_id: str) -> SyncOutcome:
        """Delete the user if present; recommendations are left in place"""

        try:
            user = self.users.get_by_external_id(external_id, for_update=True)
            if user is None:
                outcome = SyncOutcome.NOOP
            else:
                self.users.delete(user)
                outcome = SyncOutcome.DELETED
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Identity removed", external_id=external_id, outcome=outcome.value)
        return outcome
