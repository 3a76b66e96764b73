"""
Authorization policy for recommendation operations

Pure decision logic: given the resolved caller (or None for anonymous),
the requested action and, where relevant, the target record, return a
Decision. The policy never reads or writes the database.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..exceptions import ForbiddenError, UnauthenticatedError
from ..models import Recommendation, User
from ..utils.logging import get_logger
from ..utils.metrics import record_denial

logger = get_logger(__name__)


class Action(str, Enum):
    """Operations guarded by the policy"""

    LIST = "list"
    LIST_MINE = "list_mine"
    ADD = "add"
    REMOVE = "remove"
    MARK_STAFF_PICK = "mark_staff_pick"


class DenialReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Scope:
    """Which rows a read may return; owner_id None means every owner"""

    owner_id: Optional[int] = None


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy check"""

    action: Action
    allowed: bool
    reason: Optional[DenialReason] = None
    scope: Scope = Scope()

    @classmethod
    def allow(cls, action: Action, scope: Scope = Scope()) -> "Decision":
        return cls(action=action, allowed=True, scope=scope)

    @classmethod
    def deny(cls, action: Action, reason: DenialReason) -> "Decision":
        return cls(action=action, allowed=False, reason=reason)

    def enforce(self) -> "Decision":
        """Raise the matching domain error if the decision is a denial"""

        if self.allowed:
            return self

        record_denial(self.action.value, self.reason.value)
        logger.info("Authorization denied", action=self.action.value, reason=self.reason.value)

        if self.reason == DenialReason.UNAUTHENTICATED:
            raise UnauthenticatedError()
        raise ForbiddenError()


class AuthorizationPolicy:
    """Role and ownership rules for the recommendation service"""

    AUTHENTICATED_ACTIONS = frozenset({
        Action.LIST_MINE,
        Action.ADD,
        Action.REMOVE,
        Action.MARK_STAFF_PICK,
    })

    def decide(
        self,
        action: Action,
        caller: Optional[User],
        resource: Optional[Recommendation] = None,
    ) -> Decision:
        """
        Decide whether caller may perform action

        Args:
            action: Requested operation
            caller: Resolved user, or None for an anonymous caller
            resource: Target recommendation for remove

        Returns:
            Decision; reads carry the scope they must be restricted to
        """
        if action == Action.LIST:
            return Decision.allow(action)

        if caller is None:
            return Decision.deny(action, DenialReason.UNAUTHENTICATED)

        if action == Action.LIST_MINE:
            if caller.is_admin:
                return Decision.allow(action)
            return Decision.allow(action, Scope(owner_id=caller.id))

        if action == Action.ADD:
            return Decision.allow(action)

        if action == Action.REMOVE:
            if resource is None:
                raise ValueError("remove requires the target recommendation")
            if caller.is_admin or resource.owner_id == caller.id:
                return Decision.allow(action)
            return Decision.deny(action, DenialReason.FORBIDDEN)

        if action == Action.MARK_STAFF_PICK:
            if caller.is_admin:
                return Decision.allow(action)
            return Decision.deny(action, DenialReason.FORBIDDEN)

        raise ValueError(f"Unknown action: {action}")

    def requires_caller(self, action: Action) -> bool:
        return action in self.AUTHENTICATED_ACTIONS
