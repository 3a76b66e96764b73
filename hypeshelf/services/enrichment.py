"""View enrichment for recommendation lists"""

from typing import List, Optional, Sequence

from ..models import Recommendation, User
from ..repositories.users import UserRepository
from ..schemas.recommendation import RecommendationView

UNKNOWN_OWNER = "Unknown"


def enrich(
    recommendations: Sequence[Recommendation],
    caller: Optional[User],
    users: UserRepository,
) -> List[RecommendationView]:
    """
    Attach owner display fields and caller context to a page of results

    Owners are fetched once per distinct owner_id in a single batched
    query, so the lookup cost does not grow with the page size. Caller
    context (role, is_owner) is only set when the caller resolved.
    """
    owners = users.get_many(rec.owner_id for rec in recommendations)

    views = []
    for rec in recommendations:
        owner = owners.get(rec.owner_id)
        views.append(
            RecommendationView(
                id=rec.id,
                owner_id=rec.owner_id,
                title=rec.title,
                genre=rec.genre,
                link=rec.link,
                blurb=rec.blurb,
                is_staff_pick=rec.is_staff_pick,
                created_at=rec.created_at,
                owner_display_name=owner.display_name if owner else UNKNOWN_OWNER,
                owner_avatar_url=owner.avatar_url if owner else None,
                caller_role=caller.role if caller else None,
                is_owner=(rec.owner_id == caller.id) if caller else None,
            )
        )

    return views
