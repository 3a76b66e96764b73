"""Recommendation store"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import Recommendation, Genre


class RecommendationRepository:
    """Repository for recommendation records"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, recommendation_id: int, for_update: bool = False) -> Optional[Recommendation]:
        query = self.db.query(Recommendation).filter(Recommendation.id == recommendation_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def list(
        self,
        limit: int,
        genre: Optional[Genre] = None,
        owner_id: Optional[int] = None,
    ) -> List[Recommendation]:
        """
        Newest-first page of recommendations

        Args:
            limit: Maximum number of rows
            genre: Only this genre when given
            owner_id: Only this owner's rows when given

        Returns:
            Recommendations ordered by creation time, then id, descending
        """
        query = self.db.query(Recommendation)

        if genre is not None:
            query = query.filter(Recommendation.genre == genre)
        if owner_id is not None:
            query = query.filter(Recommendation.owner_id == owner_id)

        return (
            query
            .order_by(Recommendation.created_at.desc(), Recommendation.id.desc())
            .limit(limit)
            .all()
        )

    def create(
        self,
        owner_id: int,
        title: str,
        genre: Genre,
        blurb: str,
        link: Optional[str] = None,
    ) -> Recommendation:
        recommendation = Recommendation(
            owner_id=owner_id,
            title=title,
            genre=genre,
            blurb=blurb,
            link=link,
            is_staff_pick=False,
        )
        self.db.add(recommendation)
        self.db.flush()
        return recommendation

    def mark_staff_pick(self, recommendation: Recommendation) -> Recommendation:
        recommendation.is_staff_pick = True
        self.db.flush()
        return recommendation

    def delete(self, recommendation: Recommendation) -> None:
        self.db.delete(recommendation)
        self.db.flush()
