"""Recommendation model"""

from enum import Enum

from sqlalchemy import Boolean, Column, Index, Integer, String
from sqlalchemy import Enum as SAEnum
from .base import Base, TimestampMixin


class Genre(str, Enum):
    """Closed set of genres a recommendation can belong to"""

    HORROR = "horror"
    ACTION = "action"
    COMEDY = "comedy"
    THRILLER = "thriller"
    SCI_FI = "sci-fi"
    DRAMA = "drama"
    ROMANCE = "romance"
    DOCUMENTARY = "documentary"


class Recommendation(Base, TimestampMixin):
    """A media recommendation shared on the feed"""

    __tablename__ = "recommendations"

    id = Column(Integer, primary_key=True, index=True)
    # Plain integer, not a foreign key: deleting a user leaves the reference orphaned
    owner_id = Column(Integer, nullable=False)
    title = Column(String(100), nullable=False)
    genre = Column(
        SAEnum(Genre, name="genre", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    link = Column(String(2048))
    blurb = Column(String(280), nullable=False)
    is_staff_pick = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index('ix_recommendations_owner_id', 'owner_id'),
        Index('ix_recommendations_genre', 'genre'),
        Index('ix_recommendations_is_staff_pick', 'is_staff_pick'),
    )

    def __repr__(self):
        return f"<Recommendation(id={self.id}, title='{self.title}', genre='{self.genre}')>"
