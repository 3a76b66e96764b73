"""User model"""

from enum import Enum

from sqlalchemy import BigInteger, Column, Integer, String
from sqlalchemy import Enum as SAEnum
from .base import Base, TimestampMixin


class Role(str, Enum):
    """User roles"""

    ADMIN = "admin"
    USER = "user"


class User(Base, TimestampMixin):
    """Local mirror of an identity provider account"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(255), unique=True, index=True, nullable=False)  # Provider "sub"
    email = Column(String(255), nullable=False, default="")
    display_name = Column(String(255), nullable=False)
    avatar_url = Column(String(2048))
    role = Column(
        SAEnum(Role, name="user_role", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.USER,
    )
    external_updated_at = Column(BigInteger)  # Provider profile updated_at (ms)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def __repr__(self):
        return f"<User(id={self.id}, external_id='{self.external_id}', role='{self.role}')>"
