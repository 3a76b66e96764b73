"""Identity store"""

from typing import Dict, Iterable, Optional

from sqlalchemy.orm import Session

from ..models import User, Role


class UserRepository:
    """Repository for user records keyed by provider identity"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_external_id(self, external_id: str, for_update: bool = False) -> Optional[User]:
        query = self.db.query(User).filter(User.external_id == external_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get_many(self, user_ids: Iterable[int]) -> Dict[int, User]:
        """
        Fetch a set of users in one query

        Returns:
            Mapping of user id to user; ids with no record are absent
        """
        ids = set(user_ids)
        if not ids:
            return {}

        users = self.db.query(User).filter(User.id.in_(ids)).all()
        return {user.id: user for user in users}

    def create(
        self,
        external_id: str,
        email: str,
        display_name: str,
        avatar_url: Optional[str] = None,
        external_updated_at: Optional[int] = None,
    ) -> User:
        user = User(
            external_id=external_id,
            email=email,
            display_name=display_name,
            avatar_url=avatar_url,
            role=Role.USER,
            external_updated_at=external_updated_at,
        )
        self.db.add(user)
        self.db.flush()
        return user

    def update_profile(
        self,
        user: User,
        email: str,
        display_name: str,
        avatar_url: Optional[str] = None,
        external_updated_at: Optional[int] = None,
    ) -> User:
        """Overwrite profile fields; role is left alone"""

        user.email = email
        user.display_name = display_name
        user.avatar_url = avatar_url
        if external_updated_at is not None:
            user.external_updated_at = external_updated_at
        self.db.flush()
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.flush()
