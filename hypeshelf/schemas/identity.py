"""Identity provider webhook schemas"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

USER_CREATED = "user.created"
USER_UPDATED = "user.updated"
USER_DELETED = "user.deleted"


class IdentityEvent(BaseModel):
    """Envelope of a user lifecycle webhook"""

    model_config = ConfigDict(extra="ignore")

    type: str = Field(..., min_length=1)
    data: Dict[str, Any]


class ProviderEmailAddress(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    email_address: str


class ProviderUser(BaseModel):
    """User object carried by created/updated events"""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    email_addresses: List[ProviderEmailAddress] = []
    primary_email_address_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    image_url: Optional[str] = None
    updated_at: Optional[int] = None

    def primary_email(self) -> str:
        for address in self.email_addresses:
            if address.id and address.id == self.primary_email_address_id:
                return address.email_address
        if self.email_addresses:
            return self.email_addresses[0].email_address
        return ""

    def display_name(self) -> str:
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or self.username or "User"

    def to_profile(self) -> "UserProfile":
        return UserProfile(
            external_id=self.id,
            email=self.primary_email(),
            display_name=self.display_name(),
            avatar_url=self.image_url or None,
            updated_at=self.updated_at,
        )


class DeletedProviderUser(BaseModel):
    """Stub object carried by deleted events"""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)


class UserProfile(BaseModel):
    """Provider profile fields mirrored into the local user record"""

    external_id: str
    email: str
    display_name: str
    avatar_url: Optional[str] = None
    updated_at: Optional[int] = None
