"""Recommendation schemas"""

from pydantic import AnyHttpUrl, BaseModel, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from typing import Optional
from datetime import datetime

from ..models.recommendation import Genre
from ..models.user import Role

_url_adapter = TypeAdapter(AnyHttpUrl)


class RecommendationCreate(BaseModel):
    """Schema for submitting a recommendation"""

    title: str = Field(..., min_length=1, max_length=100)
    genre: Genre
    blurb: str = Field(..., min_length=1, max_length=280)
    link: Optional[str] = Field(None, max_length=2048)

    @field_validator("link", mode="before")
    @classmethod
    def blank_link_is_absent(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("link")
    @classmethod
    def link_must_be_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            _url_adapter.validate_python(value)
        except PydanticValidationError:
            raise ValueError("Must be a valid URL")
        # Store what the user typed, not the normalized form
        return value


class RecommendationSubmission(BaseModel):
    """Request body for add; field rules are enforced by the service"""

    title: Optional[str] = None
    genre: Optional[str] = None
    blurb: Optional[str] = None
    link: Optional[str] = None


class RecommendationCreated(BaseModel):
    """Schema for the add response"""

    id: int


class RecommendationView(BaseModel):
    """A recommendation enriched for display"""

    id: int
    owner_id: int
    title: str
    genre: Genre
    link: Optional[str] = None
    blurb: str
    is_staff_pick: bool
    created_at: datetime
    owner_display_name: str
    owner_avatar_url: Optional[str] = None
    # Presentation hints only; the service re-checks on every mutation
    caller_role: Optional[Role] = None
    is_owner: Optional[bool] = None
