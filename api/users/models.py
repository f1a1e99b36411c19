"""
Models for the Users API
"""

from datetime import datetime, timezone
from enum import Enum
from sqlmodel import SQLModel, Field
from pydantic import ConfigDict, EmailStr

from core.records import RecordSchema, SchemaField
from core.search import SearchSpec
from api.images.models import Image, ImageableType, ImagePublic, image_relationship


class UserRole(str, Enum):
    """Roles a library user can hold"""
    ADMIN = "admin"
    MEMBER = "member"


class User(SQLModel, table=True):
    """Library user: staff or borrowing member"""

    __tablename__ = "users"
    __imageable_type__ = ImageableType.USER

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, index=True)
    email: str = Field(unique=True, index=True, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    role: UserRole = Field(default=UserRole.MEMBER, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    image: Image | None = image_relationship("User", ImageableType.USER)

    model_config = ConfigDict(from_attributes=True)


USER_SCHEMA = RecordSchema("User", [
    SchemaField("name", str, required=True),
    SchemaField("email", EmailStr, required=True),
    SchemaField("phone", str),
    SchemaField("role", UserRole),
])

USER_SEARCH = SearchSpec(fields=(User.name, User.email))


class UserSummary(SQLModel):
    """User as embedded in borrowings and returnings"""
    id: int
    name: str
    email: str


class UserPublic(SQLModel):
    """Public view of a user"""
    id: int
    name: str
    email: str
    phone: str | None = None
    role: UserRole
    created_at: datetime
    image: ImagePublic | None = None

    model_config = ConfigDict(from_attributes=True)
