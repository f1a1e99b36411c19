"""
Models for the Authors API
"""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field
from pydantic import ConfigDict

from core.records import RecordSchema, SchemaField
from core.search import SearchSpec
from api.images.models import Image, ImageableType, ImagePublic, image_relationship


class Author(SQLModel, table=True):
    """
    Represents a book author
    """
    __imageable_type__ = ImageableType.AUTHOR

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, index=True)
    biography: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    image: Image | None = image_relationship("Author", ImageableType.AUTHOR)

    model_config = ConfigDict(from_attributes=True)


AUTHOR_SCHEMA = RecordSchema("Author", [
    SchemaField("name", str, required=True),
    SchemaField("biography", str),
])

AUTHOR_SEARCH = SearchSpec(fields=(Author.name,))


class AuthorSummary(SQLModel):
    """
    Author as embedded in other records
    """
    id: int
    name: str


class AuthorPublic(SQLModel):
    """
    Represents a public view of an author
    """
    id: int
    name: str
    biography: str | None = None
    created_at: datetime
    image: ImagePublic | None = None

    model_config = ConfigDict(from_attributes=True)
