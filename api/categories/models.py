"""
Models for the Categories API
"""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field
from pydantic import ConfigDict

from core.records import RecordSchema, SchemaField
from core.search import SearchSpec


class Category(SQLModel, table=True):
    """
    Represents a book category (genre, subject)
    """
    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, unique=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True)


CATEGORY_SCHEMA = RecordSchema("Category", [
    SchemaField("name", str, required=True),
])

CATEGORY_SEARCH = SearchSpec(fields=(Category.name,))


class CategoryPublic(SQLModel):
    """
    Represents a public view of a category
    """
    id: int
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
