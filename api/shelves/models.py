"""
Models for the Shelves API
"""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field
from pydantic import ConfigDict

from core.records import RecordSchema, SchemaField
from core.search import SearchSpec


class Shelf(SQLModel, table=True):
    """
    Represents a physical shelf books are placed on
    """
    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, unique=True)
    location: str | None = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True)


SHELF_SCHEMA = RecordSchema("Shelf", [
    SchemaField("name", str, required=True),
    SchemaField("location", str),
])

SHELF_SEARCH = SearchSpec(fields=(Shelf.name, Shelf.location))


class ShelfPublic(SQLModel):
    """
    Represents a public view of a shelf
    """
    id: int
    name: str
    location: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
