"""
Image Models - single image attachment per owning record.
"""

from datetime import datetime, timezone
from enum import Enum
from sqlmodel import SQLModel, Field, Relationship, UniqueConstraint
from pydantic import ConfigDict, ValidationInfo, model_validator

from core.deps import get_blob_store


class ImageableType(str, Enum):
    """Entity types that can own an image."""
    BOOK = "BOOK"
    AUTHOR = "AUTHOR"
    USER = "USER"


class ImageOwner(SQLModel):
    """
    The record an image belongs to.

    Owning table models declare __imageable_type__ so the kind is
    derived from the record itself, never passed around as a bare string.
    """
    kind: ImageableType
    id: int

    model_config = ConfigDict(frozen=True)

    @classmethod
    def of(cls, record) -> "ImageOwner":
        return cls(kind=type(record).__imageable_type__, id=record.id)


# ============================================================================
# Database Tables
# ============================================================================


class Image(SQLModel, table=True):
    """
    Stored image file for a book, author or user.
    The unique constraint keeps at most one row per owner.
    """
    __tablename__ = "image"

    id: int | None = Field(default=None, primary_key=True)
    filename: str = Field(max_length=255, nullable=False)
    imageable_type: ImageableType = Field(nullable=False)
    imageable_id: int = Field(nullable=False, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("imageable_type", "imageable_id", name="uq_image_owner"),
    )

    model_config = ConfigDict(from_attributes=True)

    @property
    def owner(self) -> ImageOwner:
        return ImageOwner(kind=self.imageable_type, id=self.imageable_id)


def image_relationship(owner_class: str, kind: ImageableType):
    """
    Read-only one-to-one relationship from an owning table to its image.
    """
    return Relationship(
        sa_relationship_kwargs={
            "primaryjoin": (
                f"and_({owner_class}.id == foreign(Image.imageable_id), "
                f"Image.imageable_type == '{kind.value}')"
            ),
            "uselist": False,
            "viewonly": True,
        }
    )


# ============================================================================
# Request/Response Models (Pydantic)
# ============================================================================


class ImagePublic(SQLModel):
    """
    Public representation of an image.

    The url comes from the blob store passed in the validation context
    (context={"blobs": store}), falling back to the configured store.
    """
    filename: str
    url: str | None = None

    @model_validator(mode="after")
    def resolve_url(self, info: ValidationInfo) -> "ImagePublic":
        if self.url is None:
            blobs = (info.context or {}).get("blobs") or get_blob_store()
            self.url = blobs.url(self.filename)
        return self
