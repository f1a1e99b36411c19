"""
Models for the Books API
"""

from datetime import date, datetime, timezone
from sqlmodel import SQLModel, Field, Relationship
from pydantic import ConfigDict

from core.records import RecordSchema, SchemaField
from core.search import SearchSpec
from core.transfer import ImportResult
from api.authors.models import Author, AuthorSummary
from api.categories.models import Category, CategoryPublic
from api.images.models import Image, ImageableType, ImagePublic, image_relationship
from api.shelves.models import Shelf, ShelfPublic


class Book(SQLModel, table=True):
    """
    Represents a book held by the library
    """
    __imageable_type__ = ImageableType.BOOK

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(max_length=255, index=True)
    isbn: str = Field(max_length=32, index=True)
    publisher: str | None = Field(default=None, max_length=255)
    date_published: date | None = Field(default=None)
    author_id: int = Field(foreign_key="author.id", index=True)
    category_id: int = Field(foreign_key="category.id", index=True)
    shelf_id: int | None = Field(default=None, foreign_key="shelf.id", index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)

    author: Author | None = Relationship()
    category: Category | None = Relationship()
    shelf: Shelf | None = Relationship()
    image: Image | None = image_relationship("Book", ImageableType.BOOK)

    model_config = ConfigDict(from_attributes=True)


# Fields a client may set, in export column order
BOOK_SCHEMA = RecordSchema("Book", [
    SchemaField("title", str, required=True),
    SchemaField("isbn", str, required=True, aliases=("ISBN",)),
    SchemaField("publisher", str),
    SchemaField("date_published", date),
    SchemaField("author_id", int, required=True, references=Author),
    SchemaField("category_id", int, required=True, references=Category),
    SchemaField("shelf_id", int, references=Shelf),
])

BOOK_SEARCH = SearchSpec(
    fields=(Book.title, Book.isbn),
    related=(
        (Book.author, Author.name),
        (Book.category, Category.name),
    ),
)

BOOK_RELATIONS = ("author", "category", "shelf", "image")


class BookSummary(SQLModel):
    """
    Book as embedded in borrowings and returnings
    """
    id: int
    title: str
    isbn: str


class BookPublic(SQLModel):
    """
    Represents a public view of a book with its relations
    """
    id: int
    title: str
    isbn: str
    publisher: str | None = None
    date_published: date | None = None
    author_id: int
    category_id: int
    shelf_id: int | None = None
    created_at: datetime
    author: AuthorSummary | None = None
    category: CategoryPublic | None = None
    shelf: ShelfPublic | None = None
    image: ImagePublic | None = None

    model_config = ConfigDict(from_attributes=True)


class BookStored(SQLModel):
    """
    Confirmation returned after a book is created
    """
    message: str
    data: BookPublic


class BooksImported(SQLModel):
    """
    Outcome of a book import
    """
    message: str
    result: ImportResult
