"""
Models for the Borrowings API
"""

from datetime import date, datetime, timezone
from sqlmodel import SQLModel, Field, Relationship
from pydantic import ConfigDict

from core.records import RecordSchema, SchemaField
from core.search import SearchSpec
from api.books.models import Book, BookSummary
from api.users.models import User, UserSummary


class Borrowing(SQLModel, table=True):
    """
    A book lent to a member
    """
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    book_id: int = Field(foreign_key="book.id", index=True)
    date_borrowed: date
    due_date: date
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    user: User | None = Relationship()
    book: Book | None = Relationship()

    model_config = ConfigDict(from_attributes=True)


BORROWING_SCHEMA = RecordSchema("Borrowing", [
    SchemaField("user_id", int, required=True, references=User),
    SchemaField("book_id", int, required=True, references=Book),
    SchemaField("date_borrowed", date, required=True),
    SchemaField("due_date", date, required=True),
])

BORROWING_SEARCH = SearchSpec(
    related=(
        (Borrowing.user, User.name),
        (Borrowing.book, Book.title),
    ),
)


class BorrowingSummary(SQLModel):
    """
    Borrowing as embedded in returnings
    """
    id: int
    date_borrowed: date
    due_date: date


class BorrowingPublic(SQLModel):
    """
    Public view of a borrowing
    """
    id: int
    user_id: int
    book_id: int
    date_borrowed: date
    due_date: date
    created_at: datetime
    user: UserSummary | None = None
    book: BookSummary | None = None

    model_config = ConfigDict(from_attributes=True)
