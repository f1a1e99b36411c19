"""
Models for the Returnings API
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from sqlmodel import SQLModel, Field, Relationship
from pydantic import ConfigDict

from core.records import RecordSchema, SchemaField
from core.search import SearchSpec
from api.books.models import Book, BookSummary
from api.borrowings.models import Borrowing, BorrowingSummary
from api.users.models import User, UserSummary


class Returning(SQLModel, table=True):
    """
    A borrowed book brought back, with any late fine
    """
    __tablename__ = "returnings"

    id: int | None = Field(default=None, primary_key=True)
    borrow_id: int = Field(foreign_key="borrowing.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    book_id: int = Field(foreign_key="book.id", index=True)
    date_returned: date
    due_date: date
    fine: Decimal = Field(default=0, max_digits=10, decimal_places=2)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    borrowing: Borrowing | None = Relationship()
    user: User | None = Relationship()
    book: Book | None = Relationship()

    model_config = ConfigDict(from_attributes=True)


RETURNING_SCHEMA = RecordSchema("Returning", [
    SchemaField("borrow_id", int, required=True, references=Borrowing),
    SchemaField("user_id", int, required=True, references=User),
    SchemaField("book_id", int, required=True, references=Book),
    SchemaField("date_returned", date, required=True),
    SchemaField("due_date", date, required=True),
    SchemaField("fine", Decimal),
])

RETURNING_SEARCH = SearchSpec(
    related=(
        (Returning.user, User.name),
        (Returning.book, Book.title),
    ),
)


class ReturningPublic(SQLModel):
    """
    Public view of a returning
    """
    id: int
    borrow_id: int
    user_id: int
    book_id: int
    date_returned: date
    due_date: date
    fine: Decimal
    created_at: datetime
    borrowing: BorrowingSummary | None = None
    user: UserSummary | None = None
    book: BookSummary | None = None

    model_config = ConfigDict(from_attributes=True)
