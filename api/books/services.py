"""
Services for the Books API
"""
from sqlmodel import Session
from starlette.datastructures import UploadFile

from core.listing import DEFAULT_PAGE_SIZE, list_page
from core.models import Page
from core.records import RecordStore
from core.transfer import ImportResult, export_records, import_records
from core.utils import Payload
from api.books.models import (
    Book,
    BookPublic,
    BookStored,
    BOOK_RELATIONS,
    BOOK_SCHEMA,
    BOOK_SEARCH,
)
from api.images.models import ImageOwner
from api.images.services import attach_upload, detach, validate_image_filename

books = RecordStore(Book, BOOK_SCHEMA, relations=BOOK_RELATIONS, label="Book")


def get_books(
    *,
    session: Session,
    search_query: str | None,
    page: int,
    per_page: int = DEFAULT_PAGE_SIZE,
    blobs=None,
) -> Page[BookPublic]:
    """
    Returns a page of books matching the search term, newest first.
    The term is looked for in title, ISBN, author name and category name.
    """
    return list_page(
        session=session,
        store=books,
        public_model=BookPublic,
        search_spec=BOOK_SEARCH,
        search_query=search_query,
        page=page,
        per_page=per_page,
        blobs=blobs,
    )


def get_book(session: Session, book_id: int, blobs=None) -> BookPublic:
    return BookPublic.model_validate(
        books.get(session, book_id), context={"blobs": blobs}
    )


def create_book(session: Session, blobs, payload: Payload) -> BookStored:
    """
    Store a book from the allow-listed fields of payload,
    plus its image when one was uploaded.
    """
    image = payload.file("image")
    if image is not None:
        validate_image_filename(image.filename)

    book = books.create(session, payload.fields)
    if image is not None:
        attach_upload(session, blobs, book, image)

    book = books.get(session, book.id)
    return BookStored(
        message=f"{book.title} was stored in library",
        data=BookPublic.model_validate(book, context={"blobs": blobs}),
    )


def update_book(session: Session, blobs, book_id: int, payload: Payload) -> BookPublic:
    """
    Update the fields present in payload and replace the image
    when a new one was uploaded.
    """
    image = payload.file("image")
    if image is not None:
        validate_image_filename(image.filename)

    book = books.update(session, book_id, payload.fields)
    if image is not None:
        attach_upload(session, blobs, book, image)
    return get_book(session, book_id, blobs)


def delete_book(session: Session, blobs, book_id: int) -> None:
    """
    Delete a book together with its image.
    """
    books.delete(session, book_id)
    detach(session, blobs, ImageOwner(kind=Book.__imageable_type__, id=book_id))


def set_book_image(session: Session, blobs, book_id: int, image: UploadFile) -> BookPublic:
    book = books.get(session, book_id)
    attach_upload(session, blobs, book, image)
    return get_book(session, book_id, blobs)


def remove_book_image(session: Session, blobs, book_id: int) -> bool:
    book = books.get(session, book_id)
    return detach(session, blobs, ImageOwner.of(book))


def import_books(session: Session, upload: UploadFile) -> ImportResult:
    """
    Store books from a spreadsheet or CSV file.
    """
    return import_records(session, books, upload.file.read(), upload.filename)


def export_books(session: Session, file_format: str = "csv") -> bytes:
    """
    Every book as a CSV or XLSX file.
    """
    return export_records(session, books, file_format)
