"""
Routes/endpoints for the Books API

HTTP   URI                             Action
----   ---                             ------
GET    /api/v1/books                   Search and page through books
POST   /api/v1/books                   Add a book (optionally with an image)
POST   /api/v1/books/import            Add books from a CSV/XLS/XLSX file
GET    /api/v1/books/export            Download all books as a spreadsheet
GET    /api/v1/books/[id]              Retrieve info about a specific book
PUT    /api/v1/books/[id]              Update info about a book
DELETE /api/v1/books/[id]              Delete a book and its image
POST   /api/v1/books/[id]/image        Set or replace the image of a book
DELETE /api/v1/books/[id]/image        Remove the image of a book
"""

import io
from typing import Literal
from fastapi import APIRouter, File, Query, Response, UploadFile, status
from fastapi.responses import StreamingResponse

from core.deps import BlobStoreDep, SessionDep
from core.errors import RecordNotFound
from core.listing import DEFAULT_PAGE_SIZE
from core.models import Page
from core.transfer import MEDIA_TYPES
from core.utils import PayloadDep
from api.books.models import BookPublic, BooksImported, BookStored
from api.books import services

router = APIRouter(prefix="/books", tags=["Book Endpoints"])


@router.get(
    "",
    response_model=Page[BookPublic],
    status_code=status.HTTP_200_OK,
    tags=["Book Endpoints"],
)
def get_books(
    session: SessionDep,
    blobs: BlobStoreDep,
    search_query: str | None = Query(
        None, description="Matched against title, ISBN, author and category"
    ),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    per_page: int = Query(
        DEFAULT_PAGE_SIZE, ge=1, le=100, description="Number of items per page"
    ),
):
    """
    Retrieve a page of books, newest first.
    """
    return services.get_books(
        session=session,
        search_query=search_query,
        page=page,
        per_page=per_page,
        blobs=blobs,
    )


@router.post(
    "",
    response_model=BookStored,
    status_code=status.HTTP_201_CREATED,
    tags=["Book Endpoints"],
)
def add_book(
    session: SessionDep,
    blobs: BlobStoreDep,
    payload: PayloadDep,
) -> BookStored:
    """
    Store a new book. Accepts JSON or a multipart form with an
    optional "image" file.
    """
    return services.create_book(session, blobs, payload)


@router.post(
    "/import",
    response_model=BooksImported,
    status_code=status.HTTP_200_OK,
    tags=["Book Endpoints"],
)
def import_books(
    session: SessionDep,
    file: UploadFile = File(..., description="CSV, XLS or XLSX file, one book per row"),
) -> BooksImported:
    """
    Store books from an uploaded spreadsheet. Rows that fail validation
    are skipped and reported with their line number.
    """
    result = services.import_books(session, file)
    return BooksImported(message="Stored books successfully", result=result)


@router.get("/export", tags=["Book Endpoints"])
def export_books(
    session: SessionDep,
    file_format: Literal["csv", "xlsx"] = Query(
        "csv", alias="format", description="File format of the download"
    ),
) -> StreamingResponse:
    """
    Download every book, one row per book.
    """
    content = services.export_books(session, file_format)
    return StreamingResponse(
        io.BytesIO(content),
        media_type=MEDIA_TYPES[file_format],
        headers={
            "Content-Disposition": f'attachment; filename="booklist.{file_format}"'
        }
    )


@router.get(
    "/{book_id}",
    response_model=BookPublic,
    status_code=status.HTTP_200_OK,
    tags=["Book Endpoints"],
)
def get_book(session: SessionDep, blobs: BlobStoreDep, book_id: int) -> BookPublic:
    """
    Retrieve a book with its author, category, shelf and image.
    """
    return services.get_book(session, book_id, blobs)


@router.put(
    "/{book_id}",
    response_model=BookPublic,
    status_code=status.HTTP_200_OK,
    tags=["Book Endpoints"],
)
def update_book(
    session: SessionDep,
    blobs: BlobStoreDep,
    book_id: int,
    payload: PayloadDep,
) -> BookPublic:
    """
    Update the given fields of a book. Fields left out are unchanged.
    """
    return services.update_book(session, blobs, book_id, payload)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Book Endpoints"],
)
def delete_book(session: SessionDep, blobs: BlobStoreDep, book_id: int):
    services.delete_book(session, blobs, book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{book_id}/image",
    response_model=BookPublic,
    status_code=status.HTTP_200_OK,
    tags=["Book Endpoints"],
)
def set_book_image(
    session: SessionDep,
    blobs: BlobStoreDep,
    book_id: int,
    image: UploadFile = File(...),
) -> BookPublic:
    """
    Set the image of a book, replacing the stored file if there is one.
    """
    return services.set_book_image(session, blobs, book_id, image)


@router.delete(
    "/{book_id}/image",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Book Endpoints"],
)
def remove_book_image(session: SessionDep, blobs: BlobStoreDep, book_id: int):
    if not services.remove_book_image(session, blobs, book_id):
        raise RecordNotFound("Image of book", book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
