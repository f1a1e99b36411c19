"""
Routes/endpoints for the Borrowings API

HTTP   URI                             Action
----   ---                             ------
GET    /api/v1/borrowings              Search borrowings by member name or book title
POST   /api/v1/borrowings              Lend a book to a member
GET    /api/v1/borrowings/[id]         Retrieve a borrowing with its user and book
PUT    /api/v1/borrowings/[id]         Update a borrowing
DELETE /api/v1/borrowings/[id]         Delete a borrowing
"""

from fastapi import APIRouter

from core.crud import register_crud_routes
from api.borrowings.models import BorrowingPublic, BORROWING_SEARCH
from api.borrowings.services import borrowings

router = APIRouter(prefix="/borrowings", tags=["Borrowing Endpoints"])

register_crud_routes(
    router,
    resource="borrowings",
    store=borrowings,
    public_model=BorrowingPublic,
    search_spec=BORROWING_SEARCH,
)
