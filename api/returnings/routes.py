"""
Routes/endpoints for the Returnings API

HTTP   URI                             Action
----   ---                             ------
GET    /api/v1/returnings              Search returnings by member name or book title
POST   /api/v1/returnings              Record a returned book
GET    /api/v1/returnings/[id]         Retrieve a returning
PUT    /api/v1/returnings/[id]         Update a returning
DELETE /api/v1/returnings/[id]         Delete a returning
"""

from fastapi import APIRouter

from core.crud import register_crud_routes
from api.returnings.models import ReturningPublic, RETURNING_SEARCH
from api.returnings.services import returnings

router = APIRouter(prefix="/returnings", tags=["Returning Endpoints"])

register_crud_routes(
    router,
    resource="returnings",
    store=returnings,
    public_model=ReturningPublic,
    search_spec=RETURNING_SEARCH,
)
