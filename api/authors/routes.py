"""
Routes/endpoints for the Authors API

HTTP   URI                             Action
----   ---                             ------
GET    /api/v1/authors                 Search and page through authors
POST   /api/v1/authors                 Add an author (optional image)
GET    /api/v1/authors/[id]            Retrieve info about a specific author
PUT    /api/v1/authors/[id]            Update info about an author
DELETE /api/v1/authors/[id]            Delete an author and its image
"""

from fastapi import APIRouter

from core.crud import register_crud_routes
from api.authors.models import AuthorPublic, AUTHOR_SEARCH
from api.authors.services import authors
from api.images.models import ImageableType
from api.images.services import ImageHooks

router = APIRouter(prefix="/authors", tags=["Author Endpoints"])

register_crud_routes(
    router,
    resource="authors",
    store=authors,
    public_model=AuthorPublic,
    search_spec=AUTHOR_SEARCH,
    hooks=ImageHooks(ImageableType.AUTHOR),
)
