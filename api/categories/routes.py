"""
Routes/endpoints for the Categories API

HTTP   URI                             Action
----   ---                             ------
GET    /api/v1/categories              Search and page through categories
POST   /api/v1/categories              Add a category
GET    /api/v1/categories/[id]         Retrieve info about a specific category
PUT    /api/v1/categories/[id]         Rename a category
DELETE /api/v1/categories/[id]         Delete a category
"""

from fastapi import APIRouter

from core.crud import register_crud_routes
from api.categories.models import CategoryPublic, CATEGORY_SEARCH
from api.categories.services import categories

router = APIRouter(prefix="/categories", tags=["Category Endpoints"])

register_crud_routes(
    router,
    resource="categories",
    store=categories,
    public_model=CategoryPublic,
    search_spec=CATEGORY_SEARCH,
)
