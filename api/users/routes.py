"""
Routes/endpoints for the Users API

HTTP   URI                             Action
----   ---                             ------
GET    /api/v1/users                   Search and page through users (?role=member)
POST   /api/v1/users                   Add a user (optionally with a photo)
GET    /api/v1/users/[id]              Retrieve info about a specific user
PUT    /api/v1/users/[id]              Update info about a user
DELETE /api/v1/users/[id]              Delete a user and their photo
"""
from fastapi import APIRouter, Query, status
from core.crud import register_crud_routes
from core.deps import BlobStoreDep, SessionDep
from core.listing import DEFAULT_PAGE_SIZE
from core.models import Page
from api.images.models import ImageableType
from api.images.services import ImageHooks
from api.users.models import UserPublic, UserRole, USER_SEARCH
import api.users.services as services

router = APIRouter(prefix="/users", tags=["User Endpoints"])

@router.get(
  "",
  response_model=Page[UserPublic],
  status_code=status.HTTP_200_OK,
  tags=["User Endpoints"],
  name="list_users",
)
def get_users(
  session: SessionDep,
  blobs: BlobStoreDep,
  search_query: str | None = Query(None, description="Matched against name and email"),
  role: UserRole | None = Query(None, description="Only users with this role"),
  page: int = Query(1, ge=1, description="Page number (1-indexed)"),
  per_page: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100, description="Number of items per page"),
):
  """
  Returns a paginated list of users, newest first.
  """
  return services.get_users(
    session=session,
    search_query=search_query,
    role=role,
    page=page,
    per_page=per_page,
    blobs=blobs,
  )

register_crud_routes(
  router,
  resource="users",
  store=services.users,
  public_model=UserPublic,
  search_spec=USER_SEARCH,
  hooks=ImageHooks(ImageableType.USER),
  include_list=False,
)
