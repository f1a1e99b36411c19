"""
Services for the Users API
"""
from sqlmodel import Session

from core.listing import DEFAULT_PAGE_SIZE, list_page
from core.models import Page
from core.records import RecordStore
from api.users.models import User, UserPublic, UserRole, USER_SCHEMA, USER_SEARCH

users = RecordStore(User, USER_SCHEMA, relations=("image",), label="User")


def get_users(
  *,
  session: Session,
  search_query: str | None = None,
  role: UserRole | None = None,
  page: int = 1,
  per_page: int = DEFAULT_PAGE_SIZE,
  blobs=None,
) -> Page[UserPublic]:
  """
  Returns a page of users matching search_query, optionally
  restricted to a single role.
  """
  filters = ()
  extra_params = {}
  if role is not None:
    filters = (User.role == role,)
    extra_params["role"] = role.value

  return list_page(
    session=session,
    store=users,
    public_model=UserPublic,
    search_spec=USER_SEARCH,
    search_query=search_query,
    page=page,
    per_page=per_page,
    filters=filters,
    extra_params=extra_params,
    blobs=blobs,
  )
