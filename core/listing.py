"""
Listing Service

Answers "list records" requests: search predicate, eager-loaded
relations, newest-first ordering and fixed-size pages.
"""
from typing import Type

from pydantic import BaseModel
from sqlmodel import Session, col

from core.models import Page
from core.records import RecordStore
from core.search import SearchSpec, build_search_predicate

DEFAULT_PAGE_SIZE = 5


def list_page(
    *,
    session: Session,
    store: RecordStore,
    public_model: Type[BaseModel],
    search_spec: SearchSpec | None = None,
    search_query: str | None = None,
    page: int = 1,
    per_page: int = DEFAULT_PAGE_SIZE,
    filters: tuple = (),
    extra_params: dict[str, str] | None = None,
    blobs=None,
) -> Page:
    """
    Return one page of records matching search_query.

    filters are additional predicates ANDed with the search (for
    example a role filter on users); extra_params are echoed back in
    query_params so links to other pages keep them. blobs is the store
    image urls are built from.
    """
    model = store.model
    predicate = build_search_predicate(search_query, search_spec)

    # Get total record count
    total_count = store.count(session, predicate, *filters)

    # Compute total pages
    total_pages = (total_count + per_page - 1) // per_page  # Ceiling division

    records = session.exec(
        store.select(predicate, *filters)
        .order_by(col(model.created_at).desc(), col(model.id).desc())
        .limit(per_page)
        .offset((page - 1) * per_page)
    ).all()

    query_params = dict(extra_params or {})
    if search_query:
        query_params["search_query"] = search_query

    return Page[public_model](
        data=[
            public_model.model_validate(record, context={"blobs": blobs})
            for record in records
        ],
        total_items=total_count,
        total_pages=total_pages,
        current_page=page,
        per_page=per_page,
        has_next=page < total_pages,
        has_prev=page > 1,
        search_query=search_query or None,
        query_params=query_params,
    )
