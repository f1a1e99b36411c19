"""
Generic CRUD endpoints for a RecordStore

HTTP   URI                     Action
----   ---                     ------
GET    <prefix>                Search and page through records
POST   <prefix>                Create a record
GET    <prefix>/{record_id}    Retrieve a record with its relations
PUT    <prefix>/{record_id}    Update some fields of a record
DELETE <prefix>/{record_id}    Delete a record

Routes added to the router before register_crud_routes() is called take
precedence over /{record_id}.
"""
from typing import Type

from fastapi import APIRouter, Query, Response, status
from pydantic import BaseModel
from sqlmodel import Session

from core.deps import BlobStoreDep, SessionDep
from core.listing import DEFAULT_PAGE_SIZE, list_page
from core.models import Page
from core.records import RecordStore
from core.search import SearchSpec
from core.utils import Payload, PayloadDep


class RecordHooks:
    """
    Extra work around the generic endpoints, e.g. file uploads.
    The base class does nothing.
    """

    def validate(self, payload: Payload) -> None:
        """Runs before anything is written."""

    def after_save(self, session: Session, blobs, record, payload: Payload) -> None:
        """Runs after a create or update was committed."""

    def after_delete(self, session: Session, blobs, record_id) -> None:
        """Runs after the record was deleted."""


def register_crud_routes(
    router: APIRouter,
    *,
    resource: str,
    store: RecordStore,
    public_model: Type[BaseModel],
    search_spec: SearchSpec | None = None,
    hooks: RecordHooks | None = None,
    include_list: bool = True,
) -> APIRouter:
    """
    Add list/create/show/update/delete endpoints for store to router.
    resource is the plural name used for route ids (e.g. "authors").
    """
    hooks = hooks or RecordHooks()

    if include_list:
        @router.get(
            "",
            response_model=Page[public_model],
            status_code=status.HTTP_200_OK,
            name=f"list_{resource}",
        )
        def list_records(
            session: SessionDep,
            blobs: BlobStoreDep,
            search_query: str | None = Query(None, description="Search term"),
            page: int = Query(1, ge=1, description="Page number (1-indexed)"),
            per_page: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100, description="Number of items per page"),
        ):
            return list_page(
                session=session,
                store=store,
                public_model=public_model,
                search_spec=search_spec,
                search_query=search_query,
                page=page,
                per_page=per_page,
                blobs=blobs,
            )

    @router.post(
        "",
        response_model=public_model,
        status_code=status.HTTP_201_CREATED,
        name=f"create_{resource}",
    )
    def create_record(session: SessionDep, blobs: BlobStoreDep, payload: PayloadDep):
        hooks.validate(payload)
        record = store.create(session, payload.fields)
        hooks.after_save(session, blobs, record, payload)
        return public_model.model_validate(
            store.get(session, record.id), context={"blobs": blobs}
        )

    @router.get(
        "/{record_id}",
        response_model=public_model,
        name=f"get_{resource}",
    )
    def get_record(session: SessionDep, blobs: BlobStoreDep, record_id: int):
        return public_model.model_validate(
            store.get(session, record_id), context={"blobs": blobs}
        )

    @router.put(
        "/{record_id}",
        response_model=public_model,
        name=f"update_{resource}",
    )
    def update_record(session: SessionDep, blobs: BlobStoreDep, record_id: int, payload: PayloadDep):
        hooks.validate(payload)
        record = store.update(session, record_id, payload.fields)
        hooks.after_save(session, blobs, record, payload)
        return public_model.model_validate(
            store.get(session, record_id), context={"blobs": blobs}
        )

    @router.delete(
        "/{record_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        name=f"delete_{resource}",
    )
    def delete_record(session: SessionDep, blobs: BlobStoreDep, record_id: int):
        store.delete(session, record_id)
        hooks.after_delete(session, blobs, record_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
