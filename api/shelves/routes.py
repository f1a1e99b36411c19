"""
Routes/endpoints for the Shelves API

HTTP   URI                             Action
----   ---                             ------
GET    /api/v1/shelves/export          Download all shelves as a spreadsheet
GET    /api/v1/shelves                 Search and page through shelves
POST   /api/v1/shelves                 Add a shelf
GET    /api/v1/shelves/[id]            Retrieve info about a specific shelf
PUT    /api/v1/shelves/[id]            Update info about a shelf
DELETE /api/v1/shelves/[id]            Delete a shelf
"""

import io
from typing import Literal
from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse

from core.crud import register_crud_routes
from core.deps import SessionDep
from core.transfer import MEDIA_TYPES, export_records
from api.shelves.models import ShelfPublic, SHELF_SEARCH
from api.shelves.services import shelves

router = APIRouter(prefix="/shelves", tags=["Shelf Endpoints"])


@router.get("/export", tags=["Shelf Endpoints"])
def export_shelves(
    session: SessionDep,
    file_format: Literal["csv", "xlsx"] = Query(
        "csv", alias="format", description="File format of the download"
    ),
) -> StreamingResponse:
    """
    Download every shelf, one row per shelf.
    """
    content = export_records(session, shelves, file_format)
    return StreamingResponse(
        io.BytesIO(content),
        media_type=MEDIA_TYPES[file_format],
        headers={
            "Content-Disposition": f'attachment; filename="shelflist.{file_format}"'
        }
    )


register_crud_routes(
    router,
    resource="shelves",
    store=shelves,
    public_model=ShelfPublic,
    search_spec=SHELF_SEARCH,
)
