"""
Library-wide API endpoints: root, search, drag-and-drop and bulk actions.
"""
import uuid
import logging
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from doclib.core.database import get_db
from doclib.core.exceptions import ServiceException
from doclib.services.dragdrop import decode_drag_payload
from doclib.services.library import LibraryService, BulkResult
from doclib.services.root import RootBootstrapper
from doclib.services.search import SearchService
from doclib.services.selection import Selection
from doclib.schemas.file import FileResponse
from doclib.schemas.folder import FolderResponse, MoveDestinationResponse
from doclib.schemas.library import (
    SelectionRequest, BulkMoveRequest, BulkResultResponse, BulkItemResponse,
    BulkSkipResponse, DropRequest, DropResponse, SearchResponse,
    UnlinkRequest, UnlinkResponse
)
from doclib.api.dependencies import (
    get_library_service, get_search_service, get_root_bootstrapper, http_error
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/library", tags=["library"])


@router.get("/root", response_model=FolderResponse)
async def get_root(
    bootstrapper: RootBootstrapper = Depends(get_root_bootstrapper),
    db: AsyncSession = Depends(get_db)
):
    """Get the library root folder, creating it on first access."""
    try:
        root = await bootstrapper.get_or_create_root(db)
        return FolderResponse.model_validate(root)
    except ServiceException as e:
        raise http_error(e)


@router.get("/search", response_model=SearchResponse)
async def search_library(
    q: str = Query("", description="Substring to match against folder and file names"),
    service: SearchService = Depends(get_search_service)
):
    """
    Search all folder and file names in the library.

    Matching is case-insensitive and ignores the current folder. A blank
    query returns no results and ``is_active: false``.
    """
    try:
        results = await service.search(q)
        return SearchResponse(
            query=results.query,
            is_active=results.is_active,
            folders=[FolderResponse.model_validate(f) for f in results.folders],
            files=[FileResponse.model_validate(f) for f in results.files],
        )
    except ServiceException as e:
        raise http_error(e)


@router.get("/destinations", response_model=List[MoveDestinationResponse])
async def list_move_destinations(
    moving: List[uuid.UUID] = Query([], description="Folders being moved"),
    service: LibraryService = Depends(get_library_service)
):
    """
    List every folder as a move target, root first and depth first.

    Folders being moved and their descendants are marked ``disabled``.
    """
    try:
        destinations = await service.move_destinations(moving)
        return [MoveDestinationResponse(**d.__dict__) for d in destinations]
    except ServiceException as e:
        raise http_error(e)


@router.post("/drop", response_model=DropResponse)
async def drop_item(
    drop_data: DropRequest,
    service: LibraryService = Depends(get_library_service)
):
    """Move a dragged folder or file (``folder:<id>`` / ``file:<id>``) into a folder."""
    try:
        item = decode_drag_payload(drop_data.payload)
        await service.drop(item, drop_data.destination_id)
        return DropResponse(kind=item.kind, id=item.id, destination_id=drop_data.destination_id)
    except ServiceException as e:
        raise http_error(e)


@router.post("/bulk/move", response_model=BulkResultResponse)
async def bulk_move(
    move_data: BulkMoveRequest,
    service: LibraryService = Depends(get_library_service)
):
    """
    Move a selection of folders and files into a folder.

    Members that cannot be moved are reported in ``skipped``.
    """
    try:
        selection = Selection.of(move_data.folder_ids, move_data.file_ids)
        result = await service.bulk_move(selection, move_data.destination_id)
        return _to_bulk_response(result)
    except ServiceException as e:
        raise http_error(e)


@router.post("/bulk/delete", response_model=BulkResultResponse)
async def bulk_delete(
    selection_data: SelectionRequest,
    service: LibraryService = Depends(get_library_service)
):
    """Delete a selection of folders (recursively) and files."""
    try:
        selection = Selection.of(selection_data.folder_ids, selection_data.file_ids)
        result = await service.bulk_delete(selection)
        return _to_bulk_response(result)
    except ServiceException as e:
        raise http_error(e)


@router.post("/links/unlink", response_model=UnlinkResponse)
async def unlink_references(
    unlink_data: UnlinkRequest,
    service: LibraryService = Depends(get_library_service)
):
    """Clear file links to a subject or unit that was removed elsewhere."""
    try:
        count = await service.unlink_references(
            subject_id=unlink_data.subject_id,
            unit_id=unlink_data.unit_id
        )
        return UnlinkResponse(files_updated=count)
    except ServiceException as e:
        raise http_error(e)


def _to_bulk_response(result: BulkResult) -> BulkResultResponse:
    return BulkResultResponse(
        succeeded=[BulkItemResponse(kind=i.kind, id=i.id) for i in result.succeeded],
        skipped=[
            BulkSkipResponse(kind=s.kind, id=s.id, code=s.code, message=s.message)
            for s in result.skipped
        ],
    )
