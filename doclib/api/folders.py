"""
Folder management API endpoints.
"""
import uuid
import logging
from fastapi import APIRouter, Depends, status

from doclib.services.library import LibraryService
from doclib.schemas.folder import (
    FolderCreate, FolderUpdate, FolderMoveRequest, FolderResponse,
    FolderChildrenResponse, FolderInfoResponse, FolderDeleteResponse
)
from doclib.schemas.file import FileResponse
from doclib.api.dependencies import get_library_service, http_error
from doclib.core.exceptions import ServiceException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/library/folders", tags=["folders"])


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def create_folder(
    folder_data: FolderCreate,
    service: LibraryService = Depends(get_library_service)
):
    """
    Create a new folder.

    - **parent_id**: Parent folder ID (required)
    - **name**: Folder name (optional, defaults to "New Folder")
    - **color_hex**: Folder color as #RRGGBB (optional)
    """
    try:
        folder = await service.create_folder(
            folder_data.parent_id,
            name=folder_data.name,
            color_hex=folder_data.color_hex
        )
        return _to_folder_response(folder)
    except ServiceException as e:
        raise http_error(e)


@router.get("/{folder_id}", response_model=FolderResponse)
async def get_folder(
    folder_id: uuid.UUID,
    service: LibraryService = Depends(get_library_service)
):
    """Get a specific folder by ID."""
    try:
        folder = await service.get_folder(folder_id)
        return _to_folder_response(folder)
    except ServiceException as e:
        raise http_error(e)


@router.get("/{folder_id}/children", response_model=FolderChildrenResponse)
async def list_children(
    folder_id: uuid.UUID,
    service: LibraryService = Depends(get_library_service)
):
    """List the folders and files directly inside a folder."""
    try:
        folder = await service.get_folder(folder_id)
        children = await service.list_children(folder_id)
        return FolderChildrenResponse(
            folder=_to_folder_response(folder),
            folders=[_to_folder_response(f) for f in children.folders],
            files=[FileResponse.model_validate(f) for f in children.files],
        )
    except ServiceException as e:
        raise http_error(e)


@router.get("/{folder_id}/info", response_model=FolderInfoResponse)
async def get_folder_info(
    folder_id: uuid.UUID,
    service: LibraryService = Depends(get_library_service)
):
    """Get content counts, color and location of a folder."""
    try:
        info = await service.folder_info(folder_id)
        return FolderInfoResponse(**info.__dict__)
    except ServiceException as e:
        raise http_error(e)


@router.patch("/{folder_id}", response_model=FolderResponse)
async def update_folder(
    folder_id: uuid.UUID,
    folder_data: FolderUpdate,
    service: LibraryService = Depends(get_library_service)
):
    """
    Rename and/or recolor a folder.

    - **name**: New folder name (blank or null names are rejected)
    - **color_hex**: New color; send null to reset to the default color
    """
    try:
        folder = await service.update_folder(folder_id, folder_data)
        return _to_folder_response(folder)
    except ServiceException as e:
        raise http_error(e)


@router.delete("/{folder_id}", response_model=FolderDeleteResponse)
async def delete_folder(
    folder_id: uuid.UUID,
    service: LibraryService = Depends(get_library_service)
):
    """
    Delete a folder and everything inside it.

    The library root cannot be deleted.
    """
    try:
        result = await service.delete_folder(folder_id)
        return FolderDeleteResponse(**result.__dict__)
    except ServiceException as e:
        raise http_error(e)


@router.post("/{folder_id}/move", response_model=FolderResponse)
async def move_folder(
    folder_id: uuid.UUID,
    move_data: FolderMoveRequest,
    service: LibraryService = Depends(get_library_service)
):
    """
    Move a folder into another folder.

    Moving a folder into itself or into one of its descendants is rejected.
    """
    try:
        folder = await service.move_folder(folder_id, move_data.destination_id)
        return _to_folder_response(folder)
    except ServiceException as e:
        raise http_error(e)


@router.post("/{folder_id}/duplicate", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def duplicate_folder(
    folder_id: uuid.UUID,
    service: LibraryService = Depends(get_library_service)
):
    """Create an empty copy of a folder next to it."""
    try:
        folder = await service.duplicate_folder(folder_id)
        return _to_folder_response(folder)
    except ServiceException as e:
        raise http_error(e)


def _to_folder_response(folder) -> FolderResponse:
    """Convert folder model to response schema."""
    return FolderResponse.model_validate(folder)
