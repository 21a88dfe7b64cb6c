"""
File management API endpoints.
"""
import os
import uuid
import logging
from typing import Optional
from urllib.parse import quote
from fastapi import APIRouter, Depends, Form, Response, UploadFile, File as FastAPIFile, status

from doclib.services.library import LibraryService
from doclib.schemas.file import FileUpdate, FileMoveRequest, FileLinksUpdate, FileResponse
from doclib.api.dependencies import get_library_service, http_error
from doclib.core.exceptions import ServiceException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/library/files", tags=["files"])


@router.post("", response_model=FileResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    parent_folder_id: uuid.UUID = Form(...),
    file: UploadFile = FastAPIFile(...),
    name: Optional[str] = Form(None),
    subject_id: Optional[uuid.UUID] = Form(None),
    unit_id: Optional[uuid.UUID] = Form(None),
    service: LibraryService = Depends(get_library_service)
):
    """
    Import a file into a folder.

    - **parent_folder_id**: Folder receiving the file
    - **file**: File content
    - **name**: Display name (defaults to the uploaded filename without extension)
    - **subject_id** / **unit_id**: Optional tags
    """
    try:
        content = await file.read()
        display_name = name if name is not None else os.path.splitext(file.filename or "")[0]
        library_file = await service.create_file(
            parent_folder_id,
            display_name,
            content,
            subject_id=subject_id,
            unit_id=unit_id
        )
        return FileResponse.model_validate(library_file)
    except ServiceException as e:
        raise http_error(e)


@router.get("/{file_id}", response_model=FileResponse)
async def get_file(
    file_id: uuid.UUID,
    service: LibraryService = Depends(get_library_service)
):
    """Get file details by ID."""
    try:
        library_file = await service.get_file(file_id)
        return FileResponse.model_validate(library_file)
    except ServiceException as e:
        raise http_error(e)


@router.get("/{file_id}/content")
async def download_file(
    file_id: uuid.UUID,
    service: LibraryService = Depends(get_library_service)
):
    """Download the stored file content."""
    try:
        library_file = await service.get_file(file_id, with_payload=True)
        return Response(
            content=library_file.payload,
            media_type="application/pdf",
            headers={"Content-Disposition": _content_disposition(library_file.name)}
        )
    except ServiceException as e:
        raise http_error(e)


@router.patch("/{file_id}", response_model=FileResponse)
async def rename_file(
    file_id: uuid.UUID,
    file_data: FileUpdate,
    service: LibraryService = Depends(get_library_service)
):
    """Rename a file. Blank names are rejected and the old name is kept."""
    try:
        library_file = await service.rename_file(file_id, file_data.name)
        return FileResponse.model_validate(library_file)
    except ServiceException as e:
        raise http_error(e)


@router.put("/{file_id}/links", response_model=FileResponse)
async def update_file_links(
    file_id: uuid.UUID,
    links: FileLinksUpdate,
    service: LibraryService = Depends(get_library_service)
):
    """Tag a file with a subject and unit; null clears a tag."""
    try:
        library_file = await service.link_file(file_id, links.subject_id, links.unit_id)
        return FileResponse.model_validate(library_file)
    except ServiceException as e:
        raise http_error(e)


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    file_id: uuid.UUID,
    service: LibraryService = Depends(get_library_service)
):
    """Delete a file."""
    try:
        await service.delete_file(file_id)
    except ServiceException as e:
        raise http_error(e)


@router.post("/{file_id}/move", response_model=FileResponse)
async def move_file(
    file_id: uuid.UUID,
    move_data: FileMoveRequest,
    service: LibraryService = Depends(get_library_service)
):
    """Move a file into another folder."""
    try:
        library_file = await service.move_file(file_id, move_data.destination_id)
        return FileResponse.model_validate(library_file)
    except ServiceException as e:
        raise http_error(e)


def _content_disposition(name: str) -> str:
    """Inline disposition with an ASCII fallback and an RFC 5987 UTF-8 name."""
    filename = f"{name}.pdf"
    fallback = filename.encode("ascii", "ignore").decode("ascii")
    fallback = fallback.replace('"', "").replace("\\", "").strip()
    if fallback in ("", ".pdf"):
        fallback = "document.pdf"
    return f"inline; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"
