"""
Schemas for library-wide operations: selection, bulk actions, search, drops.
"""
import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from doclib.models.node import NodeKind
from doclib.schemas.file import FileResponse
from doclib.schemas.folder import FolderResponse


class SelectionRequest(BaseModel):
    """Schema for a multi-item selection."""
    folder_ids: List[uuid.UUID] = Field(default_factory=list)
    file_ids: List[uuid.UUID] = Field(default_factory=list)


class BulkMoveRequest(SelectionRequest):
    """Schema for moving a selection into a folder."""
    destination_id: uuid.UUID = Field(..., description="Destination folder ID")


class BulkItemResponse(BaseModel):
    """Schema for a processed selection member."""
    kind: NodeKind
    id: uuid.UUID


class BulkSkipResponse(BulkItemResponse):
    """Schema for a selection member that was rejected."""
    code: str
    message: str


class BulkResultResponse(BaseModel):
    """Schema for best-effort bulk operation results."""
    succeeded: List[BulkItemResponse] = []
    skipped: List[BulkSkipResponse] = []


class DropRequest(BaseModel):
    """Schema for dropping a dragged item onto a folder."""
    payload: str = Field(..., description="Drag payload, e.g. 'folder:<uuid>'")
    destination_id: uuid.UUID = Field(..., description="Folder the item was dropped on")


class DropResponse(BaseModel):
    """Schema for the result of a drop."""
    kind: NodeKind
    id: uuid.UUID
    destination_id: uuid.UUID


class SearchResponse(BaseModel):
    """Schema for library search results."""
    query: str
    is_active: bool
    folders: List[FolderResponse] = []
    files: List[FileResponse] = []


class UnlinkRequest(BaseModel):
    """Schema for clearing links to a removed subject or unit."""
    subject_id: Optional[uuid.UUID] = None
    unit_id: Optional[uuid.UUID] = None

    @model_validator(mode='after')
    def require_reference(self):
        if self.subject_id is None and self.unit_id is None:
            raise ValueError("subject_id or unit_id is required")
        return self


class UnlinkResponse(BaseModel):
    """Schema for unlink result."""
    files_updated: int
