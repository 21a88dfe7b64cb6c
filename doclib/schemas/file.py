"""
File schemas for API requests and responses.
"""
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FileUpdate(BaseModel):
    """Schema for renaming a file."""
    name: str = Field(..., description="New file name")


class FileMoveRequest(BaseModel):
    """Schema for moving a file into another folder."""
    destination_id: uuid.UUID = Field(..., description="Destination folder ID")


class FileLinksUpdate(BaseModel):
    """Schema for tagging a file with a subject and unit."""
    subject_id: Optional[uuid.UUID] = Field(None, description="Linked subject ID")
    unit_id: Optional[uuid.UUID] = Field(None, description="Linked unit ID")


class FileResponse(BaseModel):
    """Schema for file response."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    parent_folder_id: uuid.UUID
    file_size: int
    linked_subject_id: Optional[uuid.UUID] = None
    linked_unit_id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None
