"""
Folder schemas for API requests and responses.
"""
import re
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from doclib.schemas.file import FileResponse

HEX_COLOR_PATTERN = re.compile(r'^#[0-9A-Fa-f]{6}$')

# Named folder colors offered by the library; None means the default color
FOLDER_COLORS = [
    ("Blue", "#3B82F6"),
    ("Purple", "#A855F7"),
    ("Pink", "#EC4899"),
    ("Red", "#EF4444"),
    ("Orange", "#F97316"),
    ("Yellow", "#EAB308"),
    ("Green", "#10B981"),
    ("Teal", "#14B8A6"),
    ("Cyan", "#06B6D4"),
    ("Gray", "#6B7280"),
]

DEFAULT_COLOR_NAME = "Blue (Default)"


def normalize_color_hex(value: Optional[str]) -> Optional[str]:
    """
    Validate a ``#RRGGBB`` color and return it upper-cased.

    Raises:
        ValueError: If the value is not a hex color
    """
    if value is None:
        return None
    value = value.strip()
    if not HEX_COLOR_PATTERN.match(value):
        raise ValueError(f"Invalid color '{value}', expected #RRGGBB")
    return value.upper()


def color_name(color_hex: Optional[str]) -> str:
    """Display name of a folder color."""
    if color_hex is None:
        return DEFAULT_COLOR_NAME
    for name, hex_value in FOLDER_COLORS:
        if hex_value.upper() == color_hex.upper():
            return name
    return "Custom"


class FolderCreate(BaseModel):
    """Schema for creating a new folder."""
    parent_id: uuid.UUID = Field(..., description="Parent folder ID")
    name: Optional[str] = Field(None, max_length=100, description="Folder name (defaults to 'New Folder')")
    color_hex: Optional[str] = Field(None, description="Folder color as #RRGGBB")

    @field_validator('color_hex')
    @classmethod
    def validate_color_hex(cls, v):
        return normalize_color_hex(v)


class FolderUpdate(BaseModel):
    """
    Schema for updating a folder.

    Omitted fields are left unchanged; an explicit ``color_hex: null``
    resets the color to the default.
    """
    name: Optional[str] = Field(None, description="New folder name")
    color_hex: Optional[str] = Field(None, description="Folder color as #RRGGBB")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is None:
            raise ValueError("name cannot be null")
        return v

    @field_validator('color_hex')
    @classmethod
    def validate_color_hex(cls, v):
        return normalize_color_hex(v)


class FolderMoveRequest(BaseModel):
    """Schema for moving a folder into another folder."""
    destination_id: uuid.UUID = Field(..., description="Destination folder ID")


class FolderResponse(BaseModel):
    """Schema for folder response."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    parent_id: Optional[uuid.UUID] = None
    color_hex: Optional[str] = None
    is_root: bool
    created_at: Optional[datetime] = None


class FolderChildrenResponse(BaseModel):
    """Schema for the contents of a folder."""
    folder: FolderResponse
    folders: List[FolderResponse] = []
    files: List[FileResponse] = []


class FolderInfoResponse(BaseModel):
    """Schema for folder details."""
    id: uuid.UUID
    name: str
    file_count: int
    subfolder_count: int
    color_name: str
    parent_name: str
    path: List[str]


class FolderDeleteResponse(BaseModel):
    """Schema for recursive folder deletion result."""
    folder_id: uuid.UUID
    folders_deleted: int
    files_deleted: int


class MoveDestinationResponse(BaseModel):
    """Schema for one entry of the move destination listing."""
    id: uuid.UUID
    name: str
    depth: int
    disabled: bool
