"""
Node kinds shared by folders and files.
"""
import enum


class NodeKind(str, enum.Enum):
    """Kind of library node referenced by selections and drag payloads."""
    FOLDER = "folder"
    FILE = "file"
