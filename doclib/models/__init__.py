"""
Database models package.
"""
from .node import NodeKind
from .folder import LibraryFolder
from .file import LibraryFile

__all__ = [
    "NodeKind",
    "LibraryFolder",
    "LibraryFile",
]
