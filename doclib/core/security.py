"""
Input validation and sanitization utilities for library names and uploads.
"""
import logging
import re
import unicodedata
from typing import Optional

from doclib.core.config import settings

logger = logging.getLogger(__name__)

# Characters not allowed in filenames across platforms
ILLEGAL_FILENAME_CHARACTERS = re.compile(r'[/\\:*?"<>|]')

UNTITLED_FILE_NAME = "Untitled"


def _strip_control_characters(text: str) -> str:
    return "".join(ch for ch in text if unicodedata.category(ch) != "Cc")


class InputValidator:
    """Input validation and sanitization utilities."""

    @staticmethod
    def sanitize_name(name: str, max_length: Optional[int] = None) -> Optional[str]:
        """
        Validate and sanitize a display name.

        Surrounding whitespace is trimmed and control characters are removed.

        Args:
            name: Raw name input
            max_length: Maximum allowed length (defaults to settings)

        Returns:
            Optional[str]: Sanitized name, or None if the name is unusable
        """
        if name is None:
            return None

        limit = max_length or settings.MAX_NAME_LENGTH
        sanitized = _strip_control_characters(name).strip()
        if not sanitized or len(sanitized) > limit:
            return None

        return sanitized

    @staticmethod
    def sanitize_filename(filename: str) -> str:
        """
        Sanitize a string for use as a file display name.

        Args:
            filename: Raw filename

        Returns:
            str: Filename without path separators, reserved or control
                characters; may be empty
        """
        result = ILLEGAL_FILENAME_CHARACTERS.sub("", filename or "")
        result = _strip_control_characters(result).strip()

        # Hidden-file style names are not allowed
        result = result.lstrip(".").strip()

        if len(result) > settings.MAX_NAME_LENGTH:
            result = result[:settings.MAX_NAME_LENGTH].rstrip()

        return result

    @staticmethod
    def validate_file_size(file_size: int) -> bool:
        """
        Validate file size.

        Args:
            file_size: File size in bytes

        Returns:
            bool: True if file size is within limits
        """
        return 0 <= file_size <= settings.MAX_FILE_SIZE
