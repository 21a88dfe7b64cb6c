"""
Custom exceptions for the document library.
"""


class ServiceException(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, code: str = "SERVICE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ServiceException):
    """Exception raised when a folder or file does not exist."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, "NOT_FOUND")


class ValidationError(ServiceException):
    """Exception raised when validation fails."""

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message, "VALIDATION_ERROR")


class InvalidNameError(ServiceException):
    """Exception raised when a name is empty, blank or too long."""

    def __init__(self, message: str = "Name must not be empty"):
        super().__init__(message, "INVALID_NAME")


class RootDeletionForbiddenError(ServiceException):
    """Exception raised when deleting the library root is attempted."""

    def __init__(self, message: str = "The library root cannot be deleted"):
        super().__init__(message, "ROOT_DELETION_FORBIDDEN")


class SelfMoveError(ServiceException):
    """Exception raised when a folder is moved into itself."""

    def __init__(self, message: str = "A folder cannot be moved into itself"):
        super().__init__(message, "SELF_MOVE")


class CycleDetectedError(ServiceException):
    """Exception raised when a folder is moved into its own subtree."""

    def __init__(self, message: str = "A folder cannot be moved into one of its descendants"):
        super().__init__(message, "CYCLE_DETECTED")


class DestinationNotFoundError(ServiceException):
    """Exception raised when a destination folder does not exist."""

    def __init__(self, message: str = "Destination folder not found"):
        super().__init__(message, "DESTINATION_NOT_FOUND")


class CorruptedTreeError(ServiceException):
    """Exception raised when a parent chain does not terminate."""

    def __init__(self, message: str = "Folder tree is corrupted"):
        super().__init__(message, "CORRUPTED_TREE")


class CommitFailedError(ServiceException):
    """Exception raised when persisting pending changes fails."""

    def __init__(self, message: str = "Failed to save changes"):
        super().__init__(message, "COMMIT_FAILED")


class InternalError(ServiceException):
    """Exception raised for internal server errors."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, "INTERNAL_ERROR")
