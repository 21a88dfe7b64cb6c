"""
Shared API dependencies and service error mapping.
"""
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from doclib.core.database import get_db
from doclib.core.exceptions import ServiceException
from doclib.services.library import LibraryService
from doclib.services.root import RootBootstrapper
from doclib.services.search import SearchService

ERROR_STATUS_CODES = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_NAME": status.HTTP_400_BAD_REQUEST,
    "DESTINATION_NOT_FOUND": status.HTTP_400_BAD_REQUEST,
    "SELF_MOVE": status.HTTP_409_CONFLICT,
    "CYCLE_DETECTED": status.HTTP_409_CONFLICT,
    "ROOT_DELETION_FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "CORRUPTED_TREE": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "COMMIT_FAILED": status.HTTP_503_SERVICE_UNAVAILABLE,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def http_error(error: ServiceException) -> HTTPException:
    """Translate a service error into an HTTP error response."""
    status_code = ERROR_STATUS_CODES.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(
        status_code=status_code,
        detail={"code": error.code, "message": error.message}
    )


async def get_library_service(db: AsyncSession = Depends(get_db)) -> LibraryService:
    """Dependency to get library service."""
    return LibraryService(db)


async def get_search_service(db: AsyncSession = Depends(get_db)) -> SearchService:
    """Dependency to get search service."""
    return SearchService(db)


def get_root_bootstrapper(request: Request) -> RootBootstrapper:
    """Dependency to get the application's root bootstrapper."""
    return request.app.state.root_bootstrapper
