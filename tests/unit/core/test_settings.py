"""
Unit tests for configuration, logging helpers and error types.
"""
import pytest

from doclib.core.config import Settings
from doclib.core.logging import set_correlation_id, get_correlation_id
from doclib.core.exceptions import (
    ServiceException, NotFoundError, InvalidNameError, RootDeletionForbiddenError,
    CycleDetectedError, CommitFailedError
)


@pytest.mark.unit
class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self, monkeypatch):
        for key in ("LIBRARY_ROOT_NAME", "MAX_NAME_LENGTH", "MAX_FILE_SIZE", "DEFAULT_FOLDER_NAME"):
            monkeypatch.delenv(key, raising=False)

        settings = Settings(_env_file=None)

        assert settings.LIBRARY_ROOT_NAME == "Library"
        assert settings.DEFAULT_FOLDER_NAME == "New Folder"
        assert settings.MAX_NAME_LENGTH == 100
        assert settings.MAX_FILE_SIZE == 100 * 1024 * 1024

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("LIBRARY_ROOT_NAME", "Documents")
        monkeypatch.setenv("MAX_NAME_LENGTH", "64")

        settings = Settings(_env_file=None)

        assert settings.LIBRARY_ROOT_NAME == "Documents"
        assert settings.MAX_NAME_LENGTH == 64


@pytest.mark.unit
class TestCorrelationId:
    """Test cases for correlation ID helpers."""

    def test_uses_given_id(self):
        assert set_correlation_id("abc-123") == "abc-123"
        assert get_correlation_id() == "abc-123"

    def test_generates_id(self):
        corr_id = set_correlation_id()

        assert corr_id
        assert get_correlation_id() == corr_id


@pytest.mark.unit
class TestExceptions:
    """Test cases for service error types."""

    @pytest.mark.parametrize("error_class,code", [
        (NotFoundError, "NOT_FOUND"),
        (InvalidNameError, "INVALID_NAME"),
        (RootDeletionForbiddenError, "ROOT_DELETION_FORBIDDEN"),
        (CycleDetectedError, "CYCLE_DETECTED"),
        (CommitFailedError, "COMMIT_FAILED"),
    ])
    def test_codes(self, error_class, code):
        error = error_class()

        assert isinstance(error, ServiceException)
        assert error.code == code
        assert error.message
        assert str(error) == error.message
