"""
Application configuration management.
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./library.db"
    DATABASE_ECHO: bool = False

    # Library
    LIBRARY_ROOT_NAME: str = "Library"
    DEFAULT_FOLDER_NAME: str = "New Folder"
    MAX_NAME_LENGTH: int = 100
    MAX_FILE_SIZE: int = 104857600  # 100MB

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
