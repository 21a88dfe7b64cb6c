"""
Pytest configuration and shared fixtures.
"""
import pytest
import uuid
from typing import AsyncGenerator, Optional
from unittest.mock import AsyncMock
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from doclib.main import create_app
from doclib.core.database import Base, get_db
from doclib.models.folder import LibraryFolder
from doclib.models.file import LibraryFile
from doclib.services.library import LibraryService
from doclib.services.root import RootBootstrapper


# Test database URL (in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Clean up
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db() -> AsyncMock:
    """Mock database session for unit tests."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def library_service(test_db: AsyncSession) -> LibraryService:
    """Library service on the test database."""
    return LibraryService(test_db)


@pytest.fixture
async def root_folder(test_db: AsyncSession) -> LibraryFolder:
    """Bootstrapped library root."""
    return await RootBootstrapper().get_or_create_root(test_db)


@pytest.fixture
async def test_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override."""
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    # Clean up overrides
    app.dependency_overrides.clear()


# Factories for creating test data
class FolderFactory:
    """Factory for creating test folders."""

    @staticmethod
    def create_folder(
        name: str = None,
        parent: Optional[LibraryFolder] = None,
        color_hex: Optional[str] = None,
        **kwargs
    ) -> LibraryFolder:
        """Create a folder instance (not persisted)."""
        folder_id = kwargs.pop("id", None) or uuid.uuid4()
        return LibraryFolder(
            id=folder_id,
            name=name or f"folder-{folder_id.hex[:8]}",
            parent_id=parent.id if parent is not None else kwargs.pop("parent_id", None),
            color_hex=color_hex,
            **kwargs
        )

    @staticmethod
    async def create_and_save_folder(db: AsyncSession, **kwargs) -> LibraryFolder:
        """Create and save a folder to the database."""
        folder = FolderFactory.create_folder(**kwargs)
        db.add(folder)
        await db.commit()
        await db.refresh(folder)
        return folder


class FileFactory:
    """Factory for creating test files."""

    @staticmethod
    def create_file(
        name: str = None,
        parent: Optional[LibraryFolder] = None,
        payload: bytes = b"%PDF-1.4 test",
        **kwargs
    ) -> LibraryFile:
        """Create a file instance (not persisted)."""
        file_id = kwargs.pop("id", None) or uuid.uuid4()
        return LibraryFile(
            id=file_id,
            name=name or f"file-{file_id.hex[:8]}",
            parent_folder_id=parent.id if parent is not None else kwargs.pop("parent_folder_id"),
            payload=payload,
            file_size=len(payload),
            **kwargs
        )
