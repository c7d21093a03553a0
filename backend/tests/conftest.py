"""Test configuration and fixtures for the knowledge base."""

import os

os.environ["ENVIRONMENT"] = "local"
os.environ["DATABASE_BACKEND"] = "sqlite"
os.environ["SQLITE_URI"] = ":memory:"
os.environ["SQLITE_ASYNC_PREFIX"] = "sqlite+aiosqlite:///"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

# mypy: disable-error-code="import-untyped"
from testcontainers.core.docker_client import DockerClient  # noqa: E402
from testcontainers.postgres import PostgresContainer  # noqa: E402

from knowledge_base.infrastructure.chunking import RecursiveTextSplitter  # noqa: E402
from knowledge_base.infrastructure.database.session import Base, async_session, enable_sqlite_foreign_keys  # noqa: E402
from knowledge_base.infrastructure.embedding import Embedder  # noqa: E402
from knowledge_base.infrastructure.extraction import ContentExtractor  # noqa: E402
from knowledge_base.infrastructure.logging import configure_testing_logging  # noqa: E402
from knowledge_base.interfaces.api.dependencies import get_knowledge_service  # noqa: E402
from knowledge_base.interfaces.main import app  # noqa: E402
from knowledge_base.modules.chunk.models import Chunk  # noqa: E402, F401
from knowledge_base.modules.document.models import Document  # noqa: E402, F401
from knowledge_base.modules.knowledge.services import KnowledgeBaseService  # noqa: E402

from .doubles import VOCABULARY, KeywordProvider  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    configure_testing_logging()


def is_docker_running() -> bool:
    """Check if Docker daemon is running."""
    try:
        DockerClient()
        return True
    except Exception:
        return False


@pytest.fixture(scope="session")
def pg_container():
    """Create a PostgreSQL container for testing."""
    if not is_docker_running():
        pytest.skip("Docker is required, but not running")

    with PostgresContainer() as pg:
        yield pg


@pytest.fixture
def pg_url(pg_container) -> str:
    """Build an asyncpg URL for the PostgreSQL container."""
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    user = getattr(pg_container, "username", None) or getattr(pg_container, "POSTGRES_USER", "test")
    password = getattr(pg_container, "password", None) or getattr(pg_container, "POSTGRES_PASSWORD", "test")
    db = getattr(pg_container, "dbname", None) or getattr(pg_container, "POSTGRES_DB", "test")
    return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db}"


@pytest_asyncio.fixture
async def pg_session(pg_url):
    """Session against a freshly created PostgreSQL schema."""
    engine = create_async_engine(pg_url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_db_engine():
    """In-memory SQLite engine with foreign keys enforced."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_db_engine):
    """Create a test database session."""
    session_factory = async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def keyword_provider() -> KeywordProvider:
    return KeywordProvider()


@pytest.fixture
def embedder(keyword_provider: KeywordProvider) -> Embedder:
    return Embedder(providers=[keyword_provider], dimension=len(VOCABULARY), timeout=5.0)


@pytest.fixture
def knowledge_service(embedder: Embedder) -> KnowledgeBaseService:
    return KnowledgeBaseService(
        extractor=ContentExtractor(timeout=10.0),
        splitter=RecursiveTextSplitter(chunk_size=1000, chunk_overlap=200),
        embedder=embedder,
    )


@pytest_asyncio.fixture
async def client(test_db_engine, knowledge_service):
    """HTTP client with the database and knowledge service swapped for test doubles."""
    session_factory = async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[async_session] = override_get_db
    app.dependency_overrides[get_knowledge_service] = lambda: knowledge_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}
