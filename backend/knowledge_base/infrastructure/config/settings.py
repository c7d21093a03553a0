import logging
import os
from enum import Enum
from typing import List

from pydantic_settings import BaseSettings
from starlette.config import Config

logger = logging.getLogger(__name__)

current_file_dir = os.path.dirname(os.path.realpath(__file__))
project_root = os.path.abspath(os.path.join(current_file_dir, "..", "..", "..", ".."))

env_paths = [
    "/code/.env",
    os.path.join(project_root, ".env"),
    "/.env",
]

env_path = next((path for path in env_paths if os.path.isfile(path)), env_paths[0])
logger.info(f"Using environment file at: {env_path}")

config = Config(env_path)


class EnvironmentOption(str, Enum):
    """Environment options for the application."""

    PRODUCTION = "production"
    STAGING = "staging"
    DEVELOPMENT = "development"
    LOCAL = "local"


class DatabaseBackend(str, Enum):
    """Storage engines the knowledge base can run against."""

    POSTGRES = "postgres"
    SQLITE = "sqlite"


class EmbeddingBackend(str, Enum):
    """Where primary embeddings come from."""

    HUGGINGFACE = "huggingface"
    SENTENCE_TRANSFORMERS = "sentence_transformers"


class EnvironmentSettings(BaseSettings):
    """Environment-related settings."""

    ENVIRONMENT: EnvironmentOption = config("ENVIRONMENT", default=EnvironmentOption.DEVELOPMENT, cast=EnvironmentOption)


class DatabaseSettings(BaseSettings):
    """Database-related settings."""

    DATABASE_BACKEND: DatabaseBackend = config("DATABASE_BACKEND", default=DatabaseBackend.POSTGRES, cast=DatabaseBackend)

    POSTGRES_USER: str = config("POSTGRES_USER", default="postgres")
    POSTGRES_PASSWORD: str = config("POSTGRES_PASSWORD", default="postgres")
    POSTGRES_SERVER: str = config("POSTGRES_SERVER", default="localhost")
    POSTGRES_PORT: int = config("POSTGRES_PORT", default=5432, cast=int)
    POSTGRES_DB: str = config("POSTGRES_DB", default="postgres")
    POSTGRES_ASYNC_PREFIX: str = config("POSTGRES_ASYNC_PREFIX", default="postgresql+asyncpg://")

    SQLITE_URI: str = config("SQLITE_URI", default="./knowledge_base.db")
    SQLITE_ASYNC_PREFIX: str = config("SQLITE_ASYNC_PREFIX", default="sqlite+aiosqlite:///")

    CREATE_TABLES_ON_STARTUP: bool = config("CREATE_TABLES_ON_STARTUP", default=True, cast=bool)

    POSTGRES_POOL_SIZE: int = config("POSTGRES_POOL_SIZE", default=20, cast=int)
    POSTGRES_MAX_OVERFLOW: int = config("POSTGRES_MAX_OVERFLOW", default=0, cast=int)

    @property
    def DATABASE_URL(self) -> str:
        """Get the full database URL for the configured backend."""
        if self.DATABASE_BACKEND == DatabaseBackend.SQLITE:
            return f"{self.SQLITE_ASYNC_PREFIX}{self.SQLITE_URI}"
        return (
            f"{self.POSTGRES_ASYNC_PREFIX}{self.POSTGRES_USER}:"
            f"{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:"
            f"{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


class CORSSettings(BaseSettings):
    """CORS-related settings."""

    CORS_ENABLED: bool = config("CORS_ENABLED", default=True, cast=bool)
    CORS_ORIGINS: str = config("CORS_ORIGINS", default="*")
    CORS_ALLOW_CREDENTIALS: bool = config("CORS_ALLOW_CREDENTIALS", default=True, cast=bool)

    @property
    def CORS_ORIGINS_LIST(self) -> List[str]:
        """Get CORS origins as a list."""
        if not self.CORS_ORIGINS:
            return ["*"]
        return [x.strip() for x in self.CORS_ORIGINS.split(",") if x.strip()]


class CompressionSettings(BaseSettings):
    """Compression-related settings."""

    GZIP_ENABLED: bool = config("GZIP_ENABLED", default=True, cast=bool)
    GZIP_MINIMUM_SIZE: int = config("GZIP_MINIMUM_SIZE", default=1000, cast=int)


class APISettings(BaseSettings):
    """API-related settings."""

    API_PREFIX: str = "/api"
    ENABLE_DOCS_IN_PRODUCTION: bool = config("ENABLE_DOCS_IN_PRODUCTION", default=False, cast=bool)


class AppSettings(BaseSettings):
    """Application-related settings."""

    APP_NAME: str = "Knowledge Base API"
    APP_DESCRIPTION: str = "Per-account document knowledge base with semantic search"
    DEBUG: bool = config("DEBUG", default=False, cast=bool)
    VERSION: str = "0.1.0"


class EmbeddingSettings(BaseSettings):
    """Embedding backend settings.

    ``EMBEDDING_MODELS`` is a comma-separated priority list; the first model
    that answers wins, and the hash fallback covers the case where none do.
    """

    EMBEDDING_BACKEND: EmbeddingBackend = config(
        "EMBEDDING_BACKEND", default=EmbeddingBackend.HUGGINGFACE, cast=EmbeddingBackend
    )
    EMBEDDING_MODELS: str = config(
        "EMBEDDING_MODELS",
        default=(
            "sentence-transformers/paraphrase-MiniLM-L6-v2,"
            "sentence-transformers/all-MiniLM-L6-v2,"
            "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2"
        ),
    )
    EMBEDDING_DIMENSION: int = config("EMBEDDING_DIMENSION", default=384, cast=int)
    EMBEDDING_TIMEOUT_SECONDS: float = config("EMBEDDING_TIMEOUT_SECONDS", default=30.0, cast=float)
    EMBEDDING_FALLBACK_ENABLED: bool = config("EMBEDDING_FALLBACK_ENABLED", default=True, cast=bool)

    HUGGINGFACE_API_KEY: str = config("HUGGINGFACE_API_KEY", default="")
    HUGGINGFACE_API_URL: str = config("HUGGINGFACE_API_URL", default="https://router.huggingface.co/hf-inference/models")

    @property
    def EMBEDDING_MODELS_LIST(self) -> List[str]:
        """Get the embedding model priority list."""
        return [x.strip() for x in self.EMBEDDING_MODELS.split(",") if x.strip()]


class ChunkingSettings(BaseSettings):
    """Text splitting settings."""

    CHUNK_SIZE: int = config("CHUNK_SIZE", default=1000, cast=int)
    CHUNK_OVERLAP: int = config("CHUNK_OVERLAP", default=200, cast=int)


class ExtractionSettings(BaseSettings):
    """Content extraction settings."""

    EXTRACTION_TIMEOUT_SECONDS: float = config("EXTRACTION_TIMEOUT_SECONDS", default=60.0, cast=float)
    OCR_LANGUAGE: str = config("OCR_LANGUAGE", default="eng")


class UploadSettings(BaseSettings):
    """Upload validation settings."""

    MAX_UPLOAD_SIZE_BYTES: int = config("MAX_UPLOAD_SIZE_BYTES", default=10 * 1024 * 1024, cast=int)


class SearchSettings(BaseSettings):
    """Retrieval defaults for direct callers and the agent search tool."""

    SEARCH_DEFAULT_LIMIT: int = config("SEARCH_DEFAULT_LIMIT", default=5, cast=int)
    SEARCH_DEFAULT_THRESHOLD: float = config("SEARCH_DEFAULT_THRESHOLD", default=0.1, cast=float)
    SEARCH_TOOL_LIMIT: int = config("SEARCH_TOOL_LIMIT", default=10, cast=int)
    SEARCH_TOOL_THRESHOLD: float = config("SEARCH_TOOL_THRESHOLD", default=0.2, cast=float)


class LoggingSettings(BaseSettings):
    """Centralized logging configuration settings."""

    LOG_LEVEL: str = config("LOG_LEVEL", default="INFO")
    LOG_FORMAT: str = config("LOG_FORMAT", default="detailed")  # "detailed", "structured", "json"

    LOG_CONSOLE_ENABLED: bool = config("LOG_CONSOLE_ENABLED", default=True, cast=bool)
    LOG_FILE_ENABLED: bool = config("LOG_FILE_ENABLED", default=False, cast=bool)
    LOG_FILE_PATH: str = config("LOG_FILE_PATH", default="logs/knowledge_base.log")
    LOG_FILE_MAX_SIZE: int = config("LOG_FILE_MAX_SIZE", default=10485760, cast=int)
    LOG_FILE_BACKUP_COUNT: int = config("LOG_FILE_BACKUP_COUNT", default=5, cast=int)

    LOG_CORRELATION_ID: bool = config("LOG_CORRELATION_ID", default=True, cast=bool)
    LOG_DEVELOPMENT_VERBOSE: bool = config("LOG_DEVELOPMENT_VERBOSE", default=True, cast=bool)
    LOG_PRODUCTION_OPTIMIZE: bool = config("LOG_PRODUCTION_OPTIMIZE", default=True, cast=bool)

    @property
    def LOG_LEVEL_INT(self) -> int:
        """Convert string log level to integer."""
        level_map = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return level_map.get(self.LOG_LEVEL.upper(), logging.INFO)


class Settings(
    EnvironmentSettings,
    DatabaseSettings,
    CORSSettings,
    CompressionSettings,
    APISettings,
    AppSettings,
    EmbeddingSettings,
    ChunkingSettings,
    ExtractionSettings,
    UploadSettings,
    SearchSettings,
    LoggingSettings,
):
    """Main settings class that combines all setting categories."""

    pass


settings = Settings()


def get_settings() -> Settings:
    """Get application settings.

    Returns:
        The application settings.
    """
    return settings
