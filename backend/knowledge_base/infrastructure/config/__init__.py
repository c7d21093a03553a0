"""Application configuration."""

from .settings import DatabaseBackend, EmbeddingBackend, EnvironmentOption, Settings, get_settings, settings

__all__ = [
    "DatabaseBackend",
    "EmbeddingBackend",
    "EnvironmentOption",
    "Settings",
    "get_settings",
    "settings",
]
