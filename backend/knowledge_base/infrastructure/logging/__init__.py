"""Centralized logging for the knowledge base.

Usage:
    ```python
    from knowledge_base.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.warning("Embedding model failed", extra={"model": model})
    ```
"""

from .config import (
    configure_testing_logging,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
    setup_logging_configuration,
)
from .factory import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "configure_testing_logging",
    "generate_correlation_id",
    "get_correlation_id",
    "get_logger",
    "reset_correlation_id",
    "set_correlation_id",
    "setup_logging_configuration",
]
