"""Logger factory.

``get_logger()`` is the single entry point the rest of the package uses; the
first call installs the environment-specific configuration.
"""

import inspect
import logging
from threading import Lock
from typing import Optional, Union

from ..config.settings import get_settings
from .config import setup_logging_configuration

_logging_configured = False
_configuration_lock = Lock()


def get_logger(name: Optional[str] = None, **extra_context) -> Union[logging.Logger, logging.LoggerAdapter]:
    """Get a logger, configuring logging on first use.

    Args:
        name: Logger name. Defaults to the calling module's ``__name__``.
        **extra_context: Values attached to every record from this logger.

    Returns:
        A plain logger, or an adapter when ``extra_context`` is given.

    Example:
        ```python
        logger = get_logger()
        logger.info("Document ingested", extra={"document_id": str(document.id)})
        ```
    """
    _ensure_logging_configured()

    if name is None:
        name = _detect_calling_module()

    base_logger = logging.getLogger(name)
    if extra_context:
        return logging.LoggerAdapter(base_logger, extra_context)
    return base_logger


def configure_logging() -> None:
    """Install the logging configuration once per process."""
    global _logging_configured

    with _configuration_lock:
        if _logging_configured:
            return
        setup_logging_configuration()
        _logging_configured = True

        settings = get_settings()
        logging.getLogger(__name__).info(
            f"Logging configured for {settings.ENVIRONMENT.value} environment",
            extra={
                "log_level": settings.LOG_LEVEL,
                "console_enabled": settings.LOG_CONSOLE_ENABLED,
                "file_enabled": settings.LOG_FILE_ENABLED,
            },
        )


def _ensure_logging_configured() -> None:
    if not _logging_configured:
        configure_logging()


def _detect_calling_module() -> str:
    """Return ``__name__`` of the module that called ``get_logger``."""
    frame = inspect.currentframe()
    try:
        for _ in range(2):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return "knowledge_base"
        return str(frame.f_globals.get("__name__", "knowledge_base"))
    finally:
        del frame
