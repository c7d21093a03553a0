"""Domain exception classes for business logic errors."""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for all domain-specific errors."""

    def __init__(self, message: str = "", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ResourceNotFoundError(DomainError):
    """Raised when a requested resource cannot be found."""

    pass


class ValidationError(DomainError):
    """Raised when data validation fails."""

    pass


class DocumentNotFoundError(ResourceNotFoundError):
    """Raised when a document does not exist or belongs to another owner."""

    pass


class UnsupportedFileKindError(ValidationError):
    """Raised when a file kind has no content extractor."""

    pass


class ExtractionFailedError(DomainError):
    """Raised when text could not be extracted from an uploaded file."""

    pass


class EmbeddingUnavailableError(DomainError):
    """Raised when no embedding backend answered and the fallback is disabled."""

    pass


class IngestionFailedError(DomainError):
    """Raised when a document and its chunks could not be stored."""

    pass


class DocumentStoreError(DomainError):
    """Raised when the document store could not be read or updated."""

    pass
