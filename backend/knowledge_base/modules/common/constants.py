"""Common constants used across the application."""

from typing import Callable, Dict, Type

from fastapi import HTTPException, status

from .exceptions import (
    DocumentStoreError,
    DomainError,
    EmbeddingUnavailableError,
    ExtractionFailedError,
    IngestionFailedError,
    ResourceNotFoundError,
    UnsupportedFileKindError,
    ValidationError,
)

# Checked in order; subclasses must come before their bases.
EXCEPTION_MAPPING: Dict[Type[DomainError], Callable[[str], HTTPException]] = {
    UnsupportedFileKindError: lambda message: HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message),
    ResourceNotFoundError: lambda message: HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message),
    ValidationError: lambda message: HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=message),
    ExtractionFailedError: lambda message: HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=message),
    EmbeddingUnavailableError: lambda message: HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=message),
    IngestionFailedError: lambda message: HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message),
    DocumentStoreError: lambda message: HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message),
}
