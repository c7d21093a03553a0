"""Pydantic schemas for document entities."""

from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ...infrastructure.extraction.kinds import FileKind
from ..common.schemas import TimestampSchema


class DocumentBase(BaseModel):
    """Base schema for document data."""

    title: Annotated[str, Field(min_length=1, max_length=255, description="Document title")]
    filename: Annotated[str, Field(min_length=1, max_length=255, description="Original file name")]
    file_kind: FileKind = Field(description="Kind of file the content was extracted from")


class DocumentCreate(DocumentBase):
    """Schema for creating a new document."""

    owner_id: Annotated[str, Field(min_length=1, max_length=255, description="Identity that owns the document")]
    content: Optional[str] = Field(default=None, description="Extracted full text")
    file_size: int = Field(default=0, ge=0, description="Size of the uploaded file in bytes")


class DocumentRead(TimestampSchema, DocumentBase):
    """Schema for reading document data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: str
    content: Optional[str] = None
    file_size: int = 0
    chunk_count: int = Field(default=0, description="Number of chunks in document")


class DocumentSummary(BaseModel):
    """Listing view of a document: never carries content or embeddings."""

    id: UUID
    title: str
    filename: str
    file_kind: FileKind
    uploaded_at: datetime
    chunk_count: int = 0

    @classmethod
    def from_document(cls, document: DocumentRead) -> "DocumentSummary":
        return cls(
            id=document.id,
            title=document.title,
            filename=document.filename,
            file_kind=document.file_kind,
            uploaded_at=document.created_at,
            chunk_count=document.chunk_count,
        )


class DocumentListResponse(BaseModel):
    """Schema for the document list response."""

    documents: List[DocumentSummary]
    total: int
