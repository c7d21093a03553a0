"""Pydantic schemas for chunk entities."""

from typing import Annotated, Any, Dict, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..common.schemas import TimestampSchema


class ChunkBase(BaseModel):
    """Base schema for chunk data."""

    content: Annotated[str, Field(min_length=1, description="Text content of the chunk")]
    embedding: Annotated[List[float], Field(description="Vector embedding representation")]
    chunk_index: Annotated[int, Field(ge=0, description="Zero-based position of the chunk in its document")]
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Additional chunk metadata")

    @field_validator("embedding")
    @classmethod
    def validate_embedding(cls, v: List[float]) -> List[float]:
        if not v:
            raise ValueError("Embedding cannot be empty")
        if len(v) > 4096:
            raise ValueError("Embedding dimension too large (max 4096)")
        return v


class ChunkCreate(ChunkBase):
    """Schema for a chunk about to be stored with its document."""

    pass


class ChunkRead(TimestampSchema, ChunkBase):
    """Schema for reading chunk data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    document_id: UUID
