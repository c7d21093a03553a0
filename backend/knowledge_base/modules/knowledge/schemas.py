"""Pydantic schemas for knowledge base search."""

from typing import Annotated, List, Optional

from pydantic import BaseModel, Field

from ..chunk.schemas import ChunkRead
from ..document.schemas import DocumentRead, DocumentSummary


class SearchResult(BaseModel):
    """A ranked chunk joined to its parent document."""

    chunk: ChunkRead
    document: DocumentRead
    similarity: float = Field(ge=-1.0, le=1.0, description="Cosine similarity between query and chunk")


class KnowledgeSearchRequest(BaseModel):
    """Body of a knowledge base search."""

    query: Annotated[str, Field(min_length=1, max_length=2000, description="Natural-language query")]
    limit: Annotated[int, Field(ge=1, le=50, description="Maximum number of passages")] = 10


class KnowledgeSearchHit(BaseModel):
    """One passage in a search tool response."""

    rank: int
    content: str
    source: str = Field(description="Title of the document the passage comes from")
    filename: str
    similarity: int = Field(description="Similarity as a rounded percentage")


class KnowledgeSearchResponse(BaseModel):
    """Search tool response; failures are reported here rather than raised."""

    success: bool
    message: str
    content: Optional[str] = None
    sources: List[str] = Field(default_factory=list)
    total_chunks: int = 0
    results: List[KnowledgeSearchHit] = Field(default_factory=list)
    error: Optional[str] = None


class DeleteDocumentResponse(BaseModel):
    success: bool = True


class UploadDocumentResponse(BaseModel):
    success: bool = True
    document: DocumentSummary
