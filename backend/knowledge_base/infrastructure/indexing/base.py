"""Value types shared by the vector index and its callers."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID


@dataclass
class ChunkVector:
    """A stored chunk with its embedding."""

    chunk_id: UUID
    document_id: UUID
    content: str
    embedding: List[float]
    chunk_index: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None


@dataclass
class VectorMatch:
    """A chunk vector that scored above the similarity threshold."""

    vector: ChunkVector
    similarity_score: float
