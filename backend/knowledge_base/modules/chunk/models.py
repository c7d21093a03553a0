"""SQLAlchemy models for chunk entities."""

from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.models import TimestampMixin
from ...infrastructure.database.session import Base


class Chunk(Base, TimestampMixin):
    """A bounded slice of a document's text with its embedding.

    ``chunk_index`` is the zero-based position of the chunk in split order.
    Embeddings are stored as JSON float arrays so the same schema works on
    PostgreSQL and SQLite.
    """

    __tablename__ = "knowledge_chunks"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default_factory=uuid4, init=False)
    document_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("knowledge_documents.id", ondelete="CASCADE"), index=True
    )
    content: Mapped[str] = mapped_column(Text)
    embedding: Mapped[List[float]] = mapped_column(JSON)
    chunk_index: Mapped[int] = mapped_column(Integer)
    extra_metadata: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, default=None)
