"""Chunk reads for documents and owners."""

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.indexing.base import ChunkVector
from ...infrastructure.logging import get_logger
from ..common.exceptions import DocumentStoreError
from ..document.models import Document
from .crud import chunk_crud
from .models import Chunk
from .schemas import ChunkRead

logger = get_logger(__name__)


class ChunkService:
    """Service for reading stored chunks.

    Chunks are only ever written together with their document (see
    ``DocumentService``), so this service is read-only.
    """

    async def get_chunks_by_document(self, document_id: UUID, db: AsyncSession) -> List[ChunkRead]:
        """Get a document's chunks in ``chunk_index`` order.

        Args:
            document_id: Document to read
            db: Database session

        Returns:
            The chunks, or an empty list for an unknown document

        Raises:
            DocumentStoreError: If the database could not be read
        """
        stmt = await chunk_crud.select(document_id=document_id, sort_columns="chunk_index", sort_orders="asc")
        try:
            result = await db.execute(stmt)
            rows = result.mappings().all()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to read chunks of document {document_id}: {e}", exc_info=True)
            raise DocumentStoreError(f"Failed to read chunks of document {document_id}") from e

        chunks = []
        for row in rows:
            chunk_data_dict = dict(row)
            chunk_data_dict["metadata"] = chunk_data_dict.pop("extra_metadata", None) or {}
            chunks.append(ChunkRead(**chunk_data_dict))
        return chunks

    async def get_owner_chunk_vectors(self, owner_id: str, db: AsyncSession) -> List[ChunkVector]:
        """Load every chunk vector in the owner's documents.

        Vectors come back ordered by document upload time, then document id,
        then ``chunk_index``; ranking uses this order to break ties.

        Raises:
            DocumentStoreError: If the database could not be read
        """
        stmt = (
            select(Chunk)
            .join(Document, Document.id == Chunk.document_id)
            .where(Document.owner_id == owner_id)
            .order_by(Document.created_at, Document.id, Chunk.chunk_index)
        )
        try:
            result = await db.execute(stmt)
            chunks = result.scalars().all()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to load chunk vectors: {e}", exc_info=True, extra={"owner_id": owner_id})
            raise DocumentStoreError("Failed to load chunk vectors") from e

        return [
            ChunkVector(
                chunk_id=chunk.id,
                document_id=chunk.document_id,
                content=chunk.content,
                embedding=chunk.embedding,
                chunk_index=chunk.chunk_index,
                metadata=chunk.extra_metadata or {},
                created_at=chunk.created_at,
            )
            for chunk in chunks
        ]
