"""Owner-scoped document storage."""

from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.logging import get_logger
from ..chunk.models import Chunk
from ..chunk.schemas import ChunkCreate
from ..common.exceptions import DocumentNotFoundError, DocumentStoreError, IngestionFailedError
from .crud import document_crud
from .models import Document
from .schemas import DocumentCreate, DocumentRead

logger = get_logger(__name__)


class DocumentService:
    """Service for storing and reading an owner's documents.

    Every read and delete is filtered by ``owner_id``; a document owned by
    someone else behaves exactly like a missing one. Writes that touch a
    document and its chunks happen in a single transaction, so a failure
    never leaves a document without its chunks (or chunks without their
    document) visible.
    """

    async def create_document(
        self,
        document_data: DocumentCreate,
        chunks: Sequence[ChunkCreate],
        db: AsyncSession,
    ) -> DocumentRead:
        """Store a document together with all of its chunks.

        Args:
            document_data: Document creation data
            chunks: Chunks in split order; may be empty
            db: Database session

        Returns:
            The stored document with its chunk count

        Raises:
            IngestionFailedError: If the transaction could not be committed
        """
        document = Document(
            owner_id=document_data.owner_id,
            title=document_data.title,
            filename=document_data.filename,
            file_kind=document_data.file_kind.value,
            content=document_data.content,
            file_size=document_data.file_size,
        )
        try:
            # chunks reference the document row, which must be inserted first
            db.add(document)
            await db.flush()
            db.add_all(_chunk_rows(document.id, chunks))
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to store document {document_data.filename}: {e}", exc_info=True)
            raise IngestionFailedError(f"Failed to store document {document_data.filename}") from e

        return _to_read(document, chunk_count=len(chunks))

    async def get_document(
        self,
        document_id: UUID,
        owner_id: str,
        db: AsyncSession,
    ) -> Optional[DocumentRead]:
        """Get one of the owner's documents with its chunk count.

        Returns:
            The document, or None when it does not exist or is not owned by ``owner_id``

        Raises:
            DocumentStoreError: If the database could not be read
        """
        stmt = await document_crud.select(id=document_id, owner_id=owner_id)
        stmt = (
            stmt.add_columns(func.count(Chunk.id).label("chunk_count"))
            .outerjoin(Chunk, Document.id == Chunk.document_id)
            .group_by(Document.id)
        )

        try:
            result = await db.execute(stmt)
            row = result.first()
        except SQLAlchemyError as e:
            raise await _store_error(db, f"read document {document_id}", e) from e

        if not row:
            return None
        return DocumentRead(**_row_to_dict(row))

    async def get_documents(self, owner_id: str, db: AsyncSession) -> List[DocumentRead]:
        """Get all of the owner's documents, newest upload first.

        Raises:
            DocumentStoreError: If the database could not be read
        """
        stmt = await document_crud.select(owner_id=owner_id, sort_columns="created_at", sort_orders="desc")
        stmt = (
            stmt.add_columns(func.count(Chunk.id).label("chunk_count"))
            .outerjoin(Chunk, Document.id == Chunk.document_id)
            .group_by(Document.id)
        )

        try:
            result = await db.execute(stmt)
            rows = result.fetchall()
        except SQLAlchemyError as e:
            raise await _store_error(db, "list documents", e) from e

        return [DocumentRead(**_row_to_dict(row)) for row in rows]

    async def get_documents_by_ids(
        self,
        document_ids: Sequence[UUID],
        owner_id: str,
        db: AsyncSession,
    ) -> Dict[UUID, DocumentRead]:
        """Load several of the owner's documents at once, keyed by id, with chunk counts.

        Raises:
            DocumentStoreError: If the database could not be read
        """
        if not document_ids:
            return {}

        stmt = (
            select(Document, func.count(Chunk.id).label("chunk_count"))
            .outerjoin(Chunk, Document.id == Chunk.document_id)
            .where(Document.id.in_(set(document_ids)), Document.owner_id == owner_id)
            .group_by(Document.id)
        )

        try:
            result = await db.execute(stmt)
            rows = result.all()
        except SQLAlchemyError as e:
            raise await _store_error(db, "load documents", e) from e

        return {document.id: _to_read(document, chunk_count=chunk_count) for document, chunk_count in rows}

    async def delete_document(
        self,
        document_id: UUID,
        owner_id: str,
        db: AsyncSession,
    ) -> bool:
        """Delete a document and, through the foreign key cascade, its chunks.

        Args:
            document_id: Document ID to delete
            owner_id: Identity the document must belong to
            db: Database session

        Returns:
            True if a row was removed, False for missing or foreign ids

        Raises:
            DocumentStoreError: If the delete could not be committed
        """
        try:
            result = await db.execute(
                delete(Document).where(Document.id == document_id, Document.owner_id == owner_id)
            )
            await db.commit()
        except SQLAlchemyError as e:
            raise await _store_error(db, f"delete document {document_id}", e) from e

        deleted = bool(result.rowcount)
        if deleted:
            logger.info(f"Deleted document {document_id}", extra={"owner_id": owner_id})
        return deleted

    async def replace_content(
        self,
        document_id: UUID,
        owner_id: str,
        content: str,
        chunks: Sequence[ChunkCreate],
        db: AsyncSession,
    ) -> DocumentRead:
        """Swap a document's content and chunks in one transaction.

        Args:
            document_id: Document to update
            owner_id: Identity the document must belong to
            content: New full text
            chunks: New chunks in split order
            db: Database session

        Returns:
            The updated document with its new chunk count

        Raises:
            DocumentNotFoundError: If the document is missing or not owned by ``owner_id``
            DocumentStoreError: If the document could not be read
            IngestionFailedError: If the transaction could not be committed
        """
        try:
            document = await db.get(Document, document_id)
        except SQLAlchemyError as e:
            raise await _store_error(db, f"read document {document_id}", e) from e

        if document is None or document.owner_id != owner_id:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        try:
            await db.execute(delete(Chunk).where(Chunk.document_id == document_id))
            document.content = content
            db.add_all(_chunk_rows(document_id, chunks))
            await db.flush()
            await db.commit()
            await db.refresh(document)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to replace content of document {document_id}: {e}", exc_info=True)
            raise IngestionFailedError(f"Failed to update document {document_id}") from e

        return _to_read(document, chunk_count=len(chunks))


async def _store_error(db: AsyncSession, action: str, error: SQLAlchemyError) -> DocumentStoreError:
    await db.rollback()
    logger.error(f"Failed to {action}: {error}", exc_info=True)
    return DocumentStoreError(f"Failed to {action}")


def _chunk_rows(document_id: UUID, chunks: Sequence[ChunkCreate]) -> List[Chunk]:
    return [
        Chunk(
            document_id=document_id,
            content=chunk.content,
            embedding=list(chunk.embedding),
            chunk_index=chunk.chunk_index,
            extra_metadata=dict(chunk.metadata),
        )
        for chunk in chunks
    ]


def _to_read(document: Document, chunk_count: int = 0) -> DocumentRead:
    return DocumentRead(
        id=document.id,
        owner_id=document.owner_id,
        title=document.title,
        filename=document.filename,
        file_kind=document.file_kind,
        content=document.content,
        file_size=document.file_size,
        created_at=document.created_at,
        updated_at=document.updated_at,
        chunk_count=chunk_count,
    )


def _row_to_dict(row: Any) -> Dict[str, Any]:
    return {
        "id": row.id,
        "owner_id": row.owner_id,
        "title": row.title,
        "filename": row.filename,
        "file_kind": row.file_kind,
        "content": row.content,
        "file_size": row.file_size,
        "created_at": row.created_at,
        "updated_at": row.updated_at,
        "chunk_count": row.chunk_count,
    }
