"""Knowledge base ingestion and retrieval."""

from functools import lru_cache
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.chunking import RecursiveTextSplitter
from ...infrastructure.config.settings import get_settings
from ...infrastructure.embedding import Embedder, get_embedder
from ...infrastructure.extraction import ContentExtractor, FileKind
from ...infrastructure.indexing import ChunkVector, LinearSearchIndex
from ...infrastructure.logging import get_logger
from ..chunk.schemas import ChunkCreate, ChunkRead
from ..chunk.services import ChunkService
from ..common.exceptions import DocumentNotFoundError
from ..document.schemas import DocumentCreate, DocumentRead
from ..document.services import DocumentService
from .schemas import SearchResult

logger = get_logger(__name__)

REPROCESS_PLACEHOLDER = (
    "This document ({filename}) needs to be re-uploaded to extract its content properly. "
    "The PDF text extraction has been improved and will now work correctly for new uploads."
)


class KnowledgeBaseService:
    """Ingest documents into an owner's knowledge base and search it.

    Ingestion runs extract -> split -> embed -> store; the store write is a
    single transaction. Retrieval embeds the query, loads the owner's chunk
    vectors and ranks them by cosine similarity.

    Collaborators are injected so tests can swap the embedder or extractor;
    the database session is passed to each call.
    """

    def __init__(
        self,
        extractor: Optional[ContentExtractor] = None,
        splitter: Optional[RecursiveTextSplitter] = None,
        embedder: Optional[Embedder] = None,
        document_service: Optional[DocumentService] = None,
        chunk_service: Optional[ChunkService] = None,
    ):
        settings = get_settings()
        self.extractor = extractor or ContentExtractor(
            timeout=settings.EXTRACTION_TIMEOUT_SECONDS, ocr_language=settings.OCR_LANGUAGE
        )
        self.splitter = splitter or RecursiveTextSplitter(
            chunk_size=settings.CHUNK_SIZE, chunk_overlap=settings.CHUNK_OVERLAP
        )
        self.embedder = embedder or get_embedder()
        self.document_service = document_service or DocumentService()
        self.chunk_service = chunk_service or ChunkService()

    async def add_document(
        self,
        data: bytes,
        filename: str,
        file_kind: Union[FileKind, str],
        title: Optional[str],
        owner_id: str,
        db: AsyncSession,
    ) -> DocumentRead:
        """Extract, chunk, embed and store an uploaded file.

        Args:
            data: Raw file bytes
            filename: Original file name
            file_kind: Kind of the file
            title: Display title; defaults to ``filename``
            owner_id: Identity that will own the document
            db: Database session

        Returns:
            The stored document with its chunk count

        Raises:
            UnsupportedFileKindError: If ``file_kind`` is not pdf, txt or image
            ExtractionFailedError: If no text could be extracted
            EmbeddingUnavailableError: If embedding failed with the fallback disabled
            IngestionFailedError: If the store write failed
        """
        content = await self.extractor.extract(data, file_kind)
        kind = FileKind(file_kind)
        chunks = await self._build_chunks(content, filename)

        document = await self.document_service.create_document(
            DocumentCreate(
                owner_id=owner_id,
                title=title or filename,
                filename=filename,
                file_kind=kind,
                content=content,
                file_size=len(data),
            ),
            chunks,
            db,
        )
        logger.info(
            f"Ingested {filename} as document {document.id} with {len(chunks)} chunks",
            extra={"owner_id": owner_id, "file_kind": kind.value},
        )
        return document

    async def reprocess_document(self, document_id: UUID, owner_id: str, db: AsyncSession) -> DocumentRead:
        """Rebuild a document's content and chunks.

        The original bytes are not kept, so the content becomes a notice
        asking the owner to upload the file again; that notice is chunked
        and embedded like a text upload.

        Raises:
            DocumentNotFoundError: If the document is missing or not owned by ``owner_id``
        """
        document = await self.document_service.get_document(document_id, owner_id, db)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        placeholder = REPROCESS_PLACEHOLDER.format(filename=document.filename)
        content = await self.extractor.extract(placeholder.encode("utf-8"), FileKind.TXT)
        chunks = await self._build_chunks(content, document.filename)

        updated = await self.document_service.replace_content(document_id, owner_id, content, chunks, db)
        logger.info(f"Reprocessed document {document_id} into {len(chunks)} chunks", extra={"owner_id": owner_id})
        return updated

    async def search(
        self,
        query: str,
        owner_id: str,
        db: AsyncSession,
        limit: Optional[int] = None,
        similarity_threshold: Optional[float] = None,
    ) -> List[SearchResult]:
        """Rank the owner's chunks against ``query``.

        Args:
            query: Natural-language query
            owner_id: Identity whose documents are searched
            db: Database session
            limit: Maximum number of results (default from settings, 5)
            similarity_threshold: Results must score strictly above this (default from settings, 0.1)

        Returns:
            Results ordered by similarity, highest first; empty when nothing qualifies
        """
        settings = get_settings()
        limit = settings.SEARCH_DEFAULT_LIMIT if limit is None else limit
        threshold = settings.SEARCH_DEFAULT_THRESHOLD if similarity_threshold is None else similarity_threshold

        query_embedding = await self.embedder.embed(query)
        vectors = await self.chunk_service.get_owner_chunk_vectors(owner_id, db)

        index = LinearSearchIndex(dimension=len(query_embedding.vector))
        await index.add_vectors(self._comparable_vectors(vectors, index))
        matches = await index.search(query_embedding.vector, k=limit, similarity_threshold=threshold)
        if not matches:
            return []

        documents = await self.document_service.get_documents_by_ids(
            [match.vector.document_id for match in matches], owner_id, db
        )

        results = []
        for match in matches:
            document = documents.get(match.vector.document_id)
            if document is None:
                continue
            results.append(
                SearchResult(
                    chunk=_chunk_read(match.vector),
                    document=document,
                    similarity=max(-1.0, min(1.0, match.similarity_score)),
                )
            )
        return results

    async def list_documents(self, owner_id: str, db: AsyncSession) -> List[DocumentRead]:
        return await self.document_service.get_documents(owner_id, db)

    async def delete_document(self, document_id: UUID, owner_id: str, db: AsyncSession) -> bool:
        return await self.document_service.delete_document(document_id, owner_id, db)

    async def get_chunks(self, document_id: UUID, db: AsyncSession) -> List[ChunkRead]:
        return await self.chunk_service.get_chunks_by_document(document_id, db)

    async def _build_chunks(self, content: str, filename: str) -> List[ChunkCreate]:
        texts = self.splitter.split_text(content)
        embeddings = await self.embedder.embed_many(texts)

        fallback_count = sum(1 for embedding in embeddings if embedding.fallback)
        if fallback_count:
            logger.warning(f"{fallback_count} of {len(texts)} chunks of {filename} use the hash fallback embedding")

        return [
            ChunkCreate(
                content=text,
                embedding=embedding.vector,
                chunk_index=i,
                metadata={
                    "filename": filename,
                    "chunk_length": len(text),
                    "total_chunks": len(texts),
                    "fallback": embedding.fallback,
                    "embedding_model": embedding.model,
                },
            )
            for i, (text, embedding) in enumerate(zip(texts, embeddings))
        ]

    @staticmethod
    def _comparable_vectors(vectors: List[ChunkVector], index: LinearSearchIndex) -> List[ChunkVector]:
        comparable = [vector for vector in vectors if index.accepts(vector.embedding)]
        skipped = len(vectors) - len(comparable)
        if skipped:
            logger.warning(
                f"Skipped {skipped} chunk vectors whose dimension differs from the query ({index.dimension})"
            )
        return comparable


def _chunk_read(vector: ChunkVector) -> ChunkRead:
    return ChunkRead(
        id=vector.chunk_id,
        document_id=vector.document_id,
        content=vector.content,
        embedding=vector.embedding,
        chunk_index=vector.chunk_index,
        metadata=vector.metadata,
        created_at=vector.created_at,
    )


@lru_cache()
def get_knowledge_service() -> KnowledgeBaseService:
    """Get the process-wide knowledge base service built from settings."""
    return KnowledgeBaseService()
