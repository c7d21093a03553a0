"""Integration tests for the knowledge base against PostgreSQL."""

import pytest
from sqlalchemy import func, select

from knowledge_base.infrastructure.extraction import FileKind
from knowledge_base.modules.chunk.models import Chunk


class TestKnowledgeBaseOnPostgres:
    """Ingestion, search and cascade delete on a real PostgreSQL server."""

    @pytest.mark.asyncio
    async def test_ingest_search_delete(self, knowledge_service, pg_session):
        refunds = await knowledge_service.add_document(
            b"refund refund payment", "refunds.txt", FileKind.TXT, "Refunds", "user-1", pg_session
        )
        await knowledge_service.add_document(b"campus exam", "campus.txt", FileKind.TXT, None, "user-1", pg_session)
        await knowledge_service.add_document(b"refund", "theirs.txt", FileKind.TXT, None, "user-2", pg_session)

        results = await knowledge_service.search("refund", "user-1", pg_session)

        assert [r.document.id for r in results] == [refunds.id]
        assert results[0].similarity == pytest.approx(2 / 5**0.5)

        assert await knowledge_service.delete_document(refunds.id, "user-1", pg_session) is True
        remaining = await pg_session.execute(select(func.count(Chunk.id)).where(Chunk.document_id == refunds.id))
        assert remaining.scalar_one() == 0
        assert await knowledge_service.search("refund", "user-1", pg_session) == []

    @pytest.mark.asyncio
    async def test_reprocess_replaces_chunks(self, knowledge_service, pg_session):
        document = await knowledge_service.add_document(
            "".join(f"tok{i:06d} " for i in range(250)).encode("utf-8"),
            "tokens.txt",
            FileKind.TXT,
            None,
            "user-1",
            pg_session,
        )
        assert document.chunk_count == 3

        updated = await knowledge_service.reprocess_document(document.id, "user-1", pg_session)

        assert updated.chunk_count == 1
        assert len(await knowledge_service.get_chunks(document.id, pg_session)) == 1
