"""Knowledge base search exposed as an assistant tool."""

import math
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.config.settings import get_settings
from ...infrastructure.logging import get_logger
from .schemas import KnowledgeSearchHit, KnowledgeSearchResponse
from .services import KnowledgeBaseService

logger = get_logger(__name__)

TOOL_DESCRIPTION = (
    "Search uploaded documents for detailed information to provide comprehensive answers "
    "to user questions about courses, programs, or institutional information"
)


class SearchKnowledgeTool:
    """Search an owner's documents and package the answer for a chat assistant.

    ``execute`` never raises: missing identity, empty results and failures
    all come back as a response with ``success=False`` and a message.
    """

    name = "search_knowledge"
    description = TOOL_DESCRIPTION

    def __init__(self, knowledge_service: KnowledgeBaseService, similarity_threshold: Optional[float] = None):
        settings = get_settings()
        self.knowledge_service = knowledge_service
        self.similarity_threshold = (
            settings.SEARCH_TOOL_THRESHOLD if similarity_threshold is None else similarity_threshold
        )

    async def execute(
        self,
        query: str,
        owner_id: Optional[str],
        db: AsyncSession,
        limit: Optional[int] = None,
    ) -> KnowledgeSearchResponse:
        """Run a search on behalf of ``owner_id``.

        Args:
            query: What to look for
            owner_id: Caller identity; searches are refused without one
            db: Database session
            limit: Maximum number of passages (default 10)

        Returns:
            The packaged search response
        """
        if not owner_id:
            return KnowledgeSearchResponse(success=False, message="Authentication required")

        if limit is None:
            limit = get_settings().SEARCH_TOOL_LIMIT

        try:
            results = await self.knowledge_service.search(
                query, owner_id, db, limit=limit, similarity_threshold=self.similarity_threshold
            )
        except Exception as e:
            logger.error(f"Error searching documents: {e}", exc_info=True)
            return KnowledgeSearchResponse(success=False, message="Error searching documents", error=str(e))

        if not results:
            return KnowledgeSearchResponse(
                success=False, message="No relevant information found in uploaded documents."
            )

        sources = list(dict.fromkeys(result.document.title for result in results))
        return KnowledgeSearchResponse(
            success=True,
            message=f"Found detailed information from {len(sources)} document(s)",
            content="\n\n".join(result.chunk.content for result in results),
            sources=sources,
            total_chunks=len(results),
            results=[
                KnowledgeSearchHit(
                    rank=rank,
                    content=result.chunk.content,
                    source=result.document.title,
                    filename=result.document.filename,
                    similarity=math.floor(result.similarity * 100 + 0.5),
                )
                for rank, result in enumerate(results, start=1)
            ],
        )
