"""FastAPI dependencies for use in API endpoints."""

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.database import async_session
from ...modules.knowledge.search_tool import SearchKnowledgeTool
from ...modules.knowledge.services import KnowledgeBaseService
from ...modules.knowledge.services import get_knowledge_service as build_knowledge_service

DbSession = Annotated[AsyncSession, Depends(async_session)]


async def get_owner_id(x_user_id: Annotated[Optional[str], Header()] = None) -> str:
    """Read the caller identity set by the upstream gateway.

    Raises:
        HTTPException: 401 when the ``X-User-Id`` header is missing or blank.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return x_user_id.strip()


OwnerId = Annotated[str, Depends(get_owner_id)]


def get_knowledge_service() -> KnowledgeBaseService:
    """Dependency for providing the KnowledgeBaseService instance."""
    return build_knowledge_service()


def get_search_tool(
    knowledge_service: Annotated[KnowledgeBaseService, Depends(get_knowledge_service)],
) -> SearchKnowledgeTool:
    """Dependency for providing a SearchKnowledgeTool bound to the knowledge service."""
    return SearchKnowledgeTool(knowledge_service)
