"""Knowledge base API endpoints."""

from typing import Annotated, List, NoReturn, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from ....infrastructure.config.settings import get_settings
from ....infrastructure.extraction import kind_for_mime_type
from ....infrastructure.logging import get_logger
from ....modules.chunk.schemas import ChunkRead
from ....modules.common.utils.error_handler import handle_exception
from ....modules.document.schemas import DocumentListResponse, DocumentSummary
from ....modules.knowledge.schemas import (
    DeleteDocumentResponse,
    KnowledgeSearchRequest,
    KnowledgeSearchResponse,
    UploadDocumentResponse,
)
from ....modules.knowledge.search_tool import SearchKnowledgeTool
from ....modules.knowledge.services import KnowledgeBaseService
from ..dependencies import DbSession, OwnerId, get_knowledge_service, get_search_tool

logger = get_logger(__name__)

router = APIRouter(prefix="/knowledge", tags=["Knowledge Base"])

KnowledgeService = Annotated[KnowledgeBaseService, Depends(get_knowledge_service)]


def _raise_http(e: Exception, action: str) -> NoReturn:
    http_exc = handle_exception(e)
    if http_exc:
        raise http_exc from e
    logger.error(f"Unexpected error while trying to {action}: {e}", exc_info=True)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to {action}"
    ) from e


@router.post(
    "/upload",
    summary="Upload Document",
    description="""
    Uploads a file into the caller's knowledge base.

    The file's text is extracted, split into overlapping chunks and embedded
    so it can be found by semantic search.

    - **file**: PDF, plain text, JPEG, PNG or WebP, at most 10 MB
    - **title**: Optional display title, defaults to the file name
    """,
    responses={
        200: {"description": "Document ingested"},
        400: {"description": "Missing file, unsupported file type or file too large"},
        401: {"description": "Caller identity missing"},
        422: {"description": "Text could not be extracted from the file"},
    },
)
async def upload_document(
    owner_id: OwnerId,
    db: DbSession,
    knowledge_service: KnowledgeService,
    file: Annotated[Optional[UploadFile], File(description="File to ingest")] = None,
    title: Annotated[Optional[str], Form(description="Display title")] = None,
) -> UploadDocumentResponse:
    """Ingest an uploaded file."""
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    file_kind = kind_for_mime_type(file.content_type)
    if file_kind is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unsupported file type. Please upload PDF, TXT, or image files.",
        )

    max_size = get_settings().MAX_UPLOAD_SIZE_BYTES
    data = await file.read(max_size + 1)
    if len(data) > max_size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size is {max_size // (1024 * 1024)}MB.",
        )

    filename = file.filename or "upload"
    try:
        document = await knowledge_service.add_document(data, filename, file_kind, title, owner_id, db)
    except Exception as e:
        _raise_http(e, "upload document")

    return UploadDocumentResponse(document=DocumentSummary.from_document(document))


@router.get(
    "/documents",
    summary="List Documents",
    description="""
    Lists the caller's documents, most recently uploaded first.

    Each entry carries the chunk count but never the extracted content or
    embeddings.
    """,
    responses={
        200: {"description": "The caller's documents"},
        401: {"description": "Caller identity missing"},
    },
)
async def list_documents(
    owner_id: OwnerId,
    db: DbSession,
    knowledge_service: KnowledgeService,
) -> DocumentListResponse:
    """List the caller's documents."""
    try:
        documents = await knowledge_service.list_documents(owner_id, db)
    except Exception as e:
        _raise_http(e, "fetch documents")

    summaries = [DocumentSummary.from_document(document) for document in documents]
    return DocumentListResponse(documents=summaries, total=len(summaries))


@router.get(
    "/documents/{document_id}/chunks",
    summary="List Document Chunks",
    description="Returns a document's chunks in split order.",
    responses={
        200: {"description": "The document's chunks"},
        401: {"description": "Caller identity missing"},
        404: {"description": "Document not found"},
    },
)
async def get_document_chunks(
    document_id: UUID,
    owner_id: OwnerId,
    db: DbSession,
    knowledge_service: KnowledgeService,
) -> List[ChunkRead]:
    """Get the chunks of one of the caller's documents."""
    try:
        document = await knowledge_service.document_service.get_document(document_id, owner_id, db)
        if document is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
        return await knowledge_service.get_chunks(document_id, db)
    except Exception as e:
        _raise_http(e, "fetch chunks")


@router.delete(
    "/documents/{document_id}",
    summary="Delete Document",
    description="""
    Deletes one of the caller's documents together with all of its chunks.

    The call is idempotent: deleting a missing document, or one owned by
    someone else, also reports success and changes nothing.
    """,
    responses={
        200: {"description": "Document deleted or already absent"},
        401: {"description": "Caller identity missing"},
    },
)
async def delete_document(
    document_id: UUID,
    owner_id: OwnerId,
    db: DbSession,
    knowledge_service: KnowledgeService,
) -> DeleteDocumentResponse:
    """Delete a document."""
    try:
        await knowledge_service.delete_document(document_id, owner_id, db)
    except Exception as e:
        _raise_http(e, "delete document")
    return DeleteDocumentResponse(success=True)


@router.post(
    "/documents/{document_id}/reprocess",
    summary="Reprocess Document",
    description="""
    Rebuilds a document's content and chunks.

    Uploaded bytes are not kept, so the document's content is replaced with
    a notice asking for the file to be uploaded again.
    """,
    responses={
        200: {"description": "Document reprocessed"},
        401: {"description": "Caller identity missing"},
        404: {"description": "Document not found"},
    },
)
async def reprocess_document(
    document_id: UUID,
    owner_id: OwnerId,
    db: DbSession,
    knowledge_service: KnowledgeService,
) -> UploadDocumentResponse:
    """Reprocess a document."""
    try:
        document = await knowledge_service.reprocess_document(document_id, owner_id, db)
    except Exception as e:
        _raise_http(e, "reprocess document")
    return UploadDocumentResponse(document=DocumentSummary.from_document(document))


@router.post(
    "/search",
    summary="Search Knowledge Base",
    description="""
    Finds the passages of the caller's documents most similar to the query.

    Search problems are reported in the body with `success: false` rather
    than as HTTP errors.

    - **query**: Natural-language query
    - **limit**: Maximum number of passages (default: 10)
    """,
    responses={
        200: {"description": "Search outcome"},
        401: {"description": "Caller identity missing"},
    },
)
async def search_knowledge(
    request: KnowledgeSearchRequest,
    owner_id: OwnerId,
    db: DbSession,
    search_tool: Annotated[SearchKnowledgeTool, Depends(get_search_tool)],
) -> KnowledgeSearchResponse:
    """Search the caller's documents."""
    return await search_tool.execute(request.query, owner_id, db, limit=request.limit)
