from ..infrastructure.app_factory import create_application
from ..infrastructure.config.settings import get_settings
from ..interfaces.api import router as api_router

settings = get_settings()

app = create_application(
    router=api_router,
    settings=settings,
    title="Knowledge Base API",
    summary="Per-account document knowledge base with semantic search",
    description="""
    # Knowledge Base API

    Upload PDFs, text files and images into a private knowledge base and
    retrieve the passages most relevant to a question.

    ## Features

    - Text extraction from PDF, plain text and images (OCR)
    - Overlapping chunking and embedding of every document
    - Owner-scoped storage keyed by the `X-User-Id` header
    - Cosine-similarity search with a relevance threshold
    """,
    version=settings.VERSION,
)
