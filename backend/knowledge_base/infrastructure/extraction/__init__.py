"""Content extraction for uploaded documents."""

from .kinds import MIME_TYPE_KINDS, FileKind, kind_for_mime_type
from .service import EMPTY_PDF_PLACEHOLDER, ContentExtractor

__all__ = [
    "EMPTY_PDF_PLACEHOLDER",
    "MIME_TYPE_KINDS",
    "ContentExtractor",
    "FileKind",
    "kind_for_mime_type",
]
