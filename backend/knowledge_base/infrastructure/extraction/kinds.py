from enum import Enum
from typing import Dict, Optional


class FileKind(str, Enum):
    """File kinds the extractor understands."""

    PDF = "pdf"
    TXT = "txt"
    IMAGE = "image"


MIME_TYPE_KINDS: Dict[str, FileKind] = {
    "application/pdf": FileKind.PDF,
    "text/plain": FileKind.TXT,
    "image/jpeg": FileKind.IMAGE,
    "image/png": FileKind.IMAGE,
    "image/webp": FileKind.IMAGE,
}


def kind_for_mime_type(mime_type: Optional[str]) -> Optional[FileKind]:
    """Map a declared MIME type (parameters ignored) to a file kind, or ``None``."""
    if not mime_type:
        return None
    return MIME_TYPE_KINDS.get(mime_type.split(";", 1)[0].strip().lower())
