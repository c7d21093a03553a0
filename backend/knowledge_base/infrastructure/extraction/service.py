"""Turn uploaded file bytes into plain text."""

import asyncio
import io
from typing import Callable, Dict, Union

import pytesseract
from PIL import Image, ImageOps
from pypdf import PdfReader

from ...modules.common.exceptions import ExtractionFailedError, UnsupportedFileKindError
from ..logging import get_logger
from .kinds import FileKind

logger = get_logger(__name__)

EMPTY_PDF_PLACEHOLDER = (
    "[PDF Content] - This PDF appears to be empty or contains only images. File size: {size} bytes."
)


class ContentExtractor:
    """Extract searchable text from pdf, txt and image uploads.

    Each ``FileKind`` has exactly one handler. PDF parsing and OCR block, so
    they run in a worker thread bounded by ``timeout`` seconds. Any failure
    of the underlying library surfaces as ``ExtractionFailedError`` with the
    original exception chained as its cause.

    Example:
        ```python
        extractor = ContentExtractor(timeout=60.0)
        text = await extractor.extract(pdf_bytes, FileKind.PDF)
        ```
    """

    def __init__(self, timeout: float = 60.0, ocr_language: str = "eng"):
        """Initialize the extractor.

        Args:
            timeout: Seconds allowed for one extraction.
            ocr_language: Tesseract language code for image uploads.
        """
        self.timeout = timeout
        self.ocr_language = ocr_language
        self._handlers: Dict[FileKind, Callable[[bytes], str]] = {
            FileKind.PDF: self._extract_pdf,
            FileKind.TXT: self._extract_txt,
            FileKind.IMAGE: self._extract_image,
        }

    async def extract(self, data: bytes, kind: Union[FileKind, str]) -> str:
        """Extract text from ``data``.

        Args:
            data: Raw file bytes.
            kind: The file kind, as a ``FileKind`` or its string value.

        Returns:
            The extracted text. May be empty for blank text files or
            images without recognisable text.

        Raises:
            UnsupportedFileKindError: If ``kind`` has no handler.
            ExtractionFailedError: If the parser or OCR engine failed.
        """
        try:
            file_kind = FileKind(kind)
        except ValueError as e:
            raise UnsupportedFileKindError(f"Unsupported file type: {kind}") from e

        handler = self._handlers[file_kind]

        try:
            return await asyncio.wait_for(asyncio.to_thread(handler, data), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ExtractionFailedError(
                f"Extracting {file_kind.value} content timed out after {self.timeout}s"
            ) from e
        except Exception as e:
            logger.error(f"Failed to extract {file_kind.value} content: {e}")
            raise ExtractionFailedError(f"Failed to process {file_kind.value} file") from e

    @staticmethod
    def _extract_txt(data: bytes) -> str:
        return data.decode("utf-8", errors="replace")

    @staticmethod
    def _extract_pdf(data: bytes) -> str:
        reader = PdfReader(io.BytesIO(data))
        text = "\n".join(page.extract_text() or "" for page in reader.pages).strip()
        if not text:
            return EMPTY_PDF_PLACEHOLDER.format(size=len(data))
        return text

    def _extract_image(self, data: bytes) -> str:
        with Image.open(io.BytesIO(data)) as image:
            prepared = ImageOps.autocontrast(ImageOps.grayscale(image))
            return pytesseract.image_to_string(prepared, lang=self.ocr_language)
