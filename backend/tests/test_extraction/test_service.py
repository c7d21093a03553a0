"""Tests for ContentExtractor."""

import asyncio
import io
import time
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image
from pypdf import PdfWriter

from knowledge_base.infrastructure.extraction import (
    EMPTY_PDF_PLACEHOLDER,
    ContentExtractor,
    FileKind,
    kind_for_mime_type,
)
from knowledge_base.modules.common.exceptions import ExtractionFailedError, UnsupportedFileKindError

SERVICE = "knowledge_base.infrastructure.extraction.service"


def blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def png_bytes(color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (32, 16), color).save(buffer, format="PNG")
    return buffer.getvalue()


def fake_reader(*page_texts):
    reader = MagicMock()
    reader.pages = []
    for text in page_texts:
        page = MagicMock()
        page.extract_text.return_value = text
        reader.pages.append(page)
    return reader


class TestMimeTypes:
    @pytest.mark.parametrize(
        "mime_type,kind",
        [
            ("application/pdf", FileKind.PDF),
            ("text/plain", FileKind.TXT),
            ("text/plain; charset=utf-8", FileKind.TXT),
            ("image/jpeg", FileKind.IMAGE),
            ("image/png", FileKind.IMAGE),
            ("IMAGE/WEBP", FileKind.IMAGE),
        ],
    )
    def test_supported(self, mime_type, kind):
        assert kind_for_mime_type(mime_type) == kind

    @pytest.mark.parametrize("mime_type", [None, "", "application/zip", "image/gif", "text/html"])
    def test_unsupported(self, mime_type):
        assert kind_for_mime_type(mime_type) is None


class TestContentExtractor:
    @pytest.fixture
    def extractor(self):
        return ContentExtractor(timeout=5.0)

    @pytest.mark.asyncio
    async def test_txt_is_decoded_verbatim(self, extractor):
        text = "  Refunds are processed within 14 days.\n\nContact billing.  "
        assert await extractor.extract(text.encode("utf-8"), FileKind.TXT) == text

    @pytest.mark.asyncio
    async def test_txt_accepts_string_kind(self, extractor):
        assert await extractor.extract(b"exam dates", "txt") == "exam dates"

    @pytest.mark.asyncio
    async def test_txt_invalid_utf8_is_replaced(self, extractor):
        result = await extractor.extract(b"caf\xe9 menu", FileKind.TXT)
        assert result == "caf� menu"

    @pytest.mark.asyncio
    async def test_empty_txt(self, extractor):
        assert await extractor.extract(b"", FileKind.TXT) == ""

    @pytest.mark.asyncio
    async def test_pdf_pages_joined_by_newline(self, extractor):
        with patch(f"{SERVICE}.PdfReader", return_value=fake_reader("  Page one", "Page two  ")):
            result = await extractor.extract(b"%PDF-fake", FileKind.PDF)

        assert result == "Page one\nPage two"

    @pytest.mark.asyncio
    async def test_pdf_page_without_text_layer(self, extractor):
        with patch(f"{SERVICE}.PdfReader", return_value=fake_reader("Intro", None, "Outro")):
            result = await extractor.extract(b"%PDF-fake", FileKind.PDF)

        assert result == "Intro\n\nOutro"

    @pytest.mark.asyncio
    async def test_pdf_without_text_returns_placeholder(self, extractor):
        data = blank_pdf()

        result = await extractor.extract(data, FileKind.PDF)

        assert result == EMPTY_PDF_PLACEHOLDER.format(size=len(data))
        assert result.startswith("[PDF Content] - This PDF appears to be empty or contains only images.")
        assert result.endswith(f"File size: {len(data)} bytes.")

    @pytest.mark.asyncio
    async def test_corrupt_pdf_raises_extraction_failed(self, extractor):
        with pytest.raises(ExtractionFailedError) as exc_info:
            await extractor.extract(b"definitely not a pdf", FileKind.PDF)

        assert exc_info.value.__cause__ is not None

    @pytest.mark.asyncio
    async def test_image_is_greyscaled_before_ocr(self, extractor):
        with patch(f"{SERVICE}.pytesseract.image_to_string", return_value="CAMPUS MAP\n") as ocr:
            result = await extractor.extract(png_bytes(), FileKind.IMAGE)

        assert result == "CAMPUS MAP\n"
        image = ocr.call_args.args[0]
        assert image.mode == "L"
        assert ocr.call_args.kwargs["lang"] == "eng"

    @pytest.mark.asyncio
    async def test_image_ocr_language_configurable(self):
        extractor = ContentExtractor(ocr_language="deu")
        with patch(f"{SERVICE}.pytesseract.image_to_string", return_value="") as ocr:
            assert await extractor.extract(png_bytes(), FileKind.IMAGE) == ""
        assert ocr.call_args.kwargs["lang"] == "deu"

    @pytest.mark.asyncio
    async def test_ocr_failure_is_chained(self, extractor):
        cause = RuntimeError("tesseract is not installed")
        with patch(f"{SERVICE}.pytesseract.image_to_string", side_effect=cause):
            with pytest.raises(ExtractionFailedError) as exc_info:
                await extractor.extract(png_bytes(), FileKind.IMAGE)

        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    async def test_undecodable_image_raises_extraction_failed(self, extractor):
        with pytest.raises(ExtractionFailedError):
            await extractor.extract(b"not an image", FileKind.IMAGE)

    @pytest.mark.asyncio
    async def test_unsupported_kind(self, extractor):
        with pytest.raises(UnsupportedFileKindError):
            await extractor.extract(b"PK\x03\x04", "docx")

    @pytest.mark.asyncio
    async def test_timeout_raises_extraction_failed(self):
        extractor = ContentExtractor(timeout=0.01)

        def slow_ocr(*args, **kwargs):
            time.sleep(0.2)
            return "late"

        with patch(f"{SERVICE}.pytesseract.image_to_string", side_effect=slow_ocr):
            with pytest.raises(ExtractionFailedError) as exc_info:
                await extractor.extract(png_bytes(), FileKind.IMAGE)

        assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)
