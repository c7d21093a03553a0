"""Recursive character text splitter."""

import re
from typing import List, Optional, Sequence

DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", ". ", " ", "")


class RecursiveTextSplitter:
    """Split text into bounded, overlapping chunks along natural boundaries.

    The splitter tries paragraph breaks first, then line breaks, sentence
    ends, spaces and finally single characters. Pieces that are still too
    long are split again with the next separator; short pieces are merged
    greedily until ``chunk_size`` would be exceeded, and each new chunk
    starts with up to ``chunk_overlap`` characters carried over from the
    previous one.

    Separators are kept at the start of the piece that follows them, and
    every emitted chunk is whitespace-stripped.

    Example:
        ```python
        splitter = RecursiveTextSplitter(chunk_size=1000, chunk_overlap=200)
        chunks = splitter.split_text(document_text)
        ```
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        separators: Optional[Sequence[str]] = None,
    ):
        """Initialize the splitter.

        Args:
            chunk_size: Maximum number of characters per chunk.
            chunk_overlap: Maximum number of characters shared by consecutive chunks.
            separators: Boundaries to try, most preferred first.

        Raises:
            ValueError: If the size/overlap combination is invalid.
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0:
            raise ValueError(f"chunk_overlap must not be negative, got {chunk_overlap}")
        if chunk_overlap >= chunk_size:
            raise ValueError(f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = list(separators) if separators is not None else list(DEFAULT_SEPARATORS)

    def split_text(self, text: str) -> List[str]:
        """Split ``text`` into chunks.

        Args:
            text: Text to split.

        Returns:
            Chunks in document order. Empty or whitespace-only text yields ``[]``.
        """
        if not text or not text.strip():
            return []
        return self._split(text, self.separators)

    def _split(self, text: str, separators: List[str]) -> List[str]:
        separator = separators[-1]
        remaining: List[str] = []
        for i, candidate in enumerate(separators):
            if candidate == "":
                separator = candidate
                break
            if candidate in text:
                separator = candidate
                remaining = separators[i + 1 :]
                break

        chunks: List[str] = []
        pending: List[str] = []
        for piece in self._split_keeping_separator(text, separator):
            if len(piece) < self.chunk_size:
                pending.append(piece)
                continue

            if pending:
                chunks.extend(self._merge(pending))
                pending = []
            if remaining:
                chunks.extend(self._split(piece, remaining))
            else:
                chunks.append(piece)

        if pending:
            chunks.extend(self._merge(pending))
        return chunks

    @staticmethod
    def _split_keeping_separator(text: str, separator: str) -> List[str]:
        if not separator:
            return list(text)

        parts = re.split(f"({re.escape(separator)})", text)
        pieces = [parts[0]] + [parts[i] + parts[i + 1] for i in range(1, len(parts) - 1, 2)]
        return [piece for piece in pieces if piece]

    def _merge(self, pieces: List[str]) -> List[str]:
        chunks: List[str] = []
        window: List[str] = []
        total = 0

        for piece in pieces:
            length = len(piece)
            if total + length > self.chunk_size and window:
                self._emit(window, chunks)
                while total > self.chunk_overlap or (total + length > self.chunk_size and total > 0):
                    total -= len(window.pop(0))
            window.append(piece)
            total += length

        self._emit(window, chunks)
        return chunks

    @staticmethod
    def _emit(window: List[str], chunks: List[str]) -> None:
        chunk = "".join(window).strip()
        if chunk:
            chunks.append(chunk)
