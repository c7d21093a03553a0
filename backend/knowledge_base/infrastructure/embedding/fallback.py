"""Deterministic hash embedding used when no embedding model answers."""

import math
from typing import List

FALLBACK_MODEL_NAME = "hash-fallback"


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def text_hash(text: str) -> int:
    """31-multiplier rolling hash over UTF-16 code units, wrapped to a signed 32-bit int."""
    h = 0
    encoded = text.encode("utf-16-le", errors="surrogatepass")
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = _int32(h * 31 + code_unit)
    return h


def hash_embedding(text: str, dimension: int = 384) -> List[float]:
    """Build a pseudo-random but reproducible vector from ``text``.

    Component ``i`` is the signed fractional part of
    ``sin(hash + i) * 43758.5453``, so values lie in ``(-1, 1)``. Identical
    text always yields an identical vector; there is no semantic meaning.

    Args:
        text: Text to hash.
        dimension: Vector length.

    Returns:
        The fallback vector.
    """
    h = text_hash(text)
    return [math.fmod(math.sin(h + i) * 43758.5453, 1.0) for i in range(dimension)]
