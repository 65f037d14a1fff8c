"""Split text into chunks that fit the synthesis model's input ceiling."""

from __future__ import annotations

import re

from .types import TextChunk

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?…])\s+")


def chunk_text(text: str | None, max_length: int) -> list[TextChunk]:
    """Greedy sentence packing; sentences longer than ``max_length`` are hard-wrapped."""

    s = (text or "").strip()
    if not s:
        return []
    if max_length <= 0 or len(s) <= max_length:
        return [TextChunk(0, s)]

    pieces: list[str] = []
    current = ""
    for sentence in _SENTENCE_BOUNDARY.split(s):
        if not sentence:
            continue
        candidate = f"{current} {sentence}" if current else sentence
        if len(candidate) <= max_length:
            current = candidate
            continue

        if current:
            pieces.append(current)
        if len(sentence) <= max_length:
            current = sentence
        else:
            pieces.extend(
                sentence[i : i + max_length] for i in range(0, len(sentence), max_length)
            )
            current = ""

    if current:
        pieces.append(current)
    return [TextChunk(index, piece) for index, piece in enumerate(pieces)]


__all__ = ["chunk_text"]
