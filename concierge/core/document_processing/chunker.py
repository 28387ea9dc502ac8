"""Paragraph-packing chunker for normalized document text."""

from dataclasses import dataclass

DEFAULT_MAX_CHARS = 1500
DEFAULT_MIN_CHARS = 50


@dataclass
class TextChunk:
    """A passage of document text and its position in the document."""

    chunk_index: int
    content: str

    @property
    def char_count(self) -> int:
        return len(self.content)


def chunk_content(
    content: str,
    max_chars: int = DEFAULT_MAX_CHARS,
    min_chars: int = DEFAULT_MIN_CHARS,
) -> list[TextChunk]:
    """
    Split content into chunks of whole paragraphs.

    Paragraphs (separated by blank lines) are packed greedily: a paragraph
    starts a new chunk when adding it would push a non-empty chunk past
    max_chars. A single paragraph longer than max_chars becomes its own chunk.
    Chunks shorter than min_chars after trimming are dropped; the remaining
    chunks keep the index they were assigned before dropping.

    Args:
        content: Normalized document text
        max_chars: Soft upper bound on chunk length
        min_chars: Shorter chunks are discarded

    Returns:
        List of TextChunk ordered by chunk_index
    """
    if not content or not content.strip():
        return []

    packed: list[str] = []
    current = ""

    for paragraph in content.split("\n\n"):
        if current and len(current) + len(paragraph) > max_chars:
            packed.append(current.strip())
            current = paragraph
        else:
            current = f"{current}\n\n{paragraph}" if current else paragraph

    if current.strip():
        packed.append(current.strip())

    return [
        TextChunk(chunk_index=index, content=text)
        for index, text in enumerate(packed)
        if len(text) >= min_chars
    ]
