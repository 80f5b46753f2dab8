"""Paragraph-based chunking strategy."""

import re

PARAGRAPH_BREAK = re.compile(r"(?:\r\n|\n|\r){2,}")
PARAGRAPH_JOINER = "\n\n"


def chunk_markdown(text: str, max_chars: int) -> list[str]:
    """Split text on blank lines and greedily merge paragraphs up to ``max_chars``.

    Paragraphs are trimmed and joined with a blank line. A paragraph longer
    than ``max_chars`` on its own is emitted unsplit.

    Args:
        text: Document text
        max_chars: Upper bound on the length of a merged chunk

    Returns:
        Chunks in document order

    Raises:
        ValueError: If ``max_chars`` is not positive
    """
    if max_chars <= 0:
        raise ValueError(f"max_chars must be positive, got {max_chars}")

    chunks: list[str] = []
    for raw in PARAGRAPH_BREAK.split(text):
        paragraph = raw.strip()
        if not paragraph:
            continue

        if chunks:
            combined = chunks[-1] + PARAGRAPH_JOINER + paragraph
            if len(combined) <= max_chars:
                chunks[-1] = combined
                continue

        chunks.append(paragraph)

    return chunks


class ParagraphChunker:
    """Default chunking: split by blank lines, merge while under the size bound.

    - Splits on paragraph boundaries (two or more line breaks)
    - Merges neighbouring paragraphs while the result fits ``max_chars``
    - Never splits inside a paragraph, so oversized paragraphs pass through
    """

    DEFAULT_MAX_CHARS = 800

    def __init__(self, max_chars: int = DEFAULT_MAX_CHARS):
        if max_chars <= 0:
            raise ValueError(f"max_chars must be positive, got {max_chars}")
        self.max_chars = max_chars

    def chunk(self, text: str) -> list[str]:
        """Split text into chunks no longer than ``max_chars`` where possible."""
        return chunk_markdown(text, self.max_chars)
