"""Structured text extraction from content-stream text-show operators.

Concatenates the string operands of every text-show operator, page by page
and in stream order. No spacing, positioning or dehyphenation is inferred;
the output is exactly the glyph runs the document draws.
"""

from __future__ import annotations

import logging

from docsift.extractor.backends import Document
from docsift.extractor.probe import TEXT_SHOW_OPERATORS

logger = logging.getLogger(__name__)


def _operand_text(operand) -> str:
    """Characters contributed by one operand (strings only)."""
    if isinstance(operand, str):
        return operand
    if isinstance(operand, (bytes, bytearray)):
        return bytes(operand).decode("latin-1")
    if isinstance(operand, (list, tuple)):
        # TJ arrays interleave strings with numeric kerning adjustments
        return "".join(_operand_text(item) for item in operand)
    return ""


def extract_text(document: Document) -> str:
    """Return the concatenated text-show operands of *document*.

    Returns an empty string when the document has no text-show operators.
    """
    parts: list[str] = []
    for page in document.pages:
        page_chars = 0
        for op in page.operations():
            if op.operator not in TEXT_SHOW_OPERATORS:
                continue
            for operand in op.operands:
                chunk = _operand_text(operand)
                parts.append(chunk)
                page_chars += len(chunk)
        logger.debug("Page %d: %d chars of structured text", page.number + 1, page_chars)

    text = "".join(parts)
    logger.info(
        "Structured text extracted: %d chars from %d page(s)",
        len(text),
        len(document.pages),
    )
    return text
