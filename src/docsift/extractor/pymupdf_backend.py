"""PyMuPDF-backed document parser.

Implements the ``DocumentParser`` / ``Document`` / ``Page`` protocols on top
of PyMuPDF. PyMuPDF provides page geometry, object filters and rendering.
Decoded content streams are tokenized with pypdf's ``ContentStream``, which
yields ``(operands, operator)`` pairs.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

import pymupdf
from PIL import Image
from pypdf.errors import PyPdfError
from pypdf.generic import ArrayObject, ContentStream, DecodedStreamObject

from docsift.extractor.errors import DocumentParseFailure
from docsift.extractor.probe import TEXT_SHOW_OPERATORS
from docsift.extractor.types import (
    IMAGE_ELEMENT,
    INLINE_IMAGE_ELEMENT,
    TEXT_ELEMENT,
    ContentElement,
    ContentOperation,
)

logger = logging.getLogger(__name__)

# Names inside a /Filter value such as "/FlateDecode" or "[/A85 /FlateDecode]"
_FILTER_NAME = re.compile(r"/([^\s/\[\]<>()]+)")

# Inline images may use abbreviated filter names
_INLINE_FILTER_NAMES = {
    "AHx": "ASCIIHexDecode",
    "A85": "ASCII85Decode",
    "LZW": "LZWDecode",
    "Fl": "FlateDecode",
    "RL": "RunLengthDecode",
    "CCF": "CCITTFaxDecode",
    "DCT": "DCTDecode",
}

# pypdf raises these, besides PyPdfError, on malformed operands
_TOKENIZE_ERRORS = (PyPdfError, ValueError, KeyError, IndexError, TypeError)


def _inline_filters(operands: tuple) -> tuple[str, ...]:
    settings = operands[0].get("settings", {}) if operands else {}
    value = settings.get("/F", settings.get("/Filter"))
    if value is None:
        return ()
    names = value if isinstance(value, ArrayObject) else [value]
    return tuple(
        _INLINE_FILTER_NAMES.get(str(name).lstrip("/"), str(name).lstrip("/"))
        for name in names
    )


class PyMuPDFPage:
    """Protocol adapter around a ``pymupdf.Page``."""

    def __init__(self, doc: pymupdf.Document, page: pymupdf.Page) -> None:
        self._doc = doc
        self._page = page
        self.number = page.number
        self.width = page.rect.width
        self.height = page.rect.height

    def _filters(self, xref: int) -> tuple[str, ...]:
        kind, value = self._doc.xref_get_key(xref, "Filter")
        if kind == "null":
            return ()
        if kind == "xref":
            # Indirect /Filter: "12 0 R" -> read the referenced object
            value = self._doc.xref_object(int(value.split()[0]), compressed=True)
        return tuple(_FILTER_NAME.findall(value))

    def content_elements(self) -> Iterator[ContentElement]:
        """Yield what the content stream draws, never the stream container.

        Text-show operators and inline images come first, in stream order,
        then the image XObjects the page uses (including those nested in
        form XObjects).
        """
        for op in self.operations():
            if op.operator in TEXT_SHOW_OPERATORS:
                yield ContentElement(TEXT_ELEMENT)
            elif op.operator == "INLINE IMAGE":
                yield ContentElement(INLINE_IMAGE_ELEMENT, _inline_filters(op.operands))
        for xref, *_ in self._page.get_images(full=True):
            yield ContentElement(IMAGE_ELEMENT, self._filters(xref))

    def operations(self) -> Iterator[ContentOperation]:
        data = self._page.read_contents()
        if not data:
            return
        stream = DecodedStreamObject()
        stream.set_data(data)
        try:
            parsed = ContentStream(stream, None).operations
        except _TOKENIZE_ERRORS as e:
            raise DocumentParseFailure(
                f"Malformed content stream on page {self.number + 1}: {e}"
            ) from e
        for operands, operator in parsed:
            if not isinstance(operands, list):
                # Inline images carry a settings/data dict
                operands = [operands]
            yield ContentOperation(operator.decode("latin-1"), tuple(operands))

    def render(self, width: int, height: int) -> Image.Image:
        rect = self._page.rect
        matrix = pymupdf.Matrix(width / rect.width, height / rect.height)
        pix = self._page.get_pixmap(matrix=matrix, alpha=True)
        return Image.frombytes("RGBA", (pix.width, pix.height), pix.samples)


class PyMuPDFDocument:
    """An open PDF. Use as a context manager so it is always closed."""

    def __init__(self, doc: pymupdf.Document) -> None:
        self._doc = doc
        self._pages: list[PyMuPDFPage] | None = None

    @property
    def pages(self) -> list[PyMuPDFPage]:
        if self._pages is None:
            self._pages = [PyMuPDFPage(self._doc, page) for page in self._doc]
        return self._pages

    def close(self) -> None:
        self._pages = None
        self._doc.close()

    def __enter__(self) -> PyMuPDFDocument:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class PyMuPDFParser:
    """Open PDF bytes with PyMuPDF.

    Args:
        aa_level: MuPDF anti-aliasing level (0-8) applied to rendering.
    """

    def __init__(self, aa_level: int = 8) -> None:
        pymupdf.TOOLS.set_aa_level(aa_level)

    def open(self, data: bytes) -> PyMuPDFDocument:
        try:
            doc = pymupdf.open(stream=data, filetype="pdf")
        except Exception as e:
            raise DocumentParseFailure(f"Cannot open PDF: {e}") from e

        if doc.needs_pass:
            doc.close()
            raise DocumentParseFailure("PDF is encrypted")

        logger.debug("Opened PDF: %d page(s), %d bytes", doc.page_count, len(data))
        return PyMuPDFDocument(doc)
