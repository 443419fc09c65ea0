"""Error taxonomy for content classification and extraction.

Every failure raised by the extractor package derives from ExtractionError.
All of them are fatal for the document being classified; none is retried
inside this package.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for extraction failures."""


class UnsupportedFormat(ExtractionError):
    """Declared extension is neither PDF nor a supported raster format."""

    def __init__(self, extension: str) -> None:
        super().__init__(f"Unsupported document format: {extension!r}")
        self.extension = extension


class DocumentParseFailure(ExtractionError):
    """Bytes could not be opened as a document of the declared type."""


class InvalidPageGeometry(ExtractionError):
    """A page reports a width or height that rounds to zero or less."""

    def __init__(self, page_number: int, width: float, height: float) -> None:
        super().__init__(
            f"Page {page_number + 1} has invalid geometry {width}x{height}"
        )
        self.page_number = page_number
        self.width = width
        self.height = height


class ResourceLimitExceeded(ExtractionError):
    """Page count or pixel dimensions exceed the configured limits."""


class OCREngineUnavailable(ExtractionError):
    """OCR engine binary or language data is missing or failed to start."""


class OCRExtractionFailed(ExtractionError):
    """One or more pages failed recognition.

    Attributes:
        failures: ``(page_number, message)`` pairs, 0-based page numbers,
            in page order.
    """

    def __init__(self, failures: list[tuple[int, str]]) -> None:
        summary = "; ".join(f"page {n + 1}: {msg}" for n, msg in failures)
        super().__init__(f"OCR failed on {len(failures)} page(s): {summary}")
        self.failures = failures
