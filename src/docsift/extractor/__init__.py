"""Content classification and extraction for PDFs and raster images.

Public API:
    ContentClassifier(parser, ...).classify(data, extension)
        -> ExtractionResult
    ContentClassifier.from_settings(ExtractionSettings())
"""

from docsift.extractor.errors import (
    DocumentParseFailure,
    ExtractionError,
    InvalidPageGeometry,
    OCREngineUnavailable,
    OCRExtractionFailed,
    ResourceLimitExceeded,
    UnsupportedFormat,
)
from docsift.extractor.service import ContentClassifier
from docsift.extractor.types import ContentKind, ExtractionResult, OnImageOnly

__all__ = [
    "ContentClassifier",
    "ContentKind",
    "DocumentParseFailure",
    "ExtractionError",
    "ExtractionResult",
    "InvalidPageGeometry",
    "OCREngineUnavailable",
    "OCRExtractionFailed",
    "OnImageOnly",
    "ResourceLimitExceeded",
    "UnsupportedFormat",
]
