"""Capability interfaces the extractor is written against.

The orchestrator and the individual extractors only ever talk to these
protocols, so the PyMuPDF/Tesseract bindings can be swapped for fakes in
tests or for other libraries without touching the pipeline.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Protocol

from PIL import Image

from docsift.extractor.types import ContentElement, ContentOperation


class Page(Protocol):
    """One page of an open document."""

    number: int
    width: float
    height: float

    def content_elements(self) -> Iterator[ContentElement]:
        """Yield the dictionary-form objects the page draws."""
        ...

    def operations(self) -> Iterator[ContentOperation]:
        """Yield decoded content-stream operations, in stream order."""
        ...

    def render(self, width: int, height: int) -> Image.Image:
        """Paint the page's visual content on a transparent RGBA layer.

        The layer should be ``width`` x ``height`` pixels; callers resample
        it if a backend can only approximate that size.
        """
        ...


class Document(Protocol):
    """An open, read-only document. Closed by its owner."""

    @property
    def pages(self) -> Sequence[Page]: ...

    def close(self) -> None: ...

    def __enter__(self) -> Document: ...

    def __exit__(self, *exc_info) -> None: ...


class DocumentParser(Protocol):
    """Opens document bytes. Raises DocumentParseFailure on bad input."""

    def open(self, data: bytes) -> Document: ...


class OCREngine(Protocol):
    """Optical character recognition over a single raster image."""

    #: Pillow mode the engine expects its input in (e.g. ``"L"``).
    pixel_mode: str

    def recognize(self, image: Image.Image) -> str:
        """Return the text recognized in *image*.

        Raises OCREngineUnavailable when the engine itself cannot run; any
        other exception is treated as a failure of this page only.
        """
        ...
