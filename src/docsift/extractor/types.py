"""Shared types for the extraction pipeline.

Defines ExtractionResult, the tagged payload handed to the transport layer,
plus the small value types produced while scanning a page: ContentElement
and ContentOperation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ContentKind(Enum):
    """Which variant of ExtractionResult is populated."""

    TEXT = "text"
    IMAGE_PATHS = "image_paths"
    IMAGE_BASE64 = "image_base64"


class OnImageOnly(Enum):
    """What the classifier does with a PDF that has no text layer."""

    RETURN_PATHS = "return_paths"
    RUN_OCR = "run_ocr"


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of classifying a single document.

    Exactly one variant is populated:

    - ``TEXT``: ``value`` is the extracted string.
    - ``IMAGE_PATHS``: ``value`` is a tuple of PNG file paths in page order.
    - ``IMAGE_BASE64``: ``value`` is the Base64-encoded source image.

    Use the ``text`` / ``image_paths`` / ``image_base64`` constructors rather
    than building one by hand.
    """

    kind: ContentKind
    value: str | tuple[str, ...]

    def __post_init__(self) -> None:
        if self.kind is ContentKind.IMAGE_PATHS:
            if not isinstance(self.value, tuple) or not all(
                isinstance(p, str) for p in self.value
            ):
                raise TypeError("image_paths result requires a tuple of str")
        elif not isinstance(self.value, str):
            raise TypeError(f"{self.kind.value} result requires a str value")

    @classmethod
    def text(cls, value: str) -> ExtractionResult:
        return cls(ContentKind.TEXT, value)

    @classmethod
    def image_paths(cls, paths) -> ExtractionResult:
        return cls(ContentKind.IMAGE_PATHS, tuple(str(p) for p in paths))

    @classmethod
    def image_base64(cls, value: str) -> ExtractionResult:
        return cls(ContentKind.IMAGE_BASE64, value)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping for the outbound request builder."""
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {"kind": self.kind.value, "value": value}


# ContentElement kinds
TEXT_ELEMENT = "text"
IMAGE_ELEMENT = "image"
INLINE_IMAGE_ELEMENT = "inline_image"


@dataclass(frozen=True)
class ContentElement:
    """An object a page's content stream draws.

    Attributes:
        kind: ``"text"`` for a text-show run, ``"image"`` for an image
            XObject, ``"inline_image"`` for a ``BI``/``ID``/``EI`` image.
        filters: Filter names without the leading slash, e.g.
            ``("FlateDecode",)``. Empty when the object is unfiltered, and
            always empty for text runs.
    """

    kind: str
    filters: tuple[str, ...] = ()


@dataclass(frozen=True)
class ContentOperation:
    """One decoded drawing instruction from a page's content stream."""

    operator: str
    operands: tuple[Any, ...] = field(default_factory=tuple)
