"""In-memory stand-ins for the document parser and OCR engine protocols."""

from __future__ import annotations

from PIL import Image

from docsift.extractor.types import ContentElement, ContentOperation

TEXT_RUN = ContentElement("text")
FLATE_IMAGE = ContentElement("image", ("FlateDecode",))
JPEG_IMAGE = ContentElement("image", ("DCTDecode",))
PLAIN_IMAGE = ContentElement("image", ())


def tj(*strings):
    """One ``Tj`` operation per string."""
    return [ContentOperation("Tj", (s,)) for s in strings]


class FakePage:
    def __init__(
        self,
        number=0,
        width=200,
        height=300,
        elements=(),
        operations=(),
        paint=None,
    ):
        self.number = number
        self.width = width
        self.height = height
        self._elements = list(elements)
        self._operations = list(operations)
        self._paint = paint
        self.render_calls = 0

    def content_elements(self):
        yield from self._elements

    def operations(self):
        yield from self._operations

    def render(self, width, height):
        self.render_calls += 1
        layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        if self._paint is not None:
            self._paint(layer)
        return layer


class FakeDocument:
    def __init__(self, pages):
        self.pages = list(pages)
        self.closed = False

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class FakeParser:
    def __init__(self, document=None, error=None):
        self.document = document
        self.error = error
        self.opened = 0

    def open(self, data):
        self.opened += 1
        if self.error is not None:
            raise self.error
        return self.document


class FakeOCREngine:
    """Returns canned text per call; raises the matching entry of ``errors``."""

    pixel_mode = "L"

    def __init__(self, texts, errors=None):
        self.texts = list(texts)
        self.errors = errors or {}
        self.images = []

    def recognize(self, image):
        call = len(self.images)
        self.images.append((image.mode, image.size))
        if call in self.errors:
            raise self.errors[call]
        return self.texts[call]


def text_document(*pages_of_strings):
    """Document whose pages draw text runs with Tj operators."""
    return FakeDocument(
        FakePage(number=i, elements=[TEXT_RUN], operations=tj(*strings))
        for i, strings in enumerate(pages_of_strings)
    )


def scanned_document(page_count, width=200, height=300):
    """Document whose pages only draw JPEG images."""
    return FakeDocument(
        FakePage(number=i, width=width, height=height, elements=[JPEG_IMAGE])
        for i in range(page_count)
    )
