"""Per-document content classification and extraction.

Selects exactly one extraction path for a downloaded document:

1. **PDF with a text layer** -- structured text from text-show operators.
2. **PDF without a text layer** -- pages rasterized and either written to a
   fresh scratch directory as ``page_<n>.png`` (``OnImageOnly.RETURN_PATHS``)
   or OCR'd inline (``OnImageOnly.RUN_OCR``).
3. **Raster image** (.jpeg/.jpg/.gif/.png) -- Base64-encoded as-is.

Anything else is rejected with UnsupportedFormat before any work is done.

The classifier holds configuration only. Every document it opens is closed
before ``classify`` returns or raises, so one instance can serve many
requests.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from collections.abc import Iterable
from pathlib import Path

from docsift.config.settings import ExtractionSettings
from docsift.extractor.backends import Document, DocumentParser, OCREngine
from docsift.extractor.encoding import encode_image
from docsift.extractor.errors import (
    OCREngineUnavailable,
    ResourceLimitExceeded,
    UnsupportedFormat,
)
from docsift.extractor.ocr import OCRExtractor, TesseractEngine
from docsift.extractor.probe import TextProbe, filter_probe, get_probe
from docsift.extractor.pymupdf_backend import PyMuPDFParser
from docsift.extractor.raster import PageRasterizer
from docsift.extractor.text import extract_text
from docsift.extractor.types import ExtractionResult, OnImageOnly

logger = logging.getLogger(__name__)

__all__ = ["ContentClassifier", "normalise_extension"]

PDF_EXTENSION = ".pdf"
DEFAULT_IMAGE_EXTENSIONS = (".jpeg", ".jpg", ".gif", ".png")


def normalise_extension(extension: str) -> str:
    """``"PDF"``, ``".pdf"`` and ``" .Pdf "`` all become ``".pdf"``."""
    return "." + extension.strip().lower().lstrip(".")


class ContentClassifier:
    """Choose and run the extraction path for one document at a time.

    Args:
        parser: Opens PDF bytes into a Document.
        rasterizer: Page renderer shared by the image-path and OCR branches.
        ocr_engine: Required only when ``on_image_only`` is RUN_OCR.
        text_probe: Decides whether a PDF has a text layer.
        on_image_only: Behaviour for PDFs without a text layer.
        scratch_root: Parent directory for per-call scratch directories.
        image_extensions: Raster extensions encoded directly.
        max_pages: PDFs with more pages are rejected.
    """

    def __init__(
        self,
        parser: DocumentParser,
        rasterizer: PageRasterizer | None = None,
        ocr_engine: OCREngine | None = None,
        text_probe: TextProbe = filter_probe,
        on_image_only: OnImageOnly = OnImageOnly.RETURN_PATHS,
        scratch_root: str | Path = "data/scratch",
        image_extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
        max_pages: int = 500,
    ) -> None:
        self.parser = parser
        self.rasterizer = rasterizer or PageRasterizer()
        self.ocr_engine = ocr_engine
        self.text_probe = text_probe
        self.on_image_only = on_image_only
        self.scratch_root = Path(scratch_root)
        self.image_extensions = frozenset(
            normalise_extension(ext) for ext in image_extensions
        )
        self.max_pages = max_pages

    @classmethod
    def from_settings(cls, settings: ExtractionSettings) -> ContentClassifier:
        """Wire the PyMuPDF parser and Tesseract engine from settings."""
        engine = TesseractEngine(
            language=settings.ocr_language,
            tessdata_dir=settings.tessdata_dir,
            tesseract_cmd=settings.tesseract_cmd,
            config=settings.tesseract_config,
        )
        return cls(
            parser=PyMuPDFParser(),
            rasterizer=PageRasterizer(settings.max_pixel_dimension),
            ocr_engine=engine,
            text_probe=get_probe(settings.text_probe),
            on_image_only=OnImageOnly(settings.on_image_only),
            scratch_root=settings.scratch_path(),
            image_extensions=settings.image_extensions,
            max_pages=settings.max_pages,
        )

    def classify_file(self, data: bytes, filename: str) -> ExtractionResult:
        """Classify using the extension of *filename*."""
        return self.classify(data, Path(filename).suffix)

    def classify(self, data: bytes, declared_extension: str) -> ExtractionResult:
        """Extract the content of *data* according to its declared extension.

        Raises:
            UnsupportedFormat: extension is neither PDF nor a raster type.
            DocumentParseFailure: PDF bytes cannot be opened.
            ResourceLimitExceeded: page count or page size above limits.
            InvalidPageGeometry: a page to be rendered has no area.
            OCREngineUnavailable / OCRExtractionFailed: OCR branch failures.
        """
        extension = normalise_extension(declared_extension)

        if extension == PDF_EXTENSION:
            return self._classify_pdf(data)

        if extension in self.image_extensions:
            logger.info("Encoding %s image (%d bytes) as Base64", extension, len(data))
            return ExtractionResult.image_base64(encode_image(data))

        logger.warning("Rejected unsupported format %r", declared_extension)
        raise UnsupportedFormat(declared_extension)

    def _classify_pdf(self, data: bytes) -> ExtractionResult:
        with self.parser.open(data) as document:
            page_count = len(document.pages)
            if page_count > self.max_pages:
                raise ResourceLimitExceeded(
                    f"PDF has {page_count} pages, above the {self.max_pages} page limit"
                )

            if self.text_probe(document):
                logger.info("PDF has a text layer (%d pages): structured text", page_count)
                return ExtractionResult.text(extract_text(document))

            if self.on_image_only is OnImageOnly.RUN_OCR:
                logger.info("PDF is image-only (%d pages): running OCR", page_count)
                if self.ocr_engine is None:
                    raise OCREngineUnavailable("No OCR engine configured")
                extractor = OCRExtractor(self.ocr_engine, self.rasterizer)
                return ExtractionResult.text(extractor.extract(document))

            logger.info("PDF is image-only (%d pages): rendering pages", page_count)
            return ExtractionResult.image_paths(self._write_page_images(document))

    def _write_page_images(self, document: Document) -> list[str]:
        """Render every page into a fresh scratch directory.

        The directory is removed again if any page fails, so callers never
        see a partial set of artifacts.
        """
        scratch_dir = self.scratch_root / uuid.uuid4().hex
        scratch_dir.mkdir(parents=True)

        paths: list[str] = []
        try:
            for position, page in enumerate(document.pages, start=1):
                rendered = self.rasterizer.render(page)
                try:
                    path = scratch_dir / f"page_{position}.png"
                    rendered.save(path)
                finally:
                    rendered.close()
                paths.append(str(path))
        except Exception:
            shutil.rmtree(scratch_dir, ignore_errors=True)
            raise

        logger.info("Wrote %d page image(s) to %s", len(paths), scratch_dir)
        return paths
