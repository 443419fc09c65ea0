"""OCR extraction for image-only documents.

``OCRExtractor`` rasterizes every page and runs an ``OCREngine`` over it,
concatenating the recognized text in page order. ``TesseractEngine`` is the
pytesseract-backed engine used in production.

Failure policy: a page that fails recognition does not stop the remaining
pages; all failures are collected and raised together as
OCRExtractionFailed. Engine unavailability and geometry/limit errors abort
immediately.
"""

from __future__ import annotations

import logging

import pytesseract
from PIL import Image

from docsift.extractor.backends import Document, OCREngine
from docsift.extractor.errors import (
    OCREngineUnavailable,
    OCRExtractionFailed,
)
from docsift.extractor.raster import PageRasterizer

logger = logging.getLogger(__name__)

# tesseract stderr when traineddata is missing or unreadable
_LANGUAGE_LOAD_FAILED = "Failed loading language"


class TesseractEngine:
    """pytesseract binding.

    Each ``recognize`` call runs a separate tesseract process, so one
    instance can be shared across concurrent classifications. pytesseract
    keeps the binary path in a module global: only one ``tesseract_cmd`` is
    supported per process, and the last engine checked wins.
    """

    pixel_mode = "L"

    def __init__(
        self,
        language: str = "eng",
        tessdata_dir: str | None = None,
        tesseract_cmd: str = "tesseract",
        config: str = "",
    ) -> None:
        self.language = language
        self.tessdata_dir = tessdata_dir
        self.tesseract_cmd = tesseract_cmd
        self.config = config
        self._checked = False

    def _tesseract_config(self) -> str:
        parts = []
        if self.tessdata_dir:
            parts.append(f'--tessdata-dir "{self.tessdata_dir}"')
        if self.config:
            parts.append(self.config)
        return " ".join(parts)

    def check(self) -> None:
        """Verify the binary runs and the language data is installed.

        Raises:
            OCREngineUnavailable: binary missing or traineddata not found.
        """
        if self._checked:
            return

        pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd
        try:
            version = pytesseract.get_tesseract_version()
            installed = set(pytesseract.get_languages(config=self._tesseract_config()))
        except pytesseract.TesseractNotFoundError as e:
            raise OCREngineUnavailable(
                f"Tesseract binary not found: {self.tesseract_cmd}"
            ) from e
        except pytesseract.TesseractError as e:
            raise OCREngineUnavailable(
                f"Tesseract cannot list its languages: {e.message}"
            ) from e

        missing = [lang for lang in self.language.split("+") if lang not in installed]
        if missing:
            location = self.tessdata_dir or "the default tessdata directory"
            raise OCREngineUnavailable(
                f"Tesseract language data not found in {location}: {', '.join(missing)}"
            )

        logger.info("Tesseract %s ready (lang=%s)", version, self.language)
        self._checked = True

    def recognize(self, image: Image.Image) -> str:
        self.check()
        try:
            return pytesseract.image_to_string(
                image, lang=self.language, config=self._tesseract_config()
            )
        except pytesseract.TesseractNotFoundError as e:
            raise OCREngineUnavailable(str(e)) from e
        except pytesseract.TesseractError as e:
            if _LANGUAGE_LOAD_FAILED in e.message:
                raise OCREngineUnavailable(
                    f"Tesseract could not load language {self.language!r}: {e.message}"
                ) from e
            raise


class OCRExtractor:
    """Rasterize each page and recognize its text."""

    def __init__(self, engine: OCREngine, rasterizer: PageRasterizer) -> None:
        self.engine = engine
        self.rasterizer = rasterizer

    def extract(self, document: Document) -> str:
        """Return the recognized text of every page, in page order.

        Raises:
            OCRExtractionFailed: one or more pages failed recognition.
            OCREngineUnavailable: the engine cannot run at all.
        """
        parts: list[str] = []
        failures: list[tuple[int, str]] = []

        for page in document.pages:
            rendered = self.rasterizer.render(page)
            try:
                image = rendered.image.convert(self.engine.pixel_mode)
                try:
                    text = self.engine.recognize(image)
                finally:
                    image.close()
            except OCREngineUnavailable:
                raise
            except Exception as e:
                logger.warning("OCR failed on page %d: %s", page.number + 1, e)
                failures.append((page.number, str(e)))
                continue
            finally:
                rendered.close()

            logger.debug("Page %d: OCR recognized %d chars", page.number + 1, len(text))
            parts.append(text)

        if failures:
            raise OCRExtractionFailed(failures)

        text = "".join(parts)
        logger.info(
            "OCR extracted %d chars from %d page(s)", len(text), len(document.pages)
        )
        return text
