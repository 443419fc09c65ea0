"""Page rasterization to fixed-size, opaque RGB bitmaps.

Each page is painted at 1:1 scale (one pixel per PDF point) onto a white
canvas exactly the page's rounded size. The page backend draws onto a
transparent layer which is then composited over the white background, so
transparency in the source never leaks into the output.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from PIL import Image

from docsift.extractor.backends import Page
from docsift.extractor.errors import InvalidPageGeometry, ResourceLimitExceeded

logger = logging.getLogger(__name__)

BACKGROUND = (255, 255, 255)


@dataclass
class RenderedPage:
    """A rasterized page.

    Attributes:
        index: 0-based page number in the source document.
        image: Opaque RGB Pillow image.
    """

    index: int
    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def mode(self) -> str:
        return self.image.mode

    def save(self, destination: str | Path | BinaryIO) -> None:
        """Write the page as PNG to a file path or a binary buffer."""
        self.image.save(destination, format="PNG")

    def to_png_bytes(self) -> bytes:
        buf = io.BytesIO()
        self.save(buf)
        return buf.getvalue()

    def close(self) -> None:
        self.image.close()


class PageRasterizer:
    """Render pages to RenderedPage bitmaps, enforcing geometry limits."""

    def __init__(self, max_pixel_dimension: int = 10_000) -> None:
        self.max_pixel_dimension = max_pixel_dimension

    def render(self, page: Page) -> RenderedPage:
        """Rasterize *page* onto an opaque white canvas of its exact size.

        Raises:
            InvalidPageGeometry: width or height rounds to zero or less.
            ResourceLimitExceeded: width or height above max_pixel_dimension.
        """
        width = round(page.width)
        height = round(page.height)

        # Both checks run before anything is allocated
        if width <= 0 or height <= 0:
            raise InvalidPageGeometry(page.number, page.width, page.height)
        if width > self.max_pixel_dimension or height > self.max_pixel_dimension:
            raise ResourceLimitExceeded(
                f"Page {page.number + 1} is {width}x{height} px, above the "
                f"{self.max_pixel_dimension} px limit"
            )

        canvas = Image.new("RGB", (width, height), BACKGROUND)
        layer = page.render(width, height)
        try:
            if layer.mode != "RGBA":
                layer = layer.convert("RGBA")
            if layer.size != canvas.size:
                logger.debug(
                    "Resampling page %d layer %dx%d -> %dx%d",
                    page.number + 1,
                    layer.width,
                    layer.height,
                    width,
                    height,
                )
                layer = layer.resize(canvas.size, Image.Resampling.LANCZOS)
            canvas.paste(layer, (0, 0), layer)
        finally:
            layer.close()

        logger.debug("Rendered page %d at %dx%d", page.number + 1, width, height)
        return RenderedPage(index=page.number, image=canvas)
