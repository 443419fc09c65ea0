"""Transport-safe encoding for raster image uploads."""

from __future__ import annotations

import base64


def encode_image(data: bytes) -> str:
    """Standard Base64 of *data*: no line wrapping, no URL-safe alphabet."""
    return base64.b64encode(data).decode("ascii")
