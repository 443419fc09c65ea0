"""Load document bytes from a local path or an http(s) URL.

URLs are fetched with a single streamed GET: redirects are followed, the
declared Content-Length is checked up front and the running byte count is
checked while streaming, so an oversized body is abandoned early. There is
no retry; a failed download surfaces as SourceLoadError.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

import httpx

from docsift.config.settings import PipelineSettings

logger = logging.getLogger(__name__)

_DISPOSITION_FILENAME = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.I)


class SourceLoadError(Exception):
    """The document could not be read or downloaded."""


@dataclass
class LoadedSource:
    """Raw document bytes plus the filename used to pick an extraction path."""

    data: bytes
    filename: str


def _is_url(location: str) -> bool:
    return urlparse(location).scheme in ("http", "https")


def _filename_from_response(response: httpx.Response) -> str:
    disposition = response.headers.get("content-disposition", "")
    match = _DISPOSITION_FILENAME.search(disposition)
    if match:
        return unquote(match.group(1).strip())
    return unquote(PurePosixPath(response.url.path).name)


def _load_file(path: Path, settings: PipelineSettings) -> LoadedSource:
    try:
        size = path.stat().st_size
        if size > settings.max_source_bytes:
            raise SourceLoadError(
                f"{path.name} exceeds max size limit "
                f"({size} bytes > {settings.max_source_bytes} bytes)"
            )
        data = path.read_bytes()
    except OSError as e:
        raise SourceLoadError(f"Cannot read {path}: {e}") from e

    logger.info("Read %s (%d bytes)", path, len(data))
    return LoadedSource(data=data, filename=path.name)


def _download(
    url: str, settings: PipelineSettings, http_client: httpx.Client
) -> LoadedSource:
    try:
        with http_client.stream(
            "GET",
            url,
            timeout=settings.download_timeout_seconds,
            follow_redirects=True,
        ) as response:
            response.raise_for_status()

            content_length = response.headers.get("content-length")
            if content_length is not None:
                try:
                    declared_size = int(content_length)
                except ValueError:
                    declared_size = 0
                if declared_size > settings.max_source_bytes:
                    raise SourceLoadError(
                        f"Source exceeds max size limit "
                        f"({declared_size} bytes > {settings.max_source_bytes} bytes)"
                    )

            chunks: list[bytes] = []
            received = 0
            for chunk in response.iter_bytes(chunk_size=settings.download_chunk_size):
                received += len(chunk)
                if received > settings.max_source_bytes:
                    raise SourceLoadError(
                        f"Source exceeds max size limit during streaming "
                        f"({received} bytes > {settings.max_source_bytes} bytes)"
                    )
                chunks.append(chunk)

            filename = _filename_from_response(response)
    except httpx.HTTPError as e:
        raise SourceLoadError(f"Download failed for {url}: {e}") from e

    logger.info("Downloaded %s (%d bytes) as %r", url, received, filename)
    return LoadedSource(data=b"".join(chunks), filename=filename)


def load_source(
    location: str,
    settings: PipelineSettings,
    http_client: httpx.Client | None = None,
) -> LoadedSource:
    """Return the bytes and filename of *location*.

    Args:
        location: Local filesystem path or ``http(s)://`` URL.
        settings: Pipeline configuration (size cap, timeout, chunk size).
        http_client: Optional ``httpx.Client`` whose lifecycle the caller
            manages; a short-lived client is created when omitted.

    Raises:
        SourceLoadError: missing file, HTTP error, transport error or size
            limit exceeded.
    """
    if not _is_url(location):
        return _load_file(Path(location), settings)

    if http_client is not None:
        return _download(location, settings, http_client)

    with httpx.Client(headers={"User-Agent": settings.user_agent}) as client:
        return _download(location, settings, client)
