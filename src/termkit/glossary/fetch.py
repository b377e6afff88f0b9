"""Retrieval of SAF and MRG documents from local paths or remote URLs.

Remote documents are downloaded with httpx into a temporary directory owned
by the fetcher and read from there, so every consumer only ever deals with
local files.
"""

from __future__ import annotations

import hashlib
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import httpx

from .exceptions import FetchError

logger = logging.getLogger(__name__)


def is_remote(location: str) -> bool:
    """True if the location is an http(s) URL."""
    return urlparse(str(location)).scheme in ("http", "https")


def join_location(base: str, *parts: str) -> str:
    """Join path segments onto a local directory or a URL."""
    if is_remote(base):
        segments = [base.rstrip("/")] + [str(p).strip("/") for p in parts if p]
        return "/".join(segments)
    return str(Path(base).joinpath(*[p for p in parts if p]))


def parent_location(location: str) -> str:
    """Directory (or URL prefix) that contains the given document."""
    if is_remote(location):
        return location.rstrip("/").rsplit("/", 1)[0]
    return str(Path(location).parent)


class DocumentFetcher:
    """Reads documents from disk or downloads them over HTTP."""

    def __init__(self, client: Optional[httpx.Client] = None, timeout: float = 10.0):
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._tempdir: Optional[Path] = None

    def _get_http_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout, follow_redirects=True)
        return self._client

    def _download_dir(self) -> Path:
        if self._tempdir is None:
            self._tempdir = Path(tempfile.mkdtemp(prefix="termkit-"))
        return self._tempdir

    def close(self):
        """Close HTTP client and remove downloaded files."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None
        if self._tempdir is not None:
            shutil.rmtree(self._tempdir, ignore_errors=True)
            self._tempdir = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def download(self, url: str) -> Path:
        """Download a remote document into the fetcher's temporary directory.

        Raises:
            FetchError: On network errors or non-success status codes
        """
        client = self._get_http_client()
        try:
            response = client.get(url)
        except httpx.RequestError as exc:
            raise FetchError(url, f"request failed: {exc}") from exc

        if not response.is_success:
            raise FetchError(url, f"request failed with status code {response.status_code}")

        # Prefix with a digest of the URL; several scopes publish files with the same basename
        digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:12]
        name = url.rstrip("/").rsplit("/", 1)[-1] or "document"
        target = self._download_dir() / f"{digest}-{name}"
        target.write_bytes(response.content)
        logger.debug("Downloaded %s to %s", url, target)
        return target

    def local_path(self, location: str) -> Path:
        """Return a local path for the document, downloading it if remote.

        Raises:
            FetchError: If the document does not exist or cannot be downloaded
        """
        if is_remote(location):
            return self.download(location)

        path = Path(location)
        if not path.is_file():
            raise FetchError(location, "file does not exist")
        return path

    def read_text(self, location: str) -> str:
        """Read a document as UTF-8 text.

        Raises:
            FetchError: If the document cannot be retrieved or read
        """
        path = self.local_path(location)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FetchError(location, str(exc)) from exc
