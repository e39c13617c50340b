"""Default fetch collaborator: raw bytes for a local path or a URL."""
from __future__ import annotations

from urllib.parse import urlparse
from urllib.request import url2pathname

from .exceptions import FetchError
from .http import FETCH_ERRORS, fetch_bytes


def is_remote(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def fetch_source(source: str, **http_opts) -> bytes:
    """Read ``source`` from disk or the network; errors become ``FetchError``."""
    try:
        if is_remote(source):
            return fetch_bytes(source, **http_opts)
        parsed = urlparse(source)
        path = url2pathname(parsed.path) if parsed.scheme == "file" else source
        with open(path, "rb") as fh:
            return fh.read()
    except FETCH_ERRORS as e:
        raise FetchError(source, str(e)) from e
