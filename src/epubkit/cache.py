"""On-disk cache for remote resource bytes.

Entries are keyed by source URL and grouped by host, keeping the source's
extension so a cached image or font can be opened directly. The root is
``EPUBKIT_CACHE_DIR`` or ``./.cache/epubkit``.
"""
from __future__ import annotations

import hashlib
import os
from typing import Optional
from urllib.parse import urlparse

from .registry import source_ext


def cache_dir() -> str:
    return os.environ.get("EPUBKIT_CACHE_DIR") or os.path.join(os.getcwd(), ".cache", "epubkit")


def cache_path(source: str) -> str:
    host = urlparse(source).netloc or "local"
    digest = hashlib.sha1(source.encode("utf-8")).hexdigest()
    return os.path.join(cache_dir(), host, digest + source_ext(source))


def load(source: str) -> Optional[bytes]:
    try:
        with open(cache_path(source), "rb") as fh:
            return fh.read()
    except OSError:
        return None


def store(source: str, data: bytes) -> None:
    path = cache_path(source)
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        tmp = path + ".part"
        with open(tmp, "wb") as fh:
            fh.write(data)
        os.replace(tmp, path)
    except OSError:
        # Best-effort cache; ignore write errors
        return
