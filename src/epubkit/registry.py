"""Named resources (images, stylesheets, fonts) kept per kind.

Each kind is its own filename namespace. Generated names follow
``<prefix><NNNN><ext>`` where ``NNNN`` is the count of that kind plus one.
"""
from __future__ import annotations

import logging
import os
import posixpath
from dataclasses import dataclass
from typing import Dict, List, Optional
from urllib.parse import quote, urlparse

from .exceptions import FilenameAlreadyUsed, InvalidFilename
from .models import FONT, IMAGE, STYLESHEET, Resource

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class KindSpec:
    prefix: str
    folder: str
    fixed_ext: Optional[str] = None


KINDS: Dict[str, KindSpec] = {
    IMAGE: KindSpec(prefix="image", folder="img"),
    STYLESHEET: KindSpec(prefix="css", folder="css", fixed_ext=".css"),
    FONT: KindSpec(prefix="font", folder="font"),
}


def source_ext(source: Optional[str]) -> str:
    """Extension of a local path or of a URL's path (query and fragment ignored)."""
    if not source:
        return ""
    parsed = urlparse(source)
    if parsed.scheme in ("http", "https", "file"):
        return posixpath.splitext(parsed.path)[1]
    return os.path.splitext(source)[1]


def relative_ref(kind: str, filename: str) -> str:
    """Path of a resource as seen from a section file."""
    return posixpath.join("..", KINDS[kind].folder, quote(filename))


def resource_href(kind: str, filename: str) -> str:
    """Href of a resource relative to the package document."""
    return f"{KINDS[kind].folder}/{quote(filename)}"


def check_filename(filename: str, kind: str) -> None:
    """Supplied names must stay inside their folder of the container."""
    if "/" in filename or "\\" in filename or ".." in filename:
        raise InvalidFilename(filename, kind)


class ResourceRegistry:
    def __init__(self):
        self._order: List[Resource] = []
        self._names: Dict[str, set] = {kind: set() for kind in KINDS}

    def count(self, kind: str) -> int:
        return len(self._names[kind])

    def resources(self, kind: Optional[str] = None) -> List[Resource]:
        if kind is None:
            return list(self._order)
        return [r for r in self._order if r.kind == kind]

    def add(
        self,
        kind: str,
        source: Optional[str] = None,
        filename: Optional[str] = None,
        data: Optional[bytes] = None,
    ) -> str:
        if kind not in KINDS:
            raise ValueError(f"Unknown resource kind: {kind!r}")
        if (source is None) == (data is None):
            raise ValueError("Exactly one of source or data is required")
        spec = KINDS[kind]
        if not filename:
            ext = spec.fixed_ext if spec.fixed_ext is not None else source_ext(source)
            filename = f"{spec.prefix}{self.count(kind) + 1:04d}{ext}"
        check_filename(filename, kind)
        names = self._names[kind]
        if filename in names:
            raise FilenameAlreadyUsed(filename, kind)
        names.add(filename)
        self._order.append(Resource(kind=kind, filename=filename, source=source, data=data))
        log.debug("registered %s %s (source=%s)", kind, filename, source or "<inline>")
        return relative_ref(kind, filename)
