from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from .exceptions import BookStateError
from .models import FONT, IMAGE, STYLESHEET, BookMeta, Section
from .registry import ResourceRegistry
from .sections import SectionStore
from .writer import BookParts, BuildEvent, Fetcher, write_epub

log = logging.getLogger(__name__)


class Book:
    """An EPUB 3 book being assembled in memory.

    Add images, stylesheets, fonts and sections, then call :meth:`write` once.
    The ``add_*`` methods return the reference to use from section content:
    ``../img/<name>``, ``../css/<name>``, ``../font/<name>`` for resources and
    the bare filename for sections (sections share one folder).

    A book is not thread-safe; serialize access when populating it from
    several threads.
    """

    def __init__(self, title: str):
        self._meta = BookMeta(title=title)
        self._registry = ResourceRegistry()
        self._sections = SectionStore()
        self._written = False

    def _check_building(self) -> None:
        if self._written:
            raise BookStateError("Book was already written; create a new Book")

    # metadata

    @property
    def title(self) -> str:
        return self._meta.title

    @title.setter
    def title(self, value: str) -> None:
        self._check_building()
        self._meta.title = value

    @property
    def author(self) -> str:
        return self._meta.author

    @author.setter
    def author(self, value: str) -> None:
        self._check_building()
        self._meta.author = value

    @property
    def language(self) -> str:
        return self._meta.language

    @language.setter
    def language(self, value: str) -> None:
        self._check_building()
        self._meta.language = value

    @property
    def identifier(self) -> str:
        """Unique identifier without the ``urn:uuid:`` prefix."""
        return self._meta.identifier

    @identifier.setter
    def identifier(self, value: str) -> None:
        self._check_building()
        self._meta.identifier = value

    @property
    def modified(self) -> Optional[datetime]:
        return self._meta.modified

    @modified.setter
    def modified(self, value: Optional[datetime]) -> None:
        self._check_building()
        self._meta.modified = value

    @property
    def written(self) -> bool:
        return self._written

    # content

    def add_image(self, source: str, filename: Optional[str] = None) -> str:
        """Register an image from a local path or URL; bytes are read at write time."""
        self._check_building()
        return self._registry.add(IMAGE, source=source, filename=filename)

    def add_stylesheet(self, content: str, filename: Optional[str] = None) -> str:
        self._check_building()
        return self._registry.add(STYLESHEET, data=content.encode("utf-8"), filename=filename)

    def add_font(self, source: str, filename: Optional[str] = None) -> str:
        self._check_building()
        return self._registry.add(FONT, source=source, filename=filename)

    def add_section(
        self,
        title: str,
        content: str,
        filename: Optional[str] = None,
        stylesheet: Optional[str] = None,
    ) -> str:
        """Append a section; ``content`` goes between the ``<body>`` tags unvalidated."""
        self._check_building()
        return self._sections.add(title, content, filename=filename, stylesheet=stylesheet)

    def sections(self) -> List[Section]:
        return list(self._sections)

    # output

    def write(
        self,
        out_path: str,
        *,
        fetcher: Optional[Fetcher] = None,
        on_event: Optional[Callable[[BuildEvent], None]] = None,
    ) -> str:
        self._check_building()
        parts = BookParts(meta=self._meta, registry=self._registry, store=self._sections)
        write_epub(parts, out_path, fetcher=fetcher, on_event=on_event)
        self._written = True
        log.debug("book %s marked as written", self._meta.urn)
        return out_path
