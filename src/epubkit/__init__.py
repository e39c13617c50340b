"""epubkit public API (library-first).

Build an EPUB 3 file (with an EPUB 2 NCX for older readers) from sections,
images, stylesheets and fonts without dealing with the container layout.
"""
from __future__ import annotations

from .book import Book
from .exceptions import (
    BookStateError,
    EpubError,
    FetchError,
    FilenameAlreadyUsed,
    InvalidFilename,
    SerializationError,
    UnsupportedMediaType,
)
from .sources import fetch_source
from .writer import BuildEvent

__all__ = [
    "Book",
    "BuildEvent",
    "fetch_source",
    "EpubError",
    "FilenameAlreadyUsed",
    "InvalidFilename",
    "UnsupportedMediaType",
    "FetchError",
    "SerializationError",
    "BookStateError",
]
