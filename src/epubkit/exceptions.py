from __future__ import annotations

from typing import Optional


class EpubError(Exception):
    """Base user-facing error for epubkit.

    Use this for predictable, actionable failures (duplicate filename, missing
    image, unwritable destination). Callers can catch it to report a concise
    message without a traceback.
    """


class FilenameAlreadyUsed(EpubError):
    """The filename is already taken within its namespace (image, css, font, section)."""

    def __init__(self, filename: str, kind: str):
        super().__init__(f"Filename already used: {filename} ({kind})")
        self.filename = filename
        self.kind = kind


class UnsupportedMediaType(EpubError):
    """No media type is known for the file extension."""

    def __init__(self, filename: str):
        super().__init__(f"Unsupported media type for {filename!r}")
        self.filename = filename


class FetchError(EpubError):
    """Retrieval error for a local or remote resource."""

    def __init__(self, source: str, reason: Optional[str] = None):
        msg = f"Cannot fetch {source}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.source = source


class SerializationError(EpubError):
    """The archive could not be assembled or moved into place."""


class BookStateError(EpubError):
    """The book was already written and no longer accepts changes."""


class InvalidFilename(EpubError):
    """The filename would leave its folder inside the container (separator or ``..``)."""

    def __init__(self, filename: str, kind: str):
        super().__init__(f"Invalid filename: {filename!r} ({kind})")
        self.filename = filename
        self.kind = kind
