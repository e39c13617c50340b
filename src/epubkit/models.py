from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

URN_UUID_PREFIX = "urn:uuid:"
DEFAULT_LANGUAGE = "en"

IMAGE = "image"
STYLESHEET = "stylesheet"
FONT = "font"


@dataclass
class BookMeta:
    title: str
    author: str = ""
    language: str = DEFAULT_LANGUAGE
    identifier: str = dataclasses.field(default_factory=lambda: str(uuid.uuid4()))
    modified: Optional[datetime] = None

    @property
    def urn(self) -> str:
        return URN_UUID_PREFIX + self.identifier


@dataclass
class Resource:
    kind: str
    filename: str
    source: Optional[str] = None
    data: Optional[bytes] = None  # inline content (stylesheets)


@dataclass
class Section:
    filename: str
    title: str
    body: str  # xhtml fragment placed inside <body>
    position: int
    stylesheet: Optional[str] = None


@dataclass
class ManifestEntry:
    id: str
    href: str
    media_type: str
    properties: Optional[str] = None


@dataclass
class SpineItemRef:
    idref: str


@dataclass
class TocEntry:
    title: str
    href: str
    play_order: int
