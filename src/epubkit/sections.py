"""Sections (chapters) in reading order and their XHTML shell.

Sections live in their own folder, a sibling of img/, css/ and font/, so the
``../img/...`` references handed out by the registry resolve from them.
"""
from __future__ import annotations

import logging
import xml.sax.saxutils as xsu
from typing import List, Optional
from urllib.parse import quote

from .exceptions import FilenameAlreadyUsed
from .models import Section
from .registry import check_filename

log = logging.getLogger(__name__)

SECTION_FOLDER = "xhtml"


def build_section_xhtml(title: str, body_html: str, lang: str = "en", stylesheet: Optional[str] = None) -> str:
    """Minimal EPUB3 XHTML shell; the body fragment is inserted as is."""
    title_xml = xsu.escape(title)
    link = ""
    if stylesheet:
        link = "  <link rel=\"stylesheet\" type=\"text/css\" href=%s/>\n" % xsu.quoteattr(stylesheet)
    return (
        "<?xml version=\"1.0\" encoding=\"utf-8\"?>\n"
        "<!DOCTYPE html>\n"
        "<html xmlns=\"http://www.w3.org/1999/xhtml\" xmlns:epub=\"http://www.idpf.org/2007/ops\" xml:lang=%s lang=%s>\n"
        "<head>\n"
        "  <meta charset=\"utf-8\"/>\n"
        "  <title>%s</title>\n"
        "%s"
        "</head>\n"
        "<body>\n"
        "%s\n"
        "</body>\n"
        "</html>\n"
    ) % (xsu.quoteattr(lang), xsu.quoteattr(lang), title_xml, link, body_html)


def section_path(section: Section) -> str:
    """Location of a section file below the content folder."""
    return f"{SECTION_FOLDER}/{section.filename}"


def section_href(section: Section) -> str:
    """Href of a section relative to the package document (shared by manifest, spine and tocs)."""
    return f"{SECTION_FOLDER}/{quote(section.filename)}"


class SectionStore:
    """Sections in insertion order; filenames unique among sections only."""

    def __init__(self):
        self._sections: List[Section] = []
        self._names: set = set()

    def __len__(self) -> int:
        return len(self._sections)

    def __iter__(self):
        return iter(list(self._sections))

    def add(self, title: str, body: str, filename: Optional[str] = None, stylesheet: Optional[str] = None) -> str:
        if not filename:
            filename = f"section{len(self._sections) + 1:04d}.xhtml"
        check_filename(filename, "section")
        if filename in self._names:
            raise FilenameAlreadyUsed(filename, "section")
        section = Section(
            filename=filename,
            title=title,
            body=body,
            position=len(self._sections) + 1,
            stylesheet=stylesheet or None,
        )
        self._names.add(filename)
        self._sections.append(section)
        log.debug("added section %d %s", section.position, filename)
        return filename

    def render(self, section: Section, lang: str = "en") -> str:
        return build_section_xhtml(section.title, section.body, lang, section.stylesheet)
