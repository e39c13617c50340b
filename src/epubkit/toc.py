"""EPUB 2 NCX navigation map and EPUB 3 navigation document.

Both are rendered from one list of ``TocEntry`` built from the section store,
so their hrefs and order match the manifest and spine.
"""
from __future__ import annotations

import xml.sax.saxutils as xsu
from typing import List

from .models import BookMeta, TocEntry
from .sections import SectionStore, section_href


def build_toc(store: SectionStore) -> List[TocEntry]:
    return [
        TocEntry(title=section.title, href=section_href(section), play_order=idx)
        for idx, section in enumerate(store, 1)
    ]


def render_ncx(meta: BookMeta, entries: List[TocEntry]) -> str:
    navmap_lines: List[str] = []
    for entry in entries:
        idx = entry.play_order
        navmap_lines.extend([
            f"    <navPoint id=\"navPoint-{idx}\" playOrder=\"{idx}\">",
            f"      <navLabel><text>{xsu.escape(entry.title)}</text></navLabel>",
            f"      <content src={xsu.quoteattr(entry.href)}/>",
            "    </navPoint>",
        ])
    return (
        "<?xml version=\"1.0\" encoding=\"utf-8\"?>\n"
        "<ncx xmlns=\"http://www.daisy.org/z3986/2005/ncx/\" version=\"2005-1\">\n"
        "  <head>\n"
        "    <meta name=\"dtb:uid\" content=%s/>\n"
        "    <meta name=\"dtb:depth\" content=\"1\"/>\n"
        "    <meta name=\"dtb:totalPageCount\" content=\"0\"/>\n"
        "    <meta name=\"dtb:maxPageNumber\" content=\"0\"/>\n"
        "  </head>\n"
        "  <docTitle><text>%s</text></docTitle>\n"
        "  <navMap>\n"
        "%s\n"
        "  </navMap>\n"
        "</ncx>\n"
    ) % (
        xsu.quoteattr(meta.urn),
        xsu.escape(meta.title),
        "\n".join(navmap_lines),
    )


def render_nav(meta: BookMeta, entries: List[TocEntry]) -> str:
    items = "\n".join(
        f"      <li><a href={xsu.quoteattr(e.href)}>{xsu.escape(e.title)}</a></li>" for e in entries
    )
    lang = xsu.quoteattr(meta.language)
    return (
        "<?xml version=\"1.0\" encoding=\"utf-8\"?>\n"
        "<!DOCTYPE html>\n"
        "<html xmlns=\"http://www.w3.org/1999/xhtml\" xmlns:epub=\"http://www.idpf.org/2007/ops\" xml:lang=%s lang=%s>\n"
        "<head>\n"
        "  <meta charset=\"utf-8\"/>\n"
        "  <title>%s</title>\n"
        "</head>\n"
        "<body>\n"
        "  <nav epub:type=\"toc\">\n"
        "    <h1>%s</h1>\n"
        "    <ol>\n"
        "%s\n"
        "    </ol>\n"
        "  </nav>\n"
        "</body>\n"
        "</html>\n"
    ) % (lang, lang, xsu.escape(meta.title), xsu.escape(meta.title), items)
