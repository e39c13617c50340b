from __future__ import annotations

import posixpath
import xml.sax.saxutils as xsu
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List

from .exceptions import UnsupportedMediaType
from .models import BookMeta, ManifestEntry, SpineItemRef
from .registry import KINDS, ResourceRegistry, resource_href
from .sections import SectionStore, section_href

PACKAGE_FILE = "package.opf"
NCX_FILE = "toc.ncx"
NAV_FILE = "nav.xhtml"
NCX_ID = "ncx"
NAV_ID = "nav"

MEDIA_TYPES = {
    ".css": "text/css",
    ".gif": "image/gif",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".png": "image/png",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".otf": "font/otf",
    ".ttf": "font/ttf",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".htm": "application/xhtml+xml",
    ".html": "application/xhtml+xml",
    ".xhtml": "application/xhtml+xml",
    ".ncx": "application/x-dtbncx+xml",
}


def media_type(filename: str) -> str:
    ext = posixpath.splitext(filename)[1].lower()
    try:
        return MEDIA_TYPES[ext]
    except KeyError:
        raise UnsupportedMediaType(filename) from None


def format_modified(meta: BookMeta) -> str:
    ts = meta.modified or datetime.now(timezone.utc)
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class PackageDocument:
    meta: BookMeta
    manifest: List[ManifestEntry] = field(default_factory=list)
    spine: List[SpineItemRef] = field(default_factory=list)


def build_package(meta: BookMeta, registry: ResourceRegistry, store: SectionStore) -> PackageDocument:
    """Manifest and spine for the current registry and section store."""
    doc = PackageDocument(meta=meta)
    doc.manifest.append(ManifestEntry(id=NCX_ID, href=NCX_FILE, media_type=media_type(NCX_FILE)))
    doc.manifest.append(ManifestEntry(id=NAV_ID, href=NAV_FILE, media_type=media_type(NAV_FILE), properties="nav"))
    for kind, spec in KINDS.items():
        for idx, res in enumerate(registry.resources(kind), 1):
            doc.manifest.append(
                ManifestEntry(
                    id=f"{spec.prefix}{idx:04d}",
                    href=resource_href(kind, res.filename),
                    media_type=media_type(res.filename),
                )
            )
    for section in store:
        sid = f"section{section.position:04d}"
        doc.manifest.append(ManifestEntry(id=sid, href=section_href(section), media_type=media_type(section.filename)))
        doc.spine.append(SpineItemRef(idref=sid))
    return doc


def render_package(doc: PackageDocument) -> str:
    meta = doc.meta
    creator = ""
    if meta.author:
        creator = f"    <dc:creator id=\"creator\">{xsu.escape(meta.author)}</dc:creator>\n"
    items = []
    for entry in doc.manifest:
        props = f" properties={xsu.quoteattr(entry.properties)}" if entry.properties else ""
        items.append(
            f"    <item id={xsu.quoteattr(entry.id)} href={xsu.quoteattr(entry.href)} "
            f"media-type={xsu.quoteattr(entry.media_type)}{props}/>"
        )
    itemrefs = [f"    <itemref idref={xsu.quoteattr(ref.idref)}/>" for ref in doc.spine]
    return (
        "<?xml version=\"1.0\" encoding=\"utf-8\"?>\n"
        "<package xmlns=\"http://www.idpf.org/2007/opf\" version=\"3.0\" unique-identifier=\"pub-id\">\n"
        "  <metadata xmlns:dc=\"http://purl.org/dc/elements/1.1/\">\n"
        "    <dc:identifier id=\"pub-id\">%s</dc:identifier>\n"
        "    <dc:title>%s</dc:title>\n"
        "    <dc:language>%s</dc:language>\n"
        "%s"
        "    <meta property=\"dcterms:modified\">%s</meta>\n"
        "  </metadata>\n"
        "  <manifest>\n"
        "%s\n"
        "  </manifest>\n"
        "  <spine toc=\"%s\">\n"
        "%s\n"
        "  </spine>\n"
        "</package>\n"
    ) % (
        xsu.escape(meta.urn),
        xsu.escape(meta.title),
        xsu.escape(meta.language),
        creator,
        format_modified(meta),
        "\n".join(items),
        NCX_ID,
        "\n".join(itemrefs),
    )
