from __future__ import annotations

import io
import logging
import os
import tempfile
import zipfile
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .exceptions import EpubError, FetchError, SerializationError
from .models import BookMeta, Resource
from .package import NAV_FILE, NCX_FILE, PACKAGE_FILE, build_package, render_package
from .registry import KINDS, ResourceRegistry
from .sections import SectionStore, section_path
from .sources import fetch_source
from .toc import build_toc, render_nav, render_ncx

log = logging.getLogger(__name__)

MIMETYPE = b"application/epub+zip"
CONTENT_DIR = "OEBPS"

CONTAINER_XML = (
    "<?xml version=\"1.0\" encoding=\"UTF-8\"?>\n"
    "<container version=\"1.0\" xmlns=\"urn:oasis:names:tc:opendocument:xmlns:container\">\n"
    "  <rootfiles>\n"
    f"    <rootfile full-path=\"{CONTENT_DIR}/{PACKAGE_FILE}\" media-type=\"application/oebps-package+xml\"/>\n"
    "  </rootfiles>\n"
    "</container>\n"
).encode("utf-8")

Fetcher = Callable[[str], bytes]


class BuildEvent(dict):
    """Opaque event object for progress reporting."""
    pass


def _emit(cb: Optional[Callable[[BuildEvent], None]], ev: BuildEvent) -> None:
    if cb:
        try:
            cb(ev)
        except Exception:  # noqa: BLE001
            # Never let callbacks break the build
            log.debug("on_event callback failed for %s", ev.get("type"), exc_info=True)


@dataclass
class BookParts:
    meta: BookMeta
    registry: ResourceRegistry
    store: SectionStore


def resolve_resources(
    resources: List[Resource],
    fetcher: Fetcher,
    on_event: Optional[Callable[[BuildEvent], None]] = None,
) -> Dict[Tuple[str, str], bytes]:
    """Bytes for every resource, keyed by (kind, filename); first failure aborts."""
    out: Dict[Tuple[str, str], bytes] = {}
    for idx, res in enumerate(resources, 1):
        if res.data is not None:
            out[(res.kind, res.filename)] = res.data
            continue
        _emit(on_event, BuildEvent(type="resource_fetch_start", index=idx, kind=res.kind, source=res.source))
        try:
            data = fetcher(res.source)
        except EpubError:
            raise
        except Exception as e:  # noqa: BLE001
            raise FetchError(res.source, str(e)) from e
        out[(res.kind, res.filename)] = data
        _emit(on_event, BuildEvent(type="resource_fetch_done", index=idx, kind=res.kind, size=len(data)))
    return out


def build_archive(parts: BookParts, payload: Dict[Tuple[str, str], bytes]) -> bytes:
    """Serialize the whole container in memory; ``mimetype`` is stored first."""
    meta = parts.meta
    package_opf = render_package(build_package(meta, parts.registry, parts.store))
    entries = build_toc(parts.store)

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zi = zipfile.ZipInfo("mimetype")
        zi.compress_type = zipfile.ZIP_STORED
        zf.writestr(zi, MIMETYPE)
        zf.writestr("META-INF/container.xml", CONTAINER_XML)
        zf.writestr(f"{CONTENT_DIR}/{PACKAGE_FILE}", package_opf.encode("utf-8"))
        zf.writestr(f"{CONTENT_DIR}/{NCX_FILE}", render_ncx(meta, entries).encode("utf-8"))
        zf.writestr(f"{CONTENT_DIR}/{NAV_FILE}", render_nav(meta, entries).encode("utf-8"))
        for kind, spec in KINDS.items():
            for res in parts.registry.resources(kind):
                zf.writestr(f"{CONTENT_DIR}/{spec.folder}/{res.filename}", payload[(kind, res.filename)])
        for section in parts.store:
            xhtml = parts.store.render(section, meta.language)
            zf.writestr(f"{CONTENT_DIR}/{section_path(section)}", xhtml.encode("utf-8"))
    return buf.getvalue()


def write_epub(
    parts: BookParts,
    out_path: str,
    *,
    fetcher: Optional[Fetcher] = None,
    on_event: Optional[Callable[[BuildEvent], None]] = None,
) -> str:
    """Resolve resources, build the archive and move it into ``out_path``.

    Nothing is created at ``out_path`` unless every step succeeds.
    """
    if not len(parts.store):
        raise SerializationError("Book has no sections; readers need at least one spine item")
    payload = resolve_resources(parts.registry.resources(), fetcher or fetch_source, on_event)
    try:
        data = build_archive(parts, payload)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as e:
        raise SerializationError(f"Cannot build archive: {e}") from e

    out_dir = os.path.dirname(os.path.abspath(out_path))
    tmp_path = None
    try:
        os.makedirs(out_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".epubkit-", suffix=".tmp", dir=out_dir)
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, out_path)
        tmp_path = None
    except OSError as e:
        raise SerializationError(f"Cannot write {out_path}: {e}") from e
    finally:
        if tmp_path is not None:
            try:
                os.remove(tmp_path)
            except OSError:
                log.warning("could not remove temporary file %s", tmp_path)
    log.info("wrote %s (%d sections, %d resources, %d bytes)",
             out_path, len(parts.store), len(payload), len(data))
    _emit(on_event, BuildEvent(type="write_done", path=out_path, size=len(data)))
    return out_path
