import xml.etree.ElementTree as ET

from epubkit.models import BookMeta
from epubkit.package import build_package
from epubkit.registry import ResourceRegistry
from epubkit.sections import SectionStore
from epubkit.toc import build_toc, render_nav, render_ncx

NCX = "{http://www.daisy.org/z3986/2005/ncx/}"
XHTML = "{http://www.w3.org/1999/xhtml}"


def _store(titles):
    store = SectionStore()
    for t in titles:
        store.add(t, f"<p>{t}</p>")
    return store


def test_toc_order_and_play_order():
    entries = build_toc(_store(["Gamma", "Alpha", "Beta"]))
    assert [e.title for e in entries] == ["Gamma", "Alpha", "Beta"]
    assert [e.play_order for e in entries] == [1, 2, 3]


def test_toc_hrefs_match_spine():
    store = _store(["One", "Two"])
    doc = build_package(BookMeta(title="T"), ResourceRegistry(), store)
    by_id = {e.id: e.href for e in doc.manifest}
    assert [e.href for e in build_toc(store)] == [by_id[r.idref] for r in doc.spine]


def test_ncx_carries_uid_title_and_navpoints():
    meta = BookMeta(title="Book <1>", identifier="abc")
    root = ET.fromstring(render_ncx(meta, build_toc(_store(["A", "B"]))).encode("utf-8"))
    uid = [m for m in root.iter(f"{NCX}meta") if m.get("name") == "dtb:uid"][0]
    assert uid.get("content") == "urn:uuid:abc"
    assert root.find(f"{NCX}docTitle/{NCX}text").text == "Book <1>"
    points = root.findall(f"{NCX}navMap/{NCX}navPoint")
    assert [p.get("playOrder") for p in points] == ["1", "2"]
    assert [p.find(f"{NCX}content").get("src") for p in points] == [
        "xhtml/section0001.xhtml",
        "xhtml/section0002.xhtml",
    ]


def test_nav_document_lists_sections_in_order():
    meta = BookMeta(title="T", language="de")
    root = ET.fromstring(render_nav(meta, build_toc(_store(["A", "B"]))).encode("utf-8"))
    assert root.get("lang") == "de"
    links = root.findall(f"{XHTML}body/{XHTML}nav/{XHTML}ol/{XHTML}li/{XHTML}a")
    assert [(a.text, a.get("href")) for a in links] == [
        ("A", "xhtml/section0001.xhtml"),
        ("B", "xhtml/section0002.xhtml"),
    ]
