import re

import pytest

from epubkit.exceptions import FilenameAlreadyUsed, InvalidFilename
from epubkit.models import FONT, IMAGE, STYLESHEET
from epubkit.registry import ResourceRegistry, source_ext


def test_stylesheet_names_supplied_then_generated():
    reg = ResourceRegistry()
    assert reg.add(STYLESHEET, data=b"h1 {}", filename="epub.css") == "../css/epub.css"
    assert reg.add(STYLESHEET, data=b"h1 {}") == "../css/css0002.css"


def test_image_names_supplied_then_generated_from_url():
    reg = ResourceRegistry()
    assert reg.add(IMAGE, source="testdata/gophercolor16x16.png", filename="go-gopher.png") == "../img/go-gopher.png"
    assert reg.add(IMAGE, source="https://golang.org/doc/gopher/gophercolor16x16.png") == "../img/image0002.png"


def test_generated_names_are_unique_and_increasing_per_kind():
    reg = ResourceRegistry()
    imgs = [reg.add(IMAGE, source=f"pics/p{i}.jpg") for i in range(3)]
    fonts = [reg.add(FONT, source="fonts/Serif.ttf") for _ in range(2)]
    assert imgs == ["../img/image0001.jpg", "../img/image0002.jpg", "../img/image0003.jpg"]
    assert fonts == ["../font/font0001.ttf", "../font/font0002.ttf"]
    for path in imgs:
        assert re.match(r"^\.\./img/image\d{4}\.jpg$", path)


def test_duplicate_leaves_registry_unchanged():
    reg = ResourceRegistry()
    reg.add(IMAGE, source="a.png", filename="cover.png")
    with pytest.raises(FilenameAlreadyUsed) as ei:
        reg.add(IMAGE, source="b.png", filename="cover.png")
    assert ei.value.filename == "cover.png" and ei.value.kind == IMAGE
    assert reg.count(IMAGE) == 1
    assert [r.source for r in reg.resources()] == ["a.png"]
    assert reg.add(IMAGE, source="c.png") == "../img/image0002.png"


def test_namespaces_are_independent():
    reg = ResourceRegistry()
    reg.add(IMAGE, source="x.png", filename="shared")
    reg.add(FONT, source="x.ttf", filename="shared")
    reg.add(STYLESHEET, data=b"", filename="shared")
    assert reg.count(IMAGE) == reg.count(FONT) == reg.count(STYLESHEET) == 1


def test_source_or_data_required():
    reg = ResourceRegistry()
    with pytest.raises(ValueError):
        reg.add(IMAGE)
    with pytest.raises(ValueError):
        reg.add(IMAGE, source="a.png", data=b"x")
    with pytest.raises(ValueError):
        reg.add("video", source="a.mp4")


def test_source_ext_ignores_query_and_fragment():
    assert source_ext("https://example.com/a/b.gif?size=2#top") == ".gif"
    assert source_ext("file:///tmp/pic.jpeg") == ".jpeg"
    assert source_ext("images/no_ext") == ""


@pytest.mark.parametrize("name", ["../xhtml/section0001.xhtml", "sub/a.png", "a\\b.png", ".."])
def test_filename_must_stay_in_folder(name):
    reg = ResourceRegistry()
    with pytest.raises(InvalidFilename):
        reg.add(STYLESHEET, data=b"", filename=name)
    assert reg.count(STYLESHEET) == 0 and reg.resources() == []


def test_reference_is_percent_encoded():
    reg = ResourceRegistry()
    assert reg.add(IMAGE, source="a.png", filename="my pic#1.png") == "../img/my%20pic%231.png"
