"""Tests for the in-memory reference index."""

import pytest

from skillpack.references import ReferenceIndex, UnknownReferenceError, extract_title, load_reference
from skillpack.skill import ReferenceDocument, ReferenceEntry


@pytest.fixture
def index():
    entries = [
        ReferenceEntry("state-management", "references/state-management.md", "State."),
        ReferenceEntry("view-composition", "references/view-composition.md", "Views."),
    ]
    docs = {
        "view-composition": ReferenceDocument("view-composition", "View Composition", "# View Composition\n"),
        "state-management": ReferenceDocument("state-management", "State Management", "# State Management\n"),
    }
    return ReferenceIndex(entries, docs, skill="swiftui-test")


def test_list_follows_entry_order(index):
    assert index.list() == ("state-management", "view-composition")


def test_list_is_idempotent(index):
    assert index.list() == index.list()
    assert [d.identifier for d in index] == list(index.list())


def test_get_returns_document(index):
    doc = index.get("state-management")
    assert doc.title == "State Management"
    assert doc.body == "# State Management\n"


def test_get_unknown_raises(index):
    with pytest.raises(UnknownReferenceError) as exc_info:
        index.get("nonexistent")
    assert exc_info.value.identifier == "nonexistent"
    assert isinstance(exc_info.value, LookupError)


def test_summary_and_membership(index):
    assert index.summary("view-composition") == "Views."
    assert "state-management" in index
    assert "animations" not in index
    assert len(index) == 2
    with pytest.raises(UnknownReferenceError):
        index.summary("animations")


def test_entry_without_document_is_rejected():
    entries = [ReferenceEntry("animations", "references/animations.md", "")]
    with pytest.raises(UnknownReferenceError):
        ReferenceIndex(entries, {})


def test_empty_index():
    index = ReferenceIndex([], {})
    assert index.list() == ()
    assert len(index) == 0


def test_extract_title_skips_code_fences():
    body = "```swift\n# not a title\n```\n# Real Title\n"
    assert extract_title(body, "fallback") == "Real Title"
    assert extract_title("no heading", "fallback") == "fallback"


def test_load_reference_keeps_bytes(tmp_path):
    body = "# Performance\r\n\r\nLine with trailing spaces   \r\n"
    path = tmp_path / "performance.md"
    path.write_bytes(body.encode("utf-8"))
    doc = load_reference(path)
    assert doc.identifier == "performance"
    assert doc.title == "Performance"
    assert doc.body == body
    assert doc.path == path


def test_extract_title_fence_closes_on_matching_marker():
    body = "```swift\n~~~\n# inside code\n```\n# Title\n"
    assert extract_title(body, "fallback") == "Title"
    assert extract_title("~~~~\n```\n# inside\n~~~~\n# After\n", "fallback") == "After"
