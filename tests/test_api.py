"""Tests for the read-only HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from skillpack.config import settings
from skillpack.main import app
from tests.samples import STATE_DOC


@pytest.fixture
def client(tmp_path, make_skill, monkeypatch):
    root = tmp_path / "skills"
    make_skill(root=root)
    monkeypatch.setattr(settings, "skills_dir", root)
    with TestClient(app) as c:
        yield c


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "skills": 1}


def test_list_skills(client):
    resp = client.get("/skills")
    assert resp.status_code == 200
    assert resp.json() == [
        {"name": "swiftui-test", "description": "SwiftUI guidance used in tests.", "reference_count": 2}
    ]


def test_get_manifest(client):
    data = client.get("/skills/swiftui-test").json()
    assert data["title"] == "SwiftUI Test Skill"
    assert [s["heading"] for s in data["workflow_sections"]] == ["Overview", "Workflow Decision Tree"]
    assert [r["identifier"] for r in data["references"]] == ["state-management", "view-composition"]


def test_unknown_skill_is_404(client):
    assert client.get("/skills/nope").status_code == 404
    assert client.get("/skills/nope/references").status_code == 404


def test_list_references_in_order(client):
    data = client.get("/skills/swiftui-test/references").json()
    assert [r["identifier"] for r in data] == ["state-management", "view-composition"]
    assert data[1]["summary"] == "Splitting views and modifiers."


def test_get_reference(client):
    data = client.get("/skills/swiftui-test/references/state-management").json()
    assert data == {"identifier": "state-management", "title": "State Management", "body": STATE_DOC}


def test_get_unknown_reference_is_404(client):
    resp = client.get("/skills/swiftui-test/references/nonexistent")
    assert resp.status_code == 404
    assert "nonexistent" in resp.json()["detail"]


def test_raw_reference_is_unchanged(client):
    resp = client.get("/skills/swiftui-test/references/state-management/raw")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/markdown")
    assert resp.text == STATE_DOC


def test_context_with_refs(client):
    resp = client.get(
        "/skills/swiftui-test/context",
        params=[("ref", "view-composition"), ("ref", "state-management")],
    )
    assert resp.status_code == 200
    assert resp.text.index('id="view-composition"') < resp.text.index('id="state-management"')


def test_context_unknown_ref_is_404(client):
    resp = client.get("/skills/swiftui-test/context", params={"ref": "nonexistent"})
    assert resp.status_code == 404
