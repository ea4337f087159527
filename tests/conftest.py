import textwrap
from pathlib import Path

import pytest

from skillpack import loader
from tests.samples import COMPOSITION_DOC, MANIFEST, STATE_DOC


@pytest.fixture(autouse=True)
def reset_skills():
    loader.reset()
    yield
    loader.reset()


@pytest.fixture
def make_skill(tmp_path):
    def _make(name="swiftui", manifest=MANIFEST, references=None, root=None) -> Path:
        if references is None:
            references = {
                "state-management.md": STATE_DOC,
                "view-composition.md": COMPOSITION_DOC,
            }
        skill_dir = (root or tmp_path) / name
        (skill_dir / "references").mkdir(parents=True)
        (skill_dir / "SKILL.md").write_text(textwrap.dedent(manifest), encoding="utf-8")
        for filename, body in references.items():
            (skill_dir / "references" / filename).write_text(body, encoding="utf-8", newline="")
        return skill_dir

    return _make


@pytest.fixture
def skill_dir(make_skill):
    return make_skill()
