from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from skillpack.manifest import MalformedManifestError
from skillpack.references import ReferenceIndex
from skillpack.skill import SkillManifest

log = structlog.get_logger()


@dataclass(frozen=True)
class LoadedSkill:
    manifest: SkillManifest
    references: ReferenceIndex
    path: Path

    @property
    def name(self) -> str:
        return self.manifest.name


class UnknownSkillError(LookupError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"no skill named '{name}'")


_SKILLS: dict[str, LoadedSkill] = {}


def register_skill(skill: LoadedSkill) -> None:
    previous = _SKILLS.get(skill.name)
    if previous is not None and previous.path != skill.path:
        log.error("skill name registered twice", skill=skill.name, old=str(previous.path), new=str(skill.path))
        raise MalformedManifestError(
            f"skill name '{skill.name}' already registered from {previous.path}", skill.path / "SKILL.md"
        )
    _SKILLS[skill.name] = skill


def get_skill(name: str) -> LoadedSkill:
    try:
        return _SKILLS[name]
    except KeyError:
        raise UnknownSkillError(name) from None


def get_skill_manifests() -> list[SkillManifest]:
    return [s.manifest for s in _SKILLS.values()]


def all_skills() -> list[LoadedSkill]:
    return list(_SKILLS.values())


def clear_skills() -> None:
    _SKILLS.clear()
