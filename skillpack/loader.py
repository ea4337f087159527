from __future__ import annotations

from pathlib import Path

import structlog

from skillpack.config import settings
from skillpack.manifest import MalformedManifestError, load_manifest
from skillpack.references import ReferenceIndex, load_reference
from skillpack.registry import LoadedSkill, clear_skills, get_skill_manifests, register_skill
from skillpack.skill import ReferenceDocument, SkillManifest

log = structlog.get_logger()

MANIFEST_FILENAME = "SKILL.md"
REFERENCES_DIRNAME = "references"

_loaded = False


def _resolve_reference_path(skill_dir: Path, filename: str) -> Path | None:
    candidate = skill_dir / filename
    if candidate.is_file():
        return candidate
    fallback = skill_dir / REFERENCES_DIRNAME / Path(filename).name
    if fallback.is_file():
        return fallback
    return None


def load_skill(skill_dir: str | Path) -> LoadedSkill:
    """Load SKILL.md and every reference file it lists from one directory.

    Every entry in the manifest's reference index must resolve to a
    non-empty file; a dangling entry raises MalformedManifestError.
    """
    skill_dir = Path(skill_dir)
    manifest_path = skill_dir / MANIFEST_FILENAME
    manifest = load_manifest(manifest_path)

    documents: dict[str, ReferenceDocument] = {}
    for entry in manifest.reference_index:
        ref_path = _resolve_reference_path(skill_dir, entry.filename)
        if ref_path is None:
            raise MalformedManifestError(f"reference file '{entry.filename}' not found", manifest_path)
        try:
            doc = load_reference(ref_path, entry.identifier)
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedManifestError(f"cannot read reference '{entry.filename}': {e}", manifest_path) from e
        if not doc.body.strip():
            raise MalformedManifestError(f"reference file '{entry.filename}' is empty", manifest_path)
        documents[entry.identifier] = doc

    references = ReferenceIndex(manifest.reference_index, documents, skill=manifest.name)
    log.debug("loaded skill", skill=manifest.name, references=list(references.list()))
    return LoadedSkill(manifest=manifest, references=references, path=skill_dir)


def discover_and_load_skills(skills_dir: str | Path | None = None) -> list[SkillManifest]:
    """Scan the skills directory for SKILL.md manifests and register each skill.

    Idempotent: only the first call loads. Returns the loaded SkillManifest
    objects in directory order.
    """
    global _loaded
    if _loaded:
        return get_skill_manifests()

    root = Path(skills_dir) if skills_dir is not None else settings.skills_dir
    manifests: list[SkillManifest] = []

    if not root.is_dir():
        log.warning("skills directory not found", path=str(root))
        _loaded = True
        return manifests

    for skill_dir in sorted(root.iterdir()):
        if not (skill_dir / MANIFEST_FILENAME).is_file():
            continue
        try:
            skill = load_skill(skill_dir)
            register_skill(skill)
        except MalformedManifestError:
            log.exception("failed to load skill", path=str(skill_dir))
            raise
        manifests.append(skill.manifest)

    _loaded = True
    log.info("skill discovery complete", count=len(manifests))
    return manifests


def reset() -> None:
    """Forget loaded skills so the next discovery call scans again."""
    global _loaded
    _loaded = False
    clear_skills()
