from __future__ import annotations

from collections.abc import Iterable

from skillpack.registry import LoadedSkill
from skillpack.skill import SkillManifest


def render_skill_summary(manifest: SkillManifest) -> str:
    """Short block for an agent's system prompt: what the skill is and what it can load."""
    lines = [
        f"## Skill: {manifest.name}",
        manifest.description,
        "",
        f"Use when: {manifest.trigger_conditions}",
    ]
    if manifest.reference_index:
        lines += ["", "Available references:"]
        for entry in manifest.reference_index:
            summary = f" - {entry.summary}" if entry.summary else ""
            lines.append(f"- {entry.identifier}{summary}")
    return "\n".join(lines)


def render_skill_context(skill: LoadedSkill, identifiers: Iterable[str] = ()) -> str:
    """Workflow guidance followed by the full text of each requested reference.

    References are emitted in the order requested; an unknown identifier
    raises UnknownReferenceError before anything is rendered.
    """
    documents = [skill.references.get(i) for i in identifiers]

    parts = [f"# {skill.manifest.title}"]
    for section in skill.manifest.workflow_sections:
        parts.append(f"## {section.heading}\n\n{section.text}".rstrip())
    for doc in documents:
        parts.append(f'<reference id="{doc.identifier}">\n{doc.body.rstrip()}\n</reference>')
    return "\n\n".join(parts) + "\n"
