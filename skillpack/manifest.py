from __future__ import annotations

import re
from pathlib import Path
from types import MappingProxyType
from typing import Any

import structlog
import yaml

from skillpack.markdown import track_fence
from skillpack.skill import ReferenceEntry, SkillManifest, WorkflowSection

log = structlog.get_logger()

FRONTMATTER_DELIM = "---"
REQUIRED_FIELDS = ("name", "description")

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+?)\s*#*\s*$")
_REFERENCE_HEADING_RE = re.compile(r"^references?(?:\s+(?:files|documents|docs))?$", re.IGNORECASE)
_BULLET_RE = re.compile(r"^\s*[-*+]\s+(?P<item>.*?)\s*$")
_FILENAME_RE = re.compile(r"^[\w./-]+\.(?:md|markdown|txt)$")
_LINK_ITEM_RE = re.compile(
    r"""^(?:\*\*|`)?\[(?P<text>[^\]]*)\]\((?P<target>[^)\s]+)\)(?:\*\*|`)?
        \s*(?:[-:–—]\s*)?
        (?P<summary>.*)$""",
    re.VERBOSE,
)
_FILE_ITEM_RE = re.compile(
    r"""^(?:\*\*|`)?(?P<filename>[\w./-]+\.(?:md|markdown|txt))(?:\*\*|`)?
        \s*(?:[-:–—]\s*)?
        (?P<summary>.*)$""",
    re.VERBOSE,
)


class MalformedManifestError(ValueError):
    """The manifest is missing required fields or cannot be parsed."""

    def __init__(self, message: str, path: str | Path | None = None):
        self.path = str(path) if path is not None else None
        super().__init__(f"{self.path}: {message}" if self.path else message)


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split a leading ``---`` YAML block from the Markdown body.

    Only a block at the very start of the file is recognised, so a ``---``
    rule further down the body is left alone.
    """
    normalized = text.removeprefix("\ufeff").replace("\r\n", "\n")
    if not normalized.startswith(FRONTMATTER_DELIM + "\n"):
        raise MalformedManifestError("manifest must start with a '---' front-matter block")

    start = len(FRONTMATTER_DELIM) + 1
    end = (normalized + "\n").find("\n" + FRONTMATTER_DELIM + "\n", start - 1)
    if end == -1:
        raise MalformedManifestError("front-matter block is not terminated")

    fm_text = normalized[start:end]
    body = normalized[end + len(FRONTMATTER_DELIM) + 2 :]

    try:
        meta = yaml.safe_load(fm_text) if fm_text.strip() else {}
    except yaml.YAMLError as e:
        raise MalformedManifestError(f"front matter is not valid YAML: {e}") from e

    if not isinstance(meta, dict):
        raise MalformedManifestError("front matter must be a key/value mapping")
    return meta, body


def _split_sections(body: str) -> tuple[str, list[tuple[str, str]]]:
    """Return the document title and its ``##`` sections in order.

    Headings inside fenced code blocks are treated as text.
    """
    title = ""
    sections: list[tuple[str, list[str]]] = []
    fence: str | None = None

    for line in body.split("\n"):
        was_fenced = fence is not None
        fence = track_fence(line, fence)
        m = None if (was_fenced or fence) else _HEADING_RE.match(line)
        if m and len(m.group(1)) == 1 and not title and not sections:
            title = m.group(2)
            continue
        if m and len(m.group(1)) == 2:
            sections.append((m.group(2), []))
            continue
        if sections:
            sections[-1][1].append(line)

    return title, [(heading, "\n".join(lines).strip()) for heading, lines in sections]


def _parse_reference_item(item: str) -> tuple[str, str]:
    """Return (filename, summary) for one bullet of the reference list."""
    m = _LINK_ITEM_RE.match(item)
    if m:
        text = m.group("text").strip("`* ")
        filename = text if _FILENAME_RE.match(text) else m.group("target")
        if _FILENAME_RE.match(filename):
            return filename, m.group("summary").strip()
    m = _FILE_ITEM_RE.match(item)
    if m:
        return m.group("filename"), m.group("summary").strip()
    raise MalformedManifestError(f"reference list item names no reference file: '{item}'")


def _parse_reference_index(text: str) -> tuple[ReferenceEntry, ...]:
    entries: list[ReferenceEntry] = []
    seen: set[str] = set()
    fence: str | None = None
    for line in text.split("\n"):
        was_fenced = fence is not None
        fence = track_fence(line, fence)
        if was_fenced or fence:
            continue
        bullet = _BULLET_RE.match(line)
        if not bullet:
            continue
        filename, summary = _parse_reference_item(bullet.group("item"))
        identifier = Path(filename).stem
        if identifier in seen:
            raise MalformedManifestError(f"reference '{identifier}' is listed more than once")
        seen.add(identifier)
        entries.append(
            ReferenceEntry(identifier=identifier, filename=filename, summary=summary)
        )
    return tuple(entries)


def _trigger_conditions(meta: dict[str, Any], sections: list[tuple[str, str]], description: str) -> str:
    triggers = meta.get("triggers")
    if isinstance(triggers, (list, tuple)):
        joined = "; ".join(str(t).strip() for t in triggers if str(t).strip())
        if joined:
            return joined
    elif isinstance(triggers, str) and triggers.strip():
        return triggers.strip()

    for heading, text in sections:
        if heading.lower() == "when to use" and text:
            return text
    return description


def parse_manifest(text: str) -> SkillManifest:
    """Parse ``SKILL.md`` content into a SkillManifest.

    Raises MalformedManifestError when the front matter is absent or broken,
    or when ``name``/``description`` are missing. Deterministic for a given
    input.
    """
    meta, body = split_frontmatter(text)

    for key in REQUIRED_FIELDS:
        value = meta.get(key)
        if not isinstance(value, str) or not value.strip():
            raise MalformedManifestError(f"required field '{key}' is missing or empty")

    name = meta["name"].strip()
    description = meta["description"].strip()
    title, sections = _split_sections(body)

    reference_index: tuple[ReferenceEntry, ...] = ()
    workflow: list[WorkflowSection] = []
    found_index = False
    for heading, section_text in sections:
        if not found_index and _REFERENCE_HEADING_RE.match(heading.strip()):
            reference_index = _parse_reference_index(section_text)
            found_index = True
            continue
        workflow.append(WorkflowSection(heading=heading, text=section_text))

    extra = {k: v for k, v in meta.items() if k not in (*REQUIRED_FIELDS, "triggers")}

    return SkillManifest(
        name=name,
        description=description,
        trigger_conditions=_trigger_conditions(meta, sections, description),
        title=title or name,
        workflow_sections=tuple(workflow),
        reference_index=reference_index,
        metadata=MappingProxyType(extra),
    )


def load_manifest(path: str | Path) -> SkillManifest:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedManifestError(f"cannot read manifest: {e}", path) from e

    try:
        manifest = parse_manifest(text)
    except MalformedManifestError as e:
        raise MalformedManifestError(str(e), path) from e

    log.debug("parsed manifest", path=str(path), skill=manifest.name, references=len(manifest.reference_index))
    return manifest
