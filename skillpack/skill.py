from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class WorkflowSection:
    heading: str                                # "Workflow Decision Tree"
    text: str                                   # section body, verbatim


@dataclass(frozen=True)
class ReferenceEntry:
    identifier: str                             # "state-management"
    filename: str                               # "references/state-management.md"
    summary: str                                # one-liner shown to the agent


@dataclass(frozen=True)
class SkillManifest:
    name: str                                   # "swiftui-expert"
    description: str                            # one-liner for system prompt
    trigger_conditions: str
    title: str = ""
    workflow_sections: tuple[WorkflowSection, ...] = ()
    reference_index: tuple[ReferenceEntry, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), hash=False)   # leftover front-matter keys, read-only

    def reference_identifiers(self) -> tuple[str, ...]:
        return tuple(e.identifier for e in self.reference_index)

    def section(self, heading: str) -> WorkflowSection | None:
        wanted = heading.strip().lower()
        for s in self.workflow_sections:
            if s.heading.lower() == wanted:
                return s
        return None


@dataclass(frozen=True)
class ReferenceDocument:
    identifier: str
    title: str
    body: str                                   # full file text, unmodified
    path: Path | None = None
