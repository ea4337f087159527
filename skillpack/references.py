from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

from skillpack.markdown import track_fence
from skillpack.skill import ReferenceDocument, ReferenceEntry

_TITLE_RE = re.compile(r"^#\s+(.+?)\s*#*\s*$")


class UnknownReferenceError(LookupError):
    def __init__(self, identifier: str, skill: str | None = None):
        self.identifier = identifier
        self.skill = skill
        where = f" in skill '{skill}'" if skill else ""
        super().__init__(f"no reference document '{identifier}'{where}")


def extract_title(body: str, default: str) -> str:
    fence: str | None = None
    for line in body.removeprefix("\ufeff").splitlines():
        was_fenced = fence is not None
        fence = track_fence(line, fence)
        if not (was_fenced or fence):
            m = _TITLE_RE.match(line)
            if m:
                return m.group(1)
    return default


def load_reference(path: str | Path, identifier: str | None = None) -> ReferenceDocument:
    """Read one reference file as UTF-8. The body is kept byte-for-byte."""
    path = Path(path)
    identifier = identifier or path.stem
    with open(path, encoding="utf-8", newline="") as f:
        body = f.read()
    return ReferenceDocument(
        identifier=identifier,
        title=extract_title(body, identifier),
        body=body,
        path=path,
    )


class ReferenceIndex:
    """In-memory lookup from identifier to ReferenceDocument, in manifest order."""

    def __init__(
        self,
        entries: Iterable[ReferenceEntry],
        documents: Mapping[str, ReferenceDocument],
        skill: str | None = None,
    ):
        self._entries = tuple(entries)
        self._skill = skill
        missing = [e.identifier for e in self._entries if e.identifier not in documents]
        if missing:
            raise UnknownReferenceError(missing[0], skill)
        self._documents = {e.identifier: documents[e.identifier] for e in self._entries}

    def get(self, identifier: str) -> ReferenceDocument:
        try:
            return self._documents[identifier]
        except KeyError:
            raise UnknownReferenceError(identifier, self._skill) from None

    def list(self) -> tuple[str, ...]:
        return tuple(e.identifier for e in self._entries)

    def entries(self) -> tuple[ReferenceEntry, ...]:
        return self._entries

    def summary(self, identifier: str) -> str:
        for e in self._entries:
            if e.identifier == identifier:
                return e.summary
        raise UnknownReferenceError(identifier, self._skill)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._documents

    def __iter__(self) -> Iterator[ReferenceDocument]:
        return (self._documents[e.identifier] for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)
