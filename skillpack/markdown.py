from __future__ import annotations

import re

_FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")


def track_fence(line: str, open_fence: str | None) -> str | None:
    """Return the fence marker still open after ``line``, or None.

    A fence closes only on a run of the same character at least as long as
    the one that opened it, so ``~~~`` inside a backtick block is plain text.
    """
    m = _FENCE_RE.match(line)
    if not m:
        return open_fence
    marker = m.group(1)
    if open_fence is None:
        return marker
    if marker[0] == open_fence[0] and len(marker) >= len(open_fence) and not line.strip()[len(marker):].strip():
        return None
    return open_fence
