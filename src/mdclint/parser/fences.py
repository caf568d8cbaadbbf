"""Markdown code fence scanning (``` and ~~~ blocks)."""

from __future__ import annotations

import re
from dataclasses import dataclass

_FENCE_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})(?P<info>.*)$")


@dataclass(frozen=True, slots=True)
class Fence:
    char: str
    length: int
    line: int
    """0-based line offset of the opening fence within the scanned text."""
    end_line: int | None
    info: str = ""

    @property
    def closed(self) -> bool:
        return self.end_line is not None


def scan_fences(text: str) -> list[Fence]:
    """Return every fenced block in *text*; the last one may be unclosed.

    A closing fence uses the same character, is at least as long as the
    opener and carries no info string.
    """
    fences: list[Fence] = []
    opener: tuple[str, int, int, str] | None = None

    for i, line in enumerate(text.splitlines()):
        m = _FENCE_RE.match(line)
        if m is None:
            continue
        marker, info = m["fence"], m["info"].strip()
        if opener is None:
            if marker[0] == "`" and "`" in info:
                continue  # inline code span, not a fence
            opener = (marker[0], len(marker), i, info)
        elif marker[0] == opener[0] and len(marker) >= opener[1] and not info:
            fences.append(Fence(opener[0], opener[1], opener[2], i, opener[3]))
            opener = None

    if opener is not None:
        fences.append(Fence(opener[0], opener[1], opener[2], None, opener[3]))
    return fences


def unclosed_fence(text: str) -> Fence | None:
    fences = scan_fences(text)
    if fences and not fences[-1].closed:
        return fences[-1]
    return None


def blank_fenced_lines(text: str) -> str:
    """Replace fenced block lines with empty lines, keeping line numbers."""
    fences = scan_fences(text)
    if not fences:
        return text
    lines = text.splitlines()
    for fence in fences:
        end = fence.end_line if fence.end_line is not None else len(lines) - 1
        for i in range(fence.line, end + 1):
            lines[i] = ""
    return "\n".join(lines)
