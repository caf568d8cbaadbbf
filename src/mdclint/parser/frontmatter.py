"""Split and decode the ``---`` front-matter block of a rule document.

Splitting is pure: it never records findings.  Type and key checks run
later through the compiled schema (:mod:`mdclint.schema`), and
:func:`build_front_matter` only keeps values that have the right shape.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import yaml

from mdclint.core.document import Entry, FrontMatter
from mdclint.core.finding import MalformedFrontMatterError

DELIMITER = "---"
ALLOWED_KEYS = ("description", "globs", "alwaysApply")

_KEY_RE = re.compile(r"^(?P<key>[A-Za-z_][\w.-]*)\s*:(?P<value>.*)$")
_BOOL_LITERALS = frozenset({"true", "false"})
_COMMENT_RE = re.compile(r"\s+#.*$")


@dataclass(frozen=True, slots=True)
class FrontMatterBlock:
    entries: tuple[Entry, ...]
    invalid_lines: tuple[tuple[int, str], ...]
    start_line: int
    end_line: int


@dataclass(frozen=True, slots=True)
class SplitDocument:
    block: FrontMatterBlock | None
    body: str
    body_line: int


def split_front_matter(text: str) -> SplitDocument:
    """Separate the front-matter block from the body.

    Returns a :class:`SplitDocument` with ``block=None`` when the text does
    not start with a ``---`` line.

    Raises:
        :class:`MalformedFrontMatterError`: The opening ``---`` has no
            closing ``---``.

    """
    text = text.removeprefix("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != DELIMITER:
        return SplitDocument(block=None, body=text, body_line=1)

    for idx in range(1, len(lines)):
        if lines[idx].rstrip() == DELIMITER:
            entries, invalid = _parse_entries(lines[1:idx], first_line=2)
            block = FrontMatterBlock(
                entries=entries,
                invalid_lines=invalid,
                start_line=1,
                end_line=idx + 1,
            )
            return SplitDocument(block=block, body="".join(lines[idx + 1 :]), body_line=idx + 2)

    raise MalformedFrontMatterError(
        "Front-matter opened on line 1 is never closed with '---'", line=1
    )


def _parse_entries(
    lines: list[str], *, first_line: int
) -> tuple[tuple[Entry, ...], tuple[tuple[int, str], ...]]:
    groups: list[tuple[int, str, str, list[str]]] = []
    invalid: list[tuple[int, str]] = []

    for offset, raw in enumerate(lines):
        lineno = first_line + offset
        text = raw.rstrip("\r\n")
        stripped = text.strip()
        if not stripped or stripped.startswith("#"):
            continue

        # Indented lines and list items continue the previous key.
        if text[0] in " \t" or stripped.startswith("- "):
            if groups:
                groups[-1][3].append(text)
            else:
                invalid.append((lineno, text))
            continue

        m = _KEY_RE.match(text)
        if m is None:
            invalid.append((lineno, text))
            continue
        groups.append((lineno, m["key"], m["value"].strip(), []))

    entries = tuple(
        Entry(
            key=key,
            value=decode_value(key, inline, continuation),
            line=lineno,
            raw="\n".join([inline, *continuation]).strip(),
        )
        for lineno, key, inline, continuation in groups
    )
    return entries, tuple(invalid)


def decode_value(key: str, inline: str, continuation: list[str] | None = None) -> Any:
    """Decode one entry with the YAML loader.

    The entry is loaded as a whole ``key: value`` line, so a plain value
    containing ``: `` stays a string and trailing ``# comments`` are dropped.
    Values that are not valid YAML (``globs: *.ts`` reads as an alias) are
    returned as the raw string.
    """
    if not inline and not continuation:
        return ""

    source = "\n".join([f"{key}: {inline}", *(continuation or ())])
    try:
        loaded = yaml.safe_load(source)
    except yaml.YAMLError:
        return " ".join([inline, *(c.strip() for c in continuation or ())]).strip()
    if isinstance(loaded, dict) and key in loaded:
        return loaded[key]
    return inline


# --- Shape coercion: None means "wrong shape" ---


def coerce_description(value: Any) -> str | None:
    if value is None:
        return ""
    if isinstance(value, dict | list):
        return None
    return str(value).strip()


def coerce_globs(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return ()
    if isinstance(value, str):
        return split_globs(value)
    if isinstance(value, list) and all(isinstance(g, str) for g in value):
        return tuple(g.strip() for g in value if g.strip())
    return None


def coerce_always_apply(entry: Entry) -> bool | None:
    literal = _COMMENT_RE.sub("", entry.raw).lower()
    if isinstance(entry.value, bool) and literal in _BOOL_LITERALS:
        return entry.value
    return None


def split_globs(value: str) -> tuple[str, ...]:
    """Split a comma-separated globs string (``"*.ts, *.tsx"``)."""
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        value = value[1:-1]
    parts = (p.strip().strip("\"'").strip() for p in value.split(","))
    return tuple(p for p in parts if p)


def build_front_matter(block: FrontMatterBlock) -> FrontMatter:
    """Build a :class:`FrontMatter` from the well-formed entries of *block*.

    The first occurrence of each allowed key wins; unknown keys and values
    of the wrong shape are dropped.
    """
    seen: dict[str, Entry] = {}
    for entry in block.entries:
        if entry.key in ALLOWED_KEYS and entry.key not in seen:
            seen[entry.key] = entry

    description = ""
    if (e := seen.get("description")) is not None:
        description = coerce_description(e.value) or ""

    globs: tuple[str, ...] = ()
    if (e := seen.get("globs")) is not None:
        globs = coerce_globs(e.value) or ()

    always_apply: bool | None = None
    if (e := seen.get("alwaysApply")) is not None:
        always_apply = coerce_always_apply(e)

    return FrontMatter(
        description=description,
        globs=globs,
        always_apply=always_apply,
        start_line=block.start_line,
        end_line=block.end_line,
    )
