"""Tokenizer and tree builder for the XML-like rule body.

Only the schema tags in :data:`KNOWN_TAGS` build elements; any other tag
(HTML inside an example, JSX, generics in prose) is kept as text.  CDATA
sections and comments are opaque.  Nesting problems are collected as
:class:`MarkupProblem` values instead of raising, so the structure
validator can report them with line numbers.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass, field
from enum import StrEnum

from mdclint.parser.fences import blank_fenced_lines

KNOWN_TAGS = frozenset(
    {
        "rule",
        "meta",
        "title",
        "description",
        "created-at",
        "applies-to",
        "file-matcher",
        "action-matcher",
        "requirements",
        "requirement",
        "non-negotiable",
        "examples",
        "example",
        "correct-example",
        "incorrect-example",
        "grammar",
        "pattern",
        "context",
        "references",
        "reference",
    }
)

_TOKEN_RE = re.compile(
    r"(?P<cdata><!\[CDATA\[.*?\]\]>)"
    r"|(?P<cdata_open><!\[CDATA\[)"
    r"|(?P<comment><!--.*?-->)"
    r"|<(?P<close>/)?(?P<tag>[A-Za-z][\w.-]*)(?P<attrs>(?:\s[^<>]*?)?)\s*(?P<selfclose>/)?>",
    re.DOTALL,
)
_ATTR_RE = re.compile(r"""([A-Za-z_:][\w:.-]*)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_RULE_ROOT_RE = re.compile(r"^\s*<rule(?:\s[^<>]*)?>", re.MULTILINE | re.IGNORECASE)


class ProblemKind(StrEnum):
    UNCLOSED = "unclosed"
    STRAY_CLOSE = "stray_close"
    UNCLOSED_CDATA = "unclosed_cdata"


@dataclass(frozen=True, slots=True)
class MarkupProblem:
    kind: ProblemKind
    tag: str
    line: int


@dataclass(slots=True)
class Element:
    """A schema element with its source span."""

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    line: int = 0
    end_line: int = 0
    content_line: int = 0
    children: list[Element] = field(default_factory=list)
    parts: list[tuple[str, bool]] = field(default_factory=list)
    """Direct text content as ``(text, is_cdata)`` pairs."""
    content: str = ""
    """Raw source between the opening and closing tag."""
    closed: bool = False

    @property
    def text(self) -> str:
        """Direct text content, CDATA unwrapped, children excluded."""
        return "".join(t for t, _ in self.parts).strip()

    @property
    def has_cdata(self) -> bool:
        return any(is_cdata for _, is_cdata in self.parts)

    def find(self, tag: str) -> Element | None:
        return next((c for c in self.children if c.tag == tag), None)

    def find_all(self, tag: str) -> list[Element]:
        return [c for c in self.children if c.tag == tag]

    def iter(self, tag: str | None = None) -> list[Element]:
        """All descendants in document order, optionally filtered by tag."""
        found: list[Element] = []
        for child in self.children:
            if tag is None or child.tag == tag:
                found.append(child)
            found.extend(child.iter(tag))
        return found


@dataclass
class ParsedMarkup:
    root: Element
    problems: list[MarkupProblem] = field(default_factory=list)

    @property
    def rule(self) -> Element | None:
        return self.root.find("rule")


def has_rule_root(text: str) -> bool:
    """Return ``True`` if *text* has a ``<rule>`` element at line start.

    Tags inside fenced code blocks do not count: guides often quote a rule.
    """
    return _RULE_ROOT_RE.search(blank_fenced_lines(text)) is not None


class _LineIndex:
    def __init__(self, text: str, first_line: int) -> None:
        self._starts = [0] + [m.end() for m in re.finditer(r"\n", text)]
        self._first = first_line

    def line_of(self, offset: int) -> int:
        return bisect.bisect_right(self._starts, offset) - 1 + self._first


def parse_attrs(raw: str) -> dict[str, str]:
    return {m[1]: m[2] if m[2] is not None else m[3] for m in _ATTR_RE.finditer(raw)}


def parse_markup(text: str, *, first_line: int = 1) -> ParsedMarkup:
    """Build the element tree for *text*.

    ``first_line`` is the file line number of the first line of *text*, so
    element lines refer to the original file.
    """
    index = _LineIndex(text, first_line)
    root = Element(tag="#root", line=first_line, closed=True)
    problems: list[MarkupProblem] = []
    stack: list[tuple[Element, int]] = [(root, 0)]
    pos = 0

    def add_text(chunk: str, *, cdata: bool = False) -> None:
        if chunk:
            stack[-1][0].parts.append((chunk, cdata))

    for m in _TOKEN_RE.finditer(text):
        add_text(text[pos : m.start()])
        pos = m.end()

        if m["cdata"] is not None:
            add_text(m["cdata"][9:-3], cdata=True)
            continue
        if m["cdata_open"] is not None:
            cdata_line = index.line_of(m.start())
            problems.append(MarkupProblem(ProblemKind.UNCLOSED_CDATA, stack[-1][0].tag, cdata_line))
            # Everything after an unterminated CDATA opener is opaque.
            add_text(text[m.end() :], cdata=True)
            pos = len(text)
            break
        if m["comment"] is not None:
            continue

        tag = m["tag"].lower()
        if tag not in KNOWN_TAGS:
            add_text(m.group(0))
            continue

        line = index.line_of(m.start())
        if m["close"]:
            _close(tag, stack, problems, text, m.start(), line)
            continue

        element = Element(
            tag=tag,
            attrs=parse_attrs(m["attrs"] or ""),
            line=line,
            content_line=index.line_of(m.end()),
        )
        stack[-1][0].children.append(element)
        if m["selfclose"]:
            element.end_line = line
            element.closed = True
        else:
            stack.append((element, m.end()))

    add_text(text[pos:])

    end_line = index.line_of(len(text))
    while len(stack) > 1:
        element, start = stack.pop()
        element.end_line = end_line
        element.content = text[start:]
        problems.append(MarkupProblem(ProblemKind.UNCLOSED, element.tag, element.line))

    return ParsedMarkup(root=root, problems=problems)


def _close(
    tag: str,
    stack: list[tuple[Element, int]],
    problems: list[MarkupProblem],
    text: str,
    offset: int,
    line: int,
) -> None:
    open_tags = [e.tag for e, _ in stack[1:]]
    if tag not in open_tags:
        problems.append(MarkupProblem(ProblemKind.STRAY_CLOSE, tag, line))
        return

    while True:
        element, start = stack.pop()
        element.end_line = line
        element.content = text[start:offset]
        if element.tag == tag:
            element.closed = True
            return
        problems.append(MarkupProblem(ProblemKind.UNCLOSED, element.tag, element.line))
