"""Parsed rule document model.

A :class:`RuleDocument` is built once per file by
:func:`mdclint.core.pipeline.parse_document` and is immutable afterwards.
Body sections form a closed tagged union (:data:`Section`); validators
dispatch on the variant with ``match``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

from mdclint.core._types import ExampleKind, Priority, SectionKind

if TYPE_CHECKING:
    from mdclint.parser.markup import ParsedMarkup


@dataclass(frozen=True, slots=True)
class Entry:
    """One ``key: value`` pair with its source line.

    Used for front-matter keys and for element attributes alike.
    """

    key: str
    value: Any
    line: int
    raw: str = ""


@dataclass(frozen=True, slots=True)
class FrontMatter:
    """Validated front-matter.

    Only built from entries that passed the schema: unknown keys and
    wrongly typed values never reach this object.
    """

    description: str = ""
    globs: tuple[str, ...] = ()
    always_apply: bool | None = None
    start_line: int = 1
    end_line: int = 1

    @property
    def matches_no_files(self) -> bool:
        """An empty ``globs`` value selects no files (distinct from ``*``)."""
        return not self.globs


@dataclass(frozen=True, slots=True)
class Title:
    text: str
    line: int
    end_line: int

    kind = SectionKind.TITLE


@dataclass(frozen=True, slots=True)
class Context:
    description: str
    text: str
    line: int
    end_line: int

    kind = SectionKind.CONTEXT


@dataclass(frozen=True, slots=True)
class Example:
    """A single correct or incorrect demonstration."""

    kind: ExampleKind
    attrs: dict[str, str]
    content: str
    has_cdata: bool
    line: int
    end_line: int
    content_line: int = 0

    @property
    def title(self) -> str:
        return self.attrs.get("title", "")

    @property
    def multiline(self) -> bool:
        return "\n" in self.content.strip()


@dataclass(frozen=True, slots=True)
class ExamplePair:
    """An ``<example>`` block: correct and/or incorrect demonstrations."""

    title: str
    demos: tuple[Example, ...]
    line: int
    end_line: int

    kind = SectionKind.EXAMPLE

    @property
    def correct(self) -> Example | None:
        return next((d for d in self.demos if d.kind == ExampleKind.CORRECT), None)

    @property
    def incorrect(self) -> Example | None:
        return next((d for d in self.demos if d.kind == ExampleKind.INCORRECT), None)


@dataclass(frozen=True, slots=True)
class Requirement:
    priority: Priority | None
    description: str
    examples: tuple[ExamplePair, ...]
    line: int
    end_line: int
    critical: bool = False
    """Declared as ``<non-negotiable>`` rather than ``<requirement>``."""

    kind = SectionKind.REQUIREMENT

    @property
    def has_correct_example(self) -> bool:
        return any(pair.correct is not None for pair in self.examples)


@dataclass(frozen=True, slots=True)
class GrammarPattern:
    description: str
    regex: str
    line: int


@dataclass(frozen=True, slots=True)
class Grammar:
    patterns: tuple[GrammarPattern, ...]
    line: int
    end_line: int

    kind = SectionKind.GRAMMAR


@dataclass(frozen=True, slots=True)
class Reference:
    href: str
    relation: str
    reason: str
    line: int
    end_line: int

    kind = SectionKind.REFERENCE


@dataclass(frozen=True, slots=True)
class Unknown:
    tag: str
    line: int
    end_line: int

    kind = SectionKind.UNKNOWN


Section: TypeAlias = Title | Context | Requirement | ExamplePair | Grammar | Reference | Unknown


@dataclass(frozen=True)
class RuleDocument:
    """One parsed rule file."""

    path: str
    front_matter: FrontMatter | None
    body: str
    body_line: int = 1
    entries: tuple[Entry, ...] = ()
    invalid_lines: tuple[tuple[int, str], ...] = ()
    """Front-matter lines that are not ``key: value`` pairs, with line numbers."""
    rooted: bool = False
    markup: ParsedMarkup | None = None
    sections: tuple[Section, ...] = field(default=())

    def sections_of(self, kind: SectionKind) -> list[Section]:
        return [s for s in self.sections if s.kind == kind]

    @property
    def requirements(self) -> list[Requirement]:
        return [s for s in self.sections if isinstance(s, Requirement)]

    @property
    def examples(self) -> list[ExamplePair]:
        return [s for s in self.sections if isinstance(s, ExamplePair)]
