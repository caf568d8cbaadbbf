from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TypeAlias

from mdclint.core.context import DocumentContext
from mdclint.core.document import Entry
from mdclint.core.rule import Rule
from mdclint.schema._checks import CheckSpec

Fields: TypeAlias = Mapping[str, Entry]
CheckFn: TypeAlias = Callable[[DocumentContext, Fields, int], None]
"""Check function: ``(ctx, fields, line)``; *line* locates missing fields."""


@dataclass(frozen=True, slots=True)
class ElementSpec:
    """Attribute constraints for one body element."""

    tag: str  # "requirement"
    checks: tuple[CheckSpec, ...] = ()


@dataclass(frozen=True, slots=True)
class DocumentSchema:
    """Declarative rule document format: front-matter keys and element attributes."""

    name: str  # "rule-file"
    front_matter_layer: str  # "frontmatter"
    front_matter_keys: tuple[str, ...]
    front_matter_checks: tuple[CheckSpec, ...] = ()
    unknown_key_rule_id: str = ""
    unknown_key_summary: str = ""
    unknown_key_hint: str = ""
    element_layer: str = ""
    elements: tuple[ElementSpec, ...] = ()


@dataclass(frozen=True)
class CompiledSchema:
    """Result of compiling a DocumentSchema - rules + dispatch tables."""

    rules: dict[str, Rule]
    allowed_keys: frozenset[str]
    unknown_key_rule: Rule | None
    front_matter_fns: tuple[CheckFn, ...]
    element_dispatch: dict[str, tuple[CheckFn, ...]]
