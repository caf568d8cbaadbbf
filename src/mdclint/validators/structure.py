import re

from mdclint.core.config import MdclintConfig
from mdclint.core.context import DocumentContext
from mdclint.core.document import Entry, Grammar, Requirement, RuleDocument, Title, Unknown
from mdclint.parser.markup import Element, ParsedMarkup, ProblemKind
from mdclint.rules.structure import (
    ST_001,
    ST_002,
    ST_006,
    ST_007,
    ST_008,
    ST_009,
    ST_010,
    ST_011,
    ST_014,
    ST_015,
    ST_016,
)
from mdclint.schema._schema import CompiledSchema
from mdclint.validators.base import BaseValidator

_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")
_REQUIREMENT_TAGS = ("requirement", "non-negotiable")


def count_sentences(text: str) -> int:
    return len([s for s in _SENTENCE_SPLIT_RE.split(text.strip()) if s.strip()])


class StructureValidator(BaseValidator):
    """Validates the nesting and content of a ``<rule>`` body."""

    def __init__(self, compiled: CompiledSchema, config: MdclintConfig | None = None) -> None:
        cfg = config or MdclintConfig()
        self._elements = compiled.element_dispatch
        self._max_sentences = cfg.max_description_sentences

    def validate_body(self, ctx: DocumentContext, document: RuleDocument) -> None:
        markup = document.markup
        if markup is None:
            return

        self._check_markup(ctx, markup)

        rule = markup.rule
        if rule is None:
            return

        self._check_layout(ctx, document, rule)
        self._check_attributes(ctx, rule)

        for section in document.sections:
            match section:
                case Requirement():
                    self._check_requirement(ctx, section)
                case Grammar():
                    self._check_grammar(ctx, section)
                case Unknown(tag=tag, line=line, end_line=end_line):
                    ctx.finding(
                        ST_010,
                        f"Unexpected <{tag}> directly under <rule>",
                        line=line,
                        end_line=end_line,
                    )

    def _check_markup(self, ctx: DocumentContext, markup: ParsedMarkup) -> None:
        for problem in markup.problems:
            match problem.kind:
                case ProblemKind.UNCLOSED:
                    ctx.finding(ST_008, f"<{problem.tag}> is never closed", line=problem.line)
                case ProblemKind.STRAY_CLOSE:
                    ctx.finding(
                        ST_009,
                        f"</{problem.tag}> has no matching <{problem.tag}>",
                        line=problem.line,
                    )
                case ProblemKind.UNCLOSED_CDATA:
                    ctx.finding(
                        ST_016,
                        f"CDATA section inside <{problem.tag}> is never terminated",
                        line=problem.line,
                    )

    def _check_layout(self, ctx: DocumentContext, document: RuleDocument, rule: Element) -> None:
        if not any(isinstance(s, Title) and s.text for s in document.sections):
            ctx.finding(ST_001, line=rule.line)

        meta = rule.find("meta")
        requirements = rule.find("requirements")
        if requirements is None:
            ctx.finding(ST_002, line=rule.line, end_line=rule.end_line)
            return

        if not any(el.tag in _REQUIREMENT_TAGS for el in requirements.children):
            ctx.finding(ST_015, line=requirements.line, end_line=requirements.end_line)

        if meta is not None and requirements.line < meta.line:
            ctx.finding(ST_014, line=requirements.line)

    def _check_attributes(self, ctx: DocumentContext, rule: Element) -> None:
        for el in rule.iter():
            checks = self._elements.get(el.tag)
            if not checks:
                continue
            fields = {k: Entry(k, v, el.line, v) for k, v in el.attrs.items()}
            for check in checks:
                check(ctx, fields, el.line)

    def _check_requirement(self, ctx: DocumentContext, requirement: Requirement) -> None:
        if not requirement.description:
            ctx.finding(ST_006, line=requirement.line, end_line=requirement.end_line)
            return
        sentences = count_sentences(requirement.description)
        if sentences > self._max_sentences:
            ctx.finding(
                ST_007,
                f"Requirement description has {sentences} sentences "
                f"(expected at most {self._max_sentences})",
                line=requirement.line,
            )

    def _check_grammar(self, ctx: DocumentContext, grammar: Grammar) -> None:
        for pattern in grammar.patterns:
            if not pattern.regex:
                ctx.finding(ST_011, "Grammar pattern is empty", line=pattern.line)
                continue
            try:
                re.compile(pattern.regex)
            except re.error as exc:
                ctx.finding(
                    ST_011,
                    f"Pattern {pattern.regex!r} does not compile: {exc}",
                    line=pattern.line,
                )
