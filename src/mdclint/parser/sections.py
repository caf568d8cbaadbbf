from mdclint.core._types import ExampleKind, Priority
from mdclint.core.document import (
    Context,
    Example,
    ExamplePair,
    Grammar,
    GrammarPattern,
    Reference,
    Requirement,
    Section,
    Title,
    Unknown,
)
from mdclint.parser.markup import Element, ParsedMarkup

_DEMO_KINDS = {
    "correct-example": ExampleKind.CORRECT,
    "incorrect-example": ExampleKind.INCORRECT,
}
_REQUIREMENT_TAGS = ("requirement", "non-negotiable")
_PRIORITIES = frozenset(Priority)


def build_sections(markup: ParsedMarkup) -> tuple[Section, ...]:
    """Turn the ``<rule>`` element tree into ordered sections.

    Example pairs appear both inside their :class:`Requirement` and as
    sections of their own, so the example checker can walk them directly.
    """
    rule = markup.rule
    if rule is None:
        return ()

    sections: list[Section] = []
    for child in rule.children:
        match child.tag:
            case "meta":
                title = child.find("title")
                if title is not None:
                    sections.append(Title(title.text, title.line, title.end_line))
            case "requirements":
                for el in child.children:
                    if el.tag in _REQUIREMENT_TAGS:
                        requirement = _requirement(el)
                        sections.append(requirement)
                        sections.extend(requirement.examples)
            case "context":
                description = child.attrs.get("description", "")
                sections.append(Context(description, child.text, child.line, child.end_line))
            case "grammar":
                patterns = tuple(
                    GrammarPattern(p.attrs.get("description", ""), p.text, p.line)
                    for p in child.iter("pattern")
                )
                sections.append(Grammar(patterns, child.line, child.end_line))
            case "references":
                sections.extend(
                    Reference(
                        href=ref.attrs.get("href", ""),
                        relation=ref.attrs.get("as", ""),
                        reason=ref.attrs.get("reason", ""),
                        line=ref.line,
                        end_line=ref.end_line,
                    )
                    for ref in child.find_all("reference")
                )
            case _:
                sections.append(Unknown(child.tag, child.line, child.end_line))

    return tuple(sorted(sections, key=lambda s: s.line))


def _requirement(el: Element) -> Requirement:
    description = el.find("description")
    raw_priority = el.attrs.get("priority", "").strip().lower()
    priority = Priority(raw_priority) if raw_priority in _PRIORITIES else None
    return Requirement(
        priority=priority,
        description=description.text if description is not None else "",
        examples=tuple(example_pair(ex) for ex in el.iter("example")),
        line=el.line,
        end_line=el.end_line,
        critical=el.tag == "non-negotiable",
    )


def example_pair(el: Element) -> ExamplePair:
    demos = tuple(
        Example(
            kind=_DEMO_KINDS[c.tag],
            attrs=dict(c.attrs),
            content="".join(t for t, _ in c.parts),
            has_cdata=c.has_cdata,
            line=c.line,
            end_line=c.end_line,
            content_line=c.content_line,
        )
        for c in el.children
        if c.tag in _DEMO_KINDS
    )
    return ExamplePair(
        title=el.attrs.get("title", ""),
        demos=demos,
        line=el.line,
        end_line=el.end_line,
    )
