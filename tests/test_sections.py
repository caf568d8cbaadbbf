from mdclint.core._types import ExampleKind, Priority, SectionKind
from mdclint.core.document import (
    Context,
    ExamplePair,
    Grammar,
    Reference,
    Requirement,
    Title,
    Unknown,
)
from mdclint.parser.markup import parse_markup
from mdclint.parser.sections import build_sections
from tests.conftest import FIXTURES, parse, rule_text


def _sections(body: str):
    return build_sections(parse_markup(body))


def test_no_rule_root_has_no_sections() -> None:
    assert _sections("<meta><title>T</title></meta>") == ()


def test_title() -> None:
    (title,) = _sections("<rule><meta><title> Naming </title></meta></rule>")
    assert isinstance(title, Title)
    assert title.text == "Naming"
    assert title.kind == SectionKind.TITLE


def test_requirement_fields() -> None:
    sections = _sections(
        '<rule><requirements><requirement priority="HIGH">'
        "<description>Use snake_case.</description>"
        "</requirement></requirements></rule>"
    )
    (requirement,) = sections
    assert isinstance(requirement, Requirement)
    assert requirement.priority == Priority.HIGH
    assert requirement.description == "Use snake_case."
    assert requirement.examples == ()
    assert not requirement.critical


def test_invalid_priority_is_none() -> None:
    (requirement,) = _sections(
        '<rule><requirements><requirement priority="urgent"></requirement></requirements></rule>'
    )
    assert isinstance(requirement, Requirement)
    assert requirement.priority is None
    assert requirement.description == ""


def test_non_negotiable_is_critical() -> None:
    (requirement,) = _sections(
        '<rule><requirements><non-negotiable priority="critical">'
        "<description>Never commit secrets.</description>"
        "</non-negotiable></requirements></rule>"
    )
    assert isinstance(requirement, Requirement)
    assert requirement.critical
    assert requirement.priority == Priority.CRITICAL


def test_examples_belong_to_requirement_and_sections() -> None:
    sections = _sections(
        "<rule>\n<requirements>\n<requirement>\n<examples>\n"
        '<example title="Names">\n'
        '<correct-example conditions="c" expected-result="r"><![CDATA[x = 1]]></correct-example>\n'
        "<incorrect-example>X = 1</incorrect-example>\n"
        "</example>\n</examples>\n</requirement>\n</requirements>\n</rule>"
    )
    requirement, pair = sections
    assert isinstance(requirement, Requirement)
    assert isinstance(pair, ExamplePair)
    assert requirement.examples == (pair,)
    assert requirement.has_correct_example
    assert pair.title == "Names"
    assert pair.line == 5
    assert pair.correct is not None
    assert pair.correct.kind == ExampleKind.CORRECT
    assert pair.correct.content == "x = 1"
    assert pair.correct.has_cdata
    assert pair.correct.attrs["conditions"] == "c"
    assert pair.incorrect is not None
    assert pair.incorrect.content == "X = 1"
    assert not pair.incorrect.has_cdata


def test_grammar_patterns() -> None:
    (grammar,) = _sections(
        "<rule><grammar>"
        '<pattern description="delimiter">^---$</pattern>'
        "<pattern><![CDATA[a<b]]></pattern>"
        "</grammar></rule>"
    )
    assert isinstance(grammar, Grammar)
    assert [(p.description, p.regex) for p in grammar.patterns] == [
        ("delimiter", "^---$"),
        ("", "a<b"),
    ]


def test_context() -> None:
    (context,) = _sections('<rule><context description="why">Background text.</context></rule>')
    assert isinstance(context, Context)
    assert context.description == "why"
    assert context.text == "Background text."


def test_references() -> None:
    sections = _sections(
        "<rule><references>"
        '<reference href="a.md" as="dependency" reason="r"/>'
        '<reference href="b.md"/>'
        "</references></rule>"
    )
    assert all(isinstance(s, Reference) for s in sections)
    assert [(s.href, s.relation) for s in sections] == [("a.md", "dependency"), ("b.md", "")]


def test_misplaced_element_is_unknown() -> None:
    (unknown,) = _sections("<rule><example></example></rule>")
    assert isinstance(unknown, Unknown)
    assert unknown.tag == "example"
    assert unknown.kind == SectionKind.UNKNOWN


def test_sections_in_source_order() -> None:
    sections = _sections(
        "<rule>\n<context>c</context>\n<meta><title>T</title></meta>\n"
        "<requirements><requirement><description>d</description></requirement></requirements>\n"
        "</rule>"
    )
    assert [s.kind for s in sections] == [
        SectionKind.CONTEXT,
        SectionKind.TITLE,
        SectionKind.REQUIREMENT,
    ]


def test_document_accessors() -> None:
    document = parse((FIXTURES / "rules" / "rules.mdc").read_text(encoding="utf-8"))
    assert document.rooted
    assert len(document.requirements) == 3
    assert len(document.examples) == 3
    assert len(document.sections_of(SectionKind.REFERENCE)) == 2
    (title,) = document.sections_of(SectionKind.TITLE)
    assert isinstance(title, Title)
    assert title.text == "Rule File Format"


def test_body_lines_refer_to_file() -> None:
    document = parse(rule_text("<rule>\n<meta><title>T</title></meta>\n</rule>"))
    (title,) = document.sections
    assert title.line == 5
