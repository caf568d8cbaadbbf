from mdclint.core._types import Severity
from mdclint.core.config import MdclintConfig
from mdclint.core.context import DocumentContext
from mdclint.schema import RULE_FILE
from mdclint.validators.structure import StructureValidator, count_sentences
from tests.conftest import (
    assert_finding,
    assert_findings,
    assert_no_finding,
    assert_no_findings,
    make_ctx,
    parse,
    rule_text,
)

_META = "<meta><title>Naming</title></meta>"


def _validate(body: str, *, config: MdclintConfig | None = None) -> DocumentContext:
    ctx = make_ctx()
    StructureValidator(RULE_FILE, config=config).validate_body(ctx, parse(rule_text(body)))
    return ctx


def _requirements(inner: str) -> str:
    return f"<rule>\n{_META}\n<requirements>\n{inner}\n</requirements>\n</rule>"


def test_minimal_rule_is_clean() -> None:
    ctx = _validate(
        _requirements('<requirement priority="high"><description>d</description></requirement>')
    )
    assert_no_findings(ctx)


def test_free_form_body_is_skipped() -> None:
    ctx = make_ctx()
    StructureValidator(RULE_FILE).validate_body(ctx, parse(rule_text("# Just a guide")))
    assert_no_findings(ctx)


# ST-001 MissingTitle, ST-002 MissingRequirements


def test_missing_title() -> None:
    ctx = _validate(
        "<rule><requirements><requirement priority='low'>"
        "<description>d</description></requirement></requirements></rule>"
    )
    f = assert_finding(ctx, "ST-001")
    assert f.severity == Severity.ERROR
    assert f.line == 4


def test_empty_title() -> None:
    ctx = _validate(
        "<rule><meta><title>  </title></meta><requirements><requirement priority='low'>"
        "<description>d</description></requirement></requirements></rule>"
    )
    assert_finding(ctx, "ST-001")


def test_missing_requirements() -> None:
    ctx = _validate(f"<rule>\n{_META}\n</rule>")
    f = assert_finding(ctx, "ST-002")
    assert f.name == "MissingRequirements"
    assert f.line == 4
    assert f.end_line == 6


def test_empty_requirements() -> None:
    ctx = _validate(_requirements(""))
    f = assert_finding(ctx, "ST-015")
    assert f.severity == Severity.WARNING
    assert_no_finding(ctx, "ST-002")


def test_requirements_before_meta() -> None:
    ctx = _validate(
        "<rule>\n<requirements><requirement priority='low'><description>d</description>"
        f"</requirement></requirements>\n{_META}\n</rule>"
    )
    f = assert_finding(ctx, "ST-014")
    assert f.line == 5


# Priorities: ST-003, ST-004, ST-005


def test_non_negotiable_without_critical_priority() -> None:
    ctx = _validate(
        _requirements(
            "<non-negotiable><description>Never log secrets.</description></non-negotiable>"
        )
    )
    f = assert_finding(ctx, "ST-003")
    assert f.severity == Severity.WARNING
    assert "got nothing" in f.message


def test_non_negotiable_with_other_priority() -> None:
    ctx = _validate(
        _requirements(
            '<non-negotiable priority="high"><description>d</description></non-negotiable>'
        )
    )
    f = assert_finding(ctx, "ST-003")
    assert "'high'" in f.message


def test_non_negotiable_critical() -> None:
    ctx = _validate(
        _requirements(
            '<non-negotiable priority="critical"><description>d</description></non-negotiable>'
        )
    )
    assert_no_findings(ctx)


def test_invalid_priority() -> None:
    ctx = _validate(
        _requirements('<requirement priority="urgent"><description>d</description></requirement>')
    )
    f = assert_finding(ctx, "ST-004")
    assert f.name == "InvalidPriority"
    assert "'urgent'" in f.message
    assert_no_finding(ctx, "ST-005")


def test_priority_case_insensitive() -> None:
    ctx = _validate(
        _requirements('<requirement priority="High"><description>d</description></requirement>')
    )
    assert_no_findings(ctx)


def test_missing_priority() -> None:
    ctx = _validate(_requirements("<requirement><description>d</description></requirement>"))
    f = assert_finding(ctx, "ST-005")
    assert f.severity == Severity.WARNING
    assert f.line == 7
    assert_no_finding(ctx, "ST-004")


# ST-006 EmptyRequirementDescription, ST-007 CompoundDescription


def test_empty_description() -> None:
    ctx = _validate(
        _requirements("<requirement priority='low'><description> </description></requirement>")
    )
    assert_finding(ctx, "ST-006")


def test_missing_description_element() -> None:
    ctx = _validate(_requirements("<requirement priority='low'></requirement>"))
    assert_finding(ctx, "ST-006")


def test_compound_description() -> None:
    ctx = _validate(
        _requirements(
            "<requirement priority='low'><description>"
            "Use snake_case. Avoid globals. Prefer pure functions!"
            "</description></requirement>"
        )
    )
    f = assert_finding(ctx, "ST-007")
    assert f.severity == Severity.INFO
    assert "3 sentences" in f.message


def test_sentence_limit_configurable() -> None:
    body = _requirements(
        "<requirement priority='low'><description>One. Two.</description></requirement>"
    )
    assert_no_finding(_validate(body), "ST-007")
    assert_finding(_validate(body, config=MdclintConfig(max_description_sentences=1)), "ST-007")


def test_count_sentences() -> None:
    assert count_sentences("One statement") == 1
    assert count_sentences("Use .mdc files. Keep them short.") == 2
    assert count_sentences("Why? Because! Done.") == 3
    assert count_sentences("") == 0


# Markup problems: ST-008, ST-009, ST-016


def test_unclosed_tag() -> None:
    ctx = _validate(
        _requirements("<requirement priority='low'>\n<description>d\n</requirement>")
    )
    f = assert_finding(ctx, "ST-008")
    assert "<description>" in f.message
    assert f.line == 8


def test_unexpected_closing_tag() -> None:
    ctx = _validate(f"<rule>\n{_META}\n</examples>\n</rule>")
    f = assert_finding(ctx, "ST-009")
    assert f.severity == Severity.WARNING
    assert f.line == 6


def test_unclosed_cdata() -> None:
    ctx = _validate(
        _requirements(
            "<requirement priority='low'><description>d</description>\n"
            "<example><correct-example><![CDATA[\nbroken"
        )
    )
    assert_findings(ctx, "ST-016", "ST-008")


# ST-010 UnknownSection, ST-011 InvalidGrammarPattern


def test_unknown_section() -> None:
    ctx = _validate(
        _requirements("<requirement priority='low'><description>d</description></requirement>")
        .replace("</rule>", "<example></example>\n</rule>")
    )
    f = assert_finding(ctx, "ST-010")
    assert "<example>" in f.message
    assert f.severity == Severity.INFO


def test_invalid_grammar_pattern() -> None:
    ctx = _validate(
        _requirements("<requirement priority='low'><description>d</description></requirement>")
        .replace(
            "</rule>",
            "<grammar><pattern>([a-z</pattern><pattern>^ok$</pattern></grammar>\n</rule>",
        )
    )
    findings = [f for f in ctx.findings if f.rule_id == "ST-011"]
    assert len(findings) == 1
    assert "([a-z" in findings[0].message


def test_empty_grammar_pattern() -> None:
    ctx = _validate(
        _requirements("<requirement priority='low'><description>d</description></requirement>")
        .replace("</rule>", "<grammar><pattern></pattern></grammar>\n</rule>")
    )
    f = assert_finding(ctx, "ST-011")
    assert "empty" in f.message


# References: ST-012, ST-013


def _with_references(refs: str) -> str:
    return _requirements(
        "<requirement priority='low'><description>d</description></requirement>"
    ).replace("</rule>", f"<references>{refs}</references>\n</rule>")


def test_valid_references() -> None:
    assert_no_findings(
        _validate(_with_references('<reference href="a.md" as="dependency"/>'))
    )


def test_reference_without_href() -> None:
    f = assert_finding(_validate(_with_references('<reference as="context"/>')), "ST-012")
    assert f.severity == Severity.WARNING


def test_reference_with_blank_href() -> None:
    assert_finding(_validate(_with_references('<reference href=" " as="context"/>')), "ST-012")


def test_reference_invalid_type() -> None:
    f = assert_finding(
        _validate(_with_references('<reference href="a.md" as="inspiration"/>')), "ST-013"
    )
    assert "'inspiration'" in f.message


def test_reference_type_optional() -> None:
    assert_no_findings(_validate(_with_references('<reference href="a.md"/>')))
