from mdclint.core._types import Priority, Severity
from mdclint.core.document import Entry
from mdclint.parser.frontmatter import (
    ALLOWED_KEYS,
    coerce_always_apply,
    coerce_description,
    coerce_globs,
)
from mdclint.schema._checks import FieldChoice, FieldRequired, FieldValue
from mdclint.schema._schema import DocumentSchema, ElementSpec


def _type_name(value: object) -> str:
    if value is None:
        return "nothing"
    return type(value).__name__


def _check_always_apply(entry: Entry) -> str | None:
    if coerce_always_apply(entry) is None:
        return f"alwaysApply must be true or false, got {entry.raw or 'nothing'!r}"
    return None


def _check_globs_type(entry: Entry) -> str | None:
    if coerce_globs(entry.value) is None:
        return f"globs must be a string or a list of strings, got {_type_name(entry.value)}"
    return None


def _check_description_type(entry: Entry) -> str | None:
    if coerce_description(entry.value) is None:
        return f"description must be a single string, got {_type_name(entry.value)}"
    return None


def _check_empty_globs(entry: Entry) -> str | None:
    if isinstance(entry.value, list):
        empty = sum(1 for g in entry.value if isinstance(g, str) and not g.strip())
        if empty:
            return f"globs list has {empty} empty pattern(s)"
    return None


RULE_FILE_SCHEMA = DocumentSchema(
    name="rule-file",
    front_matter_layer="frontmatter",
    front_matter_keys=ALLOWED_KEYS,
    unknown_key_rule_id="FM-002",
    unknown_key_summary="Unknown front-matter key",
    front_matter_checks=(
        FieldValue(
            "alwaysApply",
            _check_always_apply,
            "FM-003",
            name="TypeMismatch",
            severity=Severity.ERROR,
            summary="alwaysApply is not a boolean literal",
            hint="Use 'alwaysApply: true' or 'alwaysApply: false'",
        ),
        FieldValue(
            "globs",
            _check_globs_type,
            "FM-004",
            name="TypeMismatch",
            severity=Severity.ERROR,
            summary="globs is not a string or a list of strings",
            hint="Use a glob string ('*.ts'), a comma-separated string or a YAML list",
        ),
        FieldValue(
            "description",
            _check_description_type,
            "FM-005",
            name="TypeMismatch",
            severity=Severity.ERROR,
            summary="description is not a string",
        ),
        FieldRequired(
            "description",
            "FM-006",
            name="MissingDescription",
            severity=Severity.WARNING,
            summary="missing description reduces AI rule-selection quality",
            hint="Describe when the rule applies in one sentence",
            allow_empty=False,
        ),
        FieldValue(
            "globs",
            _check_empty_globs,
            "FM-011",
            name="EmptyGlob",
            severity=Severity.WARNING,
            summary="globs list contains an empty pattern",
        ),
    ),
    element_layer="structure",
    elements=(
        ElementSpec(
            "requirement",
            checks=(
                FieldRequired(
                    "priority",
                    "ST-005",
                    name="MissingPriority",
                    severity=Severity.WARNING,
                    summary="<requirement> has no priority attribute",
                    hint='Add priority="low|medium|high|critical"',
                ),
                FieldChoice(
                    "priority",
                    tuple(Priority),
                    "ST-004",
                    name="InvalidPriority",
                    severity=Severity.ERROR,
                ),
            ),
        ),
        ElementSpec(
            "non-negotiable",
            checks=(
                FieldChoice(
                    "priority",
                    (Priority.CRITICAL,),
                    "ST-003",
                    name="NonNegotiablePriority",
                    required=True,
                    severity=Severity.WARNING,
                    summary='<non-negotiable> should declare priority="critical"',
                    hint='Add priority="critical" to <non-negotiable>',
                ),
            ),
        ),
        ElementSpec(
            "reference",
            checks=(
                FieldRequired(
                    "href",
                    "ST-012",
                    name="MissingReferenceHref",
                    severity=Severity.WARNING,
                    summary="<reference> has no href",
                    allow_empty=False,
                ),
                FieldChoice(
                    "as",
                    ("dependency", "context"),
                    "ST-013",
                    name="InvalidReferenceType",
                    severity=Severity.WARNING,
                ),
            ),
        ),
    ),
)
