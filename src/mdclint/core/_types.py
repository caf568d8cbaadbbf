from enum import StrEnum


class Severity(StrEnum):
    """Finding severity levels (ordered lowest → highest)."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


SEVERITY_LEVEL: dict[Severity, int] = {
    Severity.INFO: 0,
    Severity.WARNING: 1,
    Severity.ERROR: 2,
}


class Priority(StrEnum):
    """Requirement priority levels accepted by the rule schema."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class SectionKind(StrEnum):
    """Variants of a rule document body section."""

    TITLE = "title"
    CONTEXT = "context"
    REQUIREMENT = "requirement"
    EXAMPLE = "example"
    GRAMMAR = "grammar"
    REFERENCE = "reference"
    UNKNOWN = "unknown"


class ExampleKind(StrEnum):
    """Demonstration kinds inside an ``<example>`` block."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
