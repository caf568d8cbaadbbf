from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

from mdclint.core._types import Severity
from mdclint.core.document import Entry


@dataclass(frozen=True, slots=True)
class FieldRequired:
    """Field must be present (and, unless ``allow_empty``, non-blank)."""

    field: str
    rule_id: str
    name: str = "MissingField"
    severity: Severity = Severity.ERROR
    summary: str = ""
    hint: str = ""
    allow_empty: bool = True


@dataclass(frozen=True, slots=True)
class FieldValue:
    """Field value must pass a custom check function."""

    field: str
    check: Callable[[Entry], str | None]  # None = OK, str = error detail
    rule_id: str
    name: str = "InvalidValue"
    severity: Severity = Severity.WARNING
    summary: str = ""
    hint: str = ""


@dataclass(frozen=True, slots=True)
class FieldChoice:
    """Field value must be one of a fixed set (case-insensitive)."""

    field: str
    choices: tuple[str, ...]
    rule_id: str
    name: str = "InvalidChoice"
    required: bool = False
    severity: Severity = Severity.ERROR
    summary: str = ""
    hint: str = ""


CheckSpec: TypeAlias = FieldRequired | FieldValue | FieldChoice
