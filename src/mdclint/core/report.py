from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from mdclint.core._types import SEVERITY_LEVEL, Severity
from mdclint.core.finding import Finding, RuleFileError
from mdclint.rules.general import G_001


@dataclass(frozen=True)
class Report:
    """Findings for one document, in source line order."""

    document_path: str
    findings: tuple[Finding, ...] = ()

    @classmethod
    def from_findings(cls, document_path: str, findings: Iterable[Finding]) -> Report:
        return cls(document_path, tuple(sorted(findings, key=lambda f: f.line)))

    @property
    def passed(self) -> bool:
        return self.errors == 0

    def count(self, severity: Severity) -> int:
        return sum(1 for f in self.findings if f.severity == severity)

    @property
    def errors(self) -> int:
        return self.count(Severity.ERROR)

    @property
    def warnings(self) -> int:
        return self.count(Severity.WARNING)

    @property
    def infos(self) -> int:
        return self.count(Severity.INFO)

    def filtered(self, min_severity: Severity) -> list[Finding]:
        level = SEVERITY_LEVEL[min_severity]
        return [f for f in self.findings if SEVERITY_LEVEL[f.severity] >= level]


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


@dataclass
class BatchSummary:
    """Reports of a batch run, ordered by document path."""

    reports: list[Report] = field(default_factory=list)

    @property
    def checked(self) -> int:
        return len(self.reports)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.reports if r.passed)

    @property
    def failed(self) -> int:
        return self.checked - self.passed

    @property
    def errors(self) -> int:
        return sum(r.errors for r in self.reports)

    @property
    def warnings(self) -> int:
        return sum(r.warnings for r in self.reports)

    @property
    def infos(self) -> int:
        return sum(r.infos for r in self.reports)

    @property
    def all_findings(self) -> list[Finding]:
        return [f for r in self.reports for f in r.findings]

    @property
    def unreadable(self) -> list[Report]:
        """Reports of documents that could not be read (``G-001``)."""
        return [r for r in self.reports if any(f.rule_id == G_001.id for f in r.findings)]

    @property
    def exit_code(self) -> int:
        """``0`` when every document passed, ``1`` on errors, ``2`` on an unreadable input."""
        if self.unreadable:
            return 2
        return 0 if self.failed == 0 else 1

    def summary_line(self) -> str:
        return (
            f"{self.checked} files checked, {self.passed} passed, {self.failed} failed "
            f"({_plural(self.errors, 'error')}, {_plural(self.warnings, 'warning')})"
        )

    def raise_for_errors(self) -> None:
        """Raise :class:`RuleFileError` if any document has an error finding."""
        errors = [f for f in self.all_findings if f.severity == Severity.ERROR]
        if errors:
            raise RuleFileError(errors)
