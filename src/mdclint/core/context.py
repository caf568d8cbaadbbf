from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from mdclint.core._types import Severity
from mdclint.core.finding import Finding
from mdclint.core.rule import Rule

FindingCallback: TypeAlias = Callable[[Finding], Any]
RuleFilter: TypeAlias = Callable[[Rule, Severity | None], bool]


@dataclass
class DocumentContext:
    """Collects findings for a single rule document.

    Each document validation gets its own context; contexts are never
    shared between documents.
    """

    path: str = ""

    strict: bool = False
    """Strict mode: full schema conformance is required."""

    advisory: bool = False
    """Free-form document in non-strict mode: errors are reported as warnings."""

    findings: list[Finding] = field(default_factory=list)

    _rule_allowed: RuleFilter | None = None
    _on_finding: FindingCallback | None = None

    def finding(
        self,
        rule: Rule,
        detail: str = "",
        *,
        line: int = 0,
        end_line: int = 0,
        severity: Severity | None = None,
        hint: str = "",
    ) -> None:
        """Record a finding.

        Args:
            rule: The Rule that was violated.
            detail: Dynamic, document-specific message.
                    Falls back to ``rule.summary`` when empty.
            line: 1-based source line the finding refers to.
            end_line: Last line of the offending range, if any.
            severity: Override the rule's default severity.
            hint: Override the rule's default hint.

        """
        effective = severity or rule.severity
        if self.advisory and effective == Severity.ERROR:
            effective = Severity.WARNING

        if self._rule_allowed is not None and not self._rule_allowed(rule, effective):
            return

        f = Finding(
            rule_id=rule.id,
            name=rule.name,
            severity=effective,
            message=detail or rule.summary,
            hint=hint or rule.hint,
            line=line,
            end_line=end_line,
            path=self.path,
        )
        self.findings.append(f)

        if self._on_finding is not None:
            self._on_finding(f)

    def strict_severity(self, lenient: Severity = Severity.WARNING) -> Severity:
        """Severity for checks that escalate to errors in strict mode."""
        return Severity.ERROR if self.strict else lenient
