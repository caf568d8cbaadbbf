from dataclasses import dataclass

from mdclint.core._types import Severity


@dataclass(frozen=True, slots=True)
class Rule:
    """Metadata for a single conformance rule.

    Rule instances are pure data - they describe *what* a rule checks,
    not *how* to check it.  Validators reference Rule objects by import.

    Example::

        ST_002 = Rule(
            id="ST-002",
            name="MissingRequirements",
            severity=Severity.ERROR,
            summary="Rule document has no <requirements> block",
            hint="Add <requirements> with at least one <requirement>",
            layer="structure",
        )
    """

    id: str
    name: str
    severity: Severity
    summary: str
    hint: str = ""
    layer: str = ""

    def __str__(self) -> str:
        return f"[{self.id}] {self.summary}"
