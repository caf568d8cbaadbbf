from dataclasses import dataclass

from mdclint.core._types import Severity


@dataclass(frozen=True, slots=True)
class Finding:
    """A single deviation from the rule file format detected by mdclint."""

    rule_id: str
    name: str
    severity: Severity
    message: str
    hint: str = ""
    line: int = 0
    end_line: int = 0
    path: str = ""

    @property
    def location(self) -> str:
        """``"12"`` for a single line, ``"12-15"`` for a range, ``""`` if unknown."""
        if not self.line:
            return ""
        if self.end_line and self.end_line != self.line:
            return f"{self.line}-{self.end_line}"
        return str(self.line)


class MalformedFrontMatterError(ValueError):
    """Raised by the front-matter parser when the ``---`` block is unusable."""

    def __init__(self, message: str, line: int = 1) -> None:
        self.line = line
        super().__init__(message)


class RuleFileError(Exception):
    """Raised when checked rule files carry error-severity findings."""

    def __init__(self, findings: list[Finding]) -> None:
        self.findings = findings
        errors = sum(1 for f in findings if f.severity == Severity.ERROR)
        paths = len({f.path for f in findings})
        super().__init__(f"Rule file errors: {errors} errors in {paths} files")
