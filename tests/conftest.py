import textwrap
from pathlib import Path

from mdclint.core.context import DocumentContext
from mdclint.core.document import RuleDocument
from mdclint.core.finding import Finding
from mdclint.core.pipeline import parse_document

FIXTURES = Path(__file__).parent / "fixtures"


def make_ctx(*, strict: bool = False, advisory: bool = False) -> DocumentContext:
    return DocumentContext(path="test.mdc", strict=strict, advisory=advisory)


def rule_text(body: str, *, front_matter: str = "description: Example rule\n") -> str:
    """Build a rule document from a front-matter block and a dedented body."""
    return f"---\n{front_matter}---\n{textwrap.dedent(body).strip()}\n"


def parse(text: str) -> RuleDocument:
    return parse_document(text, path="test.mdc")


def _findings(source: object) -> list[Finding]:
    return list(source.findings)  # type: ignore[attr-defined]


def assert_finding(source: object, rule_id: str) -> Finding:
    findings = _findings(source)
    matching = [f for f in findings if f.rule_id == rule_id]
    assert matching, f"Expected finding {rule_id}, got: {[f.rule_id for f in findings] or 'none'}"
    return matching[0]


def assert_findings(source: object, *rule_ids: str) -> list[Finding]:
    findings = _findings(source)
    found_ids = {f.rule_id for f in findings}
    expected = set(rule_ids)
    missing = expected - found_ids
    assert not missing, f"Missing findings: {missing}. Got: {found_ids}"
    return [f for f in findings if f.rule_id in expected]


def assert_no_finding(source: object, rule_id: str) -> None:
    ids = [f.rule_id for f in _findings(source)]
    assert rule_id not in ids, f"Unexpected finding {rule_id} in {ids}"


def assert_no_findings(source: object) -> None:
    findings = _findings(source)
    assert findings == [], (
        f"Expected no findings, got: {[(f.rule_id, f.message) for f in findings]}"
    )
