"""pytest plugin for mdclint: rule file validation in tests.

Provides the ``rule_files`` fixture, ``@pytest.mark.rule_files_validate``
marker, and ``--rule-files-strict`` CLI flag.

Usage::

    def test_rules_dir(rule_files):
        checked = rule_files(".cursor/rules")
        assert checked.summary.failed == 0

    @pytest.mark.rule_files_validate(exclude_rules={"ST-007"}, min_severity="warning")
    def test_strict(rule_files):
        rule_files("docs/rules", strict=True)
        # Findings auto-checked after the test; it fails if any are found.

CLI flag (applies rule_files_validate to all tests using rule_files)::

    pytest --rule-files-strict
    pytest --rule-files-strict --rule-files-min-severity warning

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from pathlib import Path

    from mdclint.core.finding import Finding
    from mdclint.core.report import BatchSummary

_SEVERITY_ORDER: dict[str, int] = {
    "info": 0,
    "warning": 1,
    "error": 2,
}

_CHECKED_KEY: pytest.StashKey[list[CheckedFiles]] = pytest.StashKey()


@dataclass
class CheckedFiles:
    """Result returned by the ``rule_files`` fixture."""

    summary: BatchSummary

    @property
    def findings(self) -> list[Finding]:
        return self.summary.all_findings

    def assert_valid(self) -> None:
        """Raise :class:`~mdclint.RuleFileError` if any file has errors."""
        self.summary.raise_for_errors()


def _check_paths(
    paths: tuple[str | Path, ...],
    *,
    strict: bool = False,
    exclude_rules: set[str] | None = None,
) -> CheckedFiles:
    from mdclint.cli._loader import collect_files
    from mdclint.core.config import MdclintConfig
    from mdclint.core.pipeline import run_check

    config = MdclintConfig(strict=strict, exclude_rules=frozenset(exclude_rules or ()))
    files = collect_files(paths, extensions=config.extensions, exclude=config.exclude)
    return CheckedFiles(summary=run_check(files, config=config))


def _format_finding(f: Any) -> str:
    location = f"{f.path}:{f.line}" if f.line else f.path
    line = f"  {location} [{f.rule_id}] {f.severity}: {f.message}"
    if f.hint:
        line += f"\n    hint: {f.hint}"
    return line


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("mdclint", "Rule file validation")
    group.addoption(
        "--rule-files-strict",
        action="store_true",
        default=False,
        help="Auto-validate rule files in all tests using the rule_files fixture.",
    )
    group.addoption(
        "--rule-files-min-severity",
        default="error",
        choices=list(_SEVERITY_ORDER),
        help="Minimum severity for --rule-files-strict (default: error).",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "rule_files_validate: mark test to auto-check rule file findings after the test. "
        "Options: exclude_rules=set(), min_severity='error'",
    )


@pytest.fixture
def rule_files(request: pytest.FixtureRequest) -> Any:
    """Fixture that checks rule files with mdclint.

    Returns a callable: ``rule_files(*paths, strict=False, exclude_rules=...)``
    that returns a :class:`CheckedFiles` with the batch summary.

    If the test is marked with ``@pytest.mark.rule_files_validate`` or
    ``--rule-files-strict`` is passed, findings are auto-checked after the
    test body.
    """
    checked: list[CheckedFiles] = []
    # Stash before return: the hook reads results during "call", not teardown
    request.node.stash[_CHECKED_KEY] = checked

    def factory(
        *paths: str | Path,
        strict: bool = False,
        exclude_rules: set[str] | None = None,
    ) -> CheckedFiles:
        result = _check_paths(paths, strict=strict, exclude_rules=exclude_rules)
        checked.append(result)
        return result

    return factory


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]) -> Any:
    outcome = yield
    if call.when != "call":
        return
    report = outcome.get_result()
    if not report.passed:
        return

    checked = item.stash.get(_CHECKED_KEY, None)
    if checked is None:
        return

    marker = item.get_closest_marker("rule_files_validate")
    global_strict = item.config.getoption("--rule-files-strict", default=False)

    if marker is None and not global_strict:
        return

    marker_kwargs = (marker.kwargs if marker and marker.kwargs else {}) or {}
    marker_exclude: set[str] = marker_kwargs.get("exclude_rules", set())

    if marker is not None:
        min_severity = marker_kwargs.get("min_severity", "error")
    else:
        min_severity = item.config.getoption("--rule-files-min-severity", default="error")

    min_level = _SEVERITY_ORDER.get(min_severity, 2)

    all_findings = [
        f
        for result in checked
        for f in result.findings
        if _SEVERITY_ORDER.get(f.severity, 0) >= min_level and f.rule_id not in marker_exclude
    ]

    if all_findings:
        lines = [f"Rule file findings detected ({len(all_findings)}):"]
        lines.extend(_format_finding(f) for f in all_findings)
        report.outcome = "failed"
        report.longrepr = "\n".join(lines)
