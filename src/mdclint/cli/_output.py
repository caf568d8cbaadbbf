from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING

from mdclint import __version__
from mdclint.core._types import Severity

if TYPE_CHECKING:
    from mdclint.core.finding import Finding
    from mdclint.core.report import BatchSummary
    from mdclint.core.rule import Rule

_SEVERITY_COLORS: dict[Severity, str] = {
    Severity.ERROR: "\033[31m",  # red
    Severity.WARNING: "\033[33m",  # yellow
    Severity.INFO: "\033[36m",  # cyan
}
_GREEN = "\033[32m"
_RED = "\033[31m"
_BOLD = "\033[1m"
_RESET = "\033[0m"


def _use_color(no_color_flag: bool) -> bool:
    if no_color_flag:
        return False
    return not os.environ.get("NO_COLOR", "")


def _c(text: str, code: str, *, color: bool) -> str:
    if not color:
        return text
    return f"{code}{text}{_RESET}"


def _location(f: Finding) -> str:
    return f"{f.path}:{f.line}" if f.line else f.path


def format_text(
    summary: BatchSummary,
    *,
    min_severity: Severity = Severity.INFO,
    no_color: bool = False,
    quiet: bool = False,
) -> str:
    color = _use_color(no_color)
    lines: list[str] = []
    w = lines.append

    if not quiet:
        for report in summary.reports:
            for f in report.filtered(min_severity):
                tag = _c(f"[{f.rule_id}]", _BOLD, color=color)
                sev = _c(f.severity, _SEVERITY_COLORS.get(f.severity, ""), color=color)
                w(f"{_location(f)} {tag} {sev}: {f.message}")
                if f.hint:
                    w(f"    hint: {f.hint}")
        if lines:
            w("")

    status = _GREEN if summary.exit_code == 0 else _RED
    w(_c(summary.summary_line(), status, color=color))
    return "\n".join(lines)


def format_json(
    summary: BatchSummary,
    *,
    min_severity: Severity = Severity.INFO,
) -> str:
    data = {
        "version": __version__,
        "files": [
            {
                "path": report.document_path,
                "passed": report.passed,
                "findings": [
                    {
                        "rule_id": f.rule_id,
                        "name": f.name,
                        "severity": str(f.severity),
                        "message": f.message,
                        "hint": f.hint,
                        "line": f.line,
                        "end_line": f.end_line,
                    }
                    for f in report.filtered(min_severity)
                ],
            }
            for report in summary.reports
        ],
        "summary": {
            "checked": summary.checked,
            "passed": summary.passed,
            "failed": summary.failed,
            "error": summary.errors,
            "warning": summary.warnings,
            "info": summary.infos,
        },
    }
    return json.dumps(data, indent=2)


_LAYER_TITLES: dict[str, str] = {
    "general": "General",
    "frontmatter": "Front-matter",
    "structure": "Structure",
    "examples": "Examples",
}

_LAYER_ORDER: list[str] = list(_LAYER_TITLES)

_LINE_WIDTH = 66


def format_rules_text(
    rules: list[Rule],
    *,
    no_color: bool = False,
    total: int | None = None,
) -> str:
    color = _use_color(no_color)
    lines: list[str] = []
    w = lines.append

    id_w = max((len(r.id) for r in rules), default=0)
    sev_w = max((len(str(r.severity)) for r in rules), default=0)

    groups: dict[str, list[Rule]] = {}
    for r in rules:
        groups.setdefault(r.layer, []).append(r)

    count = len(rules)
    header = f"mdclint {__version__} - {count} rules"
    if total is not None and total != count:
        header += f" (filtered from {total})"
    w(header)

    for layer in _LAYER_ORDER:
        group = groups.get(layer)
        if not group:
            continue

        title = _LAYER_TITLES.get(layer, layer)
        header = f"── {title} ({len(group)}) "
        fill = "─" * max(0, _LINE_WIDTH - len(header))
        w("")
        w(_c(header + fill, _BOLD, color=color))
        w("")
        for r in group:
            sev_color = _SEVERITY_COLORS.get(r.severity, "")
            rule_id = _c(r.id.ljust(id_w), _BOLD, color=color)
            severity = _c(str(r.severity).ljust(sev_w), sev_color, color=color)
            w(f"  {rule_id}  {severity}  {r.name}: {r.summary}")

    return "\n".join(lines)


def format_rules_json(rules: list[Rule]) -> str:
    data = {
        "version": __version__,
        "rules": [
            {
                "id": r.id,
                "name": r.name,
                "severity": str(r.severity),
                "summary": r.summary,
                "hint": r.hint,
                "layer": r.layer,
            }
            for r in rules
        ],
        "total": len(rules),
    }
    return json.dumps(data, indent=2)
