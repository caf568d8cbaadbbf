import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from mdclint.cli._loader import LoadError, collect_files
from mdclint.cli._output import (
    format_json,
    format_rules_json,
    format_rules_text,
    format_text,
)
from mdclint.cli.main import cli
from mdclint.core._types import Severity
from mdclint.core.finding import Finding
from mdclint.core.report import BatchSummary, Report
from mdclint.rules import ALL_RULES
from tests.conftest import FIXTURES

CANONICAL = str(FIXTURES / "rules" / "rules.mdc")
GUIDE = str(FIXTURES / "rules" / "python-style.md")
BROKEN = str(FIXTURES / "broken")


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep config auto-discovery away from the project's own pyproject.toml.
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n")
    monkeypatch.chdir(tmp_path)


class TestLoader:
    def test_walks_directories_sorted(self) -> None:
        files = collect_files([FIXTURES])
        assert [f.name for f in files] == [
            "bad-frontmatter.mdc",
            "no-requirements.mdc",
            "unterminated.mdc",
            "python-style.md",
            "rules.mdc",
        ]

    def test_extension_filter(self) -> None:
        files = collect_files([FIXTURES], extensions=(".MD",))
        assert [f.name for f in files] == ["python-style.md"]

    def test_exclude_component(self) -> None:
        files = collect_files([FIXTURES], exclude=("broken",))
        assert [f.name for f in files] == ["python-style.md", "rules.mdc"]

    def test_exclude_relative_glob(self) -> None:
        files = collect_files([FIXTURES], exclude=("rules/*.md",))
        assert "python-style.md" not in [f.name for f in files]

    def test_explicit_file_always_kept(self, tmp_path: Path) -> None:
        notes = tmp_path / "notes.txt"
        notes.write_text("hello")
        assert collect_files([notes]) == [notes]

    def test_duplicates_dropped(self) -> None:
        files = collect_files([CANONICAL, FIXTURES / "rules"])
        assert [f.name for f in files] == ["rules.mdc", "python-style.md"]

    def test_unlistable_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def scandir(path: object) -> object:
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr(os, "scandir", scandir)
        with pytest.raises(LoadError, match="cannot be read"):
            collect_files([tmp_path])

    def test_missing_path(self) -> None:
        with pytest.raises(LoadError, match="does not exist"):
            collect_files(["no/such/dir"])


def _summary() -> BatchSummary:
    return BatchSummary(
        [
            Report.from_findings(
                "a.mdc",
                [
                    Finding(
                        "ST-002",
                        "MissingRequirements",
                        Severity.ERROR,
                        "Rule document has no <requirements> block",
                        hint="Add <requirements>",
                        line=4,
                        end_line=9,
                        path="a.mdc",
                    ),
                    Finding(
                        "G-002", "FreeFormDocument", Severity.INFO, "note", line=12, path="a.mdc"
                    ),
                ],
            ),
            Report("b.mdc"),
        ]
    )


class TestOutput:
    def test_text(self) -> None:
        out = format_text(_summary(), no_color=True)
        lines = out.splitlines()
        assert lines[0] == "a.mdc:4 [ST-002] error: Rule document has no <requirements> block"
        assert lines[1] == "    hint: Add <requirements>"
        assert lines[2] == "a.mdc:12 [G-002] info: note"
        assert lines[-1] == "2 files checked, 1 passed, 1 failed (1 error, 0 warnings)"

    def test_text_min_severity(self) -> None:
        out = format_text(_summary(), no_color=True, min_severity=Severity.WARNING)
        assert "G-002" not in out
        assert "ST-002" in out

    def test_text_quiet(self) -> None:
        out = format_text(_summary(), no_color=True, quiet=True)
        assert out == "2 files checked, 1 passed, 1 failed (1 error, 0 warnings)"

    def test_text_color(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        assert "\033[31m" in format_text(_summary())

    def test_json(self) -> None:
        data = json.loads(format_json(_summary()))
        assert [f["path"] for f in data["files"]] == ["a.mdc", "b.mdc"]
        assert data["files"][0]["passed"] is False
        finding = data["files"][0]["findings"][0]
        assert finding["rule_id"] == "ST-002"
        assert finding["name"] == "MissingRequirements"
        assert finding["line"] == 4
        assert finding["end_line"] == 9
        assert data["summary"] == {
            "checked": 2,
            "passed": 1,
            "failed": 1,
            "error": 1,
            "warning": 0,
            "info": 1,
        }

    def test_json_min_severity(self) -> None:
        data = json.loads(format_json(_summary(), min_severity=Severity.ERROR))
        assert len(data["files"][0]["findings"]) == 1

    def test_rules_text(self) -> None:
        out = format_rules_text(ALL_RULES, no_color=True)
        assert f"{len(ALL_RULES)} rules" in out
        assert "Front-matter (11)" in out
        assert "FM-002" in out
        assert "UnknownKey" in out

    def test_rules_text_total_param(self) -> None:
        out = format_rules_text(ALL_RULES[:3], no_color=True, total=len(ALL_RULES))
        assert f"(filtered from {len(ALL_RULES)})" in out

    def test_rules_json(self) -> None:
        data = json.loads(format_rules_json(ALL_RULES))
        assert data["total"] == len(ALL_RULES)
        assert data["rules"][0]["id"] == ALL_RULES[0].id
        assert set(data["rules"][0]) == {"id", "name", "severity", "summary", "hint", "layer"}


class TestCLI:
    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "mdclint" in result.output

    def test_check_canonical_file(self) -> None:
        result = CliRunner().invoke(cli, ["check", "--no-color", "--strict", CANONICAL])
        assert result.exit_code == 0
        assert "1 files checked, 1 passed, 0 failed" in result.output

    def test_check_broken_directory(self) -> None:
        result = CliRunner().invoke(cli, ["check", "--no-color", BROKEN])
        assert result.exit_code == 1
        assert "unterminated.mdc:1 [FM-001] error" in result.output
        assert "[ST-002]" in result.output
        assert "3 files checked, 0 passed, 3 failed" in result.output

    def test_check_free_form_document(self) -> None:
        result = CliRunner().invoke(cli, ["check", "--no-color", GUIDE])
        assert result.exit_code == 0
        assert "[G-002] info: free-form document; schema checks skipped" in result.output

    def test_check_free_form_document_strict(self) -> None:
        result = CliRunner().invoke(cli, ["check", "--no-color", "--strict", GUIDE])
        assert result.exit_code == 1

    def test_check_profile_strict(self) -> None:
        result = CliRunner().invoke(cli, ["check", "--no-color", "--profile", "strict", GUIDE])
        assert result.exit_code == 1

    def test_check_missing_path_exits_2(self) -> None:
        result = CliRunner().invoke(cli, ["check", "no/such/dir"])
        assert result.exit_code == 2
        assert "does not exist" in result.output

    def test_check_unreadable_file_exits_2(self, tmp_path: Path) -> None:
        bad = tmp_path / "latin1.mdc"
        bad.write_bytes(b"---\ndescription: caf\xe9\n---\n")
        result = CliRunner().invoke(cli, ["check", "--no-color", str(bad), CANONICAL])
        assert result.exit_code == 2
        assert "[G-001]" in result.output
        assert "2 files checked, 1 passed, 1 failed" in result.output

    def test_check_unreadable_directory_exits_2(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        locked = tmp_path / "locked"
        locked.mkdir()
        real_scandir = os.scandir

        def scandir(path: object) -> object:
            if Path(path) == locked:  # type: ignore[arg-type]
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)  # type: ignore[arg-type]

        monkeypatch.setattr(os, "scandir", scandir)
        result = CliRunner().invoke(cli, ["check", str(locked)])
        assert result.exit_code == 2
        assert "cannot be read: Permission denied" in result.output

    def test_check_requires_a_path(self) -> None:
        result = CliRunner().invoke(cli, ["check"])
        assert result.exit_code == 2

    def test_check_invalid_config_exits_2(self, tmp_path: Path) -> None:
        config = tmp_path / ".mdclint.toml"
        config.write_text('min_severity = "fatal"\n')
        result = CliRunner().invoke(cli, ["check", "--config", str(config), CANONICAL])
        assert result.exit_code == 2
        assert "invalid config" in result.output

    def test_check_config_file_applies(self, tmp_path: Path) -> None:
        (tmp_path / ".mdclint.toml").write_text('exclude = ["broken"]\n')
        result = CliRunner().invoke(cli, ["check", "--no-color", str(FIXTURES)])
        assert result.exit_code == 0
        assert "2 files checked" in result.output

    def test_check_json_format(self) -> None:
        result = CliRunner().invoke(cli, ["check", "--format", "json", BROKEN])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["summary"]["checked"] == 3
        assert data["summary"]["failed"] == 3

    def test_check_exclude_rules(self) -> None:
        bad = str(FIXTURES / "broken" / "bad-frontmatter.mdc")
        result1 = CliRunner().invoke(cli, ["check", "--no-color", bad])
        assert result1.exit_code == 1
        result2 = CliRunner().invoke(
            cli, ["check", "--no-color", "--exclude-rules", "FM-002, FM-003", bad]
        )
        assert result2.exit_code == 0
        assert "[FM-002]" not in result2.output

    def test_check_min_severity(self) -> None:
        result = CliRunner().invoke(
            cli, ["check", "--no-color", "--min-severity", "warning", GUIDE]
        )
        assert result.exit_code == 0
        assert "[G-002]" not in result.output

    def test_check_quiet(self) -> None:
        result = CliRunner().invoke(cli, ["check", "--no-color", "-q", BROKEN])
        assert result.exit_code == 1
        assert result.output.strip() == (
            "3 files checked, 0 passed, 3 failed (4 errors, 0 warnings)"
        )

    def test_check_jobs_and_verbose(self) -> None:
        result = CliRunner().invoke(cli, ["check", "--no-color", "-j", "2", "-v", BROKEN])
        assert result.exit_code == 1

    def test_check_invalid_jobs(self) -> None:
        result = CliRunner().invoke(cli, ["check", "--jobs", "0", BROKEN])
        assert result.exit_code == 2

    def test_rules_text(self) -> None:
        result = CliRunner().invoke(cli, ["rules", "--no-color"])
        assert result.exit_code == 0
        assert "G-001" in result.output

    def test_rules_json(self) -> None:
        result = CliRunner().invoke(cli, ["rules", "--format", "json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["total"] == len(ALL_RULES)

    def test_rules_layer_filter(self) -> None:
        result = CliRunner().invoke(cli, ["rules", "--no-color", "--layer", "examples"])
        assert result.exit_code == 0
        assert "EX-001" in result.output
        assert "FM-001" not in result.output
        assert "(filtered from" in result.output

    def test_rules_severity_filter(self) -> None:
        result = CliRunner().invoke(cli, ["rules", "--format", "json", "--severity", "info"])
        data = json.loads(result.output)
        assert data["rules"]
        assert all(r["severity"] == "info" for r in data["rules"])
