"""Tests for the ruff linter engine."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from changelint.errors import SubprocessFailure
from changelint.linters.base import LintRequest
from changelint.linters.ruff_linter import RuffLinter, checker_for, to_finding
from changelint.models import FilteredResult, Severity


def _record(path, code, row=1, column=1, message="problem"):
    return {
        "code": code,
        "filename": str(Path(path).resolve()),
        "location": {"row": row, "column": column},
        "end_location": {"row": row, "column": column + 1},
        "message": message,
        "fix": None,
        "noqa_row": row,
        "url": None,
    }


def _completed(records, returncode=0, stderr=""):
    return MagicMock(returncode=returncode, stdout=json.dumps(records), stderr=stderr)


class _Recorder:
    """Collects reporter and done calls."""

    def __init__(self):
        self.reported = []
        self.done_calls = []

    def reporter(self, path, findings):
        self.reported.append((path, findings))
        return FilteredResult(file=str(path))

    def done(self, success, report):
        self.done_calls.append((success, report))


class TestCheckerFor:
    @pytest.mark.parametrize(
        "code, checker",
        [
            ("E501", "pycodestyle"),
            ("W291", "pycodestyle"),
            ("F401", "pyflakes"),
            ("C901", "mccabe"),
            ("I001", "isort"),
            ("ERA001", "ruff"),
            ("C401", "ruff"),
            ("PLR0913", "ruff"),
            (None, "ruff"),
        ],
    )
    def test_families(self, code, checker):
        assert checker_for(code) == checker


class TestToFinding:
    def test_error_record(self):
        finding = to_finding(_record("a.py", "F401", row=3, column=8, message="`os` unused"))
        assert finding.line == 3
        assert finding.column == 8
        assert finding.severity == Severity.ERROR
        assert finding.checker == "pyflakes"
        assert finding.rule == "F401"
        assert finding.message == "`os` unused"

    def test_warning_record(self):
        finding = to_finding(_record("a.py", "W291"))
        assert finding.severity == Severity.WARN
        assert finding.is_warning is True

    def test_syntax_error_record(self):
        finding = to_finding(_record("a.py", None, message="SyntaxError: invalid syntax"))
        assert finding.rule == "syntax"
        assert finding.checker == "ruff"

    def test_named_syntax_error_record(self):
        finding = to_finding(_record("a.py", "invalid-syntax"))
        assert finding.rule == "syntax"

    def test_io_error_is_file_level(self):
        finding = to_finding(_record("a.py", "E902", message="No such file or directory"))
        assert finding.line is None
        assert finding.column is None


class TestRuffLinter:
    def test_reports_each_file_once_in_order(self, tmp_path):
        a, b = tmp_path / "a.py", tmp_path / "b.py"
        records = [_record(b, "F401", row=4), _record(a, "E501", row=9), _record(a, "F841", row=2)]
        recorder = _Recorder()
        with patch(
            "changelint.linters.ruff_linter.subprocess.run", return_value=_completed(records)
        ) as mock_run:
            RuffLinter().check(LintRequest(files=[a, b]), recorder.reporter, recorder.done)

        cmd = mock_run.call_args[0][0]
        assert cmd[:2] == ["ruff", "check"]
        assert "--output-format=json" in cmd
        assert [path for path, _ in recorder.reported] == [a, b]
        assert [f.line for f in recorder.reported[0][1]] == [2, 9]
        assert [f.rule for f in recorder.reported[1][1]] == ["F401"]
        assert len(recorder.done_calls) == 1
        success, report = recorder.done_calls[0]
        assert success is True
        assert len(report) == 2

    def test_clean_file_gets_empty_findings(self, tmp_path):
        a = tmp_path / "a.py"
        recorder = _Recorder()
        with patch("changelint.linters.ruff_linter.subprocess.run", return_value=_completed([])):
            RuffLinter().check(LintRequest(files=[a]), recorder.reporter, recorder.done)
        assert recorder.reported == [(a, [])]

    def test_skips_disabled_file_types(self, tmp_path):
        recorder = _Recorder()
        with patch("changelint.linters.ruff_linter.subprocess.run") as mock_run:
            RuffLinter().check(
                LintRequest(files=[tmp_path / "style.css"]), recorder.reporter, recorder.done
            )
        mock_run.assert_not_called()
        assert recorder.reported == []
        assert recorder.done_calls == [(True, [])]

    def test_io_error_fails_linter(self, tmp_path):
        a = tmp_path / "a.py"
        recorder = _Recorder()
        with patch(
            "changelint.linters.ruff_linter.subprocess.run",
            return_value=_completed([_record(a, "E902")]),
        ):
            RuffLinter().check(LintRequest(files=[a]), recorder.reporter, recorder.done)
        assert recorder.done_calls[0][0] is False

    def test_ruff_missing(self, tmp_path):
        recorder = _Recorder()
        with patch(
            "changelint.linters.ruff_linter.subprocess.run", side_effect=FileNotFoundError
        ):
            with pytest.raises(SubprocessFailure, match="command not found"):
                RuffLinter().check(
                    LintRequest(files=[tmp_path / "a.py"]), recorder.reporter, recorder.done
                )
        assert recorder.done_calls == []

    def test_ruff_abnormal_exit(self, tmp_path):
        recorder = _Recorder()
        with patch(
            "changelint.linters.ruff_linter.subprocess.run",
            return_value=MagicMock(returncode=2, stdout="", stderr="invalid config"),
        ):
            with pytest.raises(SubprocessFailure, match="invalid config"):
                RuffLinter().check(
                    LintRequest(files=[tmp_path / "a.py"]), recorder.reporter, recorder.done
                )

    def test_unreadable_output(self, tmp_path):
        with patch(
            "changelint.linters.ruff_linter.subprocess.run",
            return_value=MagicMock(returncode=0, stdout="not json", stderr=""),
        ):
            with pytest.raises(SubprocessFailure, match="unreadable"):
                RuffLinter().run_ruff([tmp_path / "a.py"])
