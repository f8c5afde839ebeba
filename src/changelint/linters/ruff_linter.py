"""Linter engine backed by ruff's JSON output."""

from __future__ import annotations

import json
import re
import subprocess
from pathlib import Path
from typing import Any

from changelint.errors import SubprocessFailure
from changelint.linters.base import BaseLinter, Done, LintRequest, Reporter
from changelint.models import FilteredResult, Finding, Severity

_CODE = re.compile(r"^([A-Z]+)(\d*)$")

# Rule-code prefix -> checker name. Longest prefix wins.
CHECKER_PREFIXES: dict[str, str] = {
    "C90": "mccabe",
    "E": "pycodestyle",
    "W": "pycodestyle",
    "F": "pyflakes",
    "I": "isort",
}
DEFAULT_CHECKER = "ruff"

# Codes that describe the file as a whole rather than a line in it
_FILE_LEVEL_CODES = {"E902"}


def checker_for(code: str | None) -> str:
    """Map a ruff rule code to the checker it belongs to."""
    if not code:
        return DEFAULT_CHECKER
    match = _CODE.match(code)
    if not match:
        return DEFAULT_CHECKER
    letters = match.group(1)
    for prefix in sorted(CHECKER_PREFIXES, key=len, reverse=True):
        if code.startswith(prefix) and letters == prefix.rstrip("0123456789"):
            return CHECKER_PREFIXES[prefix]
    return DEFAULT_CHECKER


def to_finding(record: dict[str, Any]) -> Finding:
    """Convert one ruff JSON diagnostic into a Finding."""
    code = record.get("code")
    if code is not None and not _CODE.match(code):
        # Newer ruff names syntax errors instead of leaving the code empty
        code = None
    location = record.get("location") or {}

    line: int | None = location.get("row")
    column: int | None = location.get("column")
    if code in _FILE_LEVEL_CODES:
        line = column = None

    return Finding(
        file=record.get("filename", ""),
        line=line,
        column=column,
        severity=Severity.WARN if code and code.startswith("W") else Severity.ERROR,
        message=record.get("message", ""),
        rule=code or "syntax",
        checker=checker_for(code),
    )


class RuffLinter(BaseLinter):
    """Run ``ruff check`` once over all requested files."""

    name = "ruff"

    def __init__(self, executable: str = "ruff", cwd: str | Path | None = None) -> None:
        self.executable = executable
        self.cwd = cwd

    def _command(self, files: list[Path]) -> list[str]:
        return [
            self.executable,
            "check",
            "--output-format=json",
            "--exit-zero",
            "--no-fix",
            *[str(f) for f in files],
        ]

    def run_ruff(self, files: list[Path]) -> list[dict[str, Any]]:
        """Run ruff and return its decoded JSON diagnostics."""
        cmd = self._command(files)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, cwd=self.cwd)
        except FileNotFoundError as e:
            raise SubprocessFailure(cmd) from e

        if result.returncode != 0:
            raise SubprocessFailure(cmd, result.returncode, result.stderr)

        try:
            records = json.loads(result.stdout or "[]")
        except json.JSONDecodeError as e:
            raise SubprocessFailure(cmd, result.returncode, f"unreadable ruff output: {e}") from e
        if not isinstance(records, list):
            raise SubprocessFailure(cmd, result.returncode, "unexpected ruff output")
        return records

    def check(self, request: LintRequest, reporter: Reporter, done: Done) -> None:
        files = request.selected_files()
        if not files:
            done(True, [])
            return

        by_file: dict[str, list[Finding]] = {str(f.resolve()): [] for f in files}
        success = True
        for record in self.run_ruff(files):
            finding = to_finding(record)
            key = str(Path(finding.file).resolve())
            if key not in by_file:
                continue
            if finding.rule in _FILE_LEVEL_CODES:
                success = False
            by_file[key].append(finding)

        report: list[FilteredResult] = []
        for path in files:
            findings = by_file[str(path.resolve())]
            if request.sort:
                findings.sort(key=lambda f: (f.line or 0, f.column or 0))
            report.append(reporter(path, findings))

        done(success, report)
