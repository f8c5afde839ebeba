"""Core changelint engine: diff, ignore, lint, filter, decide."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import IO, Sequence

from changelint.config import ChangeLintConfig
from changelint.diff_parser import parse_diff, total_modified_lines
from changelint.errors import LinterProtocolError, RootNotFound, SubprocessFailure
from changelint.ignore import is_ignored
from changelint.linters.base import BaseLinter, LintRequest
from changelint.models import DisplayOptions, FilteredResult, RunContext, RunOutcome
from changelint.report import aggregate
from changelint.result_filter import ResultFilter

NO_RULES = "No checkers are enabled in the changelint config, nothing to check"
NO_FILES = "No modified files to check, style check passed"


def find_project_root(cwd: str | Path | None = None) -> Path:
    """Walk up from ``cwd`` to the first directory containing ``.git``.

    Raises:
        RootNotFound: No ancestor holds version-control metadata.
    """
    start = Path(cwd or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        if (directory / ".git").exists():
            return directory
    raise RootNotFound(str(start))


def get_diff(root: Path, cached: bool = False, paths: Sequence[str] = ()) -> str:
    """Get diff text from git.

    Args:
        root: Project root to run git in.
        cached: Only look at staged changes.
        paths: Path filters passed after ``--``.

    Returns:
        The unified diff text.
    """
    # Pin the output format so user git config cannot change the headers
    cmd = [
        "git",
        "diff",
        "--no-color",
        "--no-ext-diff",
        "--src-prefix=a/",
        "--dst-prefix=b/",
        "--ignore-space-at-eol",
    ]
    if cached:
        cmd.append("--cached")
    if paths:
        cmd.extend(["--", *paths])

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True, cwd=root)
    except subprocess.CalledProcessError as e:
        raise SubprocessFailure(cmd, e.returncode, e.stderr or "") from e
    except FileNotFoundError as e:
        raise SubprocessFailure(cmd) from e
    return result.stdout


class ChangeLintEngine:
    """Runs one style check over the lines a pending change modifies.

    The engine resolves the project root, reads the git diff, drops ignored
    files, runs the linter over what is left, filters each file's findings to
    the modified lines and turns the result into a RunOutcome.
    """

    def __init__(
        self,
        config: ChangeLintConfig,
        linter: BaseLinter,
        root: Path,
        display: DisplayOptions = DisplayOptions(),
        stream: IO[str] | None = None,
    ) -> None:
        self.config = config
        self.linter = linter
        self.root = root
        self.display = display
        self.stream = stream

    def _notice(self, message: str) -> None:
        print(message, file=sys.stderr)

    def collect_modified_files(self, diff_text: str) -> dict[str, frozenset[int]]:
        """Parse the diff, drop ignored files, and key the rest by absolute path."""
        rules = self.config.ignore_rules
        modified: dict[str, frozenset[int]] = {}
        for rel_path, lines in parse_diff(diff_text).items():
            if is_ignored(rules, rel_path):
                continue
            modified[str(self.root / rel_path)] = lines
        return modified

    def run(self, paths: Sequence[str] = (), cached: bool = False) -> RunOutcome:
        """Run the full check and return its outcome."""
        if not self.config.has_enabled_rules():
            return RunOutcome(success=True, message=NO_RULES)

        diff_text = get_diff(self.root, cached=cached, paths=paths)
        modified = self.collect_modified_files(diff_text)
        if not modified:
            return RunOutcome(success=True, message=NO_FILES)

        self._notice(
            f"Checking {total_modified_lines(modified)} modified line(s) "
            f"in {len(modified)} file(s)..."
        )
        context = RunContext(
            root=self.root,
            rules=self.config.rules,
            modified_files=modified,
            display=self.display,
        )
        return self.lint(context)

    def lint(self, context: RunContext) -> RunOutcome:
        """Hand the modified files to the linter and wait for its verdict."""
        outcomes: list[RunOutcome] = []

        def done(success: bool, report: list[FilteredResult]) -> None:
            outcomes.append(
                aggregate(report, linter_success=success, blocking=self.config.stop_commit)
            )

        request = LintRequest(
            files=[Path(p) for p in context.modified_files],
            file_types=frozenset(self.config.file_types),
            sort=self.display.sort_by_position,
        )
        self.linter.check(request, ResultFilter(context, self.stream), done)

        if len(outcomes) != 1:
            raise LinterProtocolError(
                f"linter {self.linter.name!r} completed {len(outcomes)} times, expected once"
            )
        return outcomes[0]
