"""Abstract base class for linter engines."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from changelint.models import FilteredResult, Finding

# Called once per file, serially; the result's ``success`` is the file's accept state
Reporter = Callable[[Path, list[Finding]], FilteredResult]
# Called exactly once after every file has been reported
Done = Callable[[bool, list[FilteredResult]], None]


@dataclass(frozen=True)
class LintRequest:
    """Files to lint and how the engine should treat them."""

    files: list[Path]
    file_types: frozenset[str] = field(default_factory=lambda: frozenset({"py"}))
    sort: bool = True

    def selected_files(self) -> list[Path]:
        """Files whose extension is one of the enabled file types."""
        return [f for f in self.files if f.suffix.lstrip(".") in self.file_types]


class BaseLinter(ABC):
    """Base class for changelint linter engines.

    An engine analyses a batch of files, hands each file's raw findings to
    the reporter, then calls ``done`` once with its own success flag and the
    collected per-file results.
    """

    # Subclasses must set this
    name: str = ""

    @abstractmethod
    def check(self, request: LintRequest, reporter: Reporter, done: Done) -> None:
        """Lint the requested files.

        Args:
            request: Files and options for this run.
            reporter: Per-file callback producing the filtered result.
            done: Completion callback, fired exactly once.
        """
        ...  # pragma: no cover
