"""Data models for changelint."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

# file path -> 1-indexed line numbers in the new version of the file
ModifiedFileSet = Mapping[str, frozenset[int]]


class Severity(str, Enum):
    """Finding severity levels."""

    WARN = "WARN"
    ERROR = "ERROR"


@dataclass(frozen=True)
class CheckRule:
    """Per-checker switches from the ``checkRules`` config section."""

    enabled: bool = False
    warn_ignored: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> CheckRule:
        return cls(
            enabled=bool(data.get("open", False)),
            warn_ignored=bool(data.get("warnIgnored", False)),
        )

    def to_dict(self) -> dict:
        return {"open": self.enabled, "warnIgnored": self.warn_ignored}


# checker name -> CheckRule
RuleConfig = Mapping[str, CheckRule]


@dataclass(frozen=True)
class IgnoreRule:
    """A single ignore glob, optionally negated with a leading ``!``."""

    pattern: str
    negated: bool = False

    @classmethod
    def parse(cls, raw: str) -> IgnoreRule:
        if raw.startswith("!"):
            return cls(pattern=raw[1:], negated=True)
        return cls(pattern=raw)


@dataclass
class Finding:
    """A single raw finding reported by a linter engine."""

    file: str
    message: str
    checker: str
    rule: str = ""
    line: int | None = None
    column: int | None = None
    severity: Severity = Severity.ERROR
    legacy_type: str | None = None

    @property
    def is_warning(self) -> bool:
        """True when either the severity or the legacy type marker says WARN."""
        return self.severity == Severity.WARN or self.legacy_type == Severity.WARN.value


@dataclass(frozen=True)
class ReportedFinding:
    """A finding that survived filtering, with its rendered display line."""

    finding: Finding
    message: str
    rule: str
    info: str


@dataclass
class FilteredResult:
    """Surviving findings for one file."""

    file: str
    findings: list[ReportedFinding] = field(default_factory=list)
    display_text: str = ""

    @property
    def success(self) -> bool:
        return not self.findings


@dataclass(frozen=True)
class DisplayOptions:
    """How surviving findings are ordered and rendered."""

    sort_by_position: bool = True
    show_rule_name: bool = True


@dataclass(frozen=True)
class RunOutcome:
    """Final decision of a check run."""

    success: bool
    blocking: bool = False
    message: str = ""
    findings: int = 0
    files: int = 0

    @property
    def exit_code(self) -> int:
        return 1 if self.blocking else 0


@dataclass(frozen=True)
class RunContext:
    """Everything a single check run shares between components.

    Built once per invocation and never mutated afterwards.
    """

    root: Path
    rules: RuleConfig
    modified_files: ModifiedFileSet
    display: DisplayOptions = DisplayOptions()

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))
        object.__setattr__(
            self,
            "modified_files",
            MappingProxyType({k: frozenset(v) for k, v in self.modified_files.items()}),
        )

    def lines_for(self, path: str | Path) -> frozenset[int] | None:
        return self.modified_files.get(str(path))
