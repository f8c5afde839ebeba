"""Per-file filtering of raw linter findings.

A finding survives only when its checker is switched on, it sits on a line
the change modified (or has no line at all), and it is not a warning from a
checker configured to ignore warnings.
"""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import IO, Iterable

from changelint.models import (
    DisplayOptions,
    FilteredResult,
    Finding,
    ReportedFinding,
    RuleConfig,
    RunContext,
)

# Tool-specific trailing tokens: legacy ``baidu123`` codes and ``[E501]`` tags
_SUFFIX_TOKEN = re.compile(r"\s*(?:baidu\d{3}|\[[A-Za-z]+\d+\])$")
_NEWLINES = re.compile(r"[\r\n]+")


def is_reportable(finding: Finding, rules: RuleConfig, lines: frozenset[int] | None) -> bool:
    """Decide whether a single finding survives filtering."""
    rule = rules.get(finding.checker)
    if rule is None or not rule.enabled:
        return False
    if finding.line is not None and (lines is None or finding.line not in lines):
        return False
    if finding.is_warning and rule.warn_ignored:
        return False
    return True


def _position_key(finding: Finding) -> tuple[int, int, int, int]:
    # None sorts before any real position
    line, column = finding.line, finding.column
    return (
        0 if line is None else 1,
        line or 0,
        0 if column is None else 1,
        column or 0,
    )


def clean_message(message: str) -> str:
    """Strip trailing tool suffix tokens and embedded newlines."""
    return _SUFFIX_TOKEN.sub("", _NEWLINES.sub("", message))


def format_finding(finding: Finding, show_rule_name: bool = True) -> ReportedFinding:
    """Render the display line for a surviving finding."""
    info = "→ "
    if finding.line is not None:
        info += f"line {finding.line}"
        if finding.column is not None:
            info += f", col {finding.column}"
        info += ": "

    message = clean_message(finding.message)
    info += message

    rule = finding.rule or "syntax"
    if show_rule_name:
        info += f"\t({rule})"

    return ReportedFinding(finding=finding, message=message, rule=rule, info=info)


def filter_findings(
    file: str | Path,
    findings: Iterable[Finding],
    rules: RuleConfig,
    lines: frozenset[int] | None,
    options: DisplayOptions = DisplayOptions(),
    stream: IO[str] | None = None,
) -> FilteredResult:
    """Filter one file's findings and print the survivors.

    Args:
        file: The file the findings belong to.
        findings: Raw findings from the linter for this file.
        rules: Checker configuration.
        lines: Modified line numbers for the file, or None if it has none.
        options: Sorting and rendering switches.
        stream: Where to print the report (defaults to stdout).

    Returns:
        A FilteredResult; its ``success`` is True when nothing survived.
    """
    kept = [f for f in findings if is_reportable(f, rules, lines)]
    if options.sort_by_position:
        kept.sort(key=_position_key)

    reported = [format_finding(f, options.show_rule_name) for f in kept]
    result = FilteredResult(file=str(file), findings=reported)
    if not reported:
        return result

    out = stream if stream is not None else sys.stdout
    text_lines = [f"File: {file}"] + [r.info for r in reported]
    result.display_text = "\n".join(text_lines)
    print("\n" + result.display_text, file=out)
    return result


class ResultFilter:
    """Reporter callback handed to a linter, bound to one run's context."""

    def __init__(self, context: RunContext, stream: IO[str] | None = None) -> None:
        self.context = context
        self.stream = stream

    def __call__(self, file: str | Path, findings: list[Finding]) -> FilteredResult:
        return filter_findings(
            file,
            findings,
            self.context.rules,
            self.context.lines_for(file),
            self.context.display,
            self.stream,
        )
