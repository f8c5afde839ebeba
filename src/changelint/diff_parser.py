"""Git diff parser for changelint.

Turns unified diff text into the set of new-file line numbers each file's
change adds. Parsing runs in two phases: the text is first split into per-file
segments at ``diff --git`` markers, then each segment is scanned through a
small hunk state machine.
"""

from __future__ import annotations

import re
from enum import Enum

from changelint.models import ModifiedFileSet

# Regex patterns for parsing unified diff format
_DIFF_HEADER = re.compile(r"^diff --git a/(\S+) b/(\S+)")
_HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


class _State(Enum):
    SEEKING_HUNK = "seeking-hunk"
    IN_HUNK = "in-hunk"


def split_file_segments(diff_text: str) -> list[tuple[str, list[str]]]:
    """Partition diff text into ``(path, lines)`` segments, one per file.

    Segments whose marker names two different paths (renames) are dropped,
    as is anything before the first marker.
    """
    segments: list[tuple[str, list[str]]] = []
    current: list[str] | None = None

    # Only "\n" ends a diff line; content may hold form feeds or U+2028
    for raw_line in diff_text.split("\n"):
        if raw_line.endswith("\r"):
            raw_line = raw_line[:-1]
        if raw_line.startswith("diff --git "):
            header_match = _DIFF_HEADER.match(raw_line)
            if header_match and header_match.group(1) == header_match.group(2):
                current = []
                segments.append((header_match.group(1), current))
            else:
                # Rename or unreadable marker: skip until the next file
                current = None
            continue

        if current is not None:
            current.append(raw_line)

    return segments


def modified_lines(segment: list[str]) -> set[int]:
    """Scan one file segment and collect the new-file numbers of added lines."""
    lines: set[int] = set()
    state = _State.SEEKING_HUNK
    line_no = 0
    old_left = new_left = 0
    last_advanced = False

    for raw_line in segment:
        if raw_line.startswith("@@"):
            hunk_match = _HUNK_HEADER.match(raw_line)
            if not hunk_match:
                # Malformed header: drop this hunk's body, keep the file
                state = _State.SEEKING_HUNK
                continue
            old_left = int(hunk_match.group(2)) if hunk_match.group(2) is not None else 1
            new_left = int(hunk_match.group(4)) if hunk_match.group(4) is not None else 1
            line_no = int(hunk_match.group(3))
            last_advanced = False
            state = _State.IN_HUNK
            continue

        if state is not _State.IN_HUNK:
            continue

        if raw_line.startswith("+") and new_left > 0:
            lines.add(line_no)
            line_no += 1
            new_left -= 1
            last_advanced = True
        elif raw_line.startswith(" ") and new_left > 0:
            line_no += 1
            new_left -= 1
            old_left -= 1
            last_advanced = True
        elif raw_line.startswith("-") and old_left > 0:
            old_left -= 1
            last_advanced = False
        elif raw_line.startswith("\\"):
            # No-newline marker follows the prefix class of the line before it
            if last_advanced:
                line_no += 1
        else:
            state = _State.SEEKING_HUNK

    return lines


def parse_diff(diff_text: str) -> dict[str, frozenset[int]]:
    """Parse unified diff text into a mapping of path to modified line numbers.

    Args:
        diff_text: Raw output from `git diff` (unified diff format).

    Returns:
        Paths as written in the diff markers, each mapped to the 1-indexed
        line numbers added in the new version. Files without added lines are
        left out.
    """
    result: dict[str, frozenset[int]] = {}
    for path, segment in split_file_segments(diff_text):
        lines = modified_lines(segment)
        if lines:
            result[path] = result.get(path, frozenset()) | frozenset(lines)
    return result


def total_modified_lines(files: ModifiedFileSet) -> int:
    """Count modified lines across all files."""
    return sum(len(lines) for lines in files.values())
