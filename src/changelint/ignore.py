"""Ignore-rule evaluation for changed files.

Rules come from the ``ignore`` list in ``.changelint.yml`` and are evaluated
in order. A plain rule that matches marks the path ignored. A ``!`` rule that
matches un-ignores it again, but only when an earlier rule had ignored it.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

from changelint.models import IgnoreRule


def parse_ignore_rules(patterns: str | Iterable[str] | None) -> list[IgnoreRule]:
    """Build the ordered rule list from config strings."""
    if patterns is None:
        return []
    if isinstance(patterns, str):
        patterns = [patterns]
    return [IgnoreRule.parse(p.strip()) for p in patterns if p and p.strip()]


def _normalize(path: str) -> str:
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    """Translate a shell glob into a regex where only ``**`` crosses ``/``."""
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                i += 2
                if pattern.startswith("/", i):
                    i += 1
                    out.append("(?:.*/)?")
                else:
                    out.append(".*")
                continue
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            negated = pattern.startswith(("[!", "[^"), i)
            end = pattern.find("]", i + 3 if negated else i + 2)
            if end == -1:
                out.append(re.escape(c))
            else:
                body = pattern[i + (2 if negated else 1) : end]
                body = body.replace("\\", "\\\\").replace("[", "\\[")
                out.append(("[^" if negated else "[") + body + "]")
                i = end
        else:
            out.append(re.escape(c))
        i += 1
    return re.compile("".join(out), re.DOTALL)


def glob_match(pattern: str, path: str) -> bool:
    """Match a relative path against a shell glob.

    A pattern without a slash also matches the path's basename, so ``*.json``
    covers ``a/b/config.json``. A trailing slash means "everything below".
    """
    pattern = _normalize(pattern)
    path = _normalize(path)
    if not pattern:
        return False
    if pattern.endswith("/"):
        pattern += "**"

    regex = _compile(pattern)
    if regex.fullmatch(path):
        return True
    if "/" not in pattern:
        return regex.fullmatch(path.rsplit("/", 1)[-1]) is not None
    return False


def is_ignored(rules: Iterable[IgnoreRule], path: str) -> bool:
    """Return True when the ordered rule list excludes ``path``."""
    ignored = False
    for rule in rules:
        if rule.negated:
            if ignored and glob_match(rule.pattern, path):
                ignored = False
        elif not ignored and glob_match(rule.pattern, path):
            ignored = True
    return ignored
