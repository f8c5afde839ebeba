"""Turn per-file filtered results into the final pass/fail outcome."""

from __future__ import annotations

from typing import Iterable

from changelint.models import FilteredResult, RunOutcome

PASSED = "Style check passed"
FAILED_BLOCKING = "Style check failed, fix the issues above before committing"
FAILED_NON_BLOCKING = "Style check failed (not blocking)"


def aggregate(
    results: Iterable[FilteredResult],
    *,
    linter_success: bool,
    blocking: bool,
) -> RunOutcome:
    """Combine filtered results with the linter's own verdict.

    Args:
        results: One FilteredResult per checked file.
        linter_success: The linter engine's own overall success flag.
        blocking: Whether a failure should stop the commit (``stopCommit``).

    Returns:
        The RunOutcome. ``blocking`` is only ever True for a failed run.
    """
    results = list(results)
    total = sum(len(r.findings) for r in results)
    files = sum(1 for r in results if r.findings)
    success = linter_success and total == 0

    if success:
        return RunOutcome(success=True, blocking=False, message=PASSED, files=len(results))
    if blocking:
        return RunOutcome(
            success=False, blocking=True, message=FAILED_BLOCKING, findings=total, files=files
        )
    return RunOutcome(
        success=False, blocking=False, message=FAILED_NON_BLOCKING, findings=total, files=files
    )
