"""Shared test fixtures for changelint tests."""

from pathlib import Path

import pytest

from changelint.config import ChangeLintConfig
from changelint.linters.base import BaseLinter
from changelint.models import CheckRule


class FakeLinter(BaseLinter):
    """Linter double that reports canned findings per file name."""

    name = "fake"

    def __init__(self, findings=None, success=True, call_done=True):
        self.findings = findings or {}
        self.success = success
        self.call_done = call_done
        self.requests = []

    def check(self, request, reporter, done):
        self.requests.append(request)
        report = [
            reporter(path, list(self.findings.get(Path(path).name, [])))
            for path in request.selected_files()
        ]
        if self.call_done:
            done(self.success, report)


@pytest.fixture
def fake_linter():
    """Factory for FakeLinter instances."""
    return FakeLinter


@pytest.fixture
def config():
    return ChangeLintConfig(
        stop_commit=True,
        rules={
            "pyflakes": CheckRule(enabled=True, warn_ignored=False),
            "pycodestyle": CheckRule(enabled=True, warn_ignored=True),
        },
        ignore=["*.json"],
    )


@pytest.fixture
def git_root(tmp_path):
    """A temporary directory that looks like a git checkout."""
    (tmp_path / ".git" / "hooks").mkdir(parents=True)
    return tmp_path
