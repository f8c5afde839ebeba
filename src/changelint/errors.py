"""Exceptions raised by changelint."""

from __future__ import annotations


class ChangeLintError(Exception):
    """Base class for fatal changelint errors."""


class RootNotFound(ChangeLintError):
    """No ``.git`` directory was found walking up from the working directory."""

    def __init__(self, start: str) -> None:
        super().__init__(f"no .git found in {start} or any parent directory")
        self.start = start


class SubprocessFailure(ChangeLintError):
    """An external command (git, ruff) could not be run or exited abnormally."""

    def __init__(self, command: list[str], returncode: int | None = None, stderr: str = "") -> None:
        detail = stderr.strip() or (
            "command not found" if returncode is None else f"exit status {returncode}"
        )
        super().__init__(f"{' '.join(command[:2])} failed: {detail}")
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class ConfigError(ChangeLintError):
    """The config file exists but cannot be parsed."""


class LinterProtocolError(ChangeLintError):
    """A linter did not report completion exactly once."""


class InitError(ChangeLintError):
    """A file written by ``--init`` could not be created."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot write {path}: {reason}")
        self.path = path
