"""Linter engines for changelint."""

from changelint.linters.base import BaseLinter, LintRequest
from changelint.linters.ruff_linter import RuffLinter

__all__ = ["BaseLinter", "LintRequest", "RuffLinter"]
