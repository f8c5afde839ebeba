"""changelint init command: bootstrap the config file and git hook."""

from __future__ import annotations

import re
import stat
import subprocess
from pathlib import Path

import yaml  # type: ignore

from changelint import __version__
from changelint.config import CONFIG_FILENAME, ChangeLintConfig, dump_config
from changelint.engine import find_project_root
from changelint.errors import InitError, SubprocessFailure

HOOK_MARKER = "# changelint pre-commit v"
_HOOK_VERSION = re.compile(r"^# changelint pre-commit v([\w.\-+]+)", re.MULTILINE)

# ---------------------------------------------------------------------------
# Template builders
# ---------------------------------------------------------------------------


def _build_changelint_yml() -> str:
    return f"""\
# {CONFIG_FILENAME}: changelint configuration
#
# checkRules: open switches a checker on, warnIgnored drops its warnings
# ignore: ordered globs, a leading ! re-includes a previously ignored path
{dump_config(ChangeLintConfig.default())}"""


def _build_pre_commit_hook() -> str:
    return f"""\
#!/usr/bin/env python3
{HOOK_MARKER}{__version__}
import subprocess
import sys

sys.exit(subprocess.run([sys.executable, "-m", "changelint", "--cached"]).returncode)
"""


# ---------------------------------------------------------------------------
# Version checks
# ---------------------------------------------------------------------------


def _config_version(path: Path) -> str | None:
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError):
        return None
    if isinstance(loaded, dict) and loaded.get("version") is not None:
        return str(loaded["version"])
    return None


def _hook_version(path: Path) -> str | None:
    try:
        match = _HOOK_VERSION.search(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError):
        return None
    return match.group(1) if match else None


def _write_file(path: Path, content: str, executable: bool = False) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if executable:
            path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        raise InitError(str(path), e.strerror or str(e)) from e
    print(f"  Writing {path} ... done")


def hooks_dir(root: Path) -> Path:
    """Locate the hooks directory, asking git when ``.git`` is not a directory.

    Worktrees and submodules keep a ``.git`` file pointing elsewhere.
    """
    git_dir = root / ".git"
    if git_dir.is_dir():
        return git_dir / "hooks"

    cmd = ["git", "rev-parse", "--git-path", "hooks"]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True, cwd=root)
    except subprocess.CalledProcessError as e:
        raise SubprocessFailure(cmd, e.returncode, e.stderr or "") from e
    except FileNotFoundError as e:
        raise SubprocessFailure(cmd) from e
    return root / result.stdout.strip()


def init_config(root: Path, force: bool = False) -> Path | None:
    """Write the default config unless an up-to-date one exists."""
    path = root / CONFIG_FILENAME
    if force or not path.exists() or _config_version(path) != __version__:
        _write_file(path, _build_changelint_yml())
        return path
    return None


def init_hook(root: Path) -> Path | None:
    """Install the pre-commit hook unless this version is already installed."""
    path = hooks_dir(root) / "pre-commit"
    if _hook_version(path) != __version__:
        _write_file(path, _build_pre_commit_hook(), executable=True)
        return path
    return None


# ---------------------------------------------------------------------------
# Main command
# ---------------------------------------------------------------------------


def init_command(args: object) -> int:
    """Execute the init command.

    Args:
        args: Parsed CLI arguments with an optional ``force`` attribute.

    Returns:
        0 on success.
    """
    root = find_project_root()
    force = getattr(args, "force", False)

    print("changelint init")
    print("-" * 50)
    written = [p for p in (init_config(root, force), init_hook(root)) if p]
    if not written:
        print("  Everything is up to date")
    print("-" * 50)
    print("Done! Staged changes are now checked before every commit.")
    return 0
