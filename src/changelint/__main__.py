"""changelint CLI entry point.

Usage:
    changelint [--cached] [paths ...]   # check modified lines
    changelint --init [--force]         # write .changelint.yml and the git hook
    python -m changelint [options]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from changelint import __version__
from changelint.config import Found, load_config
from changelint.engine import ChangeLintEngine, find_project_root
from changelint.errors import ChangeLintError
from changelint.init_command import init_command
from changelint.linters.ruff_linter import RuffLinter
from changelint.models import DisplayOptions


def check_command(args: argparse.Namespace) -> int:
    """Execute the style check."""
    print("Checking code style of modified lines...", file=sys.stderr)

    root = find_project_root()
    loaded = load_config(root, args.config)
    if not isinstance(loaded, Found):
        print("No .changelint.yml found, using default rules", file=sys.stderr)
    config = loaded.config

    engine = ChangeLintEngine(
        config,
        RuffLinter(cwd=root),
        root,
        display=DisplayOptions(
            sort_by_position=not args.no_sort,
            show_rule_name=not args.no_rule_names,
        ),
    )
    paths = [str(Path(p).resolve()) for p in (args.paths or ["."])]
    outcome = engine.run(paths, cached=args.cached)

    print(f"\n{outcome.message}", file=sys.stderr)
    return outcome.exit_code


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="changelint",
        usage="changelint [options] [file.py ...] [dir ...]",
        description="Run style checks on the lines a pending git change modifies",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Files or directories to check (default: current directory)",
    )
    parser.add_argument(
        "-c",
        "--cached",
        action="store_true",
        help="Check staged changes only (git diff --cached)",
    )
    parser.add_argument(
        "-i",
        "--init",
        action="store_true",
        help="Write .changelint.yml and install the git pre-commit hook",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="With --init, overwrite an existing .changelint.yml",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a config file (default: .changelint.yml in the project root)",
    )
    parser.add_argument(
        "--no-sort",
        action="store_true",
        help="Report findings in linter order instead of by position",
    )
    parser.add_argument(
        "--no-rule-names",
        action="store_true",
        help="Do not append rule names to reported findings",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.init:
            sys.exit(init_command(args))
        sys.exit(check_command(args))
    except ChangeLintError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
