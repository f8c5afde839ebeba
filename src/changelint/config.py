"""Configuration management for changelint."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

import yaml  # type: ignore

from changelint import __version__
from changelint.errors import ConfigError
from changelint.ignore import parse_ignore_rules
from changelint.models import CheckRule, IgnoreRule

CONFIG_FILENAME = ".changelint.yml"

_DEFAULT_CONFIG: dict[str, Any] = {
    "version": __version__,
    "stopCommit": True,
    "fileTypes": ["py"],
    "checkRules": {
        "pycodestyle": {"open": True, "warnIgnored": True},
        "pyflakes": {"open": True, "warnIgnored": False},
        "mccabe": {"open": False, "warnIgnored": False},
        "isort": {"open": False, "warnIgnored": False},
        "ruff": {"open": True, "warnIgnored": False},
    },
    "ignore": [
        "*.json",
        "docs/**",
    ],
}


@dataclass
class ChangeLintConfig:
    """changelint configuration loaded from `.changelint.yml`."""

    version: str = __version__
    stop_commit: bool = True
    file_types: list[str] = field(default_factory=lambda: ["py"])
    rules: dict[str, CheckRule] = field(default_factory=dict)
    ignore: list[str] = field(default_factory=list)

    @classmethod
    def default(cls) -> ChangeLintConfig:
        return cls._from_raw(copy.deepcopy(_DEFAULT_CONFIG))

    @classmethod
    def _from_raw(cls, raw: dict[str, Any]) -> ChangeLintConfig:
        """Build config from a raw dict (merged defaults + user overrides)."""
        cfg = cls()
        cfg.version = str(raw.get("version", cfg.version))
        cfg.stop_commit = bool(raw.get("stopCommit", cfg.stop_commit))

        file_types = raw.get("fileTypes", cfg.file_types)
        if isinstance(file_types, str):
            file_types = file_types.split(",")
        cfg.file_types = [t.strip().lstrip(".") for t in file_types if t and t.strip()]

        # Check rules
        rules_raw = raw.get("checkRules") or {}
        if not isinstance(rules_raw, dict):
            raise ConfigError("'checkRules' must be a mapping of checker name to settings")
        for name, settings in rules_raw.items():
            if isinstance(settings, dict):
                cfg.rules[name] = CheckRule.from_dict(settings)

        ignore = raw.get("ignore") or []
        cfg.ignore = [ignore] if isinstance(ignore, str) else list(ignore)
        return cfg

    @property
    def ignore_rules(self) -> list[IgnoreRule]:
        return parse_ignore_rules(self.ignore)

    def has_enabled_rules(self) -> bool:
        """Check if at least one checker is switched on."""
        return any(rule.enabled for rule in self.rules.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "stopCommit": self.stop_commit,
            "fileTypes": list(self.file_types),
            "checkRules": {name: rule.to_dict() for name, rule in self.rules.items()},
            "ignore": list(self.ignore),
        }


@dataclass(frozen=True)
class Found:
    """A config file was found and parsed."""

    config: ChangeLintConfig
    path: Path


@dataclass(frozen=True)
class NotFound:
    """No config file exists; ``config`` holds the bundled defaults."""

    config: ChangeLintConfig


ConfigResult = Union[Found, NotFound]


def load_config(root: str | Path, config_path: str | Path | None = None) -> ConfigResult:
    """Load configuration for a project.

    Search order:
    1. Explicit ``config_path`` argument
    2. ``.changelint.yml`` in the project root

    Raises:
        ConfigError: The file exists but is not a valid YAML mapping.
    """
    path = Path(config_path) if config_path else Path(root) / CONFIG_FILENAME
    if not path.exists():
        return NotFound(ChangeLintConfig.default())

    try:
        with open(path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    # Missing top-level keys fall back to defaults; a user checkRules
    # section replaces the default one as a whole
    raw = dict(copy.deepcopy(_DEFAULT_CONFIG))
    raw.update(loaded)
    return Found(ChangeLintConfig._from_raw(raw), path)


def dump_config(config: ChangeLintConfig) -> str:
    """Render a config as YAML for writing to disk."""
    return yaml.safe_dump(config.to_dict(), sort_keys=False, default_flow_style=False)
