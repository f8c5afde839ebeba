"""changelint: style checks limited to the lines a git change touches."""

__version__ = "0.1.0"
