"""skillwisp: install skills, rules and workflows into many AI coding tools."""

__version__ = "0.4.0"
