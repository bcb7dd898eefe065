"""Shared exception classes for skillwisp."""


class SkillwispError(Exception):
    """Base exception for skillwisp errors."""


class UnsupportedTargetError(SkillwispError):
    """Raised when a target tool does not offer a kind/scope combination."""

    def __init__(self, tool_id: str, kind: str, scope: str, message: str | None = None):
        self.tool_id = tool_id
        self.kind = kind
        self.scope = scope
        super().__init__(
            message
            or f"Target '{tool_id}' does not support {kind} installs at {scope} scope"
        )


class NoTargetsError(SkillwispError):
    """Raised when target resolution yields nothing to install into."""


class UnsafeResourceError(SkillwispError):
    """Raised when a resource id or path could escape its install root."""


class MaterializationError(SkillwispError):
    """Raised when a resource cannot be fetched into staging."""


class MissingDependencyError(MaterializationError):
    """Raised when the git executable is not available."""


class GitCommandError(MaterializationError):
    """Raised when a git subprocess exits with a non-zero status."""


class InvalidResourceError(MaterializationError):
    """Raised when the fetched tree lacks the kind's entry file."""


class PartialWriteError(SkillwispError):
    """Raised when both the symlink and the copy fallback fail for a target."""


class ConfigError(SkillwispError):
    """Base class for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested config file is missing."""


class ConfigParseError(ConfigError):
    """Raised when config.toml cannot be parsed."""


class ConfigValidationError(ConfigError):
    """Raised when config.toml contains invalid values."""
