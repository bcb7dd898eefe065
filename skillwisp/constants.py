"""Centralized constants for the skillwisp package."""

# Canonical directory holding the real copy of every installed resource
PRIMARY_DIR_NAME = ".agents"

# Literal filename prefix shared by every single-file install root
FILE_PREFIX = "skillwisp-"

# Per-user data root (~/.agents/.skillwisp)
USER_DATA_DIR_NAME = ".skillwisp"
CONFIG_FILENAME = "config.toml"

DEFAULT_DISTRIBUTION_URL = "https://github.com/skillwisp/registry"

# Staging directories are created under the system temp dir with this prefix
STAGING_PREFIX = "skillwisp-"

# Display names pulled from frontmatter are cut to this many characters
DISPLAY_NAME_MAX = 30

# Staging directories older than this (seconds) are left over from interrupted runs
STAGING_STALE_AFTER = 3600
