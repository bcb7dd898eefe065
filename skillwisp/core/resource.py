"""Resource kind definitions and the Resource value object.

A resource is a markdown-based bundle (skill, rule or workflow) published
in the distribution repository under ``<kind dir>/<path>/<entry file>``.
"""

import re
from dataclasses import dataclass
from enum import Enum

from skillwisp.exceptions import UnsafeResourceError


class ResourceKind(Enum):
    """Resource kinds supported by skillwisp."""

    SKILL = "skill"
    RULE = "rule"
    WORKFLOW = "workflow"


@dataclass(frozen=True)
class KindSpec:
    """How a resource kind is laid out on disk."""

    kind: ResourceKind
    label: str
    dir_name: str  # e.g., "skills"
    entry_file: str  # e.g., "SKILL.md"


KIND_SPECS: dict[ResourceKind, KindSpec] = {
    ResourceKind.SKILL: KindSpec(
        kind=ResourceKind.SKILL,
        label="Skill",
        dir_name="skills",
        entry_file="SKILL.md",
    ),
    ResourceKind.RULE: KindSpec(
        kind=ResourceKind.RULE,
        label="Rule",
        dir_name="rules",
        entry_file="RULE.md",
    ),
    ResourceKind.WORKFLOW: KindSpec(
        kind=ResourceKind.WORKFLOW,
        label="Workflow",
        dir_name="workflows",
        entry_file="WORKFLOW.md",
    ),
}

SAFE_ID_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._-]*$")


def get_kind_spec(kind: "ResourceKind | str") -> KindSpec:
    """Look up the layout of a resource kind.

    Args:
        kind: A ResourceKind or its string value ("skill", "rule", "workflow")

    Returns:
        The KindSpec for the kind

    Raises:
        ValueError: If the string is not a known kind
    """
    return KIND_SPECS[coerce_kind(kind)]


def coerce_kind(kind: "ResourceKind | str") -> ResourceKind:
    """Accept either the enum or its value."""
    if isinstance(kind, ResourceKind):
        return kind
    try:
        return ResourceKind(kind)
    except ValueError:
        valid = ", ".join(k.value for k in ResourceKind)
        raise ValueError(f"Unknown resource kind '{kind}'. Must be one of: {valid}")


def sanitize_resource_id(resource_id: str) -> str:
    """Validate a resource id before it is joined onto an install root.

    Args:
        resource_id: Id taken from the registry or the command line

    Returns:
        The id unchanged

    Raises:
        UnsafeResourceError: If the id is empty, contains path separators or
            parent references, or has characters outside the safe set
    """
    if not resource_id or not isinstance(resource_id, str):
        raise UnsafeResourceError("Invalid resource id: empty or not a string")
    if "/" in resource_id or "\\" in resource_id or ".." in resource_id:
        raise UnsafeResourceError(f"Unsafe resource id (path traversal attempt): {resource_id}")
    if not SAFE_ID_PATTERN.match(resource_id):
        raise UnsafeResourceError(f"Invalid resource id format: {resource_id}")
    return resource_id


def validate_resource_path(resource_path: str) -> str:
    """Reject distribution paths that could escape the checkout."""
    if not resource_path or not isinstance(resource_path, str):
        raise UnsafeResourceError("Invalid resource path: empty or not a string")
    if ".." in resource_path or resource_path.startswith(("/", "\\")):
        raise UnsafeResourceError(f"Unsafe resource path (path traversal attempt): {resource_path}")
    return resource_path


@dataclass(frozen=True)
class Resource:
    """A resource as described by the registry.

    Attributes:
        id: Install name, used as the directory or filename stem
        kind: Declared resource kind
        source: Source label (e.g., "anthropic")
        path: Path relative to the kind directory in the distribution repo
            (e.g., "@anthropic/pdf")
        name: Human-readable name
        description: One-line description, used when rendering single-file targets
    """

    id: str
    kind: ResourceKind
    path: str
    source: str = ""
    name: str = ""
    description: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.id
