"""Post-install management: uninstall, detail and filtered listing.

Uninstall does not consult any record of where a resource was installed.
It visits every known tool's path for the resource and removes whatever is
there, so it also cleans up installs made to tools that were later dropped
from a target list.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from skillwisp.core.paths import InstallContext, InstallScope, coerce_scope, resource_path
from skillwisp.core.resource import ResourceKind, coerce_kind
from skillwisp.core.scanner import InstalledResource, scan_installed
from skillwisp.core.tool import ALL_TOOLS, PRIMARY_SOURCE, TARGET_TOOLS
from skillwisp.utils import is_symlink, lexists, remove_path, same_location

logger = logging.getLogger(__name__)


@dataclass
class UninstallResult:
    success: bool
    removed_paths: list[Path] = field(default_factory=list)
    error: str | None = None


@dataclass(frozen=True)
class ToolPath:
    """Where one tool holds (or would hold) a resource."""

    tool_id: str
    tool_name: str
    path: Path
    is_symlink: bool
    exists: bool


@dataclass
class ResourceDetail:
    id: str
    kind: ResourceKind
    scope: InstallScope
    primary_path: Path | None
    tool_paths: list[ToolPath] = field(default_factory=list)


def uninstall(
    resource_id: str,
    kind: "ResourceKind | str",
    scope: "InstallScope | str",
    context: InstallContext | None = None,
) -> UninstallResult:
    """Remove a resource from every tool directory, Primary Source included.

    Projections are removed without following symlinks, so the Primary
    Source copy is only deleted through its own path.

    Args:
        resource_id: Resource id
        kind: Resource kind
        scope: Install scope

    Returns:
        UninstallResult; ``success`` is False when nothing was found
    """
    kind = coerce_kind(kind)
    scope = coerce_scope(scope)
    removed: list[Path] = []
    primary = resource_path(PRIMARY_SOURCE, kind, scope, resource_id, context)

    try:
        # Projections first so links never dangle while we work
        for tool in [*TARGET_TOOLS, PRIMARY_SOURCE]:
            path = resource_path(tool, kind, scope, resource_id, context)
            if path is None or path in removed:
                continue
            if tool is not PRIMARY_SOURCE and primary is not None and same_location(path, primary):
                # Reached through a linked tool root; removed via its own path
                continue
            if remove_path(path):
                logger.debug(f"Removed {path}")
                removed.append(path)
    except OSError as e:
        return UninstallResult(success=False, removed_paths=removed, error=str(e))

    if not removed:
        return UninstallResult(
            success=False,
            error=f'Resource "{resource_id}" ({kind.value}, {scope.value}) not found in any tool directory',
        )
    logger.info(f"Uninstalled {kind.value} '{resource_id}' from {len(removed)} location(s)")
    return UninstallResult(success=True, removed_paths=removed)


def detail(
    resource_id: str,
    kind: "ResourceKind | str",
    scope: "InstallScope | str",
    context: InstallContext | None = None,
) -> ResourceDetail | None:
    """Describe where a resource is installed, without changing anything.

    Returns:
        ResourceDetail listing the Primary Source path and every existing
        projection, or None if the resource is installed nowhere
    """
    kind = coerce_kind(kind)
    scope = coerce_scope(scope)

    primary = resource_path(PRIMARY_SOURCE, kind, scope, resource_id, context)
    primary_path = primary if primary is not None and lexists(primary) else None

    tool_paths: list[ToolPath] = []
    for tool in ALL_TOOLS:
        if tool.id == PRIMARY_SOURCE.id:
            continue
        path = resource_path(tool, kind, scope, resource_id, context)
        if path is None:
            continue
        exists = lexists(path)
        tool_paths.append(
            ToolPath(
                tool_id=tool.id,
                tool_name=tool.name,
                path=path,
                is_symlink=exists and is_symlink(path),
                exists=exists,
            )
        )

    existing = [tp for tp in tool_paths if tp.exists]
    if primary_path is None and not existing:
        return None
    return ResourceDetail(
        id=resource_id,
        kind=kind,
        scope=scope,
        primary_path=primary_path,
        tool_paths=existing,
    )


def list_resources(
    scope: "InstallScope | str | None" = None,
    kind: "ResourceKind | str | None" = None,
    tool_id: str | None = None,
    context: InstallContext | None = None,
) -> list[InstalledResource]:
    """Installed resources, filtered and collapsed to one entry per (scope, kind, id)."""
    resources = scan_installed(scope, context)
    if kind is not None:
        wanted = coerce_kind(kind)
        resources = [r for r in resources if r.kind is wanted]
    if tool_id is not None:
        resources = [r for r in resources if r.tool_id == tool_id]

    seen: set[tuple[InstallScope, ResourceKind, str]] = set()
    unique: list[InstalledResource] = []
    for resource in resources:
        key = (resource.scope, resource.kind, resource.id)
        if key in seen:
            continue
        seen.add(key)
        unique.append(resource)
    return unique
