"""Discovery of installed resources.

The filesystem is the only record of what is installed, so scanning walks
the same roots the installer writes to. Anything unreadable is treated as
"nothing installed there".
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from skillwisp.constants import DISPLAY_NAME_MAX
from skillwisp.core.paths import (
    DirectoryRoot,
    InstallContext,
    InstallScope,
    SingleFileRoot,
    coerce_scope,
    parse_resource_id,
    resolve_root,
)
from skillwisp.core.render import frontmatter_field
from skillwisp.core.resource import ResourceKind, coerce_kind
from skillwisp.core.tool import ALL_TOOLS, get_tool
from skillwisp.utils import is_symlink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstalledResource:
    """A resource found on disk.

    Attributes:
        id: Resource id (directory name or parsed from the filename)
        kind: Resource kind
        tool_id: Tool whose root it was found in
        path: Resource directory or single file
        is_symlink: True when the entry is a symlink (a projection)
        scope: Scope that was scanned
        name: Short display name from the entry file's description, if any
    """

    id: str
    kind: ResourceKind
    tool_id: str
    path: Path
    is_symlink: bool
    scope: InstallScope
    name: str | None = None


def extract_display_name(path: Path) -> str | None:
    """Pull the frontmatter description out of an entry file.

    Returns:
        The description, cut to a short length, or None if unavailable
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None

    description = frontmatter_field(content, "description")
    if description is None:
        return None
    description = description.strip().strip("\"'")
    if len(description) > DISPLAY_NAME_MAX:
        return description[:DISPLAY_NAME_MAX] + "…"
    return description or None


def _scan_directory_root(
    root: DirectoryRoot,
    tool_id: str,
    kind: ResourceKind,
    scope: InstallScope,
) -> list[InstalledResource]:
    found: list[InstalledResource] = []
    try:
        entries = sorted(root.dir.iterdir())
    except OSError:
        return found

    for entry in entries:
        try:
            if not (entry.is_dir() or entry.is_symlink()):
                continue
            entry_file = entry / root.entry_file
            if not entry_file.is_file():
                continue
        except OSError:
            continue
        found.append(
            InstalledResource(
                id=entry.name,
                kind=kind,
                tool_id=tool_id,
                path=entry,
                is_symlink=is_symlink(entry),
                scope=scope,
                name=extract_display_name(entry_file),
            )
        )
    return found


def _scan_single_file_root(
    root: SingleFileRoot,
    tool_id: str,
    kind: ResourceKind,
    scope: InstallScope,
) -> list[InstalledResource]:
    found: list[InstalledResource] = []
    try:
        entries = sorted(root.dir.iterdir())
    except OSError:
        return found

    for entry in entries:
        resource_id = parse_resource_id(entry.name, root)
        if resource_id is None:
            continue
        try:
            if not (entry.is_file() or entry.is_symlink()):
                continue
        except OSError:
            continue
        found.append(
            InstalledResource(
                id=resource_id,
                kind=kind,
                tool_id=tool_id,
                path=entry,
                is_symlink=is_symlink(entry),
                scope=scope,
                name=extract_display_name(entry),
            )
        )
    return found


def scan_tool(
    tool_id: str,
    kind: "ResourceKind | str",
    scope: "InstallScope | str",
    context: InstallContext | None = None,
) -> list[InstalledResource]:
    """Scan one tool's root for one kind and scope.

    Returns:
        Installed resources; empty for unknown tools or unsupported roots
    """
    tool = get_tool(tool_id)
    if tool is None:
        return []
    kind = coerce_kind(kind)
    scope = coerce_scope(scope)

    root = resolve_root(tool, kind, scope, context)
    if root is None:
        return []
    if isinstance(root, SingleFileRoot):
        return _scan_single_file_root(root, tool.id, kind, scope)
    return _scan_directory_root(root, tool.id, kind, scope)


def scan_installed(
    scope: "InstallScope | str | None" = None,
    context: InstallContext | None = None,
) -> list[InstalledResource]:
    """Scan every known tool and kind.

    Args:
        scope: Limit to one scope; both are scanned when None
        context: Filesystem anchors (defaults to cwd/home/os.environ)

    Returns:
        Everything found, Primary Source first, one entry per tool and path
    """
    ctx = context or InstallContext()
    scopes = list(InstallScope) if scope is None else [coerce_scope(scope)]

    installed: list[InstalledResource] = []
    for tool in ALL_TOOLS:
        for kind in ResourceKind:
            for each_scope in scopes:
                installed.extend(scan_tool(tool.id, kind, each_scope, ctx))
    logger.debug(f"Scan found {len(installed)} installed resources")
    return installed
