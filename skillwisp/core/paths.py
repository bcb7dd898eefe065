"""Install root resolution.

Maps a (tool, kind, scope) triple to the place where resources of that kind
live for that tool. Two layouts exist:

- directory roots: ``<dir>/<resource id>/<entry file>``
- single-file roots: ``<dir>/<prefix><resource id><ext>``

``None`` is returned when a tool does not offer the combination at all.
That is a normal answer, not an error; callers decide whether it matters.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Union

from skillwisp.constants import FILE_PREFIX
from skillwisp.core.resource import ResourceKind, get_kind_spec
from skillwisp.core.tool import RootStrategy, ToolConfig


class InstallScope(Enum):
    """Where resources are installed."""

    LOCAL = "local"  # project directory
    GLOBAL = "global"  # user's home directory


def coerce_scope(scope: "InstallScope | str") -> InstallScope:
    if isinstance(scope, InstallScope):
        return scope
    try:
        return InstallScope(scope)
    except ValueError:
        raise ValueError(f"Unknown install scope '{scope}'. Must be 'local' or 'global'")


@dataclass(frozen=True)
class InstallContext:
    """Filesystem anchors for path resolution.

    Defaults to the current directory, the user's home and the process
    environment; tests pass explicit values to stay hermetic.
    """

    base_dir: Path = field(default_factory=Path.cwd)
    home_dir: Path = field(default_factory=Path.home)
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)

    def scope_base(self, scope: InstallScope) -> Path:
        return self.home_dir if scope is InstallScope.GLOBAL else self.base_dir


@dataclass(frozen=True)
class DirectoryRoot:
    """Resources live as ``dir/<id>/<entry_file>``."""

    dir: Path
    entry_file: str

    def path_for(self, resource_id: str) -> Path:
        return self.dir / resource_id


@dataclass(frozen=True)
class SingleFileRoot:
    """Resources live as one file ``dir/<prefix><id><ext>``."""

    dir: Path
    prefix: str
    ext: str

    def file_name(self, resource_id: str) -> str:
        return f"{self.prefix}{resource_id}{self.ext}"

    def path_for(self, resource_id: str) -> Path:
        return self.dir / self.file_name(resource_id)


InstallRoot = Union[DirectoryRoot, SingleFileRoot]


def resolve_root(
    tool: ToolConfig,
    kind: "ResourceKind | str",
    scope: "InstallScope | str",
    context: InstallContext | None = None,
) -> InstallRoot | None:
    """Resolve the install root of a tool for a kind and scope.

    Precedence:
        1. Environment override of the global root (e.g., CODEX_HOME)
        2. Project-only single-file tools (skills only)
        3. Dual-scope single-file tools (skills only)
        4. Directory root at ``{scope base}/{tool base}/{kind dir}``

    Args:
        tool: Tool configuration
        kind: Resource kind
        scope: Install scope
        context: Filesystem anchors (defaults to cwd/home/os.environ)

    Returns:
        The install root, or None if the tool does not offer this combination
    """
    ctx = context or InstallContext()
    kind_spec = get_kind_spec(kind)
    scope = coerce_scope(scope)

    if not tool.supports_kind(kind_spec.kind):
        return None

    if tool.strategy is RootStrategy.ENV_OVERRIDE and scope is InstallScope.GLOBAL:
        override = (ctx.environ.get(tool.env_var) or "").strip()
        if override:
            return DirectoryRoot(
                dir=Path(override) / kind_spec.dir_name,
                entry_file=kind_spec.entry_file,
            )

    if tool.strategy is RootStrategy.WORKSPACE_FILE and kind_spec.kind is ResourceKind.SKILL:
        if scope is InstallScope.GLOBAL:
            return None
        return SingleFileRoot(
            dir=ctx.base_dir / tool.base_dir / tool.file_dir,
            prefix=FILE_PREFIX,
            ext=tool.file_ext,
        )

    if tool.strategy is RootStrategy.FILE and kind_spec.kind is ResourceKind.SKILL:
        root = tool.global_base_dir if scope is InstallScope.GLOBAL else tool.base_dir
        if not root:
            return None
        return SingleFileRoot(
            dir=ctx.scope_base(scope) / root / tool.file_dir,
            prefix=FILE_PREFIX,
            ext=tool.file_ext,
        )

    root = tool.global_base_dir if scope is InstallScope.GLOBAL else tool.base_dir
    if not root:
        return None
    return DirectoryRoot(
        dir=ctx.scope_base(scope) / root / kind_spec.dir_name,
        entry_file=kind_spec.entry_file,
    )


def resource_path(
    tool: ToolConfig,
    kind: "ResourceKind | str",
    scope: "InstallScope | str",
    resource_id: str,
    context: InstallContext | None = None,
) -> Path | None:
    """Path where a given resource is (or would be) installed for a tool."""
    root = resolve_root(tool, kind, scope, context)
    if root is None:
        return None
    return root.path_for(resource_id)


def parse_resource_id(file_name: str, root: SingleFileRoot) -> str | None:
    """Recover the resource id from a single-file install name.

    Args:
        file_name: Bare filename (e.g., "skillwisp-pdf.mdc")
        root: The single-file root the file was found in

    Returns:
        The resource id, or None if the name does not match the root's pattern
    """
    if not file_name.startswith(root.prefix) or not file_name.endswith(root.ext):
        return None
    resource_id = file_name[len(root.prefix): len(file_name) - len(root.ext)]
    return resource_id or None
