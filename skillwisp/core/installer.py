"""Resource installer.

Strategy: Primary Source + projections.

- The Primary Source (``.agents/<kind dir>/<id>``) always holds the real files.
- Directory-based tools get a relative symlink to that copy, falling back to
  a full copy when linking is not possible.
- Single-file tools get the entry file rendered through their template.

The resource is fetched exactly once per install, no matter how many targets
it fans out to. Targets are validated before anything is written. Targets
already written are not rolled back if a later one fails.
"""

import logging
import shutil
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from skillwisp.config import SkillwispConfig
from skillwisp.core.materialize import staged_resource
from skillwisp.core.paths import (
    DirectoryRoot,
    InstallContext,
    InstallRoot,
    InstallScope,
    SingleFileRoot,
    coerce_scope,
    resolve_root,
    resource_path,
)
from skillwisp.core.render import render_single_file
from skillwisp.core.resource import (
    Resource,
    ResourceKind,
    coerce_kind,
    get_kind_spec,
    sanitize_resource_id,
    validate_resource_path,
)
from skillwisp.core.result import Err, Ok, Result
from skillwisp.core.targets import CompatNotice, normalize_targets
from skillwisp.core.tool import PRIMARY_SOURCE, ToolConfig, detect_tools, get_tool, get_tools
from skillwisp.exceptions import (
    InvalidResourceError,
    NoTargetsError,
    PartialWriteError,
    SkillwispError,
    UnsupportedTargetError,
)
from skillwisp.utils import lexists, relative_link_target, remove_path, same_location, strip_vcs

logger = logging.getLogger(__name__)

# (distribution_url, resource_path, kind, resource_id=...) -> context yielding the staged tree
Materializer = Callable[..., AbstractContextManager]


class Mechanism(Enum):
    """How a target artifact was realized."""

    COPY = "copy"
    LINK = "link"


@dataclass(frozen=True)
class InstallTarget:
    """One artifact written by an install."""

    tool_id: str
    path: Path
    mechanism: Mechanism


@dataclass
class InstallResult:
    """Result of an install operation."""

    success: bool
    targets: list[InstallTarget] = field(default_factory=list)
    primary_path: Path | None = None
    compat_notices: list[CompatNotice] = field(default_factory=list)
    error: str | None = None


# --- Link-or-copy -----------------------------------------------------------


def try_symlink(source: Path, target: Path) -> Result[Mechanism]:
    """Step 1: create a relative symlink at ``target`` pointing to ``source``."""
    try:
        target.symlink_to(relative_link_target(source, target), target_is_directory=True)
    except OSError as e:
        return Err(PartialWriteError(f"symlink failed: {e}"))
    return Ok(Mechanism.LINK)


def copy_tree(source: Path, target: Path) -> Result[Mechanism]:
    """Step 2: copy ``source`` recursively to ``target``, dropping VCS metadata."""
    try:
        remove_path(target)
        shutil.copytree(source, target, symlinks=True)
        strip_vcs(target)
    except OSError as e:
        return Err(PartialWriteError(f"copy failed: {e}"))
    return Ok(Mechanism.COPY)


def link_or_copy(source: Path, target: Path, *, use_symlinks: bool = True) -> Result[Mechanism]:
    """Project a directory: symlink first, recover with a copy.

    Args:
        source: Primary Source copy
        target: Path of the projection (its parent must exist)
        use_symlinks: When False, go straight to copying

    Returns:
        Ok(mechanism used), or Err(PartialWriteError) carrying both failures
    """
    if not use_symlinks:
        return copy_tree(source, target)

    linked = try_symlink(source, target)
    if linked.ok:
        return linked

    logger.info(f"Symlink to {target} not possible, copying instead ({linked.message})")
    copied = copy_tree(source, target)
    if copied.ok:
        return copied
    return Err(PartialWriteError(f"{linked.message}; {copied.message}"))


# --- Installer --------------------------------------------------------------


class Installer:
    """Coordinates the install pipeline for resources.

    Args:
        config: Runtime configuration (distribution URL, symlink default)
        context: Filesystem anchors used for path resolution
        materializer: Fetches a resource into staging; defaults to a git clone
    """

    def __init__(
        self,
        config: SkillwispConfig | None = None,
        *,
        context: InstallContext | None = None,
        materializer: Materializer | None = None,
    ) -> None:
        self.config = config or SkillwispConfig()
        self.context = context or InstallContext()
        self.materializer = materializer or staged_resource

    def install(
        self,
        resource: Resource,
        *,
        target_ids: list[str] | None = None,
        use_symlinks: bool | None = None,
        scope: "InstallScope | str" = InstallScope.LOCAL,
        kind: "ResourceKind | str | None" = None,
    ) -> InstallResult:
        """Install a resource into the Primary Source and every target.

        Args:
            resource: Resource to install
            target_ids: Tool ids to install to; detected tools when None or empty
            use_symlinks: Link directory targets to the Primary Source copy
                (defaults to the configured value)
            scope: "local" (project) or "global" (home directory)
            kind: Override of the resource's declared kind

        Returns:
            InstallResult; failures are reported in it, never raised
        """
        try:
            return self._install(resource, target_ids, use_symlinks, scope, kind)
        except Exception as e:
            logger.debug("Install of %s failed", getattr(resource, "id", resource), exc_info=True)
            return InstallResult(success=False, error=str(e) or type(e).__name__)

    def _install(
        self,
        resource: Resource,
        target_ids: list[str] | None,
        use_symlinks: bool | None,
        scope: "InstallScope | str",
        kind: "ResourceKind | str | None",
    ) -> InstallResult:
        kind = coerce_kind(kind or resource.kind)
        scope = coerce_scope(scope)
        symlinks = self.config.use_symlinks if use_symlinks is None else use_symlinks
        sanitize_resource_id(resource.id)
        validate_resource_path(resource.path)

        tools = self._resolve_tools(target_ids, kind, scope)
        if not tools.ok:
            return InstallResult(success=False, error=tools.message)

        normalized = normalize_targets(tools.value, kind, scope)
        planned = self._plan(normalized.real_targets, kind, scope)
        if not planned.ok:
            return InstallResult(
                success=False,
                error=planned.message,
                compat_notices=normalized.compat_notices,
            )

        logger.info(f"Installing {kind.value} '{resource.id}' ({scope.value})")
        with self.materializer(
            self.config.distribution_url,
            resource.path,
            kind,
            resource_id=resource.id,
        ) as staged:
            written = self._write(staged, resource, kind, planned.value, symlinks)

        if not written.ok:
            return InstallResult(
                success=False,
                error=written.message,
                compat_notices=normalized.compat_notices,
            )

        targets = written.value
        return InstallResult(
            success=True,
            targets=targets,
            primary_path=targets[0].path,
            compat_notices=normalized.compat_notices,
        )

    def _resolve_tools(
        self,
        target_ids: list[str] | None,
        kind: ResourceKind,
        scope: InstallScope,
    ) -> Result[list[ToolConfig]]:
        """Explicit ids, else detected tools, else the Primary Source alone."""
        if target_ids:
            tools: list[ToolConfig] = []
            for tool_id in target_ids:
                tool = get_tool(tool_id)
                if tool is None:
                    return Err(UnsupportedTargetError(
                        tool_id, kind.value, scope.value, f"Unknown target '{tool_id}'"
                    ))
                tools.append(tool)
        else:
            tools = detect_tools(self.context.base_dir, self.context.home_dir) or [PRIMARY_SOURCE]

        if not tools:
            return Err(NoTargetsError("No installation targets found"))
        return Ok(tools)

    def _plan(
        self,
        targets: list[ToolConfig],
        kind: ResourceKind,
        scope: InstallScope,
    ) -> Result[list[tuple[ToolConfig, InstallRoot]]]:
        """Resolve every real target's root; any unsupported one aborts the install."""
        plan: list[tuple[ToolConfig, InstallRoot]] = []
        for tool in targets:
            root = resolve_root(tool, kind, scope, self.context)
            if root is None:
                return Err(UnsupportedTargetError(tool.id, kind.value, scope.value))
            plan.append((tool, root))

        primary_root = plan[0][1]
        if not isinstance(primary_root, DirectoryRoot):
            return Err(SkillwispError("Primary Source must be a directory root"))
        return Ok(plan)

    def _write(
        self,
        staged: Path,
        resource: Resource,
        kind: ResourceKind,
        plan: list[tuple[ToolConfig, InstallRoot]],
        use_symlinks: bool,
    ) -> Result[list[InstallTarget]]:
        (_, primary_root), *projections = plan
        primary = self._write_primary(staged, primary_root, resource.id)
        if not primary.ok:
            return primary

        targets = [primary.value]
        primary_dir = primary.value.path
        for tool, root in projections:
            if tool.id == PRIMARY_SOURCE.id:
                continue
            if isinstance(root, SingleFileRoot):
                written = self._write_single_file(tool, root, primary_dir, resource, kind)
            else:
                written = self._project_directory(tool, root, primary_dir, resource.id, use_symlinks)
            if not written.ok:
                return written
            if written.value is not None:
                targets.append(written.value)
                logger.debug(f"{tool.id}: {written.value.mechanism.value} -> {written.value.path}")
        return Ok(targets)

    def _write_primary(self, staged: Path, root: InstallRoot, resource_id: str) -> Result[InstallTarget]:
        primary_dir = root.path_for(resource_id)
        remove_path(primary_dir)
        primary_dir.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(staged, primary_dir, symlinks=True)
        strip_vcs(primary_dir)
        return Ok(InstallTarget(tool_id=PRIMARY_SOURCE.id, path=primary_dir, mechanism=Mechanism.COPY))

    def _project_directory(
        self,
        tool: ToolConfig,
        root: DirectoryRoot,
        primary_dir: Path,
        resource_id: str,
        use_symlinks: bool,
    ) -> Result[InstallTarget | None]:
        target = root.path_for(resource_id)
        if same_location(target, primary_dir):
            # Tool root is (or links to) the Primary Source root
            return Ok(None)

        remove_path(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        projected = link_or_copy(primary_dir, target, use_symlinks=use_symlinks)
        if not projected.ok:
            return Err(PartialWriteError(f"Failed to install to {tool.name} at {target}: {projected.message}"))
        return Ok(InstallTarget(tool_id=tool.id, path=target, mechanism=projected.value))

    def _write_single_file(
        self,
        tool: ToolConfig,
        root: SingleFileRoot,
        primary_dir: Path,
        resource: Resource,
        kind: ResourceKind,
    ) -> Result[InstallTarget]:
        entry = primary_dir / get_kind_spec(kind).entry_file
        if not entry.is_file():
            return Err(InvalidResourceError(f"Missing {entry.name} in {primary_dir}"))

        content = render_single_file(tool.id, resource, entry.read_text(encoding="utf-8"))
        target = root.path_for(resource.id)
        root.dir.mkdir(parents=True, exist_ok=True)
        remove_path(target)
        target.write_text(content, encoding="utf-8")
        return Ok(InstallTarget(tool_id=tool.id, path=target, mechanism=Mechanism.COPY))

    def check_exists(
        self,
        resource_id: str,
        kind: "ResourceKind | str",
        tool_ids: list[str],
        scope: "InstallScope | str",
    ) -> list[str]:
        """Names of the tools that already have this resource installed.

        The Primary Source is always checked in addition to ``tool_ids``.

        Args:
            resource_id: Resource id
            kind: Resource kind
            tool_ids: Tools about to be installed to
            scope: Install scope

        Returns:
            Human-readable tool names, without duplicates
        """
        existing: list[str] = []
        for tool in [*get_tools(tool_ids), PRIMARY_SOURCE]:
            path = resource_path(tool, kind, scope, resource_id, self.context)
            if path is not None and lexists(path) and tool.name not in existing:
                existing.append(tool.name)
        return existing


def install_resource(resource: Resource, **options) -> InstallResult:
    """Install with the default configuration; see Installer.install."""
    return Installer(SkillwispConfig.from_env()).install(resource, **options)


def check_exists(
    resource_id: str,
    kind: "ResourceKind | str",
    tool_ids: list[str],
    scope: "InstallScope | str",
) -> list[str]:
    return Installer().check_exists(resource_id, kind, tool_ids, scope)
