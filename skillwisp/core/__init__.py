"""Core abstractions for skillwisp.

This module provides the resource materialization and installation engine:

- ResourceKind / Resource: what gets installed
- ToolConfig: per-tool directory conventions, Primary Source first
- resolve_root: (tool, kind, scope) -> install root, or None when unsupported
- staged_resource: fetch a resource once into a staging directory
- normalize_targets: requested tools -> real targets + compatibility notices
- Installer: write the Primary Source copy and project it to each target
- scan_installed: read back what is installed
- uninstall / detail / list_resources: manage installed resources
"""

from skillwisp.core.installer import (
    InstallResult,
    InstallTarget,
    Installer,
    Mechanism,
    check_exists,
    install_resource,
    link_or_copy,
)
from skillwisp.core.manager import (
    ResourceDetail,
    ToolPath,
    UninstallResult,
    detail,
    list_resources,
    uninstall,
)
from skillwisp.core.materialize import RETRIEVAL_STRATEGIES, staged_resource
from skillwisp.core.paths import (
    DirectoryRoot,
    InstallContext,
    InstallRoot,
    InstallScope,
    SingleFileRoot,
    parse_resource_id,
    resolve_root,
    resource_path,
)
from skillwisp.core.resource import KIND_SPECS, KindSpec, Resource, ResourceKind
from skillwisp.core.scanner import InstalledResource, scan_installed, scan_tool
from skillwisp.core.targets import CompatNotice, NormalizedTargets, normalize_targets
from skillwisp.core.tool import (
    ALL_TOOLS,
    PRIMARY_SOURCE,
    TARGET_TOOLS,
    RootStrategy,
    ToolConfig,
    detect_tools,
    get_tool,
)

__all__ = [
    # Resources
    "ResourceKind",
    "KindSpec",
    "KIND_SPECS",
    "Resource",
    # Tools
    "ToolConfig",
    "RootStrategy",
    "PRIMARY_SOURCE",
    "TARGET_TOOLS",
    "ALL_TOOLS",
    "get_tool",
    "detect_tools",
    # Paths
    "InstallScope",
    "InstallContext",
    "InstallRoot",
    "DirectoryRoot",
    "SingleFileRoot",
    "resolve_root",
    "resource_path",
    "parse_resource_id",
    # Materialization
    "RETRIEVAL_STRATEGIES",
    "staged_resource",
    # Targets
    "CompatNotice",
    "NormalizedTargets",
    "normalize_targets",
    # Installer
    "Installer",
    "InstallResult",
    "InstallTarget",
    "Mechanism",
    "install_resource",
    "check_exists",
    "link_or_copy",
    # Scanner / manager
    "InstalledResource",
    "scan_installed",
    "scan_tool",
    "UninstallResult",
    "ResourceDetail",
    "ToolPath",
    "uninstall",
    "detail",
    "list_resources",
]
