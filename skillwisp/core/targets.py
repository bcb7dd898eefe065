"""Target list normalization.

Turns the tools a caller asked for into the list of tools that actually get
a filesystem artifact, with the Primary Source always first.
"""

from dataclasses import dataclass, field

from skillwisp.core.paths import InstallScope, coerce_scope
from skillwisp.core.resource import ResourceKind, coerce_kind
from skillwisp.core.tool import PRIMARY_SOURCE, ToolConfig


@dataclass(frozen=True)
class CompatNotice:
    """A requested tool that reuses the Primary Source instead of a projection."""

    tool_id: str
    tool_name: str
    note: str


@dataclass
class NormalizedTargets:
    real_targets: list[ToolConfig] = field(default_factory=list)
    compat_notices: list[CompatNotice] = field(default_factory=list)


def normalize_targets(
    tools: list[ToolConfig],
    kind: "ResourceKind | str",
    scope: "InstallScope | str",
) -> NormalizedTargets:
    """Expand and deduplicate requested targets.

    Tools flagged to read project skills from the Primary Source become
    compatibility notices for local skill installs. Every other tool is kept
    once, in the caller's order, after the Primary Source.

    Args:
        tools: Requested tools
        kind: Resource kind being installed
        scope: Install scope

    Returns:
        NormalizedTargets with the Primary Source as the first real target
    """
    kind = coerce_kind(kind)
    scope = coerce_scope(scope)

    result = NormalizedTargets(real_targets=[PRIMARY_SOURCE])
    seen = {PRIMARY_SOURCE.id}

    for tool in tools:
        if (
            scope is InstallScope.LOCAL
            and kind is ResourceKind.SKILL
            and tool.redirect_local_skills
        ):
            if tool.id not in {n.tool_id for n in result.compat_notices}:
                result.compat_notices.append(
                    CompatNotice(tool_id=tool.id, tool_name=tool.name, note=tool.compat_note)
                )
            continue
        if tool.id in seen:
            continue
        seen.add(tool.id)
        result.real_targets.append(tool)

    return result
