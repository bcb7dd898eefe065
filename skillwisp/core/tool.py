"""Tool configuration table.

Each supported tool (Claude Code, Cursor, Codex, ...) is described by a
frozen ToolConfig. The table is closed: the small set of behavioural
variants is expressed through ``RootStrategy`` and dispatched on explicitly
by the path resolver.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from skillwisp.constants import PRIMARY_DIR_NAME
from skillwisp.core.resource import ResourceKind

ALL_KINDS: frozenset[ResourceKind] = frozenset(ResourceKind)
SKILL_ONLY: frozenset[ResourceKind] = frozenset({ResourceKind.SKILL})


class RootStrategy(Enum):
    """How a tool lays out its install roots."""

    DIRECTORY = "directory"  # {scope}/{base}/{kind dir}/<id>/
    ENV_OVERRIDE = "env_override"  # directory, global root overridable by env var
    WORKSPACE_FILE = "workspace_file"  # one file per skill, project scope only
    FILE = "file"  # one file per skill, both scopes


@dataclass(frozen=True)
class ToolConfig:
    """Directory conventions for a single target tool.

    Attributes:
        id: Short identifier (e.g., "claude")
        name: Human-readable name (e.g., "Claude Code")
        base_dir: Project-relative base directory (e.g., ".claude")
        global_base_dir: Home-relative base directory; empty when the tool has
            no global install location
        detect_paths: Paths whose presence indicates the tool is in use
        kinds: Resource kinds the tool can receive
        strategy: Root layout variant
        file_dir: Subdirectory of base_dir holding single-file installs
        file_ext: Extension of single-file installs (e.g., ".mdc")
        env_var: Environment variable overriding the global root
        redirect_local_skills: Tool reads project skills from the Primary
            Source, so local skill installs get a notice instead of a projection
        compat_note: Explanation shown with the redirect notice
    """

    id: str
    name: str
    base_dir: str
    global_base_dir: str
    detect_paths: tuple[str, ...]
    kinds: frozenset[ResourceKind] = ALL_KINDS
    strategy: RootStrategy = RootStrategy.DIRECTORY
    file_dir: str = ""
    file_ext: str = ""
    env_var: str = ""
    redirect_local_skills: bool = False
    compat_note: str = ""

    def supports_kind(self, kind: ResourceKind) -> bool:
        return kind in self.kinds


PRIMARY_SOURCE = ToolConfig(
    id="agents",
    name=PRIMARY_DIR_NAME,
    base_dir=PRIMARY_DIR_NAME,
    global_base_dir=PRIMARY_DIR_NAME,
    detect_paths=(PRIMARY_DIR_NAME,),
)

TARGET_TOOLS: tuple[ToolConfig, ...] = (
    ToolConfig(
        id="claude",
        name="Claude Code",
        base_dir=".claude",
        global_base_dir=".claude",
        detect_paths=(".claude", ".claude/settings.json"),
    ),
    ToolConfig(
        id="cursor",
        name="Cursor",
        base_dir=".cursor",
        global_base_dir="",
        detect_paths=(".cursor", ".cursorrules", ".cursor/rules"),
        strategy=RootStrategy.WORKSPACE_FILE,
        file_dir="rules",
        file_ext=".mdc",
    ),
    ToolConfig(
        id="gemini",
        name="Gemini",
        base_dir=".gemini",
        global_base_dir=".gemini",
        detect_paths=(".gemini", ".gemini/skills"),
    ),
    ToolConfig(
        id="codex",
        name="Codex",
        base_dir=".codex",
        global_base_dir=".codex",
        detect_paths=(".codex", ".codex/skills"),
        strategy=RootStrategy.ENV_OVERRIDE,
        env_var="CODEX_HOME",
        redirect_local_skills=True,
        compat_note=f"Codex reads project skills from {PRIMARY_DIR_NAME}/skills",
    ),
    ToolConfig(
        id="copilot",
        name="GitHub Copilot",
        base_dir=".github",
        global_base_dir=".copilot",
        detect_paths=(".github/copilot-instructions.md", ".github/skills", ".copilot"),
        kinds=SKILL_ONLY,
    ),
    ToolConfig(
        id="trae",
        name="Trae",
        base_dir=".trae",
        global_base_dir=".trae",
        detect_paths=(".trae", ".trae/skills"),
    ),
    ToolConfig(
        id="windsurf",
        name="Windsurf",
        base_dir=".windsurf",
        global_base_dir=".codeium/windsurf",
        detect_paths=(".windsurf", ".codeium/windsurf"),
        strategy=RootStrategy.WORKSPACE_FILE,
        file_dir="rules",
        file_ext=".md",
    ),
    ToolConfig(
        id="kiro",
        name="Kiro",
        base_dir=".kiro",
        global_base_dir="",
        detect_paths=(".kiro", ".kiro/steering"),
        strategy=RootStrategy.WORKSPACE_FILE,
        file_dir="steering",
        file_ext=".md",
    ),
    ToolConfig(
        id="augment",
        name="Augment",
        base_dir=".augment",
        global_base_dir=".augment",
        detect_paths=(".augment", ".augment-guidelines"),
        strategy=RootStrategy.FILE,
        file_dir="rules",
        file_ext=".md",
    ),
    ToolConfig(
        # Project scope shares the Primary Source directory
        id="antigravity",
        name="Antigravity",
        base_dir="",
        global_base_dir=".gemini/antigravity",
        detect_paths=(".gemini/antigravity",),
        kinds=SKILL_ONLY,
        redirect_local_skills=True,
        compat_note=f"Antigravity reads project skills from {PRIMARY_DIR_NAME}/skills",
    ),
)

ALL_TOOLS: tuple[ToolConfig, ...] = (PRIMARY_SOURCE, *TARGET_TOOLS)

_TOOLS_BY_ID: dict[str, ToolConfig] = {tool.id: tool for tool in ALL_TOOLS}


def get_tool(tool_id: str) -> ToolConfig | None:
    """Look up a tool by id, returning None when unknown."""
    return _TOOLS_BY_ID.get(tool_id)


def get_tools(tool_ids: list[str]) -> list[ToolConfig]:
    """Look up several tools, silently dropping unknown ids."""
    return [tool for tool in (get_tool(tid) for tid in tool_ids) if tool is not None]


def tool_ids() -> list[str]:
    return [tool.id for tool in ALL_TOOLS]


def detect_tools(
    base_dir: Path | None = None,
    home_dir: Path | None = None,
) -> list[ToolConfig]:
    """Detect which target tools are in use.

    A tool counts as present when any of its detection paths exists in the
    project directory or the user's home directory. The Primary Source is
    never reported; it is always installed to anyway.

    Args:
        base_dir: Project directory (defaults to the current directory)
        home_dir: Home directory (defaults to the user's home)

    Returns:
        Detected tools in table order
    """
    project = base_dir if base_dir is not None else Path.cwd()
    home = home_dir if home_dir is not None else Path.home()

    detected: list[ToolConfig] = []
    for tool in TARGET_TOOLS:
        for marker in tool.detect_paths:
            if (project / marker).exists() or (home / marker).exists():
                detected.append(tool)
                break
    return detected
