"""Rendering entry files for single-file targets.

Single-file tools (Cursor rules, Windsurf rules, Kiro steering, Augment
rules) get one markdown file per resource. The source entry file's own
frontmatter is dropped and replaced by the target tool's frontmatter,
followed by a heading and a source attribution line.
"""

import json
import re
from typing import Callable

from skillwisp.core.resource import Resource

FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

_YAML_SPECIAL = re.compile(r"(^[\s\-?:,\[\]{}#&*!|>'\"%@`])|(: )|( #)|(\s$)")


def split_frontmatter(content: str) -> tuple[str | None, str]:
    """Split leading ``---`` frontmatter from the body.

    Returns:
        (frontmatter text or None, body)
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return None, content
    return match.group(1), content[match.end():]


def strip_frontmatter(content: str) -> str:
    """Drop a leading frontmatter block and the blank lines after it."""
    _, body = split_frontmatter(content)
    return body.lstrip("\r\n")


def frontmatter_field(content: str, name: str) -> str | None:
    """Read a single top-level scalar field from the frontmatter, if present."""
    frontmatter, _ = split_frontmatter(content)
    if frontmatter is None:
        return None
    match = re.search(rf"^{re.escape(name)}:[ \t]*(.+?)[ \t]*$", frontmatter, re.MULTILINE)
    if not match:
        return None
    value = match.group(1)
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return value or None


def yaml_scalar(value: str) -> str:
    """Quote a value when it would not survive as a plain YAML scalar."""
    value = " ".join(value.split())
    if not value or _YAML_SPECIAL.search(value):
        return json.dumps(value, ensure_ascii=False)
    return value


def _attribution(resource: Resource) -> str:
    origin = f"{resource.source}/{resource.path}" if resource.source else resource.path
    return f"> Installed by skillwisp from `{origin}`"


def _document(frontmatter: list[str], resource: Resource, body: str) -> str:
    lines = ["---", *frontmatter, "---", "", f"# {resource.display_name}", "", _attribution(resource), ""]
    return "\n".join(lines) + "\n" + body.rstrip() + "\n"


def _render_cursor(resource: Resource, body: str, description: str) -> str:
    return _document(
        [f"description: {yaml_scalar(description)}", "globs:", "alwaysApply: false"],
        resource,
        body,
    )


def _render_windsurf(resource: Resource, body: str, description: str) -> str:
    return _document(
        ["trigger: model_decision", f"description: {yaml_scalar(description)}"],
        resource,
        body,
    )


def _render_kiro(resource: Resource, body: str, description: str) -> str:
    return _document(
        ["inclusion: manual", f"description: {yaml_scalar(description)}"],
        resource,
        body,
    )


def _render_augment(resource: Resource, body: str, description: str) -> str:
    return _document(
        ["type: agent_requested", f"description: {yaml_scalar(description)}"],
        resource,
        body,
    )


Renderer = Callable[[Resource, str, str], str]

RENDERERS: dict[str, Renderer] = {
    "cursor": _render_cursor,
    "windsurf": _render_windsurf,
    "kiro": _render_kiro,
    "augment": _render_augment,
}


def render_single_file(tool_id: str, resource: Resource, entry_content: str) -> str:
    """Render a resource entry file for a single-file target tool.

    Args:
        tool_id: Target tool id, selecting the template
        resource: Resource being installed
        entry_content: Raw content of the Primary Source entry file

    Returns:
        File content for the target. Unknown tool ids get the
        frontmatter-stripped body verbatim.
    """
    body = strip_frontmatter(entry_content)
    renderer = RENDERERS.get(tool_id)
    if renderer is None:
        return body

    description = (
        resource.description
        or frontmatter_field(entry_content, "description")
        or resource.display_name
    )
    return renderer(resource, body, description)
