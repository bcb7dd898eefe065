"""Tests for skillwisp.core.render module."""

import pytest

from skillwisp.core.render import (
    frontmatter_field,
    render_single_file,
    split_frontmatter,
    strip_frontmatter,
    yaml_scalar,
)
from skillwisp.core.resource import Resource, ResourceKind

ENTRY = """---
name: pdf
description: "PDF tool"
---

# PDF

Body text.
"""


@pytest.fixture
def resource():
    return Resource(id="pdf", kind=ResourceKind.SKILL, path="@anthropic/pdf", source="anthropic")


class TestFrontmatter:
    def test_split(self):
        frontmatter, body = split_frontmatter(ENTRY)
        assert frontmatter == 'name: pdf\ndescription: "PDF tool"'
        assert body.startswith("\n# PDF")

    def test_no_frontmatter(self):
        assert split_frontmatter("# Title\n") == (None, "# Title\n")

    def test_strip_removes_leading_blank_lines(self):
        assert strip_frontmatter(ENTRY) == "# PDF\n\nBody text.\n"

    def test_unterminated_block_is_body(self):
        content = "---\nname: pdf\n# no closing fence\n"
        assert strip_frontmatter(content) == content

    def test_field_unquoted(self):
        assert frontmatter_field(ENTRY, "description") == "PDF tool"
        assert frontmatter_field(ENTRY, "name") == "pdf"

    def test_missing_field(self):
        assert frontmatter_field(ENTRY, "license") is None
        assert frontmatter_field("# Title\n", "description") is None


class TestYamlScalar:
    @pytest.mark.parametrize("value", ["PDF tool", "Extract text from files"])
    def test_plain(self, value):
        assert yaml_scalar(value) == value

    @pytest.mark.parametrize("value", ["Note: careful", "- list-like", "#hash", "@at"])
    def test_quoted(self, value):
        assert yaml_scalar(value) == f'"{value}"'

    def test_collapses_whitespace(self):
        assert yaml_scalar("multi\nline   text") == "multi line text"


class TestRenderSingleFile:
    def test_cursor(self, resource):
        content = render_single_file("cursor", resource, ENTRY)

        assert content == (
            "---\n"
            "description: PDF tool\n"
            "globs:\n"
            "alwaysApply: false\n"
            "---\n"
            "\n"
            "# pdf\n"
            "\n"
            "> Installed by skillwisp from `anthropic/@anthropic/pdf`\n"
            "\n"
            "# PDF\n"
            "\n"
            "Body text.\n"
        )

    @pytest.mark.parametrize(
        "tool_id,first_line",
        [
            ("windsurf", "trigger: model_decision"),
            ("kiro", "inclusion: manual"),
            ("augment", "type: agent_requested"),
        ],
    )
    def test_tool_frontmatter(self, resource, tool_id, first_line):
        content = render_single_file(tool_id, resource, ENTRY)

        assert content.startswith(f"---\n{first_line}\n")
        assert "description: PDF tool\n" in content
        assert "name: pdf" not in content

    def test_unknown_tool_gets_body(self, resource):
        assert render_single_file("claude", resource, ENTRY) == "# PDF\n\nBody text.\n"

    def test_description_fallback_to_display_name(self):
        resource = Resource(id="pdf", kind=ResourceKind.SKILL, path="pdf", name="PDF Tools")

        content = render_single_file("kiro", resource, "# Just a body\n")

        assert "description: PDF Tools\n" in content
        assert "> Installed by skillwisp from `pdf`" in content

    def test_description_is_quoted_when_needed(self):
        resource = Resource(
            id="pdf", kind=ResourceKind.SKILL, path="pdf", description="Use when: reading PDFs"
        )

        content = render_single_file("cursor", resource, ENTRY)

        assert 'description: "Use when: reading PDFs"\n' in content
