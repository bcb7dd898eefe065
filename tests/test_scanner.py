"""Tests for skillwisp.core.scanner module."""

from skillwisp.core.installer import Installer
from skillwisp.core.paths import InstallScope
from skillwisp.core.resource import ResourceKind
from skillwisp.core.scanner import extract_display_name, scan_installed, scan_tool


def make_skill(root, name, description="A skill"):
    skill = root / name
    skill.mkdir(parents=True)
    (skill / "SKILL.md").write_text(f"---\nname: {name}\ndescription: {description}\n---\n\n# {name}\n")
    return skill


class TestExtractDisplayName:
    def test_reads_description(self, tmp_path):
        skill = make_skill(tmp_path, "pdf", "PDF tool")
        assert extract_display_name(skill / "SKILL.md") == "PDF tool"

    def test_truncates_long_descriptions(self, tmp_path):
        skill = make_skill(tmp_path, "pdf", "x" * 40)
        assert extract_display_name(skill / "SKILL.md") == "x" * 30 + "…"

    def test_strips_quotes(self, tmp_path):
        skill = make_skill(tmp_path, "pdf", '"Quoted"')
        assert extract_display_name(skill / "SKILL.md") == "Quoted"

    def test_no_frontmatter(self, tmp_path):
        entry = tmp_path / "SKILL.md"
        entry.write_text("# Just a title\n")
        assert extract_display_name(entry) is None

    def test_ignores_description_in_body(self, tmp_path):
        entry = tmp_path / "SKILL.md"
        entry.write_text("---\nname: x\n---\n\ndescription: not frontmatter\n\n---\n")
        assert extract_display_name(entry) is None

    def test_missing_file(self, tmp_path):
        assert extract_display_name(tmp_path / "nope.md") is None


class TestScanTool:
    def test_directory_root(self, project):
        skills = project.base_dir / ".claude" / "skills"
        make_skill(skills, "pdf", "PDF tool")
        make_skill(skills, "docx")

        found = scan_tool("claude", "skill", "local", project)

        assert [r.id for r in found] == ["docx", "pdf"]
        assert found[1].name == "PDF tool"
        assert found[1].tool_id == "claude"
        assert found[1].scope is InstallScope.LOCAL
        assert not found[1].is_symlink

    def test_skips_entries_without_entry_file(self, project):
        skills = project.base_dir / ".claude" / "skills"
        make_skill(skills, "pdf")
        (skills / "empty").mkdir()
        (skills / "notes.txt").write_text("x")

        assert [r.id for r in scan_tool("claude", "skill", "local", project)] == ["pdf"]

    def test_single_file_root(self, project):
        rules = project.base_dir / ".cursor" / "rules"
        rules.mkdir(parents=True)
        (rules / "skillwisp-pdf.mdc").write_text("---\ndescription: PDF tool\n---\n")
        (rules / "hand-written.mdc").write_text("mine")

        found = scan_tool("cursor", "skill", "local", project)

        assert [(r.id, r.name) for r in found] == [("pdf", "PDF tool")]

    def test_rules_and_skill_files_share_a_directory(self, project):
        rules = project.base_dir / ".cursor" / "rules"
        rules.mkdir(parents=True)
        (rules / "skillwisp-pdf.mdc").write_text("x")
        style = rules / "style"
        style.mkdir()
        (style / "RULE.md").write_text("# Style\n")

        assert [r.id for r in scan_tool("cursor", "rule", "local", project)] == ["style"]
        assert [r.id for r in scan_tool("cursor", "skill", "local", project)] == ["pdf"]

    def test_missing_root_is_empty(self, project):
        assert scan_tool("gemini", "skill", "local", project) == []

    def test_unsupported_combination_is_empty(self, project):
        assert scan_tool("kiro", "skill", "global", project) == []
        assert scan_tool("copilot", "workflow", "local", project) == []

    def test_unknown_tool_is_empty(self, project):
        assert scan_tool("nope", "skill", "local", project) == []


class TestScanInstalled:
    def test_finds_primary_and_projections(self, project, fake_materializer, pdf_resource):
        Installer(context=project, materializer=fake_materializer).install(
            pdf_resource, target_ids=["claude", "cursor"]
        )

        found = scan_installed(context=project)

        assert [(r.tool_id, r.id, r.is_symlink) for r in found] == [
            ("agents", "pdf", False),
            ("claude", "pdf", True),
            ("cursor", "pdf", False),
        ]
        assert all(r.kind is ResourceKind.SKILL for r in found)
        assert found[0].name == "PDF tool"

    def test_scope_filter(self, project):
        make_skill(project.base_dir / ".agents" / "skills", "local-one")
        make_skill(project.home_dir / ".agents" / "skills", "global-one")

        assert [r.id for r in scan_installed("global", project)] == ["global-one"]
        assert [r.id for r in scan_installed("local", project)] == ["local-one"]
        assert len(scan_installed(context=project)) == 2

    def test_empty(self, project):
        assert scan_installed(context=project) == []
