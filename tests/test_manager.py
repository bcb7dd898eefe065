"""Tests for skillwisp.core.manager module."""

import pytest

from skillwisp.core.installer import Installer
from skillwisp.core.manager import detail, list_resources, uninstall
from skillwisp.core.paths import InstallScope
from skillwisp.utils import lexists


@pytest.fixture
def installed(project, fake_materializer, pdf_resource):
    """pdf installed locally to Claude (link) and Cursor (rendered file)."""
    result = Installer(context=project, materializer=fake_materializer).install(
        pdf_resource, target_ids=["claude", "cursor"]
    )
    assert result.success, result.error
    return result


class TestUninstall:
    def test_removes_every_location(self, project, installed):
        result = uninstall("pdf", "skill", "local", project)

        base = project.base_dir
        assert result.success
        assert result.removed_paths == [
            base / ".claude" / "skills" / "pdf",
            base / ".cursor" / "rules" / "skillwisp-pdf.mdc",
            base / ".agents" / "skills" / "pdf",
        ]
        for path in result.removed_paths:
            assert not path.exists() and not path.is_symlink()

    def test_copied_projection_removed(self, project, fake_materializer, pdf_resource):
        Installer(context=project, materializer=fake_materializer).install(
            pdf_resource, target_ids=["gemini"], use_symlinks=False
        )

        result = uninstall("pdf", "skill", "local", project)

        assert project.base_dir / ".gemini" / "skills" / "pdf" in result.removed_paths
        assert not (project.base_dir / ".gemini" / "skills" / "pdf").exists()

    def test_dangling_link_removed(self, project):
        link = project.base_dir / ".claude" / "skills" / "pdf"
        link.parent.mkdir(parents=True)
        link.symlink_to("../../.agents/skills/pdf", target_is_directory=True)

        result = uninstall("pdf", "skill", "local", project)

        assert result.success
        assert result.removed_paths == [link]
        assert not link.is_symlink()

    def test_not_found(self, project):
        result = uninstall("pdf", "skill", "local", project)

        assert not result.success
        assert result.removed_paths == []
        assert result.error == 'Resource "pdf" (skill, local) not found in any tool directory'

    def test_inverse_of_check_exists(self, project, fake_materializer, installed):
        installer = Installer(context=project, materializer=fake_materializer)
        assert installer.check_exists("pdf", "skill", ["claude", "cursor"], "local") == [
            "Claude Code",
            "Cursor",
            ".agents",
        ]
        existing = [t.path for t in installed.targets]

        result = uninstall("pdf", "skill", "local", project)

        assert sorted(result.removed_paths) == sorted(existing)
        for path in existing:
            assert not lexists(path)
        assert installer.check_exists("pdf", "skill", ["claude", "cursor"], "local") == []
        assert detail("pdf", "skill", "local", project) is None

    def test_tool_root_linked_to_primary_root(self, project, fake_materializer, pdf_resource):
        shared = project.base_dir / ".agents" / "skills"
        shared.mkdir(parents=True)
        (project.base_dir / ".claude").mkdir()
        (project.base_dir / ".claude" / "skills").symlink_to("../.agents/skills", target_is_directory=True)
        Installer(context=project, materializer=fake_materializer).install(pdf_resource, target_ids=["claude"])

        result = uninstall("pdf", "skill", "local", project)

        assert result.success
        assert result.removed_paths == [shared / "pdf"]
        assert not lexists(shared / "pdf")
        assert (project.base_dir / ".claude" / "skills").is_symlink()

    def test_other_scope_untouched(self, project, installed):
        result = uninstall("pdf", "skill", "global", project)

        assert not result.success
        assert (project.base_dir / ".agents" / "skills" / "pdf").is_dir()


class TestDetail:
    def test_installed(self, project, installed):
        info = detail("pdf", "skill", "local", project)

        assert info.primary_path == project.base_dir / ".agents" / "skills" / "pdf"
        assert info.scope is InstallScope.LOCAL
        assert [(tp.tool_id, tp.is_symlink) for tp in info.tool_paths] == [
            ("claude", True),
            ("cursor", False),
        ]
        assert all(tp.exists for tp in info.tool_paths)

    def test_projection_without_primary(self, project):
        rule = project.base_dir / ".kiro" / "steering" / "skillwisp-pdf.md"
        rule.parent.mkdir(parents=True)
        rule.write_text("x")

        info = detail("pdf", "skill", "local", project)

        assert info.primary_path is None
        assert [tp.tool_name for tp in info.tool_paths] == ["Kiro"]

    def test_not_installed(self, project):
        assert detail("pdf", "skill", "local", project) is None


class TestListResources:
    def test_collapses_to_one_entry(self, project, installed):
        resources = list_resources(context=project)

        assert [(r.id, r.tool_id) for r in resources] == [("pdf", "agents")]

    def test_tool_filter(self, project, installed):
        resources = list_resources(tool_id="claude", context=project)

        assert [(r.id, r.tool_id, r.is_symlink) for r in resources] == [("pdf", "claude", True)]

    def test_kind_filter(self, project, installed):
        assert list_resources(kind="rule", context=project) == []
        assert len(list_resources(kind="skill", context=project)) == 1

    def test_same_id_in_both_scopes(self, project, fake_materializer, pdf_resource, installed):
        Installer(context=project, materializer=fake_materializer).install(
            pdf_resource, target_ids=["claude"], scope="global"
        )

        resources = list_resources(context=project)

        assert sorted(r.scope.value for r in resources) == ["global", "local"]
        assert [r.id for r in list_resources(scope="global", context=project)] == ["pdf"]
