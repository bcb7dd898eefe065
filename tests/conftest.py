"""Test configuration and fixtures."""

import shutil
import subprocess
from contextlib import contextmanager
from pathlib import Path

import pytest

from skillwisp.core.paths import InstallContext
from skillwisp.core.resource import Resource, ResourceKind

PDF_SKILL_MD = """---
name: pdf
description: PDF tool
---

# PDF

Extract text and tables from PDF files.
"""


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "git: tests that shell out to a real git binary")


@pytest.fixture
def project(tmp_path: Path, monkeypatch) -> InstallContext:
    """An isolated project directory and home directory.

    The process cwd and HOME point at them too, so code that falls back to
    the defaults stays inside tmp_path.
    """
    base = tmp_path / "project"
    home = tmp_path / "home"
    base.mkdir()
    home.mkdir()
    monkeypatch.chdir(base)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("CODEX_HOME", raising=False)
    return InstallContext(base_dir=base, home_dir=home, environ={})


@pytest.fixture
def pdf_resource() -> Resource:
    return Resource(
        id="pdf",
        kind=ResourceKind.SKILL,
        path="@anthropic/pdf",
        source="anthropic",
        name="PDF",
    )


@pytest.fixture
def staged_source(tmp_path: Path) -> Path:
    """A resource tree as it looks after checkout."""
    source = tmp_path / "dist" / "skills" / "@anthropic" / "pdf"
    source.mkdir(parents=True)
    (source / "SKILL.md").write_text(PDF_SKILL_MD)
    (source / "reference.md").write_text("# Reference\n")
    (source / ".git").mkdir()
    (source / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    return source


class FakeMaterializer:
    """Stands in for the git fetch: copies a prepared tree into staging."""

    def __init__(self, source: Path, staging_root: Path):
        self.source = source
        self.staging_root = staging_root
        self.calls: list[tuple[str, str, ResourceKind, str]] = []
        self.cleaned: list[Path] = []

    @contextmanager
    def __call__(self, distribution_url, resource_path, kind, *, resource_id):
        self.calls.append((distribution_url, resource_path, kind, resource_id))
        staging = self.staging_root / f"skillwisp-{resource_id}-{len(self.calls)}"
        shutil.copytree(self.source, staging)
        try:
            yield staging
        finally:
            shutil.rmtree(staging)
            self.cleaned.append(staging)


@pytest.fixture
def fake_materializer(staged_source: Path, tmp_path: Path) -> FakeMaterializer:
    staging_root = tmp_path / "staging"
    staging_root.mkdir()
    return FakeMaterializer(staged_source, staging_root)


def _git(*args: str, cwd: Path) -> None:
    subprocess.run(
        ["git", "-c", "user.name=test", "-c", "user.email=test@example.com", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def distribution_repo(tmp_path: Path) -> str:
    """A local git repository laid out like the distribution, as a file:// URL."""
    if shutil.which("git") is None:
        pytest.skip("git not available")

    repo = tmp_path / "registry"
    skill = repo / "skills" / "@anthropic" / "pdf"
    skill.mkdir(parents=True)
    (skill / "SKILL.md").write_text(PDF_SKILL_MD)
    other = repo / "skills" / "@other" / "broken"
    other.mkdir(parents=True)
    (other / "README.md").write_text("no entry file here\n")
    (repo / "rules" / "style").mkdir(parents=True)
    (repo / "rules" / "style" / "RULE.md").write_text("# Style\n")

    _git("init", "-q", cwd=repo)
    _git("config", "uploadpack.allowFilter", "true", cwd=repo)
    _git("config", "uploadpack.allowAnySHA1InWant", "true", cwd=repo)
    _git("add", ".", cwd=repo)
    _git("commit", "-q", "-m", "registry", cwd=repo)
    return repo.as_uri()
