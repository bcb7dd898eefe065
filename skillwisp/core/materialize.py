"""Fetching a resource's files into a throwaway staging directory.

The distribution repository is cloned with git, trying progressively less
optimized strategies until one works. Only the resource's subtree is needed,
so sparse strategies narrow the checkout to ``<kind dir>/<resource path>``.
"""

import logging
import os
import shutil
import subprocess
import tempfile
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Generator

from skillwisp.constants import STAGING_PREFIX, STAGING_STALE_AFTER
from skillwisp.core.resource import ResourceKind, get_kind_spec, validate_resource_path
from skillwisp.exceptions import (
    GitCommandError,
    InvalidResourceError,
    MaterializationError,
    MissingDependencyError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetrievalStrategy:
    """One way of cloning the distribution repository."""

    name: str
    clone_args: tuple[str, ...]
    sparse: bool


# Ordered from most to least optimized; the first success wins
RETRIEVAL_STRATEGIES: tuple[RetrievalStrategy, ...] = (
    RetrievalStrategy(
        name="shallow-partial-sparse",
        clone_args=("--depth", "1", "--filter=blob:none", "--sparse"),
        sparse=True,
    ),
    RetrievalStrategy(
        name="shallow-sparse",
        clone_args=("--depth", "1", "--sparse"),
        sparse=True,
    ),
    RetrievalStrategy(
        name="shallow",
        clone_args=("--depth", "1"),
        sparse=False,
    ),
)


def run_git(args: list[str], cwd: Path | None = None) -> str:
    """Run a git command and return its stdout.

    Terminal prompts are disabled so a private or missing repository fails
    instead of waiting for credentials.

    Args:
        args: Arguments after ``git``
        cwd: Working directory for the command

    Returns:
        Captured stdout

    Raises:
        MissingDependencyError: If git is not on PATH
        GitCommandError: If git exits with a non-zero status
    """
    env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            env=env,
        )
    except FileNotFoundError:
        raise MissingDependencyError("git is required but was not found in PATH")

    if result.returncode != 0:
        details = (result.stderr or "").strip() or (result.stdout or "").strip()
        command = f"git {' '.join(args)}"
        raise GitCommandError(f"{command}: {details}" if details else f"{command} failed")
    return result.stdout


def ensure_git_available() -> None:
    """Fail fast when git cannot be executed at all."""
    try:
        run_git(["--version"])
    except GitCommandError as e:
        raise MissingDependencyError(f"git is installed but not usable: {e}")


def distribution_remote(distribution_url: str) -> str:
    """Turn a distribution base URL into a clonable remote.

    Hosted repositories get a ``.git`` suffix; local paths and file:// URLs
    are used as given.
    """
    url = distribution_url.rstrip("/")
    if url.startswith(("http://", "https://")) and not url.endswith(".git"):
        return f"{url}.git"
    return url


def new_staging_dir(resource_id: str, temp_root: Path | None = None) -> Path:
    """Return a unique, not yet created staging path."""
    root = temp_root if temp_root is not None else Path(tempfile.gettempdir())
    return root / f"{STAGING_PREFIX}{resource_id}-{uuid.uuid4().hex}"


def remove_staging(staging_dir: Path) -> bool:
    """Delete a staging directory if it exists.

    Returns:
        True if something was removed
    """
    if staging_dir.exists() or staging_dir.is_symlink():
        shutil.rmtree(staging_dir, ignore_errors=True)
        if staging_dir.exists():
            logger.debug(f"Staging directory {staging_dir} could not be removed")
        return True
    return False


def clear_stale_staging(resource_id: str, temp_root: Path | None = None) -> list[Path]:
    """Remove staging directories for ``resource_id`` left by interrupted runs.

    Only directories named like ``new_staging_dir`` output and older than
    ``STAGING_STALE_AFTER`` are touched, so a concurrent install of the same
    resource keeps its tree.

    Returns:
        Directories that were removed
    """
    root = temp_root if temp_root is not None else Path(tempfile.gettempdir())
    prefix = f"{STAGING_PREFIX}{resource_id}-"
    cutoff = time.time() - STAGING_STALE_AFTER
    removed: list[Path] = []
    try:
        candidates = list(root.glob(f"{prefix}*"))
    except OSError:
        return removed

    for candidate in candidates:
        suffix = candidate.name[len(prefix):]
        if len(suffix) != 32 or any(c not in "0123456789abcdef" for c in suffix):
            continue
        try:
            if not candidate.is_dir() or candidate.stat().st_mtime > cutoff:
                continue
        except OSError:
            continue
        logger.debug(f"Removing stale staging directory {candidate}")
        remove_staging(candidate)
        removed.append(candidate)
    return removed


def _clone(strategy: RetrievalStrategy, remote: str, staging_dir: Path, sparse_path: str) -> None:
    run_git(["clone", *strategy.clone_args, remote, str(staging_dir)])
    if strategy.sparse:
        # A sparse clone starts with only top-level files checked out
        run_git(["sparse-checkout", "set", sparse_path], cwd=staging_dir)


def materialize(
    distribution_url: str,
    resource_path: str,
    kind: "ResourceKind | str",
    staging_dir: Path,
) -> Path:
    """Fetch one resource into ``staging_dir``.

    Args:
        distribution_url: Base URL (or local path) of the distribution repo
        resource_path: Resource path below the kind directory
        kind: Resource kind, selecting the kind directory and entry file
        staging_dir: Directory to clone into; removed first if stale

    Returns:
        Path to the staged resource subtree inside ``staging_dir``

    Raises:
        MissingDependencyError: If git is unavailable
        MaterializationError: If every retrieval strategy failed
        InvalidResourceError: If the entry file is missing after checkout
    """
    kind_spec = get_kind_spec(kind)
    validate_resource_path(resource_path)
    sparse_path = f"{kind_spec.dir_name}/{resource_path}"

    remove_staging(staging_dir)
    ensure_git_available()

    remote = distribution_remote(distribution_url)
    errors: list[str] = []
    for strategy in RETRIEVAL_STRATEGIES:
        try:
            logger.debug(f"Cloning {remote} with strategy {strategy.name}")
            _clone(strategy, remote, staging_dir, sparse_path)
            break
        except GitCommandError as e:
            logger.debug(f"Strategy {strategy.name} failed: {e}")
            errors.append(f"{strategy.name}: {e}")
            remove_staging(staging_dir)
    else:
        raise MaterializationError(
            f"Failed to fetch '{resource_path}' from {distribution_url}\n" + "\n".join(errors)
        )

    source_dir = staging_dir / kind_spec.dir_name / resource_path
    if not (source_dir / kind_spec.entry_file).is_file():
        remove_staging(staging_dir)
        raise InvalidResourceError(
            f"Invalid {kind_spec.kind.value}: missing {kind_spec.entry_file} in {resource_path}"
        )

    logger.debug(f"Staged {resource_path} at {source_dir}")
    return source_dir


@contextmanager
def staged_resource(
    distribution_url: str,
    resource_path: str,
    kind: "ResourceKind | str",
    *,
    resource_id: str,
    temp_root: Path | None = None,
) -> Generator[Path, None, None]:
    """
    Context manager that materializes a resource once and yields its subtree.

    The staging directory is removed exactly once on exit, whether the fetch
    succeeded, validation failed, or the body raised.

    Yields:
        Path to the staged resource subtree
    """
    clear_stale_staging(resource_id, temp_root)
    staging_dir = new_staging_dir(resource_id, temp_root)
    try:
        yield materialize(distribution_url, resource_path, kind, staging_dir)
    finally:
        remove_staging(staging_dir)
