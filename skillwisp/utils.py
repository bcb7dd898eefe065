"""Filesystem helpers shared by the installer, scanner and manager."""

import os
import shutil
from pathlib import Path

# Version-control metadata never copied into install targets
VCS_NAMES = (".git",)


def lexists(path: Path) -> bool:
    """Return True if anything is at ``path``, including a dangling symlink."""
    return os.path.lexists(path)


def is_symlink(path: Path) -> bool:
    """Symlink check that never raises."""
    try:
        return path.is_symlink()
    except OSError:
        return False


def remove_path(path: Path) -> bool:
    """Remove whatever is at ``path`` without following symlinks.

    Symlinks and files are unlinked; directories are removed recursively.

    Args:
        path: Path to remove

    Returns:
        True if something was removed, False if nothing was there
    """
    if not lexists(path):
        return False
    if path.is_symlink() or not path.is_dir():
        path.unlink()
    else:
        shutil.rmtree(path)
    return True


def strip_vcs(root: Path) -> list[Path]:
    """Delete nested version-control metadata below ``root``.

    Returns:
        Paths that were removed
    """
    removed: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        for name in VCS_NAMES:
            if name in dirnames:
                dirnames.remove(name)
                target = Path(dirpath) / name
                remove_path(target)
                removed.append(target)
            if name in filenames:
                # Worktrees and submodules use a .git file
                target = Path(dirpath) / name
                remove_path(target)
                removed.append(target)
    return removed


def relative_link_target(source: Path, link_path: Path) -> str:
    """Relative path from the directory holding ``link_path`` to ``source``."""
    return os.path.relpath(source, link_path.parent)


def same_location(a: Path, b: Path) -> bool:
    """True when ``a`` and ``b`` name the same entry once parent links are followed.

    The final component is not resolved, so a projection symlink never
    compares equal to the directory it points at.
    """
    return a.parent.resolve() / a.name == b.parent.resolve() / b.name
