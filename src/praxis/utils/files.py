"""File operation utilities for Praxis CLI."""

import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_dir(path: Path | str) -> Path:
    """Create directory and all parent directories if they don't exist.

    Args:
        path: Path to the directory to create.

    Returns:
        The Path object for the created directory.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def read_text(path: Path | str) -> str:
    """Read a file as UTF-8 text, replacing undecodable bytes.

    Args:
        path: Path to the file to read.

    Returns:
        The file contents as a string.

    Raises:
        FileNotFoundError: If the file does not exist.
        PermissionError: If the file cannot be read due to permissions.
    """
    return Path(path).read_bytes().decode("utf-8", errors="replace")


def write_file(path: Path | str, content: str) -> None:
    """Write content to a file in one call, creating parent directories.

    Content is encoded as UTF-8 and written as bytes so the file on disk
    hashes exactly like the content string.

    Args:
        path: Path to the file to write.
        content: Content to write to the file.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(content.encode("utf-8"))


def resolve_within_root(project_root: Path, relative_path: str) -> Path | None:
    """Resolve a relative path and confine it to the project root.

    Args:
        project_root: The project root directory.
        relative_path: Bundle or manifest path relative to the root.

    Returns:
        The resolved absolute path, or None if it points at the root itself
        or anywhere outside it.
    """
    root = Path(project_root).resolve()
    candidate = (root / relative_path).resolve()

    if candidate == root or not candidate.is_relative_to(root):
        logger.debug(f"Ignoring path outside project root: {relative_path}")
        return None
    return candidate


def remove_empty_dirs(project_root: Path, directories: Iterable[Path]) -> list[Path]:
    """Remove empty directories and their empty ancestors below the root.

    Directories are visited deepest first so a parent is only considered
    after its children. Non-empty or already-missing directories are left
    alone; the project root itself is never removed.

    Args:
        project_root: The project root directory.
        directories: Starting directories (typically parents of deleted files).

    Returns:
        The directories that were removed.
    """
    root = Path(project_root).resolve()
    candidates: set[Path] = set()

    for directory in directories:
        current = Path(directory).resolve()
        while current != root and current.is_relative_to(root):
            candidates.add(current)
            current = current.parent

    removed: list[Path] = []
    for directory in sorted(candidates, key=lambda p: len(p.parts), reverse=True):
        try:
            directory.rmdir()
        except OSError:
            # Not empty or already gone
            continue
        logger.debug(f"Removed empty directory: {directory}")
        removed.append(directory)

    return removed
