"""Pydantic models and persistence for the Praxis manifest.

The manifest (.praxis-manifest.json in the project root) is the durable
record of which template files Praxis installed, the SHA-256 hash of each
file at install time, and which optional components are selected.

Manifests written before component selection existed have no
selectedComponents field; callers treat that as "everything selected".
"""

import hashlib
import logging
import os
import stat
import tempfile
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from praxis.models.component import Component, ComponentType

logger = logging.getLogger(__name__)

MANIFEST_FILE = ".praxis-manifest.json"
MANIFEST_VERSION = "1.0.0"


class FileEntry(BaseModel):
    """Recorded state of a single managed file.

    Attributes:
        hash: SHA-256 hex digest of the file content at last install.
    """

    hash: str


class SelectedComponents(BaseModel):
    """Optional components currently in scope.

    Attributes:
        skills: Names of selected optional skills.
        reviewers: Names of selected optional reviewers.
    """

    skills: list[str] = Field(default_factory=list)
    reviewers: list[str] = Field(default_factory=list)

    def contains(self, component: Component) -> bool:
        """Check whether a component is part of this selection.

        Args:
            component: The component to look up.

        Returns:
            True if the component's name is listed under its type.
        """
        if component.type == ComponentType.SKILL:
            return component.name in self.skills
        return component.name in self.reviewers

    def count(self) -> int:
        """Return the total number of selected components."""
        return len(self.skills) + len(self.reviewers)


class Manifest(BaseModel):
    """Manifest model for tracking installed template files.

    Attributes:
        version: Manifest schema version.
        installed_at: ISO timestamp of the first install.
        updated_at: ISO timestamp of the last state-changing run.
        selected_components: Active component selection, None for legacy manifests.
        files: Mapping of project-relative path to its recorded entry.
    """

    model_config = ConfigDict(populate_by_name=True)

    version: str = Field(default=MANIFEST_VERSION, description="Manifest schema version")
    installed_at: str = Field(..., alias="installedAt")
    updated_at: str = Field(..., alias="updatedAt")
    selected_components: SelectedComponents | None = Field(
        default=None,
        alias="selectedComponents",
        description="Selected optional components (absent on legacy manifests)",
    )
    files: dict[str, FileEntry] = Field(default_factory=dict)


def now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


def hash_content(content: str | bytes) -> str:
    """Compute the SHA-256 hex digest of content.

    Text is encoded as UTF-8 without any newline normalization, so the
    digest matches hash_file() for a file written with the same text.

    Args:
        content: Text or raw bytes to hash.

    Returns:
        Lowercase hex digest.
    """
    data = content.encode("utf-8") if isinstance(content, str) else content
    return hashlib.sha256(data).hexdigest()


def hash_file(path: Path) -> str:
    """Hash the exact bytes of a file on disk.

    Args:
        path: File to read.

    Returns:
        Lowercase hex digest of the file content.

    Raises:
        OSError: If the file does not exist or cannot be read.
    """
    return hash_content(Path(path).read_bytes())


def manifest_path(project_root: Path) -> Path:
    """Return the manifest location for a project root."""
    return Path(project_root) / MANIFEST_FILE


def load_manifest(project_root: Path) -> Manifest | None:
    """Load the manifest from a project root.

    Args:
        project_root: Directory containing .praxis-manifest.json.

    Returns:
        Manifest model, or None if the file is missing or is not a valid
        manifest document.
    """
    path = manifest_path(project_root)
    if not path.exists():
        return None

    try:
        content = path.read_text(encoding="utf-8")
        return Manifest.model_validate_json(content)
    except (OSError, ValueError, ValidationError) as e:
        logger.warning(f"Ignoring unreadable manifest at {path}: {e}")
        return None


def _manifest_mode(path: Path) -> int:
    """Return the permission bits a rewritten manifest should carry."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save_manifest(manifest: Manifest, project_root: Path) -> None:
    """Save the manifest atomically.

    The JSON is written to a temporary file in the project root and then
    renamed over the manifest, so readers never see a truncated file. The
    existing file mode is kept; a new manifest gets the umask default.

    Args:
        manifest: Manifest model to save.
        project_root: Directory to write .praxis-manifest.json into.
    """
    path = manifest_path(project_root)
    content = manifest.model_dump_json(indent=2, by_alias=True, exclude_none=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f"{MANIFEST_FILE}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content + "\n")
        os.chmod(tmp_name, _manifest_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def is_locally_modified(project_root: Path, relative_path: str, manifest: Manifest) -> bool:
    """Check whether a tracked file differs from its recorded hash.

    Args:
        project_root: The project root directory.
        relative_path: Project-relative path of the file.
        manifest: Manifest holding the recorded hash.

    Returns:
        False for untracked paths. True when the on-disk hash differs from the
        recorded one, or when the file cannot be read at all.
    """
    entry = manifest.files.get(relative_path)
    if entry is None:
        return False

    try:
        return hash_file(Path(project_root) / relative_path) != entry.hash
    except OSError:
        return True
