"""Single-file installation with conflict resolution.

This module installs one template file into the project. When a different
version already exists on disk the user decides whether to overwrite it,
keep it, or look at a diff first. The decision dialog is shared with the
update flow through resolve_conflict().
"""

import difflib
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from praxis.models.manifest import hash_content
from praxis.utils import prompts
from praxis.utils.console import console
from praxis.utils.files import write_file
from praxis.utils.prompts import PromptOption

logger = logging.getLogger(__name__)


class InstallStatus(Enum):
    """Outcome of installing a single file.

    Attributes:
        WRITTEN: The incoming content was written to disk.
        MATCHED: The file already had identical content; nothing was written.
        SKIPPED: The user kept their differing version.
        CANCELLED: The user aborted the prompt; nothing was written.
    """

    WRITTEN = "written"
    MATCHED = "matched"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


class InstallResult(BaseModel):
    """Result of install_file().

    Attributes:
        status: The install outcome.
        hash: Hash of the content now on disk (None when cancelled).
    """

    status: InstallStatus
    hash: str | None = None


class ConflictAction(Enum):
    """Choices offered when a file differs from the incoming version."""

    OVERWRITE = "overwrite"
    SKIP = "skip"
    DIFF = "diff"


class ConflictState(Enum):
    """States of the conflict dialog."""

    INITIAL = "initial"
    DIFF_SHOWN = "diff_shown"
    RESOLVED = "resolved"


class ConflictLabels(BaseModel):
    """Wording used by the conflict dialog.

    Attributes:
        question: First question, asked with overwrite/skip/diff options.
        overwrite: Label for the overwrite option.
        skip: Label for the keep-local option.
        incoming: Diff header for the incoming version.
    """

    question: str
    overwrite: str = "Overwrite with Praxis version"
    skip: str = "Skip this file"
    incoming: str = "praxis"


def render_diff(
    relative_path: str,
    existing: str,
    incoming: str,
    incoming_label: str = "praxis",
) -> str:
    """Render a unified diff from the local version to the incoming one.

    Args:
        relative_path: Path shown in the diff headers.
        existing: Content currently on disk.
        incoming: Content about to be installed.
        incoming_label: Header label for the incoming side.

    Returns:
        The unified diff text (empty when the contents are equal).
    """
    lines = difflib.unified_diff(
        existing.splitlines(keepends=True),
        incoming.splitlines(keepends=True),
        fromfile=f"{relative_path}\tyour version",
        tofile=f"{relative_path}\t{incoming_label}",
    )
    return "".join(line if line.endswith("\n") else line + "\n" for line in lines)


def resolve_conflict(
    relative_path: str,
    existing: str,
    incoming: str,
    labels: ConflictLabels,
) -> ConflictAction | prompts.Cancel:
    """Run the overwrite/skip/diff dialog for one file.

    INITIAL asks with all three options. Choosing diff prints the diff and
    moves to DIFF_SHOWN, which asks again with overwrite/skip only.

    Args:
        relative_path: Path of the conflicting file.
        existing: Content currently on disk.
        incoming: Incoming content.
        labels: Dialog wording.

    Returns:
        ConflictAction.OVERWRITE or ConflictAction.SKIP, or CANCEL.
    """
    overwrite = PromptOption(value=ConflictAction.OVERWRITE.value, label=labels.overwrite)
    skip = PromptOption(value=ConflictAction.SKIP.value, label=labels.skip)
    show_diff = PromptOption(value=ConflictAction.DIFF.value, label="Show diff, then decide")

    state = ConflictState.INITIAL
    action = ConflictAction.SKIP

    while state != ConflictState.RESOLVED:
        if state == ConflictState.INITIAL:
            answer = prompts.select(labels.question, [overwrite, skip, show_diff])
        else:
            answer = prompts.select(f"Overwrite {relative_path}?", [overwrite, skip])

        if prompts.is_cancel(answer):
            return prompts.CANCEL

        action = ConflictAction(answer)
        if action == ConflictAction.DIFF:
            console.print(
                render_diff(relative_path, existing, incoming, labels.incoming),
                markup=False,
                highlight=False,
            )
            state = ConflictState.DIFF_SHOWN
        else:
            state = ConflictState.RESOLVED

    return action


def install_file(full_path: Path, relative_path: str, content: str) -> InstallResult:
    """Install a single file, asking before replacing a differing version.

    Args:
        full_path: Absolute destination path.
        relative_path: Project-relative path, used in prompts.
        content: Incoming file content.

    Returns:
        InstallResult. For SKIPPED the hash is that of the file kept on disk.
    """
    if full_path.exists():
        existing_bytes = full_path.read_bytes()
        incoming_bytes = content.encode("utf-8")

        if existing_bytes == incoming_bytes:
            return InstallResult(status=InstallStatus.MATCHED, hash=hash_content(incoming_bytes))

        existing = existing_bytes.decode("utf-8", errors="replace")
        labels = ConflictLabels(
            question=f"{relative_path} already exists and differs. What would you like to do?"
        )
        action = resolve_conflict(relative_path, existing, content, labels)

        if prompts.is_cancel(action):
            return InstallResult(status=InstallStatus.CANCELLED)

        if action == ConflictAction.SKIP:
            logger.debug(f"Keeping existing {relative_path}")
            return InstallResult(status=InstallStatus.SKIPPED, hash=hash_content(existing_bytes))

    write_file(full_path, content)
    logger.debug(f"Wrote {relative_path}")
    return InstallResult(status=InstallStatus.WRITTEN, hash=hash_content(content))
