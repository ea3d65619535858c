"""Reconciliation between the manifest, the project on disk and the bundle.

This module drives the three state-changing operations:

- initialize: first install of core files plus the selected components
- update: three-way reconciliation of manifest, disk and latest bundle
- change_selection: install or remove whole optional components

Every destination is confined to the project root. Each batch runs inside
a checkpoint so that a cancelled or failed run still saves the manifest
state for the files it already processed.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from praxis.models.component import Component, ComponentInfo
from praxis.models.manifest import (
    MANIFEST_VERSION,
    FileEntry,
    Manifest,
    SelectedComponents,
    hash_content,
    hash_file,
    is_locally_modified,
    now_iso,
    save_manifest,
)
from praxis.services.components import (
    discover_optional_components,
    get_component_files,
    get_component_for_file,
    get_core_files,
)
from praxis.services.installer import (
    ConflictAction,
    ConflictLabels,
    InstallResult,
    InstallStatus,
    install_file,
    resolve_conflict,
)
from praxis.services.selection import diff_selection, resolve_selection
from praxis.utils import prompts
from praxis.utils.files import (
    ensure_dir,
    read_text,
    remove_empty_dirs,
    resolve_within_root,
    write_file,
)

logger = logging.getLogger(__name__)

# Working directories created on init; not tracked in the manifest
WORKFLOW_DIRS = (
    ".ai-workflow/ideas",
    ".ai-workflow/plans",
    ".ai-workflow/learnings",
)
TAGS_FILE = ".ai-workflow/tags"


class OperationCancelled(Exception):
    """Raised when the user aborts a prompt in the middle of a batch."""


class FileAction(Enum):
    """Per-file outcome reported while reconciling.

    Attributes:
        ADDED: A new file was written.
        MATCHED: The file already had the expected content.
        UPDATED: A tracked file was overwritten with a newer version.
        REMOVED: A file was deleted.
        SKIPPED: The user kept their own version of the file.
        KEPT: The user declined to delete a file.
    """

    ADDED = "added"
    MATCHED = "matched"
    UPDATED = "updated"
    REMOVED = "removed"
    SKIPPED = "skipped"
    KEPT = "kept"


class InitResult(BaseModel):
    """Result of ReconcileService.initialize().

    Attributes:
        installed: Files written or already matching.
        skipped: Files where the user kept their existing version.
        manifest: The manifest that was saved.
    """

    installed: int = 0
    skipped: int = 0
    manifest: Manifest


class UpdatePlan(BaseModel):
    """Categorised difference between the manifest and the bundle.

    Attributes:
        selection: Effective component selection for the run.
        backfill_selection: Whether the manifest lacks selectedComponents.
        new_files: Untracked bundle paths in scope.
        changed_files: Tracked paths whose upstream hash changed, in scope.
        removed_files: Tracked paths no longer in the bundle.
        unchanged_files: Tracked paths whose upstream hash is unchanged.
        deferred_files: Untracked paths of unselected components.
        ignored_files: Changed paths of deselected components.
        new_components: Unselected components with untracked files.
    """

    selection: SelectedComponents
    backfill_selection: bool = False
    new_files: list[str] = Field(default_factory=list)
    changed_files: list[str] = Field(default_factory=list)
    removed_files: list[str] = Field(default_factory=list)
    unchanged_files: list[str] = Field(default_factory=list)
    deferred_files: list[str] = Field(default_factory=list)
    ignored_files: list[str] = Field(default_factory=list)
    new_components: list[ComponentInfo] = Field(default_factory=list)

    @property
    def is_up_to_date(self) -> bool:
        """True when there is nothing to add, update or remove."""
        return not (self.new_files or self.changed_files or self.removed_files)


class UpdateResult(BaseModel):
    """Result of ReconcileService.update().

    Attributes:
        plan: The plan that was applied.
        added: New files written.
        updated: Changed files overwritten.
        removed: Files deleted or dropped from the manifest.
        skipped: Files left untouched by user choice.
        manifest: The manifest after the run.
        manifest_written: Whether the manifest was saved.
    """

    plan: UpdatePlan
    added: int = 0
    updated: int = 0
    removed: int = 0
    skipped: int = 0
    manifest: Manifest
    manifest_written: bool = False


class SelectionChangeResult(BaseModel):
    """Result of ReconcileService.change_selection().

    Attributes:
        additions: Components added to the selection.
        removals: Components removed from the selection.
        files_added: Files written for added components.
        files_removed: Files deleted for removed components.
        files_kept: Modified files the user chose to keep.
        manifest: The manifest after the run.
        manifest_written: Whether the manifest was saved.
    """

    additions: list[Component] = Field(default_factory=list)
    removals: list[Component] = Field(default_factory=list)
    files_added: int = 0
    files_removed: int = 0
    files_kept: int = 0
    manifest: Manifest
    manifest_written: bool = False

    @property
    def changed(self) -> bool:
        """True when the selection gained or lost a component."""
        return bool(self.additions or self.removals)


class ReconcileService(BaseModel):
    """Service that reconciles a project against a template bundle.

    The bundle is copied on construction and never modified, so every
    operation within a run sees the same file set.

    Attributes:
        project_root: Root directory of the project being managed.
        templates: Bundle mapping of relative path to content.
        on_file: Optional progress callback receiving (path, action).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    project_root: Path
    templates: dict[str, str]
    on_file: Callable[[str, FileAction], None] | None = None

    def _report(self, relative_path: str, action: FileAction) -> None:
        logger.debug(f"{action.value}: {relative_path}")
        if self.on_file is not None:
            self.on_file(relative_path, action)

    def _destination(self, relative_path: str) -> Path | None:
        return resolve_within_root(self.project_root, relative_path)

    @contextmanager
    def _checkpoint(self, snapshot: Callable[[], Manifest]) -> Iterator[None]:
        """Save partial manifest state if the enclosed batch fails.

        Args:
            snapshot: Builds the manifest reflecting the work done so far.

        Yields:
            None: The batch runs while the context is active.
        """
        try:
            yield
        except Exception:
            try:
                save_manifest(snapshot(), self.project_root)
                logger.info("Saved partial manifest state after interrupted run")
            except Exception as e:
                logger.warning(f"Could not save partial manifest state: {e}")
            raise

    def _install(self, destination: Path, relative_path: str, content: str) -> InstallResult:
        result = install_file(destination, relative_path, content)
        if result.status == InstallStatus.CANCELLED:
            raise OperationCancelled(relative_path)
        return result

    def _confirm(self, message: str) -> bool:
        answer = prompts.confirm(message)
        if prompts.is_cancel(answer):
            raise OperationCancelled(message)
        return bool(answer)

    def _selected_files(self, selection: SelectedComponents) -> dict[str, str]:
        files = get_core_files(self.templates)
        for component in discover_optional_components(self.templates):
            if selection.contains(component):
                files.update(get_component_files(self.templates, component.name, component.type))
        return files

    def _create_workflow_dirs(self) -> None:
        for directory in WORKFLOW_DIRS:
            ensure_dir(self.project_root / directory)

        tags_path = self.project_root / TAGS_FILE
        if not tags_path.exists():
            write_file(tags_path, "")

    def initialize(self, selection: SelectedComponents) -> InitResult:
        """Install core files and the selected components into a fresh project.

        Files are processed in path order. Existing files that differ go
        through the conflict dialog; the recorded hash always reflects the
        file actually left on disk.

        Args:
            selection: Optional components to install.

        Returns:
            InitResult with counts and the saved manifest.

        Raises:
            OperationCancelled: If the user aborted a prompt.
            OSError: If a file could not be read or written.
        """
        timestamp = now_iso()
        files: dict[str, FileEntry] = {}

        def snapshot() -> Manifest:
            return Manifest(
                version=MANIFEST_VERSION,
                installed_at=timestamp,
                updated_at=timestamp,
                selected_components=selection,
                files=dict(files),
            )

        installed = 0
        skipped = 0

        with self._checkpoint(snapshot):
            for relative_path, content in sorted(self._selected_files(selection).items()):
                destination = self._destination(relative_path)
                if destination is None:
                    continue

                result = self._install(destination, relative_path, content)
                files[relative_path] = FileEntry(hash=result.hash)

                if result.status == InstallStatus.SKIPPED:
                    skipped += 1
                    self._report(relative_path, FileAction.SKIPPED)
                else:
                    installed += 1
                    action = (
                        FileAction.MATCHED
                        if result.status == InstallStatus.MATCHED
                        else FileAction.ADDED
                    )
                    self._report(relative_path, action)

        self._create_workflow_dirs()

        manifest = snapshot()
        save_manifest(manifest, self.project_root)
        logger.info(f"Initialized {installed} file(s), skipped {skipped}")

        return InitResult(installed=installed, skipped=skipped, manifest=manifest)

    def plan_update(self, manifest: Manifest) -> UpdatePlan:
        """Categorise bundle and manifest paths without touching the disk.

        Args:
            manifest: The current manifest.

        Returns:
            The UpdatePlan for this bundle.
        """
        discovered = discover_optional_components(self.templates)
        selection = resolve_selection(manifest, discovered)
        plan = UpdatePlan(
            selection=selection,
            backfill_selection=manifest.selected_components is None,
        )
        deferred_components: set[str] = set()

        for relative_path, content in sorted(self.templates.items()):
            if self._destination(relative_path) is None:
                continue

            component = get_component_for_file(relative_path)
            in_scope = component is None or selection.contains(component)
            entry = manifest.files.get(relative_path)

            if entry is None:
                if in_scope:
                    plan.new_files.append(relative_path)
                else:
                    plan.deferred_files.append(relative_path)
                    deferred_components.add(component.value)
            elif entry.hash != hash_content(content):
                if in_scope:
                    plan.changed_files.append(relative_path)
                else:
                    plan.ignored_files.append(relative_path)
            else:
                plan.unchanged_files.append(relative_path)

        for relative_path in sorted(manifest.files):
            if relative_path in self.templates or self._destination(relative_path) is None:
                continue
            plan.removed_files.append(relative_path)

        plan.new_components = [c for c in discovered if c.value in deferred_components]
        return plan

    def update(self, manifest: Manifest, plan: UpdatePlan | None = None) -> UpdateResult:
        """Bring the project up to date with the bundle.

        - new files are installed through the conflict-aware installer
        - changed files are overwritten unless edited locally, in which
          case the user decides
        - removed files are deleted after confirmation

        Args:
            manifest: The current manifest.
            plan: Plan from plan_update(); computed when omitted.

        Returns:
            UpdateResult with counts and the resulting manifest.

        Raises:
            OperationCancelled: If the user aborted a prompt.
            OSError: If a file could not be read, written or deleted.
        """
        if plan is None:
            plan = self.plan_update(manifest)

        if plan.is_up_to_date and not plan.backfill_selection:
            return UpdateResult(plan=plan, manifest=manifest)

        files = dict(manifest.files)

        def snapshot() -> Manifest:
            return manifest.model_copy(
                update={
                    "updated_at": now_iso(),
                    "selected_components": plan.selection,
                    "files": dict(files),
                }
            )

        result = UpdateResult(plan=plan, manifest=manifest)
        removed_parents: list[Path] = []

        try:
            with self._checkpoint(snapshot):
                for relative_path in plan.new_files:
                    destination = self._destination(relative_path)
                    content = self.templates[relative_path]
                    install = self._install(destination, relative_path, content)
                    files[relative_path] = FileEntry(hash=install.hash)

                    if install.status == InstallStatus.WRITTEN:
                        result.added += 1
                        self._report(relative_path, FileAction.ADDED)
                    elif install.status == InstallStatus.SKIPPED:
                        result.skipped += 1
                        self._report(relative_path, FileAction.SKIPPED)
                    else:
                        self._report(relative_path, FileAction.MATCHED)

                for relative_path in plan.changed_files:
                    if self._apply_change(relative_path, manifest.files[relative_path].hash, files):
                        result.updated += 1
                    else:
                        result.skipped += 1

                for relative_path in plan.removed_files:
                    destination = self._destination(relative_path)

                    if not destination.exists():
                        files.pop(relative_path, None)
                        result.removed += 1
                        continue

                    warning = (
                        " [yellow](locally modified)[/yellow]"
                        if is_locally_modified(self.project_root, relative_path, manifest)
                        else ""
                    )
                    message = f"{relative_path} was removed from Praxis.{warning} Delete it?"
                    if self._confirm(message):
                        destination.unlink()
                        files.pop(relative_path, None)
                        removed_parents.append(destination.parent)
                        result.removed += 1
                        self._report(relative_path, FileAction.REMOVED)
                    else:
                        result.skipped += 1
                        self._report(relative_path, FileAction.KEPT)
        finally:
            remove_empty_dirs(self.project_root, removed_parents)

        result.manifest = snapshot()
        save_manifest(result.manifest, self.project_root)
        result.manifest_written = True
        return result

    def _apply_change(
        self, relative_path: str, recorded_hash: str, files: dict[str, FileEntry]
    ) -> bool:
        """Apply an upstream change to one tracked file.

        Args:
            relative_path: Path of the changed file.
            recorded_hash: Hash recorded in the manifest before this run.
            files: Working copy of the manifest file map, updated in place.

        Returns:
            True if the new version was written, False if the local one was kept.
        """
        destination = self._destination(relative_path)
        content = self.templates[relative_path]

        try:
            current_hash = hash_file(destination) if destination.exists() else recorded_hash
        except OSError:
            current_hash = None

        if current_hash != recorded_hash:
            try:
                local = read_text(destination)
            except OSError:
                local = ""

            labels = ConflictLabels(
                question=(
                    f"{relative_path} has local changes and a new Praxis version. "
                    "What would you like to do?"
                ),
                overwrite="Overwrite with new Praxis version",
                skip="Keep your version",
                incoming="new praxis version",
            )
            action = resolve_conflict(relative_path, local, content, labels)
            if prompts.is_cancel(action):
                raise OperationCancelled(relative_path)

            if action == ConflictAction.SKIP:
                if current_hash is not None:
                    files[relative_path] = FileEntry(hash=current_hash)
                self._report(relative_path, FileAction.SKIPPED)
                return False

        write_file(destination, content)
        files[relative_path] = FileEntry(hash=hash_content(content))
        self._report(relative_path, FileAction.UPDATED)
        return True

    def change_selection(
        self, manifest: Manifest, new_selection: SelectedComponents
    ) -> SelectionChangeResult:
        """Install newly selected components and remove deselected ones.

        Removed files that were edited locally are only deleted after
        confirmation. Files the manifest does not track are never deleted.
        Empty directories left behind are pruned.

        Args:
            manifest: The current manifest.
            new_selection: The selection chosen by the user.

        Returns:
            SelectionChangeResult with counts and the resulting manifest.

        Raises:
            OperationCancelled: If the user aborted a prompt.
            OSError: If a file could not be read, written or deleted.
        """
        discovered = discover_optional_components(self.templates)
        current = resolve_selection(manifest, discovered)
        additions, removals = diff_selection(discovered, current, new_selection)

        result = SelectionChangeResult(additions=additions, removals=removals, manifest=manifest)
        if not result.changed and manifest.selected_components is not None:
            return result

        component_files = {
            component.value: dict(
                sorted(get_component_files(self.templates, component.name, component.type).items())
            )
            for component in [*additions, *removals]
        }
        files = dict(manifest.files)

        def snapshot() -> Manifest:
            return manifest.model_copy(
                update={
                    "updated_at": now_iso(),
                    "selected_components": new_selection,
                    "files": dict(files),
                }
            )

        removed_parents: list[Path] = []
        try:
            with self._checkpoint(snapshot):
                for component in additions:
                    for relative_path, content in component_files[component.value].items():
                        destination = self._destination(relative_path)
                        if destination is None:
                            continue

                        install = self._install(destination, relative_path, content)
                        files[relative_path] = FileEntry(hash=install.hash)
                        if install.status == InstallStatus.WRITTEN:
                            result.files_added += 1
                            self._report(relative_path, FileAction.ADDED)
                        elif install.status == InstallStatus.SKIPPED:
                            self._report(relative_path, FileAction.SKIPPED)

                for component in removals:
                    for relative_path in component_files[component.value]:
                        destination = self._destination(relative_path)
                        if destination is None:
                            continue

                        if not destination.exists():
                            files.pop(relative_path, None)
                            continue

                        if relative_path not in files:
                            logger.info(f"Leaving untracked file in place: {relative_path}")
                            continue

                        if is_locally_modified(self.project_root, relative_path, manifest):
                            if not self._confirm(
                                f"{relative_path} has local modifications. Remove it anyway?"
                            ):
                                result.files_kept += 1
                                self._report(relative_path, FileAction.KEPT)
                                continue

                        destination.unlink()
                        files.pop(relative_path, None)
                        removed_parents.append(destination.parent)
                        result.files_removed += 1
                        self._report(relative_path, FileAction.REMOVED)
        finally:
            remove_empty_dirs(self.project_root, removed_parents)

        result.manifest = snapshot()
        save_manifest(result.manifest, self.project_root)
        result.manifest_written = True
        return result
