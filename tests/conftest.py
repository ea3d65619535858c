"""Shared pytest fixtures for Praxis CLI tests."""

import json
import re
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from praxis.models import hash_content

MANIFEST_NAME = ".praxis-manifest.json"


def strip_ansi(text: str) -> str:
    """Strip ANSI escape codes from text."""
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def flat(text: str) -> str:
    """Strip ANSI codes and collapse the line wrapping Rich applies to long messages."""
    return " ".join(strip_ansi(text).split())


def make_manifest(
    files: dict[str, str] | None = None,
    selected: dict[str, list[str]] | None = None,
) -> dict:
    """Build a manifest document as it appears on disk.

    Args:
        files: Mapping of relative path to the content whose hash is recorded.
        selected: selectedComponents value, or None for a legacy manifest.

    Returns:
        The manifest as a JSON-ready dict.
    """
    data = {
        "version": "1.0.0",
        "installedAt": "2026-01-01T00:00:00+00:00",
        "updatedAt": "2026-01-01T00:00:00+00:00",
        "files": {path: {"hash": hash_content(content)} for path, content in (files or {}).items()},
    }
    if selected is not None:
        data["selectedComponents"] = selected
    return data


def write_manifest(project_root: Path, data: dict) -> Path:
    """Write a manifest document into a project root."""
    path = project_root / MANIFEST_NAME
    path.write_text(json.dumps(data, indent=2))
    return path


def read_manifest(project_root: Path) -> dict:
    """Read the manifest document from a project root."""
    return json.loads((project_root / MANIFEST_NAME).read_text())


def write_project_file(project_root: Path, relative_path: str, content: str) -> Path:
    """Create a file (and its parents) inside a project root."""
    path = project_root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def runner() -> CliRunner:
    """Create a CliRunner for testing commands."""
    return CliRunner()


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    """Create a temporary project directory.

    Args:
        tmp_path: pytest's built-in tmp_path fixture.

    Returns:
        Path to the temporary project directory.
    """
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def in_project(temp_project: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test with the temporary project as working directory.

    Args:
        temp_project: Temporary project directory.
        monkeypatch: pytest's monkeypatch fixture.

    Returns:
        Path to the temporary project directory.
    """
    monkeypatch.chdir(temp_project)
    return temp_project


@pytest.fixture
def sample_templates() -> dict[str, str]:
    """Return a small bundle with core files, a core skill and optional components."""
    return {
        ".agents/conventions.md": "# Conventions\n",
        ".agents/skills/planning/SKILL.md": '---\ndescription: "Plan work"\n---\n',
        ".agents/skills/agent-browser/SKILL.md": '---\ndescription: "Browser automation"\n---\n',
        ".agents/skills/agent-browser/scripts/run.sh": "#!/bin/sh\n",
        ".agents/agents/reviewers/security.md": '---\ndescription: "Security review"\n---\n',
    }


@pytest.fixture
def mock_fetch(sample_templates: dict[str, str]) -> Iterator[MagicMock]:
    """Serve sample_templates instead of downloading the bundle.

    Args:
        sample_templates: Bundle returned by the patched fetch.

    Yields:
        The mock standing in for fetch_templates.
    """
    with patch(
        "praxis.commands.common.fetch_templates", return_value=dict(sample_templates)
    ) as mock:
        yield mock
