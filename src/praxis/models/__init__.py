"""Praxis data models."""

from praxis.models.component import Component, ComponentInfo, ComponentType
from praxis.models.config import FetchConfig, load_fetch_config
from praxis.models.manifest import (
    MANIFEST_FILE,
    MANIFEST_VERSION,
    FileEntry,
    Manifest,
    SelectedComponents,
    hash_content,
    hash_file,
    is_locally_modified,
    load_manifest,
    now_iso,
    save_manifest,
)

__all__ = [
    "MANIFEST_FILE",
    "MANIFEST_VERSION",
    "Component",
    "ComponentInfo",
    "ComponentType",
    "FetchConfig",
    "FileEntry",
    "Manifest",
    "SelectedComponents",
    "hash_content",
    "hash_file",
    "is_locally_modified",
    "load_fetch_config",
    "load_manifest",
    "now_iso",
    "save_manifest",
]
