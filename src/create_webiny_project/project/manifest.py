"""Project manifest (package.json) handling."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"
INITIAL_VERSION = "0.1.0"

# Identity and publishing keys a template never passes on to the project
MANIFEST_BLACKLIST: frozenset[str] = frozenset(
    {
        "name",
        "version",
        "description",
        "keywords",
        "bugs",
        "license",
        "author",
        "contributors",
        "files",
        "browser",
        "bin",
        "man",
        "directories",
        "repository",
        "bundledDependencies",
        "optionalDependencies",
        "engineStrict",
        "os",
        "cpu",
        "preferGlobal",
        "private",
        "publishConfig",
    }
)


def create_initial_manifest(app_name: str) -> dict[str, Any]:
    """Return the stub manifest written before the template is installed."""
    return {
        "name": app_name,
        "version": INITIAL_VERSION,
        "private": True,
    }


def merge_template_manifest(
    project: dict[str, Any], template: dict[str, Any]
) -> dict[str, Any]:
    """Merge template manifest keys into the project manifest.

    Template values win for every key outside MANIFEST_BLACKLIST.
    Returns a new dict; neither input is modified.
    """
    merged = dict(project)
    for key, value in template.items():
        if key not in MANIFEST_BLACKLIST:
            merged[key] = value
    return merged


def read_manifest(directory: Path) -> dict[str, Any]:
    """Read package.json from a directory."""
    data = json.loads((directory / MANIFEST_FILENAME).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{directory / MANIFEST_FILENAME} is not a JSON object")
    return data


def write_manifest(directory: Path, manifest: dict[str, Any]) -> Path:
    """Write package.json with 2-space indent and a trailing line ending."""
    path = directory / MANIFEST_FILENAME
    path.write_text(
        json.dumps(manifest, indent=2) + os.linesep, encoding="utf-8", newline=""
    )
    return path


def dependency_specs(manifest: dict[str, Any]) -> list[str]:
    """Return `name@range` install specs for the manifest's dependencies."""
    dependencies = manifest.get("dependencies")
    if not isinstance(dependencies, dict):
        if dependencies:
            logger.warning("Ignoring malformed dependencies: %r", dependencies)
        return []
    return [f"{name}@{version}" for name, version in dependencies.items()]
