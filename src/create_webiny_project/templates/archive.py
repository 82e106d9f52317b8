"""Fetching and inspecting template tarballs."""

from __future__ import annotations

import json
import logging
import re
import tarfile
import tempfile
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"
TARBALL_PATTERN = re.compile(r"^.+\.(tgz|tar\.gz)$")
REMOTE_PATTERN = re.compile(r"^https?://")


class ArchiveError(Exception):
    """Raised when a template tarball cannot be read."""


def is_tarball(spec: str) -> bool:
    """Check whether a specifier points at a .tgz / .tar.gz archive."""
    return TARBALL_PATTERN.match(spec) is not None


def download(url: str, destination: Path) -> None:
    """Stream a remote file to destination."""
    logger.debug("Downloading %s to %s", url, destination)
    with (
        httpx.Client(follow_redirects=True, timeout=None) as client,
        client.stream("GET", url) as response,
    ):
        response.raise_for_status()
        with destination.open("wb") as f:
            for chunk in response.iter_bytes():
                f.write(chunk)


def find_manifest(extract_dir: Path) -> Path:
    """Locate package.json at the archive root or in its single top-level dir.

    npm-packed tarballs nest everything under a "package/" directory.
    """
    candidate = extract_dir / MANIFEST_FILENAME
    if candidate.is_file():
        return candidate

    entries = list(extract_dir.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        candidate = entries[0] / MANIFEST_FILENAME
        if candidate.is_file():
            return candidate

    raise ArchiveError(f"Archive does not contain {MANIFEST_FILENAME}")


def read_tarball_manifest(source: str) -> dict[str, Any]:
    """Fetch a tarball (URL or local path) and return its parsed manifest.

    The archive is downloaded and extracted inside a temporary directory
    that is removed before returning, whether or not reading succeeded.

    Raises:
        httpx.HTTPError: If the download fails.
        tarfile.TarError: If the archive cannot be extracted.
        OSError: If a local archive cannot be read.
        ArchiveError: If no manifest is present.
        ValueError: If the manifest is not valid JSON.
    """
    with tempfile.TemporaryDirectory(prefix="create-webiny-project-") as tmp_dir:
        tmp_path = Path(tmp_dir)

        if REMOTE_PATTERN.match(source):
            tarball_path = tmp_path / "template.tgz"
            download(source, tarball_path)
        else:
            tarball_path = Path(source)

        extract_dir = tmp_path / "extracted"
        extract_dir.mkdir()
        with tarfile.open(tarball_path, "r:*") as tar:
            tar.extractall(extract_dir, filter="data")

        manifest_path = find_manifest(extract_dir)
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ArchiveError(f"{MANIFEST_FILENAME} is not a JSON object")
        return data
