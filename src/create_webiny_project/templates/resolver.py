"""Template specifier resolution.

Turns whatever the user passed to ``--template`` into two things: the
install spec handed to the package manager, and a PackageReference naming
the package that ends up in node_modules.
"""

from __future__ import annotations

import json
import logging
import re
import tarfile
from pathlib import Path

import httpx

from create_webiny_project.console import console
from create_webiny_project.templates.archive import (
    MANIFEST_FILENAME,
    ArchiveError,
    is_tarball,
    read_tarball_manifest,
)
from create_webiny_project.templates.base import PackageReference

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_PREFIX = "cwp-template"

FILE_PATTERN = re.compile(r"^file:(.*)$")
SCOPE_PATTERN = re.compile(r"^(@[^/]+/)?(.+)$")
GIT_NAME_PATTERN = re.compile(r"([^/]+)\.git(#.*)?$")
# e.g. cwp-template-basic-1.0.0-beta.1.tgz -> cwp-template-basic
TARBALL_NAME_PATTERN = re.compile(r"^(?:.*/)?(.+?)(?:-\d+.+)?\.(tgz|tar\.gz)$")


def get_template_install_package(
    template: str | None,
    original_directory: Path,
    prefix: str = DEFAULT_TEMPLATE_PREFIX,
) -> str:
    """Normalize a template specifier into the spec passed to the package manager.

    Non-prefixed names get the template prefix added, leaving any @scope/
    intact:
    - NAME, @SCOPE/NAME -> <prefix>-NAME, @SCOPE/<prefix>-NAME
    - <prefix>-NAME, @SCOPE/<prefix>-NAME -> unchanged
    - @SCOPE -> @SCOPE/<prefix>
    File specifiers and local tarballs are made absolute against
    original_directory, since the package manager runs with --cwd <root>.
    URLs pass through.
    """
    if not template:
        return prefix

    file_match = FILE_PATTERN.match(template)
    if file_match:
        resolved = (original_directory / file_match.group(1)).resolve()
        return f"file:{resolved}"

    if "://" in template:
        return template
    if is_tarball(template):
        return str((original_directory / template).resolve())

    package_match = SCOPE_PATTERN.match(template)
    if package_match is None:
        return template
    scope = package_match.group(1) or ""
    template_name = package_match.group(2)

    if template_name == prefix or template_name.startswith(f"{prefix}-"):
        return f"{scope}{template_name}"
    if template_name.startswith("@"):
        return f"{template_name}/{prefix}"
    return f"{scope}{prefix}-{template_name}"


def guess_name_from_tarball(install_package: str) -> str:
    """Guess a package name from a tarball filename, dropping any version."""
    match = TARBALL_NAME_PATTERN.match(install_package)
    if match is None:
        return install_package
    return match.group(1)


def _read_local_manifest(path: Path) -> PackageReference:
    data = json.loads((path / MANIFEST_FILENAME).read_text(encoding="utf-8"))
    return PackageReference(name=data["name"], version=data.get("version"))


def _resolve_tarball(install_package: str) -> PackageReference:
    try:
        data = read_tarball_manifest(install_package)
        return PackageReference(name=data["name"], version=data.get("version"))
    except (
        httpx.HTTPError,
        tarfile.TarError,
        ArchiveError,
        OSError,
        ValueError,
        KeyError,
    ) as e:
        logger.warning("Could not read template archive %s: %s", install_package, e)
        console.print(f"Could not extract the package name from the archive: {e}")
        assumed_name = guess_name_from_tarball(install_package)
        console.print(
            f'Based on the filename, assuming it is "[cyan]{assumed_name}[/cyan]"'
        )
        return PackageReference(name=assumed_name)


def get_package_info(install_package: str) -> PackageReference:
    """Resolve an install spec into the package it will install.

    Rules, in priority order:
    1. file:<path> - name/version from the manifest at that path
    2. tarball URL or path - name/version from the extracted manifest,
       falling back to the filename if the archive can't be read
    3. git+<url> - name is the path segment before .git
    4. name@version - split at the last @ that isn't the scope marker
    5. anything else is a bare package name
    """
    file_match = FILE_PATTERN.match(install_package)
    if file_match:
        return _read_local_manifest(Path(file_match.group(1)))

    if is_tarball(install_package):
        return _resolve_tarball(install_package)

    if install_package.startswith("git+"):
        # git+https://github.com/mycompany/cwp-template-basic.git
        # git+ssh://github.com/mycompany/cwp-template-basic.git#v1.2.3
        git_match = GIT_NAME_PATTERN.search(install_package)
        if git_match:
            return PackageReference(name=git_match.group(1))
        return PackageReference(name=install_package)

    # Do not split on the @ of @scope/
    at_index = install_package.rfind("@")
    if at_index > 0:
        return PackageReference(
            name=install_package[:at_index],
            version=install_package[at_index + 1 :] or None,
        )

    return PackageReference(name=install_package)


def resolve_template(
    template: str | None,
    original_directory: Path,
    prefix: str = DEFAULT_TEMPLATE_PREFIX,
) -> tuple[str, PackageReference]:
    """Resolve a template specifier to (install spec, package reference)."""
    install_package = get_template_install_package(
        template, original_directory, prefix
    )
    reference = get_package_info(install_package)
    logger.debug("Resolved template %r to %s (%s)", template, reference, install_package)
    return install_package, reference
