"""Project installation: directory, stub manifest, template package."""

from __future__ import annotations

import logging
from pathlib import Path

from create_webiny_project.config.schema import DEFAULT_CONFIG, ProjectConfig
from create_webiny_project.console import console
from create_webiny_project.naming import check_app_name
from create_webiny_project.packages import PackageManager, is_online
from create_webiny_project.project.initializer import existing_artifacts, initialize
from create_webiny_project.project.manifest import (
    create_initial_manifest,
    write_manifest,
)
from create_webiny_project.templates import DEFAULT_TEMPLATE_PREFIX, resolve_template

logger = logging.getLogger(__name__)


def create_app(
    project_name: str,
    template: str | None,
    config: ProjectConfig = DEFAULT_CONFIG,
    original_directory: Path | None = None,
) -> Path:
    """Create a new project directory from a template.

    The project name is validated before anything touches the filesystem.
    Nothing is rolled back on failure: the directory and stub manifest
    stay behind.

    Returns:
        The project root.

    Raises:
        InvalidProjectNameError: If the directory name is not a valid
            package name.
        PackageManagerError: If a package manager command fails.
        MalformedTemplateError: If the template has no template/ directory.
    """
    original_directory = original_directory or Path.cwd()
    root = (original_directory / project_name).resolve()
    app_name = root.name

    check_app_name(app_name)

    preexisting = existing_artifacts(original_directory)
    root.mkdir(parents=True, exist_ok=True)

    console.print(f"\nCreating your webiny app in [green]{root}[/green].\n")
    write_manifest(root, create_initial_manifest(app_name))

    run(root, app_name, original_directory, template, config, preexisting)
    return root


def run(
    root: Path,
    app_name: str,
    original_directory: Path,
    template: str | None,
    config: ProjectConfig = DEFAULT_CONFIG,
    preexisting_artifacts: frozenset[str] | None = None,
) -> None:
    """Install the template package into root and initialize the project from it."""
    package_manager = PackageManager(
        config.package_manager or DEFAULT_CONFIG.package_manager or "yarnpkg"
    )
    prefix = config.template_prefix or DEFAULT_TEMPLATE_PREFIX

    install_package, template_info = resolve_template(
        template, original_directory, prefix
    )

    console.print("Installing packages. This might take a couple of minutes.")

    if config.offline is not None:
        offline = config.offline
    else:
        registry_host = config.registry_host or DEFAULT_CONFIG.registry_host or ""
        offline = not is_online(registry_host, package_manager)
    if offline:
        console.print("[yellow]You appear to be offline.[/yellow]")
        console.print("[yellow]Falling back to the local Yarn cache.[/yellow]\n")

    console.print(f"Installing [cyan]{install_package}[/cyan]...\n")
    package_manager.add(root, [install_package], exact=True, offline=offline)

    initialize(
        root,
        app_name,
        original_directory,
        template_info.name,
        config=config,
        package_manager=package_manager,
        preexisting_artifacts=preexisting_artifacts,
    )
