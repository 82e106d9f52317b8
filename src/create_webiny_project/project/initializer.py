"""Project initialization from an installed template package."""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path

from create_webiny_project.config.schema import DEFAULT_CONFIG, ProjectConfig
from create_webiny_project.console import console
from create_webiny_project.git import GitOperations
from create_webiny_project.packages import PackageManager
from create_webiny_project.project.manifest import (
    MANIFEST_FILENAME,
    dependency_specs,
    merge_template_manifest,
    read_manifest,
    write_manifest,
)

logger = logging.getLogger(__name__)

TEMPLATE_DIRNAME = "template"
GITIGNORE_SOURCE = "gitignore"
GITIGNORE = ".gitignore"
README = "README.md"

# Files a package manager may leave behind in the directory it runs from
ARTIFACT_NAMES: tuple[str, ...] = (MANIFEST_FILENAME, "yarn.lock", "node_modules")

NPM_COMMAND_PATTERN = re.compile(r"(npm run |npm )")


class MalformedTemplateError(Exception):
    """Raised when an installed template package lacks its template/ directory."""

    def __init__(self, template_name: str, template_dir: Path) -> None:
        self.template_name = template_name
        self.template_dir = template_dir
        super().__init__(f"Could not locate supplied template: {template_dir}")


def get_template_package_dir(root: Path, template_name: str) -> Path:
    """Return where the package manager put the template package."""
    return root / "node_modules" / template_name


def existing_artifacts(directory: Path) -> frozenset[str]:
    """Return the names of known package manager artifacts present in directory."""
    return frozenset(name for name in ARTIFACT_NAMES if (directory / name).exists())


def remove_stray_artifacts(
    directory: Path,
    preexisting: frozenset[str],
    project_root: Path | None = None,
) -> list[str]:
    """Remove package manager artifacts that appeared in directory during the run.

    Anything listed in `preexisting` belonged to the user and is left alone,
    as is any path that is or contains `project_root` (a project may itself
    be named yarn.lock or package.json). Returns the names that were removed.
    """
    protected = project_root.resolve() if project_root is not None else None
    removed: list[str] = []
    for name in ARTIFACT_NAMES:
        if name in preexisting:
            continue
        path = directory / name
        if protected is not None and protected.is_relative_to(path.resolve()):
            continue
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
        else:
            continue
        removed.append(name)
    return removed


def install_gitignore(root: Path) -> None:
    """Turn a template-provided `gitignore` into `.gitignore`.

    Templates ship the file without the dot because npm would otherwise
    rename it to .npmignore on publish. An existing .gitignore is appended to.
    """
    source = root / GITIGNORE_SOURCE
    if not source.exists():
        return

    target = root / GITIGNORE
    if target.exists():
        with target.open("a", encoding="utf-8") as f:
            f.write(source.read_text(encoding="utf-8"))
        source.unlink()
    else:
        source.rename(target)


def rewrite_readme(root: Path) -> None:
    """Replace npm commands in the README with their yarn equivalents."""
    readme = root / README
    try:
        text = readme.read_text(encoding="utf-8")
    except OSError:
        # Nothing to rewrite, the default npm commands stay
        return
    readme.write_text(NPM_COMMAND_PATTERN.sub("yarn ", text), encoding="utf-8")


def _keep_installed_template(
    merged: dict[str, object], project: dict[str, object], template_name: str
) -> None:
    """Keep the template package listed so the package manager can remove it."""
    installed = project.get("dependencies")
    if not isinstance(installed, dict) or template_name not in installed:
        return
    dependencies = merged.get("dependencies")
    if not isinstance(dependencies, dict):
        dependencies = {}
    merged["dependencies"] = {**dependencies, template_name: installed[template_name]}


def print_success(root: Path, app_name: str, original_directory: Path | None) -> None:
    """Print the success message and next steps."""
    if original_directory and original_directory / app_name == root:
        cdpath = app_name
    else:
        cdpath = str(root)

    console.print()
    console.print(f"[green]Success![/green] Created {app_name} at {root}")
    console.print("Inside that directory, you can run several commands:\n")
    console.print("  [cyan]yarn start[/cyan]")
    console.print("    Starts the development server.\n")
    console.print("  [cyan]yarn build[/cyan]")
    console.print("    Bundles the app into static files for production.\n")
    console.print("We suggest that you begin by typing:\n")
    console.print(f"  [cyan]cd[/cyan] {cdpath}")
    console.print("  [cyan]yarn start[/cyan]\n")
    console.print("Happy hacking!")


def initialize(
    root: Path,
    app_name: str,
    original_directory: Path | None,
    template_name: str,
    config: ProjectConfig = DEFAULT_CONFIG,
    package_manager: PackageManager | None = None,
    preexisting_artifacts: frozenset[str] | None = None,
) -> None:
    """Turn a directory holding an installed template package into a project.

    Args:
        root: Project directory; the template package must already be
            installed in its node_modules.
        app_name: Project name, as written to the manifest.
        original_directory: Directory the command was invoked from.
        template_name: Name of the installed template package.
        config: Effective configuration.
        package_manager: Package manager to use. Defaults to the configured one.
        preexisting_artifacts: Artifact names that already existed in
            original_directory before the run and must not be removed.

    Raises:
        MalformedTemplateError: If the template has no template/ directory.
        PackageManagerError: If installing dependencies or removing the
            template package fails.
    """
    if package_manager is None:
        package_manager = PackageManager(
            config.package_manager or DEFAULT_CONFIG.package_manager or "yarnpkg"
        )
    if preexisting_artifacts is None and original_directory is not None:
        preexisting_artifacts = existing_artifacts(original_directory)

    template_path = get_template_package_dir(root, template_name)
    template_dir = template_path / TEMPLATE_DIRNAME

    project_manifest = read_manifest(root)
    template_manifest = read_manifest(template_path)

    manifest = merge_template_manifest(project_manifest, template_manifest)
    _keep_installed_template(manifest, project_manifest, template_name)
    write_manifest(root, manifest)

    if not template_dir.is_dir():
        raise MalformedTemplateError(template_name, template_dir)
    shutil.copytree(template_dir, root, dirs_exist_ok=True)

    install_gitignore(root)
    rewrite_readme(root)

    git = GitOperations(root)
    initialized_git = git.try_init()
    if initialized_git:
        console.print("\nInitialized a git repository.")

    dependencies = dependency_specs(template_manifest)
    if dependencies:
        console.print(
            f"\nInstalling template dependencies using {package_manager.command}...\n"
        )
        package_manager.add(root, dependencies)

    if (
        original_directory is not None
        and original_directory.resolve() != root.resolve()
    ):
        removed = remove_stray_artifacts(
            original_directory, preexisting_artifacts or frozenset(), project_root=root
        )
        if removed:
            logger.info("Removed %s from %s", ", ".join(removed), original_directory)

    console.print(f"Removing template package using {package_manager.command}...\n")
    package_manager.remove(root, template_name)

    commit_message = (
        config.git_commit_message or DEFAULT_CONFIG.git_commit_message or ""
    )
    if initialized_git and git.try_commit(commit_message):
        console.print("\nCreated git commit.")

    print_success(root, app_name, original_directory)
