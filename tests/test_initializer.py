"""Tests for project initialization from an installed template."""

import json
import shutil
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from create_webiny_project.packages import PackageManager, PackageManagerError
from create_webiny_project.project import MalformedTemplateError, initialize
from create_webiny_project.project.initializer import (
    existing_artifacts,
    install_gitignore,
    remove_stray_artifacts,
    rewrite_readme,
)

TEMPLATE = "cwp-template-basic"


def _install_template(root: Path, app_name: str = "myapp") -> Path:
    template_path = root / "node_modules" / TEMPLATE
    (template_path / "template").mkdir(parents=True)

    (root / "package.json").write_text(
        json.dumps(
            {
                "name": app_name,
                "version": "0.1.0",
                "private": True,
                "dependencies": {TEMPLATE: "1.0.0"},
            }
        )
    )
    (template_path / "package.json").write_text(
        json.dumps(
            {
                "name": TEMPLATE,
                "version": "1.0.0",
                "license": "MIT",
                "scripts": {"start": "webiny start"},
                "dependencies": {"left-pad": "1.0.0"},
            }
        )
    )
    (template_path / "template" / "README.md").write_text("Run `npm run start`.\n")
    (template_path / "template" / "gitignore").write_text("node_modules/\n")
    (template_path / "template" / "src").mkdir()
    (template_path / "template" / "src" / "index.js").write_text("// app\n")
    return root


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project directory with the template package already installed."""
    return _install_template(tmp_path / "myapp")


@pytest.fixture
def package_manager():
    """Package manager that records calls instead of running."""
    pm = MagicMock(spec=PackageManager)
    pm.command = "yarnpkg"
    return pm


@pytest.fixture
def mock_git():
    """Git operations that never create a repository."""
    with patch("create_webiny_project.project.initializer.GitOperations") as mock:
        mock.return_value.try_init.return_value = False
        yield mock.return_value


def test_initialize_merges_and_copies(project: Path, package_manager, mock_git) -> None:
    """Test the full initialization sequence."""
    initialize(
        project,
        "myapp",
        project.parent,
        TEMPLATE,
        package_manager=package_manager,
    )

    manifest = json.loads((project / "package.json").read_text())
    assert manifest["name"] == "myapp"
    assert manifest["version"] == "0.1.0"
    assert manifest["private"] is True
    assert "license" not in manifest
    assert manifest["scripts"] == {"start": "webiny start"}

    assert (project / "README.md").read_text() == "Run `yarn start`.\n"
    assert (project / ".gitignore").read_text() == "node_modules/\n"
    assert not (project / "gitignore").exists()
    assert (project / "src" / "index.js").exists()

    package_manager.add.assert_called_once_with(project, ["left-pad@1.0.0"])
    package_manager.remove.assert_called_once_with(project, TEMPLATE)
    mock_git.try_commit.assert_not_called()


def test_initialize_keeps_template_listed_for_removal(
    project: Path, package_manager, mock_git
) -> None:
    """Test that the template entry survives the merge until it is removed."""
    initialize(project, "myapp", None, TEMPLATE, package_manager=package_manager)

    manifest = json.loads((project / "package.json").read_text())
    assert manifest["dependencies"] == {"left-pad": "1.0.0", TEMPLATE: "1.0.0"}


def test_initialize_commits_when_repo_created(
    project: Path, package_manager, mock_git
) -> None:
    """Test that a new repository gets an initial commit."""
    mock_git.try_init.return_value = True
    mock_git.try_commit.return_value = True

    initialize(project, "myapp", None, TEMPLATE, package_manager=package_manager)

    mock_git.try_commit.assert_called_once_with(
        "Initial commit from Create Webiny Project"
    )


def test_initialize_without_dependencies(
    project: Path, package_manager, mock_git
) -> None:
    """Test that no install runs when the template declares no dependencies."""
    template_manifest = project / "node_modules" / TEMPLATE / "package.json"
    template_manifest.write_text(json.dumps({"name": TEMPLATE}))

    initialize(project, "myapp", None, TEMPLATE, package_manager=package_manager)

    package_manager.add.assert_not_called()
    package_manager.remove.assert_called_once_with(project, TEMPLATE)


def test_missing_template_dir_is_fatal(
    project: Path, package_manager, mock_git
) -> None:
    """Test that a template without template/ stops initialization."""
    template_dir = project / "node_modules" / TEMPLATE / "template"
    shutil.rmtree(template_dir)

    with pytest.raises(MalformedTemplateError) as exc_info:
        initialize(project, "myapp", None, TEMPLATE, package_manager=package_manager)

    assert str(template_dir) in str(exc_info.value)
    package_manager.add.assert_not_called()
    package_manager.remove.assert_not_called()


def test_dependency_install_failure_is_fatal(
    project: Path, package_manager, mock_git
) -> None:
    """Test that a failed dependency install stops before removing the template."""
    package_manager.add.side_effect = PackageManagerError(
        ["yarnpkg", "add", "left-pad@1.0.0"]
    )

    with pytest.raises(PackageManagerError):
        initialize(project, "myapp", None, TEMPLATE, package_manager=package_manager)

    package_manager.remove.assert_not_called()


def test_stray_artifacts_removed_from_invocation_dir(
    project: Path, package_manager, mock_git, tmp_path: Path
) -> None:
    """Test that only artifacts created during the run are cleaned up."""
    original = tmp_path / "cwd"
    original.mkdir()
    (original / "package.json").write_text("{}")
    preexisting = existing_artifacts(original)

    (original / "yarn.lock").write_text("# lock\n")
    (original / "node_modules").mkdir()

    initialize(
        project,
        "myapp",
        original,
        TEMPLATE,
        package_manager=package_manager,
        preexisting_artifacts=preexisting,
    )

    assert (original / "package.json").exists()
    assert not (original / "yarn.lock").exists()
    assert not (original / "node_modules").exists()


def test_project_named_like_an_artifact_survives_cleanup(
    package_manager, mock_git, tmp_path: Path
) -> None:
    """Test that a project directory called yarn.lock is not cleaned up."""
    original = tmp_path / "cwd"
    original.mkdir()
    preexisting = existing_artifacts(original)
    root = _install_template(original / "yarn.lock", app_name="yarn.lock")

    initialize(
        root,
        "yarn.lock",
        original,
        TEMPLATE,
        package_manager=package_manager,
        preexisting_artifacts=preexisting,
    )

    assert (root / "package.json").exists()
    assert (root / "README.md").exists()
    package_manager.remove.assert_called_once_with(root, TEMPLATE)


def test_remove_stray_artifacts_skips_project_root(tmp_path: Path) -> None:
    """Test that an artifact path holding the project root is kept."""
    (tmp_path / "node_modules" / "app").mkdir(parents=True)
    (tmp_path / "yarn.lock").write_text("# lock\n")

    removed = remove_stray_artifacts(
        tmp_path, frozenset(), project_root=tmp_path / "node_modules" / "app"
    )

    assert removed == ["yarn.lock"]
    assert (tmp_path / "node_modules" / "app").is_dir()


def test_remove_stray_artifacts_nothing_to_do(tmp_path: Path) -> None:
    """Test that a clean directory is left alone."""
    assert remove_stray_artifacts(tmp_path, frozenset()) == []


def test_install_gitignore_appends_to_existing(tmp_path: Path) -> None:
    """Test that template ignores are appended to an existing .gitignore."""
    (tmp_path / ".gitignore").write_text("dist/\n")
    (tmp_path / "gitignore").write_text("node_modules/\n")

    install_gitignore(tmp_path)

    assert (tmp_path / ".gitignore").read_text() == "dist/\nnode_modules/\n"
    assert not (tmp_path / "gitignore").exists()


def test_install_gitignore_without_source(tmp_path: Path) -> None:
    """Test that nothing happens when the template ships no gitignore."""
    install_gitignore(tmp_path)
    assert not (tmp_path / ".gitignore").exists()


def test_rewrite_readme_missing(tmp_path: Path) -> None:
    """Test that a missing README is ignored."""
    rewrite_readme(tmp_path)
    assert not (tmp_path / "README.md").exists()


def test_rewrite_readme_commands(tmp_path: Path) -> None:
    """Test that npm commands become yarn commands."""
    (tmp_path / "README.md").write_text("npm install\nnpm run build\n")
    rewrite_readme(tmp_path)
    assert (tmp_path / "README.md").read_text() == "yarn install\nyarn build\n"


def test_initialize_with_malformed_dependencies(
    project: Path, package_manager, mock_git
) -> None:
    """Test that a dependency list instead of an object is skipped."""
    template_manifest = project / "node_modules" / TEMPLATE / "package.json"
    template_manifest.write_text(
        json.dumps({"name": TEMPLATE, "dependencies": ["left-pad"]})
    )

    initialize(project, "myapp", None, TEMPLATE, package_manager=package_manager)

    package_manager.add.assert_not_called()
    package_manager.remove.assert_called_once_with(project, TEMPLATE)
