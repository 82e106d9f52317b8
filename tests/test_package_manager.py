"""Tests for package manager invocation."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from create_webiny_project.packages import PackageManager, PackageManagerError


@pytest.fixture
def mock_subprocess():
    """Mock subprocess.run for package manager commands."""
    with patch("create_webiny_project.packages.manager.subprocess") as mock:
        yield mock


def test_add_exact(mock_subprocess) -> None:
    """Test that add pins exact versions and targets the project directory."""
    mock_subprocess.run.return_value = MagicMock(returncode=0)

    PackageManager().add(Path("/work/myapp"), ["cwp-template-basic"], exact=True)

    call_args = mock_subprocess.run.call_args[0][0]
    assert call_args == [
        "yarnpkg",
        "add",
        "--exact",
        "cwp-template-basic",
        "--cwd",
        "/work/myapp",
    ]


def test_add_offline(mock_subprocess) -> None:
    """Test that offline mode passes --offline."""
    mock_subprocess.run.return_value = MagicMock(returncode=0)

    PackageManager("yarn").add(
        Path("/work/myapp"), ["a@1.0.0", "b@2.0.0"], exact=True, offline=True
    )

    call_args = mock_subprocess.run.call_args[0][0]
    assert call_args == [
        "yarn",
        "add",
        "--exact",
        "--offline",
        "a@1.0.0",
        "b@2.0.0",
        "--cwd",
        "/work/myapp",
    ]


def test_add_failure_reports_command(mock_subprocess) -> None:
    """Test that a non-zero exit raises with the failing command line."""
    mock_subprocess.run.return_value = MagicMock(returncode=1)

    with pytest.raises(PackageManagerError) as exc_info:
        PackageManager().add(Path("/work/myapp"), ["left-pad@1.0.0"])

    assert exc_info.value.command == "yarnpkg add left-pad@1.0.0 --cwd /work/myapp"
    assert exc_info.value.returncode == 1


def test_missing_binary_raises(mock_subprocess) -> None:
    """Test that a missing package manager is reported as a failed command."""
    mock_subprocess.run.side_effect = FileNotFoundError("yarnpkg")

    with pytest.raises(PackageManagerError) as exc_info:
        PackageManager().remove(Path("/work/myapp"), "cwp-template-basic")

    assert exc_info.value.command == (
        "yarnpkg remove cwp-template-basic --cwd /work/myapp"
    )


def test_remove(mock_subprocess) -> None:
    """Test remove command line."""
    mock_subprocess.run.return_value = MagicMock(returncode=0)

    PackageManager().remove(Path("/work/myapp"), "@acme/cwp-template-basic")

    call_args = mock_subprocess.run.call_args[0][0]
    assert call_args == [
        "yarnpkg",
        "remove",
        "@acme/cwp-template-basic",
        "--cwd",
        "/work/myapp",
    ]


def test_get_config(mock_subprocess) -> None:
    """Test reading a config value."""
    mock_subprocess.run.return_value = MagicMock(
        returncode=0, stdout="http://proxy.local:3128\n"
    )
    assert PackageManager().get_config("https-proxy") == "http://proxy.local:3128"


@pytest.mark.parametrize("stdout", ["undefined\n", "null\n", "\n"])
def test_get_config_unset(mock_subprocess, stdout: str) -> None:
    """Test that unset config values are None."""
    mock_subprocess.run.return_value = MagicMock(returncode=0, stdout=stdout)
    assert PackageManager().get_config("https-proxy") is None
