"""Environment diagnostics for bug reports."""

from __future__ import annotations

import os
import platform
import plistlib
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

from rich.markup import escape

from create_webiny_project import __version__
from create_webiny_project.console import console

NOT_FOUND = "Not Found"


@dataclass(frozen=True)
class Binary:
    """A command-line tool whose version is reported."""

    name: str
    commands: tuple[str, ...]
    version_args: tuple[str, ...] = ("--version",)

    def find(self) -> str | None:
        """Return the first matching command on PATH, or None."""
        for command in self.commands:
            path = shutil.which(command)
            if path:
                return path
        return None


BINARIES: tuple[Binary, ...] = (
    Binary("Node", ("node",)),
    Binary("npm", ("npm",)),
    Binary("Yarn", ("yarnpkg", "yarn")),
    Binary("git", ("git",)),
)

BROWSERS: tuple[Binary, ...] = (
    Binary(
        "Chrome",
        ("google-chrome", "google-chrome-stable", "chromium", "chromium-browser"),
    ),
    Binary("Edge", ("microsoft-edge", "microsoft-edge-stable")),
    Binary("Internet Explorer", ()),
    Binary("Firefox", ("firefox",)),
    Binary("Safari", ()),
)

# macOS application bundles, checked when nothing is on PATH
MAC_APPS: dict[str, str] = {
    "Chrome": "/Applications/Google Chrome.app",
    "Edge": "/Applications/Microsoft Edge.app",
    "Firefox": "/Applications/Firefox.app",
    "Safari": "/Applications/Safari.app",
}


def get_command_version(
    path: str, args: tuple[str, ...] = ("--version",)
) -> str | None:
    """Run `<path> --version` and return the first line of output."""
    try:
        result = subprocess.run(
            [path, *args],
            capture_output=True,
            text=True,
        )
    except OSError:
        return None
    if result.returncode != 0:
        return None
    output = result.stdout.strip() or result.stderr.strip()
    return output.splitlines()[0] if output else None


def get_mac_app_version(app_path: Path) -> str | None:
    """Read CFBundleShortVersionString from a macOS application bundle."""
    info_plist = app_path / "Contents" / "Info.plist"
    try:
        with info_plist.open("rb") as f:
            info = plistlib.load(f)
    except (OSError, plistlib.InvalidFileException):
        return None
    version = info.get("CFBundleShortVersionString")
    return str(version) if version else None


def get_internet_explorer_version() -> str | None:
    """Report Internet Explorer on Windows by its executable."""
    if sys.platform != "win32":
        return None
    program_files = os.environ.get("ProgramFiles", r"C:\Program Files")
    iexplore = Path(program_files) / "Internet Explorer" / "iexplore.exe"
    return "Installed" if iexplore.exists() else None


def get_binary_version(binary: Binary) -> str:
    """Return "<version> - <path>" for a binary, or NOT_FOUND."""
    path = binary.find()
    if path is None:
        return NOT_FOUND
    version = get_command_version(path, binary.version_args) or "unknown"
    return f"{version} - {path}"


def get_browser_version(browser: Binary) -> str:
    """Return the installed version of a browser, or NOT_FOUND."""
    if browser.name == "Internet Explorer":
        return get_internet_explorer_version() or NOT_FOUND

    path = browser.find()
    if path:
        return get_command_version(path) or "unknown"

    if sys.platform == "darwin" and browser.name in MAC_APPS:
        return get_mac_app_version(Path(MAC_APPS[browser.name])) or NOT_FOUND

    return NOT_FOUND


def get_cpu_info() -> str:
    """Describe the CPU as "(<count>) <arch> <model>"."""
    count = os.cpu_count() or 1
    model = platform.processor() or "Unknown CPU"
    return f"({count}) {platform.machine()} {model}"


def collect_environment() -> dict[str, dict[str, str]]:
    """Gather environment info grouped by section."""
    return {
        "System": {
            "OS": f"{platform.system()} {platform.release()}",
            "CPU": get_cpu_info(),
        },
        "Binaries": {
            "Python": f"{platform.python_version()} - {sys.executable}",
            **{binary.name: get_binary_version(binary) for binary in BINARIES},
        },
        "Browsers": {
            browser.name: get_browser_version(browser) for browser in BROWSERS
        },
    }


def print_environment_info() -> None:
    """Print environment diagnostics."""
    console.print("\n[bold]Environment Info:[/bold]")
    console.print(f"\n  current version of create-webiny-project: {__version__}")
    console.print(f"  running from {Path(__file__).parent}")

    for section, entries in collect_environment().items():
        console.print(f"\n  [bold]{section}:[/bold]")
        width = max(len(name) for name in entries)
        for name, value in entries.items():
            style = "dim" if value == NOT_FOUND else "cyan"
            label = f"{name}:"
            console.print(
                f"    {label:<{width + 1}} [{style}]{escape(value)}[/{style}]"
            )
    console.print()
