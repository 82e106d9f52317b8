"""Package manager invocation."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


class PackageManagerError(Exception):
    """Raised when a package manager command exits unsuccessfully."""

    def __init__(self, command: Sequence[str], returncode: int | None = None) -> None:
        self.command = shlex.join(command)
        self.returncode = returncode
        super().__init__(f"`{self.command}` failed")


class PackageManager:
    """Runs yarn-compatible add/remove commands against a project directory.

    Output is not captured; the child process writes straight to the
    terminal so the user sees install progress.
    """

    def __init__(self, command: str = "yarnpkg") -> None:
        self.command = command

    def _run(self, args: list[str]) -> None:
        cmd = [self.command, *args]
        logger.debug("Running %s", shlex.join(cmd))
        try:
            result = subprocess.run(cmd)
        except FileNotFoundError:
            logger.error("Package manager not found: %s", self.command)
            raise PackageManagerError(cmd) from None
        if result.returncode != 0:
            raise PackageManagerError(cmd, result.returncode)

    def add(
        self,
        root: Path,
        packages: Sequence[str],
        exact: bool = False,
        offline: bool = False,
    ) -> None:
        """Add packages to the project at root.

        Raises:
            PackageManagerError: If the command fails.
        """
        args = ["add"]
        if exact:
            args.append("--exact")
        if offline:
            args.append("--offline")
        args.extend(packages)
        # Explicit --cwd so the install never lands in the invocation directory
        args.extend(["--cwd", str(root)])
        self._run(args)

    def remove(self, root: Path, package: str) -> None:
        """Remove a package from the project at root.

        Raises:
            PackageManagerError: If the command fails.
        """
        self._run(["remove", package, "--cwd", str(root)])

    def get_config(self, key: str) -> str | None:
        """Read a package manager config value, or None if unset."""
        try:
            result = subprocess.run(
                [self.command, "config", "get", key],
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            return None
        if result.returncode != 0:
            return None
        value = result.stdout.strip()
        if not value or value in ("undefined", "null"):
            return None
        return value
