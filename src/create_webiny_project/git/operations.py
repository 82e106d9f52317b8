"""Best-effort git operations for freshly created projects."""

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class GitOperations:
    """Repository setup for a new project directory.

    Nothing here raises on git failures; every method reports success as a
    boolean so callers can warn and carry on.
    """

    def __init__(self, path: Path) -> None:
        """Initialize with the project directory."""
        self._path = path

    def _run(self, *args: str) -> subprocess.CompletedProcess[str] | None:
        """Run a git command in the project directory, None if git is missing."""
        try:
            return subprocess.run(
                ["git", *args],
                cwd=self._path,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            logger.debug("git %s could not run: %s", " ".join(args), e)
            return None

    def is_available(self) -> bool:
        """Check if the git binary runs."""
        result = self._run("--version")
        return result is not None and result.returncode == 0

    def is_in_git_repository(self) -> bool:
        """Check if the project directory is inside a git work tree."""
        result = self._run("rev-parse", "--is-inside-work-tree")
        return result is not None and result.returncode == 0

    def is_in_mercurial_repository(self) -> bool:
        """Check if the project directory is inside a Mercurial repository."""
        if not shutil.which("hg"):
            return False
        result = subprocess.run(
            ["hg", "--cwd", ".", "root"],
            cwd=self._path,
            capture_output=True,
            text=True,
        )
        return result.returncode == 0

    def try_init(self) -> bool:
        """Initialize a repository unless one already encloses the project.

        Returns True if a new repository was created.
        """
        if not self.is_available():
            logger.warning("Git repo not initialized: git is not available")
            return False
        if self.is_in_git_repository() or self.is_in_mercurial_repository():
            logger.info("Skipping git init: %s is already versioned", self._path)
            return False

        result = self._run("init")
        if result is None or result.returncode != 0:
            stderr = result.stderr.strip() if result else ""
            logger.warning("Git repo not initialized: %s", stderr)
            return False
        return True

    def try_commit(self, message: str) -> bool:
        """Stage everything and create the initial commit.

        On failure (commonly a missing author identity) the .git directory is
        removed so the project is not left half-initialized.
        """
        for args in (("add", "-A"), ("commit", "-m", message)):
            result = self._run(*args)
            if result is None or result.returncode != 0:
                logger.debug(
                    "git %s failed: %s", args[0], result.stderr if result else ""
                )
                shutil.rmtree(self._path / ".git", ignore_errors=True)
                return False
        return True
