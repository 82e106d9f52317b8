"""Git operations for create-webiny-project."""

from create_webiny_project.git.operations import GitOperations

__all__ = [
    "GitOperations",
]
