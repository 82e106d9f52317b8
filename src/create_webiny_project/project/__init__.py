"""Project creation: installer, initializer and manifest handling."""

from create_webiny_project.project.initializer import (
    MalformedTemplateError,
    initialize,
)
from create_webiny_project.project.installer import create_app, run
from create_webiny_project.project.manifest import (
    MANIFEST_BLACKLIST,
    merge_template_manifest,
)

__all__ = [
    "MANIFEST_BLACKLIST",
    "MalformedTemplateError",
    "create_app",
    "initialize",
    "merge_template_manifest",
    "run",
]
