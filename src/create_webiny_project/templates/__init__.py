"""Template specifier resolution and template archives."""

from create_webiny_project.templates.base import PackageReference
from create_webiny_project.templates.resolver import (
    DEFAULT_TEMPLATE_PREFIX,
    get_package_info,
    get_template_install_package,
    resolve_template,
)

__all__ = [
    "DEFAULT_TEMPLATE_PREFIX",
    "PackageReference",
    "get_package_info",
    "get_template_install_package",
    "resolve_template",
]
