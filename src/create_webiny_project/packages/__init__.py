"""Package manager operations."""

from create_webiny_project.packages.manager import PackageManager, PackageManagerError
from create_webiny_project.packages.network import is_online

__all__ = [
    "PackageManager",
    "PackageManagerError",
    "is_online",
]
