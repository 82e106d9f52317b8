"""Configuration schema for create-webiny-project."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


@dataclass
class ProjectConfig:
    """create-webiny-project configuration schema.

    None values indicate "not set" and will use defaults or be inherited.
    """

    # Package manager settings
    package_manager: str | None = None
    registry_host: str | None = None
    offline: bool | None = None  # None means auto-detect

    # Template settings
    template_prefix: str | None = None

    # Git settings
    git_commit_message: str | None = None

    def merge(self, other: ProjectConfig) -> ProjectConfig:
        """Merge another config into this one.

        Values from `other` take precedence when they are not None.
        Returns a new ProjectConfig instance.
        """
        return ProjectConfig(
            package_manager=(
                other.package_manager
                if other.package_manager is not None
                else self.package_manager
            ),
            registry_host=(
                other.registry_host
                if other.registry_host is not None
                else self.registry_host
            ),
            offline=other.offline if other.offline is not None else self.offline,
            template_prefix=(
                other.template_prefix
                if other.template_prefix is not None
                else self.template_prefix
            ),
            git_commit_message=(
                other.git_commit_message
                if other.git_commit_message is not None
                else self.git_commit_message
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectConfig:
        """Create a ProjectConfig from a dictionary.

        Unknown keys are ignored. Strings are stripped, booleans coerced.
        """

        def _str(key: str) -> str | None:
            value = data.get(key)
            if value is None:
                return None
            text = str(value).strip()
            return text or None

        offline_raw = data.get("offline")
        offline: bool | None = None
        if isinstance(offline_raw, str):
            offline = offline_raw.strip().lower() in ("1", "true", "yes", "on")
        elif offline_raw is not None:
            offline = bool(offline_raw)

        return cls(
            package_manager=_str("package_manager"),
            registry_host=_str("registry_host"),
            offline=offline,
            template_prefix=_str("template_prefix"),
            git_commit_message=_str("git_commit_message"),
        )


# Default configuration values (used when not specified anywhere)
DEFAULT_CONFIG = ProjectConfig(
    package_manager="yarnpkg",
    registry_host="registry.yarnpkg.com",
    template_prefix="cwp-template",
    git_commit_message="Initial commit from Create Webiny Project",
)
