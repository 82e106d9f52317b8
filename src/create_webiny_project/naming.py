"""Project name validation following npm package naming rules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import quote

MAX_NAME_LENGTH = 214

BLACKLISTED_NAMES: frozenset[str] = frozenset({"node_modules", "favicon.ico"})

# Node.js core modules; a package may not shadow them
CORE_MODULE_NAMES: frozenset[str] = frozenset(
    {
        "assert",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "dns",
        "domain",
        "events",
        "fs",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "repl",
        "stream",
        "string_decoder",
        "sys",
        "timers",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "v8",
        "vm",
        "worker_threads",
        "zlib",
    }
)

SCOPED_PACKAGE_PATTERN = re.compile(r"^(?:@([^/]+?)[/])?([^/]+?)$")
SPECIAL_CHARACTERS = re.compile(r"[~'!()*]")


class InvalidProjectNameError(Exception):
    """Raised when a project name violates npm naming restrictions."""

    def __init__(self, name: str, validation: NameValidation) -> None:
        self.name = name
        self.validation = validation
        super().__init__(f"Invalid project name: {name!r}")


@dataclass
class NameValidation:
    """Outcome of validating a package name."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid_for_new_packages(self) -> bool:
        return not self.errors and not self.warnings

    @property
    def valid_for_old_packages(self) -> bool:
        return not self.errors

    @property
    def problems(self) -> list[str]:
        """All errors followed by all warnings."""
        return [*self.errors, *self.warnings]


def _url_safe(value: str) -> bool:
    """Check that a value survives URI component encoding unchanged."""
    return quote(value, safe="-_.!~*'()") == value


def validate_package_name(name: str) -> NameValidation:
    """Validate a name against npm package naming rules.

    Errors make a name invalid for any package. Warnings only apply to new
    packages, which is what a freshly scaffolded project is.
    """
    result = NameValidation()

    if not name:
        result.errors.append("name length must be greater than zero")
    if name.startswith("."):
        result.errors.append("name cannot start with a period")
    if name.startswith("_"):
        result.errors.append("name cannot start with an underscore")
    if name.strip() != name:
        result.errors.append("name cannot contain leading or trailing spaces")

    lowered = name.lower()
    if lowered in BLACKLISTED_NAMES:
        result.errors.append(f"{lowered} is a blacklisted name")
    if lowered in CORE_MODULE_NAMES:
        result.warnings.append(f"{lowered} is a core module name")

    if len(name) > MAX_NAME_LENGTH:
        result.warnings.append(
            f"name can no longer contain more than {MAX_NAME_LENGTH} characters"
        )
    if lowered != name:
        result.warnings.append("name can no longer contain capital letters")
    if SPECIAL_CHARACTERS.search(name.split("/")[-1]):
        result.warnings.append(
            "name can no longer contain special characters (\"~'!()*\")"
        )

    if not _url_safe(name):
        match = SCOPED_PACKAGE_PATTERN.match(name)
        scoped_ok = (
            match is not None
            and match.group(1) is not None
            and _url_safe(match.group(1))
            and _url_safe(match.group(2))
        )
        if not scoped_ok:
            result.errors.append("name can only contain URL-friendly characters")

    return result


def check_app_name(app_name: str) -> None:
    """Raise InvalidProjectNameError unless app_name is valid for a new package."""
    validation = validate_package_name(app_name)
    if not validation.valid_for_new_packages:
        raise InvalidProjectNameError(app_name, validation)
