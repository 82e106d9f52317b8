"""Template package references."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PackageReference:
    """A resolved, installable template package.

    Derived from the template specifier given on the command line; the
    name is always known, the version only when the specifier pins one.
    """

    name: str
    version: str | None = None

    def __str__(self) -> str:
        if self.version:
            return f"{self.name}@{self.version}"
        return self.name
