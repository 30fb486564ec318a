"""
Resolution models — what the module/runtime probe decided.

A ``Candidate`` is one entry of a static preference list. The
``ResolutionContext`` is the single record produced by probing: which
interpreter to run, which GDAL was found, and where each came from.
Every later stage (manifest, install, report) reads it.
"""

from __future__ import annotations

import re
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

_SEMVER_RE = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?")


class ResourceSource(StrEnum):
    """Where a resolved resource came from."""

    MODULE = "module"        # loaded through the environment-module system
    SYSTEM = "system"        # found on the search path without a module
    NOT_FOUND = "not_found"


class SemVer(BaseModel, frozen=True):
    """A ``major.minor.patch`` version triple."""

    major: int
    minor: int
    patch: int = 0

    @classmethod
    def parse(cls, text: str) -> SemVer | None:
        """Extract the first ``X.Y[.Z]`` token from ``text``."""
        match = _SEMVER_RE.search(text or "")
        if not match:
            return None
        major, minor, patch = match.groups()
        return cls(major=int(major), minor=int(minor), patch=int(patch or 0))

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class Candidate(BaseModel, frozen=True):
    """One entry of a preference list.

    ``rank`` orders the list (lower is tried first). ``command`` is the
    interpreter a Python module exposes once loaded; it is empty for
    every other resource.
    """

    name: str
    rank: int = 0
    command: str = ""


def ranked(names: list[str] | tuple[str, ...]) -> list[Candidate]:
    """Turn a plain ordered list of names into ranked candidates."""
    return [Candidate(name=name, rank=idx) for idx, name in enumerate(names)]


class ResolutionContext(BaseModel):
    """Aggregated result of probing the runtime and the native library.

    Invariant: once built by the resolver, ``runtime_command`` is a
    non-empty executable path whose ``runtime_version`` satisfies the
    minimum floor. ``native_library_version`` may stay ``None``; the
    manifest then falls back to the default GDAL pin.
    """

    runtime_command: str = ""
    runtime_version: SemVer | None = None
    native_library_version: SemVer | None = None

    runtime_source: ResourceSource = ResourceSource.NOT_FOUND
    lib_source: ResourceSource = ResourceSource.NOT_FOUND

    module_system: bool = False
    runtime_module: str | None = None
    lib_module: str | None = None

    # Child-process environment after module activation
    environ: dict[str, str] = Field(default_factory=dict, repr=False)
    warnings: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "module_system": self.module_system,
            "runtime": {
                "command": self.runtime_command,
                "version": str(self.runtime_version) if self.runtime_version else None,
                "source": self.runtime_source.value,
                "module": self.runtime_module,
            },
            "native_library": {
                "version": (
                    str(self.native_library_version)
                    if self.native_library_version else None
                ),
                "source": self.lib_source.value,
                "module": self.lib_module,
            },
            "warnings": list(self.warnings),
        }
