"""
Manifest model — the pinned dependency list.

Built once by the manifest generator and never mutated afterwards.
Sections only exist to keep the rendered requirements.txt readable.
"""

from __future__ import annotations

import re

from pydantic import BaseModel


def normalize_name(name: str) -> str:
    """PEP 503 normalisation (``netCDF4`` == ``netcdf4``)."""
    return re.sub(r"[-_.]+", "-", name).lower()


class Requirement(BaseModel, frozen=True):
    """One ``name<spec>`` line, e.g. ``gdal==3.11.0`` or ``wheel``."""

    name: str
    spec: str = ""

    @property
    def line(self) -> str:
        return f"{self.name}{self.spec}"

    @property
    def version(self) -> str | None:
        """The exact pin, if this requirement is ``==``-pinned."""
        if self.spec.startswith("=="):
            return self.spec[2:]
        return None

    @classmethod
    def parse(cls, line: str) -> Requirement:
        """Split ``pkg==1.0`` / ``pkg>=1`` / ``pkg`` into name and spec."""
        line = line.strip()
        match = re.match(r"^([A-Za-z0-9][A-Za-z0-9._-]*)(.*)$", line)
        if not match:
            raise ValueError(f"Invalid requirement: {line!r}")
        return cls(name=match.group(1), spec=match.group(2).strip())


class ManifestSection(BaseModel, frozen=True):
    """A titled group of requirements."""

    title: str
    requirements: tuple[Requirement, ...] = ()


class Manifest(BaseModel, frozen=True):
    """Ordered, sectioned list of requirements."""

    sections: tuple[ManifestSection, ...] = ()

    @property
    def requirements(self) -> list[Requirement]:
        return [req for section in self.sections for req in section.requirements]

    def get(self, name: str) -> Requirement | None:
        """Look up a requirement by (normalised) package name."""
        wanted = normalize_name(name)
        for req in self.requirements:
            if normalize_name(req.name) == wanted:
                return req
        return None

    def __len__(self) -> int:
        return len(self.requirements)
