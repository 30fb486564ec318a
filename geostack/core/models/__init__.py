"""
Domain models — Pydantic types for provisioning.

All models are re-exported here for convenient access:

    from geostack.core.models import ResolutionContext, Manifest, InstallReport
"""

from geostack.core.models.config import ProvisionConfig, ProvisionPaths, PythonModuleSpec
from geostack.core.models.manifest import Manifest, ManifestSection, Requirement
from geostack.core.models.outcome import InstallOutcome, InstallReport, VerificationReport
from geostack.core.models.resolution import (
    Candidate,
    ResolutionContext,
    ResourceSource,
    SemVer,
)

__all__ = [
    # config.py
    "ProvisionConfig",
    "ProvisionPaths",
    "PythonModuleSpec",
    # manifest.py
    "Manifest",
    "ManifestSection",
    "Requirement",
    # outcome.py
    "InstallOutcome",
    "InstallReport",
    "VerificationReport",
    # resolution.py
    "Candidate",
    "ResolutionContext",
    "ResourceSource",
    "SemVer",
]
