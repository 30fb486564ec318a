"""
Run-aborting errors for the provisioning workflow.

Anything degraded (missing GDAL module, failed package) is recorded
in the reports instead; only these stop a run.
"""

from __future__ import annotations


class ProvisionError(Exception):
    """Base class for fatal provisioning errors."""


class ResolutionError(ProvisionError):
    """No usable Python runtime could be resolved."""


class EnvironmentSetupError(ProvisionError):
    """Install base unusable or virtual environment creation failed."""


class ManifestError(ProvisionError):
    """The requirements manifest could not be written."""
