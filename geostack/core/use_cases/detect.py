"""
Detect use case — report which Python and GDAL would be used.

Runs the resolution step only; nothing is created or installed.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from geostack.core.config.loader import ConfigError, load_config
from geostack.core.models.resolution import ResolutionContext
from geostack.core.services.provision.errors import ProvisionError
from geostack.core.services.provision.resolver.manifest import gdal_pin, numpy_pin
from geostack.core.services.provision.resolver.resolution import resolve_environment


@dataclass
class DetectResult:
    """Result of module/runtime detection."""

    context: ResolutionContext | None = None
    gdal_pin: str | None = None
    numpy_pin: str | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.context is None:
            return {"error": self.error}
        return {
            **self.context.to_dict(),
            "pins": {"gdal": self.gdal_pin, "numpy": self.numpy_pin},
        }


def run_detect(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> DetectResult:
    result = DetectResult()
    try:
        config = load_config(config_path)
        ctx = resolve_environment(config, os.environ if environ is None else environ)
    except (ConfigError, ProvisionError) as e:
        result.error = str(e)
        return result

    result.context = ctx
    result.gdal_pin = gdal_pin(ctx, config.gdal_default_version)
    result.numpy_pin = numpy_pin(ctx.runtime_version)
    return result
